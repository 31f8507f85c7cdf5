# create_admin.py
import argparse

from sqlmodel import Session, or_, select

from app.database import engine
from app.models.user import User
from app.schemas.user_schemas import only_digits


def create_admin(name: str, credential: str):
    digits = only_digits(credential)
    with Session(engine) as session:
        user = session.exec(
            select(User).where(or_(User.telefone == digits, User.cpf == digits))
        ).first()

        if user:
            user.role = "admin"
            print(f"Promoting existing user {user.id} ({user.name}) to admin")
        else:
            user = User(
                name=name,
                cpf=digits if len(digits) == 11 else None,
                telefone=None if len(digits) == 11 else digits,
                role="admin",
            )
            print(f"Creating admin {name}")

        session.add(user)
        session.commit()
        session.refresh(user)
        print(f"Admin ready: id={user.id} telefone={user.telefone} cpf={user.cpf}")


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Create or promote a back-office admin")
    parser.add_argument("credential", help="CPF (11 digits) or phone of the admin")
    parser.add_argument("--name", default="Admin")
    args = parser.parse_args()
    create_admin(args.name, args.credential)
