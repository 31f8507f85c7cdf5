from fastapi import APIRouter, Depends, HTTPException, status
from sqlmodel import Session, or_, select
from app.database import get_session
from app.models.user import User
from app.schemas.user_schemas import AuthResponse, UserLogin, UserPublic, UserRegister, only_digits
from app.services.customer_service import CUSTOMER_ROLE, ensure_unique_contacts
from app.utils.token import create_access_token, get_current_user
import logging

logger = logging.getLogger(__name__)

router = APIRouter()


def _auth_response(message: str, user: User) -> AuthResponse:
    token = create_access_token({"user_id": user.id})
    return AuthResponse(
        message=message,
        user=UserPublic(id=user.id, name=user.name, cpf=user.cpf, telefone=user.telefone),
        access_token=token,
        token_type="bearer",
    )


# -------- AUTH ROUTES --------

@router.post("/register", response_model=AuthResponse, status_code=status.HTTP_201_CREATED)
def register_user(payload: UserRegister, session: Session = Depends(get_session)):
    ensure_unique_contacts(session, payload.telefone, payload.cpf)

    user = User(
        name=payload.name,
        telefone=payload.telefone,
        cpf=payload.cpf,
        role=CUSTOMER_ROLE,
    )

    session.add(user)
    session.commit()
    session.refresh(user)
    logger.info(f"Customer {user.id} registered")

    return _auth_response("User registered successfully!", user)


@router.post("/login", response_model=AuthResponse)
def login(payload: UserLogin, session: Session = Depends(get_session)):
    user = session.exec(
        select(User).where(
            or_(User.telefone == only_digits(payload.credential), User.cpf == payload.credential)
        )
    ).first()

    if not user or not user.can_login:
        raise HTTPException(status.HTTP_401_UNAUTHORIZED, "Invalid credentials")

    return _auth_response("Login successful!", user)


@router.get("/me", response_model=UserPublic)
def me(current_user: User = Depends(get_current_user)):
    return UserPublic(
        id=current_user.id,
        name=current_user.name,
        cpf=current_user.cpf,
        telefone=current_user.telefone,
    )


@router.post("/logout")
def logout(current_user: User = Depends(get_current_user)):
    return {"message": "Logout successful"}
