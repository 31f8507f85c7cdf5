# app/services/customer_service.py
from datetime import date, datetime, time
import logging
from typing import Dict, List, Optional, Tuple

from sqlalchemy import func, or_
from sqlmodel import Session, select

from app.core.exceptions import NotFound, ValidationFailed
from app.models.order import Order
from app.models.order_item import OrderItem
from app.models.product import ProductColorSize
from app.models.user import User
from app.schemas.user_schemas import CustomerUpdate, only_digits
from app.services.order_service import load_lines, order_total
from app.utils.pagination import paginate

logger = logging.getLogger(__name__)

CUSTOMER_ROLE = "cliente"


def customer_totals(session: Session, user_ids: List[int]) -> Dict[int, Tuple[int, float]]:
    """(order count, amount spent at current variant prices) per customer."""
    totals = {user_id: (0, 0.0) for user_id in user_ids}
    if not user_ids:
        return totals

    counts = dict(session.exec(
        select(Order.id_cliente, func.count(Order.id))
        .where(Order.id_cliente.in_(user_ids))
        .group_by(Order.id_cliente)
    ).all())
    spent = dict(session.exec(
        select(Order.id_cliente, func.sum(OrderItem.quantidade * ProductColorSize.price))
        .join(OrderItem, OrderItem.order_id == Order.id)
        .join(ProductColorSize, ProductColorSize.id == OrderItem.product_size_id)
        .where(Order.id_cliente.in_(user_ids))
        .group_by(Order.id_cliente)
    ).all())

    for user_id in user_ids:
        totals[user_id] = (counts.get(user_id, 0), float(spent.get(user_id) or 0))
    return totals


def serialize_customer(user: User, totals: Tuple[int, float]) -> Dict:
    total_orders, total_spent = totals
    return {
        "id": user.id,
        "name": user.name,
        "telefone": user.telefone,
        "email": user.email,
        "cpf": user.cpf,
        "created_at": user.created_at,
        "total_orders": total_orders,
        "total_spent": total_spent,
    }


def list_customers(
    session: Session,
    search: Optional[str] = None,
    date_from: Optional[date] = None,
    date_to: Optional[date] = None,
    page: int = 1,
    limit: int = 10,
) -> Dict:
    query = select(User).where(User.role == CUSTOMER_ROLE)
    if search:
        query = query.where(
            or_(User.name.ilike(f"%{search}%"), User.telefone.ilike(f"%{search}%"))
        )
    if date_from:
        query = query.where(User.created_at >= datetime.combine(date_from, time.min))
    if date_to:
        query = query.where(User.created_at <= datetime.combine(date_to, time.max))
    query = query.order_by(User.id)

    result = paginate(session=session, query=query, page=page, limit=limit)
    users = result["data"]
    totals = customer_totals(session, [u.id for u in users])
    result["data"] = [serialize_customer(u, totals[u.id]) for u in users]
    return result


def get_customer(session: Session, user_id: int) -> User:
    user = session.get(User, user_id)
    if not user:
        raise NotFound("Customer not found")
    return user


def customer_details(session: Session, user_id: int) -> Dict:
    user = get_customer(session, user_id)
    return serialize_customer(user, customer_totals(session, [user.id])[user.id])


def customer_orders(
    session: Session,
    user_id: int,
    date_from: Optional[date] = None,
    date_to: Optional[date] = None,
    min_value: Optional[float] = None,
    max_value: Optional[float] = None,
) -> List[Dict]:
    user = get_customer(session, user_id)
    query = select(Order).where(Order.id_cliente == user.id).order_by(Order.created_at.desc())
    if date_from:
        query = query.where(Order.created_at >= datetime.combine(date_from, time.min))
    if date_to:
        query = query.where(Order.created_at <= datetime.combine(date_to, time.max))
    orders = session.exec(query).all()
    lines_by_order = load_lines(session, [o.id for o in orders])

    response = []
    for order in orders:
        lines = lines_by_order[order.id]
        total = order_total(lines)
        if min_value is not None and total < min_value:
            continue
        if max_value is not None and total > max_value:
            continue
        response.append({
            "id": order.id,
            "created_at": order.created_at,
            "observacoes": order.observacoes,
            "total": total,
            "products": [
                {
                    "id": item.product_id,
                    "nome": product.nome if product else "Unavailable",
                    "quantidade": item.quantidade,
                    "preco": variant.price if variant else 0,
                    "status_pagamento": item.status_pagamento,
                    "status_estoque": item.status_estoque,
                }
                for item, product, variant in lines
            ],
        })
    return response


def ensure_unique_contacts(
    session: Session,
    telefone: Optional[str],
    cpf: Optional[str],
    exclude_id: Optional[int] = None,
):
    errors = {}
    checks = (
        ("telefone", User.telefone, telefone, "A user with this phone already exists."),
        ("cpf", User.cpf, cpf, "A user with this CPF already exists."),
    )
    for field, column, value, message in checks:
        if not value:
            continue
        query = select(User.id).where(column == value)
        if exclude_id is not None:
            query = query.where(User.id != exclude_id)
        if session.exec(query).first() is not None:
            errors[field] = [message]
    if errors:
        raise ValidationFailed(errors)


def update_customer(session: Session, user_id: int, data: CustomerUpdate) -> Dict:
    user = get_customer(session, user_id)
    telefone = only_digits(data.telefone or "") or None
    ensure_unique_contacts(session, telefone, data.cpf, exclude_id=user.id)

    user.name = data.name
    user.cpf = data.cpf
    user.telefone = telefone
    user.updated_at = datetime.utcnow()
    session.add(user)
    session.commit()
    session.refresh(user)
    logger.info(f"Customer {user.id} updated")
    return serialize_customer(user, customer_totals(session, [user.id])[user.id])
