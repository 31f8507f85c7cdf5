from datetime import date
from typing import Optional
from fastapi import APIRouter, Depends, Query
from sqlmodel import Session
from app.database import get_session
from app.models.user import User
from app.schemas.user_schemas import CustomerUpdate
from app.services import customer_service
from app.dependencies.admin import require_admin

router = APIRouter()


# -------- CUSTOMERS (ADMIN) --------

@router.get("")
def list_customers(
    search: Optional[str] = None,
    date_from: Optional[date] = Query(None),
    date_to: Optional[date] = Query(None),
    page: int = 1,
    limit: int = 10,
    session: Session = Depends(get_session),
    _: User = Depends(require_admin),
):
    return customer_service.list_customers(
        session, search=search, date_from=date_from, date_to=date_to, page=page, limit=limit
    )


@router.get("/{user_id}")
def show_customer(
    user_id: int,
    session: Session = Depends(get_session),
    _: User = Depends(require_admin),
):
    return customer_service.customer_details(session, user_id)


@router.get("/{user_id}/pedidos")
def customer_orders(
    user_id: int,
    date_from: Optional[date] = Query(None),
    date_to: Optional[date] = Query(None),
    min_value: Optional[float] = Query(None),
    max_value: Optional[float] = Query(None),
    session: Session = Depends(get_session),
    _: User = Depends(require_admin),
):
    return customer_service.customer_orders(
        session, user_id, date_from=date_from, date_to=date_to,
        min_value=min_value, max_value=max_value,
    )


@router.put("/{user_id}")
def update_customer(
    user_id: int,
    data: CustomerUpdate,
    session: Session = Depends(get_session),
    _: User = Depends(require_admin),
):
    user = customer_service.update_customer(session, user_id, data)
    return {"message": "User updated successfully", "user": user}
