# -------- CUSTOMER ORDERS --------
from fastapi import APIRouter, Depends
from sqlmodel import Session
from app.database import get_session
from app.models.user import User
from app.schemas.orders_schemas import MessageResponse, OrderCreateRequest, OrderCreatedResponse
from app.services import order_service
from app.utils.token import get_current_user


router = APIRouter()


@router.post("/orders", response_model=OrderCreatedResponse)
def create_order(
    data: OrderCreateRequest,
    session: Session = Depends(get_session),
    current_user: User = Depends(get_current_user)
):
    order = order_service.create_order(session, current_user, data)
    return OrderCreatedResponse(message="Order created successfully", order_id=order.id)


@router.get("/orders-user-list")
def list_my_orders(
    session: Session = Depends(get_session),
    current_user: User = Depends(get_current_user)
):
    return order_service.list_customer_orders(session, current_user)


@router.get("/orders-user/{order_id}")
def get_my_order(
    order_id: int,
    session: Session = Depends(get_session),
    current_user: User = Depends(get_current_user)
):
    return order_service.get_customer_order(session, current_user, order_id)


@router.post("/orders/{order_id}/cancel", response_model=MessageResponse)
def cancel_order(
    order_id: int,
    session: Session = Depends(get_session),
    current_user: User = Depends(get_current_user)
):
    order_service.cancel_order(session, current_user, order_id)
    return MessageResponse(message="Order cancelled successfully")


@router.post("/orders/{order_id}/items/{item_id}/cancel", response_model=MessageResponse)
def cancel_order_item(
    order_id: int,
    item_id: int,
    session: Session = Depends(get_session),
    current_user: User = Depends(get_current_user)
):
    order_service.cancel_order_item(session, current_user, order_id, item_id)
    return MessageResponse(message="Item cancelled successfully")
