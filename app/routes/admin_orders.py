# -------- ADMIN ORDERS --------
from datetime import date
from typing import Optional
from fastapi import APIRouter, Depends, Query
from sqlmodel import Session
from app.database import get_session
from app.models.user import User
from app.schemas.orders_schemas import (
    ItemStatusUpdate,
    MarkProcessedRequest,
    MessageResponse,
    PaymentNotificationRequest,
)
from app.services import catalog_service, order_service
from app.dependencies.admin import require_admin


router = APIRouter()


@router.get("/orders")
def list_orders(
    start_date: Optional[date] = Query(None),
    end_date: Optional[date] = Query(None),
    campaign_id: Optional[str] = Query(None),
    session: Session = Depends(get_session),
    _: User = Depends(require_admin)
):
    # "todas" selects every campaign
    campaign = int(campaign_id) if campaign_id and campaign_id.isdigit() else None
    return order_service.list_orders(session, start_date, end_date, campaign)


@router.get("/campaigns")
def campaign_filter_options(
    session: Session = Depends(get_session),
    _: User = Depends(require_admin),
):
    return catalog_service.campaign_options(session)


@router.get("/pedidos/{order_id}")
def order_details(
    order_id: int,
    session: Session = Depends(get_session),
    _: User = Depends(require_admin),
):
    return order_service.get_order_details(session, order_id)


@router.put("/pedidos/{order_id}/produtos/{item_id}/status", response_model=MessageResponse)
def update_status(
    order_id: int,
    item_id: int,
    data: ItemStatusUpdate,
    session: Session = Depends(get_session),
    _: User = Depends(require_admin),
):
    order_service.update_item_status(session, order_id, item_id, data)
    return MessageResponse(message="Status updated successfully")


@router.post("/notificar-pagamento", response_model=MessageResponse)
def notify_payment(
    data: PaymentNotificationRequest,
    session: Session = Depends(get_session),
    _: User = Depends(require_admin),
):
    order_service.register_payment_notification(session, data.order_id)
    return MessageResponse(message="Notification registered successfully")


@router.post("/marcar-processados", response_model=MessageResponse)
def mark_processed(
    data: MarkProcessedRequest,
    session: Session = Depends(get_session),
    _: User = Depends(require_admin),
):
    order_service.mark_processed(session, data.produtos)
    return MessageResponse(message="Products marked as processed")


@router.get("/campanha/{campaign_id}/pedidos")
def orders_by_campaign(
    campaign_id: int,
    session: Session = Depends(get_session),
    _: User = Depends(require_admin),
):
    return order_service.orders_by_campaign(session, campaign_id)


@router.get("/campanhas/{campaign_id}/pedidos")
def campaign_orders_summary(
    campaign_id: int,
    session: Session = Depends(get_session),
    _: User = Depends(require_admin),
):
    return order_service.campaign_orders_summary(session, campaign_id)


@router.get("/campanhas/{campaign_id}/vendas")
@router.get("/orders/sales-by-campaign/{campaign_id}")
def sales_by_campaign(
    campaign_id: int,
    session: Session = Depends(get_session),
    _: User = Depends(require_admin),
):
    return order_service.sales_by_campaign(session, campaign_id)
