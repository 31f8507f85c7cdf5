# app/services/order_service.py
"""Order placement, read models and line-item status tracking.

An order is a header row plus one ``order_product`` row per requested item.
Unit prices are never stored on the order: every total is derived from the
current price of each line's variant when the order is read.
"""
from datetime import date, datetime, time
import logging
from typing import Dict, List, Optional, Sequence, Tuple

from sqlalchemy import func, update
from sqlmodel import Session, select

from app.constants.order_status import (
    PAYMENT_TRANSITIONS,
    STOCK_TRANSITIONS,
    PaymentStatus,
    StockStatus,
    admin_payment_status,
    can_transition,
    order_payment_status,
)
from app.core.exceptions import NotFound, TransactionFailed, ValidationFailed
from app.models.campaign import Campaign
from app.models.order import Order
from app.models.order_item import OrderItem
from app.models.product import Product, ProductColorSize
from app.models.user import User
from app.schemas.orders_schemas import (
    ItemStatusUpdate,
    OrderCreateRequest,
    OrderItemRequest,
)
from app.services.catalog_service import (
    campaign_product_ids,
    existing_ids,
    first_thumbnail,
    get_campaign,
    product_images,
    resolve_color_image,
)

logger = logging.getLogger(__name__)

UNKNOWN_CUSTOMER = "Unknown"
NOT_INFORMED = "Not informed"

Line = Tuple[OrderItem, Optional[Product], Optional[ProductColorSize]]


# -------- PRICING --------

def unit_price(variant: Optional[ProductColorSize]) -> float:
    return variant.price if variant else 0


def order_total(lines: Sequence[Line]) -> float:
    return sum(item.quantidade * unit_price(variant) for item, _, variant in lines)


def load_lines(session: Session, order_ids: Sequence[int]) -> Dict[int, List[Line]]:
    """Line items of the given orders joined to their product and variant."""
    lines: Dict[int, List[Line]] = {order_id: [] for order_id in order_ids}
    if not order_ids:
        return lines
    rows = session.exec(
        select(OrderItem, Product, ProductColorSize)
        .outerjoin(Product, Product.id == OrderItem.product_id)
        .outerjoin(ProductColorSize, ProductColorSize.id == OrderItem.product_size_id)
        .where(OrderItem.order_id.in_(order_ids))
        .order_by(OrderItem.id)
    ).all()
    for item, product, variant in rows:
        lines[item.order_id].append((item, product, variant))
    return lines


# -------- CREATE --------

def _validate_items(session: Session, items: List[OrderItemRequest]):
    products = existing_ids(session, Product, [i.product_id for i in items])
    variants = existing_ids(session, ProductColorSize, [i.product_size_id for i in items])

    errors = {}
    for index, item in enumerate(items):
        if item.product_id not in products:
            field = f"items.{index}.product_id"
            errors[field] = [f"The selected {field} is invalid."]
        if item.product_size_id not in variants:
            field = f"items.{index}.product_size_id"
            errors[field] = [f"The selected {field} is invalid."]
    if errors:
        raise ValidationFailed(errors)


def _build_line_item(order_id: int, item: OrderItemRequest) -> OrderItem:
    return OrderItem(
        order_id=order_id,
        product_id=item.product_id,
        product_size_id=item.product_size_id,
        quantidade=item.quantidade,
        cor=item.cor,
        status_pagamento=PaymentStatus.pending.value,
        status_estoque=StockStatus.pending.value,
        is_processed=False,
    )


def create_order(session: Session, customer: User, data: OrderCreateRequest) -> Order:
    """Insert the order header and all of its line items in one transaction.

    Every item is checked against the catalog first, so a bad reference fails
    the whole request before anything is written. There is no idempotency key:
    two identical submissions create two orders.
    """
    _validate_items(session, data.items)

    now = datetime.utcnow()
    try:
        order = Order(
            id_cliente=customer.id,
            telefone=data.telefone,
            observacoes=data.observacoes,
            created_at=now,
            updated_at=now,
        )
        session.add(order)
        session.flush()

        for item in data.items:
            session.add(_build_line_item(order.id, item))

        session.commit()
    except Exception as e:
        session.rollback()
        raise TransactionFailed("creating order", e)

    session.refresh(order)
    logger.info(f"Order {order.id} created for customer {customer.id} with {len(data.items)} items")
    return order


# -------- READ --------

def _line_view(session: Session, line: Line) -> Dict:
    item, product, variant = line
    return {
        "id": item.id,
        "product_id": item.product_id,
        "product_size_id": item.product_size_id,
        "product_name": product.nome if product else "Unavailable",
        "product_size": variant.size if variant else "Unavailable",
        "price": unit_price(variant),
        "quantidade": item.quantidade,
        "cor": item.cor,
        "status_pagamento": item.status_pagamento,
        "status_estoque": item.status_estoque,
        "is_processed": item.is_processed,
        "processed_at": item.processed_at,
        "images": product_images(product),
        "color_image": resolve_color_image(session, product, variant),
    }


def get_order_details(session: Session, order_id: int) -> Dict:
    """Back-office view of one order, with per-line statuses and live prices."""
    order = session.get(Order, order_id)
    if not order:
        raise NotFound("Order not found")

    customer = session.get(User, order.id_cliente)
    lines = load_lines(session, [order.id])[order.id]

    produtos = []
    for line in lines:
        item, product, variant = line
        view = _line_view(session, line)
        produtos.append({
            "id": item.id,
            "nome": view["product_name"],
            "preco": view["price"],
            "quantidade": item.quantidade,
            "tamanho": variant.size if variant else "Not specified",
            "cor": item.cor or "Not specified",
            "status_pagamento": item.status_pagamento,
            "status_estoque": item.status_estoque,
            "processado": item.is_processed,
            "processed_at": item.processed_at,
            "images": view["images"],
            "color_image": view["color_image"],
        })

    return {
        "id": order.id,
        "cliente": {
            "id": customer.id if customer else None,
            "nome": customer.name if customer else UNKNOWN_CUSTOMER,
            "cpf": (customer.cpf if customer else None) or NOT_INFORMED,
            "telefone": order.telefone,
        },
        "observacoes": order.observacoes,
        "notificacoes_enviadas": order.notificacoes_enviadas or 0,
        "produtos": produtos,
        "total": order_total(lines),
        "created_at": order.created_at.strftime("%Y-%m-%d %H:%M:%S"),
    }


def _owned_order(session: Session, customer: User, order_id: int) -> Order:
    order = session.exec(
        select(Order).where(Order.id == order_id, Order.id_cliente == customer.id)
    ).first()
    if not order:
        raise NotFound("Order not found")
    return order


def get_customer_order(session: Session, customer: User, order_id: int) -> Dict:
    """Customer view of one of their orders, with derived total and status."""
    order = _owned_order(session, customer, order_id)
    lines = load_lines(session, [order.id])[order.id]

    return {
        "id": order.id,
        "id_cliente": order.id_cliente,
        "telefone": order.telefone,
        "observacoes": order.observacoes,
        "created_at": order.created_at.strftime("%Y-%m-%d %H:%M:%S"),
        "updated_at": order.updated_at.strftime("%Y-%m-%d %H:%M:%S"),
        "total": order_total(lines),
        "status_pagamento": order_payment_status([item.status_pagamento for item, _, _ in lines]),
        "items": [_line_view(session, line) for line in lines],
    }


def list_customer_orders(session: Session, customer: User) -> List[Dict]:
    orders = session.exec(
        select(Order)
        .where(Order.id_cliente == customer.id)
        .order_by(Order.created_at.desc(), Order.id.desc())
    ).all()
    lines_by_order = load_lines(session, [o.id for o in orders])

    response = []
    for order in orders:
        lines = lines_by_order[order.id]
        response.append({
            "id": order.id,
            "telefone": order.telefone,
            "observacoes": order.observacoes,
            "created_at": order.created_at,
            "total": order_total(lines),
            "total_quantidade": sum(item.quantidade for item, _, _ in lines),
            "status_pagamento": order_payment_status([item.status_pagamento for item, _, _ in lines]),
            "items": [
                {
                    "id": item.id,
                    "product_id": item.product_id,
                    "product_name": product.nome if product else "Unavailable",
                    "product_size": variant.size if variant else "Unavailable",
                    "quantidade": item.quantidade,
                    "cor": item.cor,
                    "status_pagamento": item.status_pagamento,
                    "status_estoque": item.status_estoque,
                    "thumbnail": first_thumbnail(product),
                }
                for item, product, variant in lines
            ],
        })
    return response


# -------- CANCEL --------

def cancel_order(session: Session, customer: User, order_id: int) -> int:
    """Mark every line of the customer's order as cancelled. Safe to repeat."""
    order = _owned_order(session, customer, order_id)
    try:
        result = session.exec(
            update(OrderItem)
            .where(OrderItem.order_id == order.id)
            .values(status_pagamento=PaymentStatus.cancelled.value)
        )
        session.commit()
    except Exception as e:
        session.rollback()
        raise TransactionFailed("cancelling order", e)

    logger.info(f"Order {order_id} cancelled by customer {customer.id}")
    return result.rowcount


def cancel_order_item(session: Session, customer: User, order_id: int, item_id: int) -> OrderItem:
    order = _owned_order(session, customer, order_id)
    item = session.exec(
        select(OrderItem).where(OrderItem.order_id == order.id, OrderItem.id == item_id)
    ).first()
    if not item:
        raise NotFound("Order item not found")

    item.status_pagamento = PaymentStatus.cancelled.value
    session.add(item)
    session.commit()
    session.refresh(item)
    logger.info(f"Order {order_id} item {item_id} cancelled by customer {customer.id}")
    return item


# -------- STATUS TRACKER --------

def update_item_status(
    session: Session,
    order_id: int,
    item_id: int,
    data: ItemStatusUpdate,
    payment_transitions: Optional[Dict[str, List[str]]] = None,
    stock_transitions: Optional[Dict[str, List[str]]] = None,
) -> OrderItem:
    """Sparse update of a line's payment and/or stock status.

    Transition tables default to the permissive ones in
    ``app.constants.order_status``; pass stricter tables to enforce a lifecycle.
    """
    item = session.exec(
        select(OrderItem).where(OrderItem.order_id == order_id, OrderItem.id == item_id)
    ).first()
    if not item:
        raise NotFound("Order item not found")

    changes = data.model_dump(exclude_none=True, mode="json")
    tables = {
        "status_pagamento": payment_transitions if payment_transitions is not None else PAYMENT_TRANSITIONS,
        "status_estoque": stock_transitions if stock_transitions is not None else STOCK_TRANSITIONS,
    }
    errors = {}
    for field, value in changes.items():
        current = getattr(item, field)
        if not can_transition(tables[field], current, value):
            errors[field] = [f"Cannot change {field} from {current} to {value}."]
    if errors:
        raise ValidationFailed(errors)

    for field, value in changes.items():
        setattr(item, field, value)
    session.add(item)
    session.commit()
    session.refresh(item)
    logger.info(f"Order {order_id} item {item_id} status updated: {changes}")
    return item


def register_payment_notification(session: Session, order_id: int) -> None:
    if session.get(Order, order_id) is None:
        raise NotFound("Order not found")
    session.exec(
        update(Order)
        .where(Order.id == order_id)
        .values(notificacoes_enviadas=Order.notificacoes_enviadas + 1)
    )
    session.commit()


def mark_processed(session: Session, item_ids: List[int]) -> int:
    if not item_ids:
        return 0
    result = session.exec(
        update(OrderItem)
        .where(OrderItem.id.in_(item_ids))
        .values(is_processed=True, processed_at=datetime.utcnow())
    )
    session.commit()
    return result.rowcount


# -------- BACK-OFFICE LISTINGS --------

def _customers_by_id(session: Session, ids) -> Dict[int, User]:
    ids = set(ids)
    if not ids:
        return {}
    return {u.id: u for u in session.exec(select(User).where(User.id.in_(ids))).all()}


def list_orders(
    session: Session,
    start_date: Optional[date] = None,
    end_date: Optional[date] = None,
    campaign_id: Optional[int] = None,
) -> List[Dict]:
    query = select(Order).order_by(Order.created_at.desc(), Order.id.desc())
    if start_date:
        query = query.where(Order.created_at >= datetime.combine(start_date, time.min))
    if end_date:
        query = query.where(Order.created_at <= datetime.combine(end_date, time.max))
    orders = session.exec(query).all()

    lines_by_order = load_lines(session, [o.id for o in orders])
    campaign_ids = {
        product.campaign_id
        for lines in lines_by_order.values()
        for _, product, _ in lines
        if product is not None
    }
    campaigns = {}
    if campaign_ids:
        campaigns = {
            c.id: c for c in session.exec(select(Campaign).where(Campaign.id.in_(campaign_ids))).all()
        }
    customers = _customers_by_id(session, [o.id_cliente for o in orders])

    response = []
    for order in orders:
        lines = lines_by_order[order.id]
        order_campaigns = [
            product.campaign_id for _, product, _ in lines if product is not None
        ]
        if campaign_id is not None and campaign_id not in order_campaigns:
            continue
        shown_id = campaign_id if campaign_id is not None else (
            order_campaigns[0] if order_campaigns else None
        )
        campaign = campaigns.get(shown_id)
        customer = customers.get(order.id_cliente)
        response.append({
            "id": order.id,
            "cliente_nome": customer.name if customer else UNKNOWN_CUSTOMER,
            "cliente_cpf": (customer.cpf if customer else None) or NOT_INFORMED,
            "cliente_telefone": order.telefone or NOT_INFORMED,
            "data_pedido": order.created_at,
            "campaign_id": campaign.id if campaign else None,
            "campaign_name": campaign.nome if campaign else "No campaign",
            "campaign_start": campaign.data_inicio if campaign else None,
            "campaign_end": campaign.data_fim if campaign else None,
            "quantidade_produtos": len(lines),
            "total": round(order_total(lines), 2),
            "status_pagamento": admin_payment_status([item.status_pagamento for item, _, _ in lines]),
        })
    return response


def orders_by_campaign(session: Session, campaign_id: int) -> List[Dict]:
    product_ids = set(campaign_product_ids(session, campaign_id))
    if not product_ids:
        return []

    order_ids = session.exec(
        select(OrderItem.order_id)
        .where(OrderItem.product_id.in_(product_ids))
        .distinct()
    ).all()
    orders = session.exec(
        select(Order).where(Order.id.in_(order_ids)).order_by(Order.id)
    ).all()
    lines_by_order = load_lines(session, [o.id for o in orders])
    customers = _customers_by_id(session, [o.id_cliente for o in orders])

    response = []
    for order in orders:
        lines = lines_by_order[order.id]
        customer = customers.get(order.id_cliente)
        response.append({
            "id": order.id,
            "total": round(order_total(lines), 2),
            "cliente_nome": customer.name if customer else UNKNOWN_CUSTOMER,
            "cliente_telefone": order.telefone or NOT_INFORMED,
            "data_pedido": order.created_at.strftime("%Y-%m-%d"),
            "quantidade_produtos": sum(
                item.quantidade for item, _, _ in lines if item.product_id in product_ids
            ),
        })
    return response


def campaign_orders_summary(session: Session, campaign_id: int) -> Dict:
    get_campaign(session, campaign_id)
    product_ids = campaign_product_ids(session, campaign_id)
    if not product_ids:
        return {"total_orders": 0, "orders_by_product": {}}

    total_orders = session.exec(
        select(func.count(func.distinct(OrderItem.order_id)))
        .where(OrderItem.product_id.in_(product_ids))
    ).one()
    rows = session.exec(
        select(OrderItem.product_id, func.count(OrderItem.order_id))
        .where(OrderItem.product_id.in_(product_ids))
        .group_by(OrderItem.product_id)
    ).all()
    return {
        "total_orders": total_orders,
        "orders_by_product": {product_id: count for product_id, count in rows},
    }


def sales_by_campaign(session: Session, campaign_id: int) -> Dict[int, int]:
    rows = session.exec(
        select(OrderItem.product_id, func.sum(OrderItem.quantidade))
        .join(Product, Product.id == OrderItem.product_id)
        .where(Product.campaign_id == campaign_id)
        .group_by(OrderItem.product_id)
    ).all()
    return {product_id: int(total or 0) for product_id, total in rows}
