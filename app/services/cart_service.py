# app/services/cart_service.py
from datetime import datetime
import logging
from typing import Dict

from sqlalchemy import delete
from sqlmodel import Session, select

from app.core.exceptions import NotFound, TransactionFailed, ValidationFailed
from app.models.cart import Cart, CartItem
from app.models.product import Product, ProductColorSize
from app.models.user import User
from app.schemas.cart_schemas import CartAddRequest, CartUpdateRequest
from app.services.catalog_service import product_images, resolve_color_image

logger = logging.getLogger(__name__)


def _validate_references(session: Session, product_id: int, product_size_id: int):
    errors = {}
    if session.get(Product, product_id) is None:
        errors["product_id"] = ["The selected product_id is invalid."]
    if session.get(ProductColorSize, product_size_id) is None:
        errors["product_size_id"] = ["The selected product_size_id is invalid."]
    if errors:
        raise ValidationFailed(errors)


def _get_or_create_cart(session: Session, user_id: int) -> Cart:
    cart = session.exec(select(Cart).where(Cart.user_id == user_id)).first()
    if cart is None:
        cart = Cart(user_id=user_id)
        session.add(cart)
        session.flush()
    return cart


def _owned_item(session: Session, user: User, item_id: int) -> CartItem:
    item = session.exec(
        select(CartItem)
        .join(Cart, Cart.id == CartItem.cart_id)
        .where(CartItem.id == item_id, Cart.user_id == user.id)
    ).first()
    if not item:
        raise NotFound("Cart item not found")
    return item


def add_item(session: Session, user: User, data: CartAddRequest) -> CartItem:
    """Add a line to the user's cart, merging on (product, variant, color)."""
    _validate_references(session, data.product_id, data.product_size_id)

    try:
        cart = _get_or_create_cart(session, user.id)

        color_match = (
            CartItem.cor.is_(None) if data.cor is None else CartItem.cor == data.cor
        )
        existing = session.exec(
            select(CartItem).where(
                CartItem.cart_id == cart.id,
                CartItem.product_id == data.product_id,
                CartItem.product_size_id == data.product_size_id,
                color_match,
            )
        ).first()

        if existing:
            existing.quantidade += data.quantidade
            existing.updated_at = datetime.utcnow()
            item = existing
        else:
            item = CartItem(
                cart_id=cart.id,
                product_id=data.product_id,
                product_size_id=data.product_size_id,
                quantidade=data.quantidade,
                cor=data.cor,
            )
        session.add(item)
        session.commit()
    except Exception as e:
        session.rollback()
        raise TransactionFailed("adding to cart", e)

    session.refresh(item)
    logger.info(f"User {user.id} cart line {item.id} now has quantity {item.quantidade}")
    return item


def get_cart(session: Session, user: User) -> Dict:
    cart = session.exec(select(Cart).where(Cart.user_id == user.id)).first()
    if not cart:
        return {"items": [], "total": 0}

    rows = session.exec(
        select(CartItem, Product, ProductColorSize)
        .outerjoin(Product, Product.id == CartItem.product_id)
        .outerjoin(ProductColorSize, ProductColorSize.id == CartItem.product_size_id)
        .where(CartItem.cart_id == cart.id)
        .order_by(CartItem.id)
    ).all()

    items = []
    for item, product, variant in rows:
        price = variant.price if variant else 0
        items.append({
            "id": item.id,
            "product_id": item.product_id,
            "product_size_id": item.product_size_id,
            "nome": product.nome if product else "Unavailable",
            "size": variant.size if variant else "Unavailable",
            "price": price,
            "quantidade": item.quantidade,
            "cor": item.cor,
            "subtotal": price * item.quantidade,
            "color_image": resolve_color_image(session, product, variant),
            "images": product_images(product),
        })

    return {
        "items": items,
        "total": sum(i["subtotal"] for i in items),
    }


def update_item(session: Session, user: User, data: CartUpdateRequest) -> CartItem:
    item = _owned_item(session, user, data.item_id)
    item.quantidade = data.quantidade
    item.updated_at = datetime.utcnow()
    session.add(item)
    session.commit()
    session.refresh(item)
    return item


def remove_item(session: Session, user: User, item_id: int) -> None:
    item = _owned_item(session, user, item_id)
    session.delete(item)
    session.commit()
    logger.info(f"User {user.id} removed cart line {item_id}")


def clear_cart(session: Session, user: User) -> int:
    result = session.exec(
        delete(CartItem).where(
            CartItem.cart_id.in_(select(Cart.id).where(Cart.user_id == user.id))
        )
    )
    session.commit()
    return result.rowcount
