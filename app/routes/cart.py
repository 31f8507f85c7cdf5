from fastapi import APIRouter, Depends, status
from sqlmodel import Session
from app.database import get_session
from app.models.user import User
from app.schemas.cart_schemas import (
    CartAddRequest,
    CartRemoveRequest,
    CartResponse,
    CartUpdateRequest,
)
from app.services import cart_service
from app.utils.token import get_current_user  # JWT dependency


router = APIRouter()

# Add to Cart

@router.post("/add", status_code=status.HTTP_201_CREATED)
def add_to_cart(
    data: CartAddRequest,
    session: Session = Depends(get_session),
    current_user: User = Depends(get_current_user)
):
    cart_service.add_item(session, current_user, data)
    return {"message": "Product added to cart!"}


# View Cart

@router.get("", response_model=CartResponse)
def get_cart(
    session: Session = Depends(get_session),
    current_user: User = Depends(get_current_user)
):
    return cart_service.get_cart(session, current_user)


# Update Cart

@router.put("/update")
def update_cart_item(
    data: CartUpdateRequest,
    session: Session = Depends(get_session),
    current_user: User = Depends(get_current_user)
):
    cart_service.update_item(session, current_user, data)
    return {"message": "Quantity updated"}


# Remove Cart

@router.delete("/remove")
def remove_item(
    data: CartRemoveRequest,
    session: Session = Depends(get_session),
    current_user: User = Depends(get_current_user)
):
    cart_service.remove_item(session, current_user, data.item_id)
    return {"message": "Item removed from cart"}


# Clear Cart

@router.delete("/clear")
def clear_cart_endpoint(
    session: Session = Depends(get_session),
    current_user: User = Depends(get_current_user)
):
    cart_service.clear_cart(session, current_user)
    return {"message": "Cart cleared"}
