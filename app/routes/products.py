from typing import Optional
from fastapi import APIRouter, Depends, Query, status
from sqlmodel import Session
from app.database import get_session
from app.models.user import User
from app.schemas.catalog_schemas import ProductCreate, ProductUpdate
from app.services import catalog_service
from app.dependencies.admin import require_admin

router = APIRouter()


@router.get("")
def list_products(
    campanhaId: Optional[int] = Query(None),
    session: Session = Depends(get_session),
):
    return [
        catalog_service.serialize_product(p)
        for p in catalog_service.list_products(session, campaign_id=campanhaId)
    ]


@router.get("/all")
def list_all_products(session: Session = Depends(get_session)):
    return [
        catalog_service.serialize_product(p)
        for p in catalog_service.list_products(session)
    ]


@router.get("/sales")
def product_sales(
    session: Session = Depends(get_session),
    _: User = Depends(require_admin),
):
    return catalog_service.product_sales(session)


@router.get("/recommended/{gender_id}")
def recommended_products(gender_id: int, session: Session = Depends(get_session)):
    return [
        catalog_service.serialize_product(p)
        for p in catalog_service.recommended_products(session, gender_id)
    ]


@router.get("/all/{product_id}")
def show_any_product(product_id: int, session: Session = Depends(get_session)):
    return catalog_service.serialize_product(
        catalog_service.get_product(session, product_id)
    )


@router.get("/{product_id}")
def show_product(product_id: int, session: Session = Depends(get_session)):
    return catalog_service.serialize_product(
        catalog_service.get_product(session, product_id, available_only=True)
    )


@router.post("", status_code=status.HTTP_201_CREATED)
def create_product(
    data: ProductCreate,
    session: Session = Depends(get_session),
    _: User = Depends(require_admin),
):
    product = catalog_service.create_product(session, data)
    return {
        "message": "Product created successfully!",
        "product": catalog_service.serialize_product(product),
    }


@router.put("/{product_id}")
def update_product(
    product_id: int,
    data: ProductUpdate,
    session: Session = Depends(get_session),
    _: User = Depends(require_admin),
):
    product = catalog_service.update_product(session, product_id, data)
    return {
        "message": "Product updated successfully!",
        "product": catalog_service.serialize_product(product),
    }


@router.delete("/{product_id}")
def delete_product(
    product_id: int,
    session: Session = Depends(get_session),
    _: User = Depends(require_admin),
):
    catalog_service.delete_product(session, product_id)
    return {"message": "Product deleted successfully!"}
