from fastapi import APIRouter, Depends, Response, status
from sqlmodel import Session, select
from app.database import get_session
from app.models.campaign import Brand
from app.models.product import ProductColor
from app.models.user import User
from app.schemas.catalog_schemas import BrandCreate, CampaignCreate, ProductColorCreate
from app.services import catalog_service
from app.dependencies.admin import require_admin

router = APIRouter()


# -------- CAMPAIGNS --------

@router.get("/campanhas")
def list_campaigns(session: Session = Depends(get_session)):
    return [
        catalog_service.serialize_campaign(c)
        for c in catalog_service.list_campaigns(session)
    ]


@router.get("/campanhasStore")
def list_active_campaigns(session: Session = Depends(get_session)):
    return [
        catalog_service.serialize_campaign(c)
        for c in catalog_service.list_campaigns(session, active_only=True)
    ]


@router.get("/campanhas/{campaign_id}")
def get_campaign(campaign_id: int, session: Session = Depends(get_session)):
    return catalog_service.serialize_campaign(
        catalog_service.get_campaign(session, campaign_id)
    )


@router.get("/campanhas/{campaign_id}/produtos")
def campaign_products(campaign_id: int, session: Session = Depends(get_session)):
    return [
        catalog_service.serialize_product(p)
        for p in catalog_service.list_products(session, campaign_id=campaign_id)
    ]


@router.post("/criar-campanha", status_code=status.HTTP_201_CREATED)
def create_campaign(
    data: CampaignCreate,
    session: Session = Depends(get_session),
    _: User = Depends(require_admin),
):
    campaign = catalog_service.create_campaign(session, data)
    return catalog_service.serialize_campaign(campaign)


@router.put("/campanhas/{campaign_id}")
def update_campaign(
    campaign_id: int,
    data: CampaignCreate,
    session: Session = Depends(get_session),
    _: User = Depends(require_admin),
):
    campaign = catalog_service.update_campaign(session, campaign_id, data)
    return catalog_service.serialize_campaign(campaign)


# -------- BRANDS --------

@router.get("/brands")
@router.get("/marcas")
def list_brands(session: Session = Depends(get_session)):
    return session.exec(select(Brand).order_by(Brand.nome)).all()


@router.post("/marcas", status_code=status.HTTP_201_CREATED)
def create_brand(
    data: BrandCreate,
    session: Session = Depends(get_session),
    _: User = Depends(require_admin),
):
    brand = Brand(nome=data.nome)
    session.add(brand)
    session.commit()
    session.refresh(brand)
    return brand


# -------- COLORS --------

@router.get("/product-colors")
def list_colors(session: Session = Depends(get_session)):
    return session.exec(select(ProductColor).order_by(ProductColor.id)).all()


@router.get("/product-colors/{color_id}")
def show_color(color_id: int, session: Session = Depends(get_session)):
    return catalog_service.get_color(session, color_id)


@router.post("/product-colors", status_code=status.HTTP_201_CREATED)
def create_color(
    data: ProductColorCreate,
    session: Session = Depends(get_session),
    _: User = Depends(require_admin),
):
    return catalog_service.create_color(session, data.name)


@router.put("/product-colors/{color_id}")
def update_color(
    color_id: int,
    data: ProductColorCreate,
    session: Session = Depends(get_session),
    _: User = Depends(require_admin),
):
    return catalog_service.update_color(session, color_id, data.name)


@router.delete("/product-colors/{color_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_color(
    color_id: int,
    session: Session = Depends(get_session),
    _: User = Depends(require_admin),
):
    catalog_service.delete_color(session, color_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
