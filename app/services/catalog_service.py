# app/services/catalog_service.py
from datetime import datetime
import logging
from typing import Dict, Iterable, List, Optional, Sequence

from sqlalchemy import delete, func, update
from sqlmodel import Session, select

from app.core.exceptions import NotFound, TransactionFailed, ValidationFailed
from app.models.campaign import Brand, Campaign
from app.models.cart import CartItem
from app.models.order_item import OrderItem
from app.models.product import (
    Product,
    ProductColor,
    ProductColorImage,
    ProductColorSize,
)
from app.schemas.catalog_schemas import (
    CampaignCreate,
    ColorImages,
    ColorSizesUpdate,
    ProductCreate,
    ProductUpdate,
)

logger = logging.getLogger(__name__)


# -------- IMAGES --------

def product_images(product: Optional[Product]) -> List[str]:
    if product is None or not product.images:
        return []
    return list(product.images)


def resolve_color_image(
    session: Session,
    product: Optional[Product],
    variant: Optional[ProductColorSize],
) -> Optional[str]:
    """Image shown for a line: the variant color's image, else the first product image."""
    color_image = None
    if product is not None and variant is not None and variant.product_color_id:
        row = session.exec(
            select(ProductColorImage)
            .where(
                ProductColorImage.product_id == product.id,
                ProductColorImage.product_color_id == variant.product_color_id,
            )
            .order_by(ProductColorImage.id)
        ).first()
        color_image = row.image_path if row else None

    images = product_images(product)
    return color_image or (images[0] if images else None)


def first_thumbnail(product: Optional[Product]) -> Optional[str]:
    if product is None or not product.thumbnails:
        return None
    return product.thumbnails[0]


def existing_ids(session: Session, model, ids: Iterable[int]) -> set:
    ids = set(ids)
    if not ids:
        return set()
    return set(session.exec(select(model.id).where(model.id.in_(ids))).all())


# -------- CAMPAIGNS --------

def unique_campaign_name(session: Session, base_name: str, exclude_id: Optional[int] = None) -> str:
    name = base_name
    counter = 1
    while True:
        query = select(Campaign.id).where(Campaign.nome == name)
        if exclude_id is not None:
            query = query.where(Campaign.id != exclude_id)
        if session.exec(query).first() is None:
            return name
        name = f"{base_name} - {counter}"
        counter += 1


def _check_brand(session: Session, brand_id: Optional[int]):
    if brand_id is not None and session.get(Brand, brand_id) is None:
        raise ValidationFailed({"brand_id": ["The selected brand_id is invalid."]})


def create_campaign(session: Session, data: CampaignCreate) -> Campaign:
    _check_brand(session, data.brand_id)
    values = data.model_dump()
    values["nome"] = unique_campaign_name(session, data.nome)
    campaign = Campaign(**values)
    session.add(campaign)
    session.commit()
    session.refresh(campaign)
    logger.info(f"Campaign {campaign.id} created as '{campaign.nome}'")
    return campaign


def update_campaign(session: Session, campaign_id: int, data: CampaignCreate) -> Campaign:
    campaign = get_campaign(session, campaign_id)
    _check_brand(session, data.brand_id)
    values = data.model_dump(exclude={"status"} if data.status is None else None)
    values["nome"] = unique_campaign_name(session, data.nome, exclude_id=campaign_id)
    for key, value in values.items():
        setattr(campaign, key, value)
    campaign.updated_at = datetime.utcnow()
    session.add(campaign)
    session.commit()
    session.refresh(campaign)
    return campaign


def get_campaign(session: Session, campaign_id: int) -> Campaign:
    campaign = session.get(Campaign, campaign_id)
    if not campaign:
        raise NotFound("Campaign not found")
    return campaign


def list_campaigns(session: Session, active_only: bool = False) -> List[Campaign]:
    query = select(Campaign).order_by(Campaign.data_inicio.desc())
    if active_only:
        now = datetime.utcnow()
        query = query.where(Campaign.data_inicio <= now, Campaign.data_fim >= now)
    return session.exec(query).all()


def serialize_campaign(campaign: Campaign) -> Dict:
    data = campaign.model_dump()
    data["status"] = campaign.status or "not_started"
    data["brand"] = campaign.brand.model_dump() if campaign.brand else None
    return data


def campaign_product_ids(session: Session, campaign_id: int) -> List[int]:
    return session.exec(select(Product.id).where(Product.campaign_id == campaign_id)).all()


def campaign_options(session: Session) -> List[Dict]:
    """Id/name pairs for the back-office order filter."""
    rows = session.exec(select(Campaign.id, Campaign.nome).order_by(Campaign.nome)).all()
    return [{"id": campaign_id, "nome": nome} for campaign_id, nome in rows]


# -------- COLORS --------

def get_color(session: Session, color_id: int) -> ProductColor:
    color = session.get(ProductColor, color_id)
    if not color:
        raise NotFound("Color not found")
    return color


def _ensure_unique_color_name(session: Session, name: str, exclude_id: Optional[int] = None):
    query = select(ProductColor.id).where(ProductColor.name == name)
    if exclude_id is not None:
        query = query.where(ProductColor.id != exclude_id)
    if session.exec(query).first() is not None:
        raise ValidationFailed({"name": ["A color with this name already exists."]})


def create_color(session: Session, name: str) -> ProductColor:
    _ensure_unique_color_name(session, name)
    color = ProductColor(name=name)
    session.add(color)
    session.commit()
    session.refresh(color)
    return color


def update_color(session: Session, color_id: int, name: str) -> ProductColor:
    color = get_color(session, color_id)
    _ensure_unique_color_name(session, name, exclude_id=color_id)
    color.name = name
    session.add(color)
    session.commit()
    session.refresh(color)
    return color


def delete_color(session: Session, color_id: int) -> None:
    """Remove a color; its variants stay, without a color, and its images go."""
    color = get_color(session, color_id)
    try:
        session.exec(
            update(ProductColorSize)
            .where(ProductColorSize.product_color_id == color_id)
            .values(product_color_id=None)
        )
        session.exec(delete(ProductColorImage).where(ProductColorImage.product_color_id == color_id))
        session.delete(color)
        session.commit()
    except Exception as e:
        session.rollback()
        raise TransactionFailed("deleting color", e)
    logger.info(f"Color {color_id} deleted")


# -------- PRODUCTS --------

def serialize_product(product: Product) -> Dict:
    data = product.model_dump()
    data["campaign"] = product.campaign.model_dump() if product.campaign else None
    data["color_sizes"] = [v.model_dump() for v in product.color_sizes]
    data["color_images"] = [i.model_dump() for i in product.color_images]
    return data


def list_products(session: Session, campaign_id: Optional[int] = None) -> List[Product]:
    query = select(Product).order_by(Product.id)
    if campaign_id is not None:
        query = query.where(Product.campaign_id == campaign_id)
    return session.exec(query).all()


def recommended_products(session: Session, gender_id: int, limit: int = 3) -> List[Product]:
    return session.exec(
        select(Product)
        .join(Campaign, Campaign.id == Product.campaign_id)
        .where(Campaign.gender_id == gender_id)
        .order_by(func.random())
        .limit(limit)
    ).all()


def product_sales(session: Session) -> List[Dict]:
    """Every product with its sizes, color names and units sold across all orders."""
    products = session.exec(select(Product).order_by(Product.id)).all()
    sold = dict(session.exec(
        select(OrderItem.product_id, func.sum(OrderItem.quantidade))
        .group_by(OrderItem.product_id)
    ).all())
    color_names = {c.id: c.name for c in session.exec(select(ProductColor)).all()}

    response = []
    for product in products:
        colors = []
        for variant in product.color_sizes:
            name = color_names.get(variant.product_color_id)
            if name and name not in colors:
                colors.append(name)
        campaign = product.campaign
        response.append({
            "id": product.id,
            "nome": product.nome,
            "campaign": {
                "nome": campaign.nome if campaign else "N/A",
                "marca": campaign.marca if campaign else "N/A",
            },
            "colors": colors,
            "sizes": [{"size": v.size, "price": v.price} for v in product.color_sizes],
            "sales": int(sold.get(product.id) or 0),
            "images": product_images(product),
        })
    return response


def get_product(session: Session, product_id: int, available_only: bool = False) -> Product:
    product = session.get(Product, product_id)
    if not product:
        raise NotFound("Product not found")
    if available_only and not product.is_available():
        logger.warning(f"Product {product_id} requested while unavailable")
        raise NotFound("Product unavailable")
    return product


def _reference_errors(
    session: Session,
    campaign_id: Optional[int],
    brand_id: Optional[int],
    colors: Sequence,
    color_images: Sequence[ColorImages],
) -> Dict[str, List[str]]:
    errors = {}
    if campaign_id is not None and session.get(Campaign, campaign_id) is None:
        errors["campaign_id"] = ["The selected campaign_id is invalid."]
    if brand_id is not None and session.get(Brand, brand_id) is None:
        errors["brand_id"] = ["The selected brand_id is invalid."]

    known_colors = existing_ids(
        session,
        ProductColor,
        [c.id for c in colors] + [c.color_id for c in color_images],
    )
    for index, color in enumerate(colors):
        if color.id not in known_colors:
            errors[f"colors.{index}.id"] = [f"The selected colors.{index}.id is invalid."]
    for index, color in enumerate(color_images):
        if color.color_id not in known_colors:
            errors[f"color_images.{index}.color_id"] = [
                f"The selected color_images.{index}.color_id is invalid."
            ]
    return errors


def _add_color_images(session: Session, product_id: int, color_images: Sequence[ColorImages]):
    for color in color_images:
        for path in color.images:
            session.add(ProductColorImage(
                product_id=product_id,
                product_color_id=color.color_id,
                image_path=path,
            ))


def create_product(session: Session, data: ProductCreate) -> Product:
    """Insert the product, its color/size variants and color images atomically."""
    errors = _reference_errors(
        session, data.campaign_id, data.brand_id, data.colors, data.color_images
    )
    if errors:
        raise ValidationFailed(errors)

    try:
        product = Product(
            nome=data.nome,
            descricao=data.descricao,
            campaign_id=data.campaign_id,
            brand_id=data.brand_id,
            preco=data.preco,
            images=list(data.images),
            thumbnails=list(data.thumbnails),
        )
        session.add(product)
        session.flush()

        for color in data.colors:
            for size in color.sizes:
                session.add(ProductColorSize(
                    product_id=product.id,
                    product_color_id=color.id,
                    size=size.size,
                    price=size.price if size.price is not None else data.preco,
                ))

        _add_color_images(session, product.id, data.color_images)
        session.commit()
    except Exception as e:
        session.rollback()
        raise TransactionFailed("creating product", e)

    session.refresh(product)
    logger.info(f"Product {product.id} created in campaign {product.campaign_id}")
    return product


def _replace_variants(session: Session, product: Product, colors: Sequence[ColorSizesUpdate]):
    """Upsert the sent variants by id and drop the product's other variants.

    Kept ids keep their order lines priced; dropped variants lose their cart lines.
    """
    current = {
        v.id: v for v in session.exec(
            select(ProductColorSize).where(ProductColorSize.product_id == product.id)
        ).all()
    }
    kept = set()
    for color in colors:
        for size in color.sizes:
            price = size.price if size.price is not None else product.preco
            variant = current.get(size.id) if size.id is not None else None
            if variant is None:
                variant = ProductColorSize(product_id=product.id)
            else:
                kept.add(variant.id)
            variant.product_color_id = color.id
            variant.size = size.size
            variant.price = price
            session.add(variant)

    dropped = [variant_id for variant_id in current if variant_id not in kept]
    if dropped:
        session.exec(delete(CartItem).where(CartItem.product_size_id.in_(dropped)))
        session.exec(delete(ProductColorSize).where(ProductColorSize.id.in_(dropped)))


def update_product(session: Session, product_id: int, data: ProductUpdate) -> Product:
    """Update product fields and, when sent, replace variants and color images atomically."""
    product = get_product(session, product_id)

    errors = _reference_errors(
        session, data.campaign_id, data.brand_id, data.colors or [], data.color_images or []
    )
    current_ids = set(session.exec(
        select(ProductColorSize.id).where(ProductColorSize.product_id == product.id)
    ).all())
    for c_index, color in enumerate(data.colors or []):
        for s_index, size in enumerate(color.sizes):
            if size.id is not None and size.id not in current_ids:
                field = f"colors.{c_index}.sizes.{s_index}.id"
                errors[field] = [f"The selected {field} is invalid."]
    if errors:
        raise ValidationFailed(errors)

    fields = data.model_dump(exclude_unset=True, exclude={"colors", "color_images"})
    for required in ("nome", "campaign_id", "preco", "images", "thumbnails"):
        if fields.get(required, "") is None:
            fields.pop(required)

    try:
        for key, value in fields.items():
            setattr(product, key, value)
        product.updated_at = datetime.utcnow()
        session.add(product)
        session.flush()

        if data.colors is not None:
            _replace_variants(session, product, data.colors)

        if data.color_images is not None:
            session.exec(delete(ProductColorImage).where(ProductColorImage.product_id == product.id))
            _add_color_images(session, product.id, data.color_images)

        session.commit()
    except Exception as e:
        session.rollback()
        raise TransactionFailed("updating product", e)

    session.refresh(product)
    logger.info(f"Product {product.id} updated: {sorted(data.model_fields_set)}")
    return product


def delete_product(session: Session, product_id: int) -> None:
    """Remove a product with its variants, color images and cart lines.

    Order lines keep pointing at the removed ids and read back as unavailable.
    """
    product = get_product(session, product_id)
    try:
        session.exec(delete(CartItem).where(CartItem.product_id == product_id))
        session.exec(delete(ProductColorImage).where(ProductColorImage.product_id == product_id))
        session.exec(delete(ProductColorSize).where(ProductColorSize.product_id == product_id))
        session.delete(product)
        session.commit()
    except Exception as e:
        session.rollback()
        raise TransactionFailed("deleting product", e)
    logger.info(f"Product {product_id} deleted")
