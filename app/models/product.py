from sqlmodel import SQLModel, Field, Relationship, Column, JSON
from typing import Optional, List, TYPE_CHECKING
from datetime import datetime

from app.models.campaign import HIDDEN_CAMPAIGN_STATUSES

if TYPE_CHECKING:
    from app.models.campaign import Campaign


class ProductColor(SQLModel, table=True):
    __tablename__ = "product_colors"
    id: Optional[int] = Field(default=None, primary_key=True)
    name: str
    created_at: datetime = Field(default_factory=datetime.utcnow)


class Product(SQLModel, table=True):
    __tablename__ = "products"
    id: Optional[int] = Field(default=None, primary_key=True)
    nome: str
    descricao: Optional[str] = None
    campaign_id: int = Field(foreign_key="campaigns.id")
    brand_id: Optional[int] = Field(default=None, foreign_key="brands.id")
    preco: float

    # stored paths, resized by the image pipeline before they get here
    images: List[str] = Field(default_factory=list, sa_column=Column(JSON))
    thumbnails: List[str] = Field(default_factory=list, sa_column=Column(JSON))

    created_at: datetime = Field(default_factory=datetime.utcnow)
    updated_at: datetime = Field(default_factory=datetime.utcnow)

    campaign: Optional["Campaign"] = Relationship(back_populates="products")
    color_sizes: List["ProductColorSize"] = Relationship(back_populates="product")
    color_images: List["ProductColorImage"] = Relationship(back_populates="product")

    def is_available(self) -> bool:
        campaign = self.campaign
        if campaign is None:
            return False
        return campaign.status not in HIDDEN_CAMPAIGN_STATUSES and campaign.is_active()


class ProductColorSize(SQLModel, table=True):
    """A purchasable variant: product + color + size, carrying the unit price."""

    __tablename__ = "product_color_sizes"
    id: Optional[int] = Field(default=None, primary_key=True)
    product_id: int = Field(foreign_key="products.id", index=True)
    product_color_id: Optional[int] = Field(default=None, foreign_key="product_colors.id")
    size: str
    price: float

    product: Optional[Product] = Relationship(back_populates="color_sizes")


class ProductColorImage(SQLModel, table=True):
    __tablename__ = "product_color_images"
    id: Optional[int] = Field(default=None, primary_key=True)
    product_id: int = Field(foreign_key="products.id", index=True)
    product_color_id: int = Field(foreign_key="product_colors.id")
    image_path: str
    thumbnail_path: Optional[str] = None

    product: Optional[Product] = Relationship(back_populates="color_images")
