from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, Field, field_validator, model_validator

from app.utils.dates import naive_utc


class CampaignCreate(BaseModel):
    nome: str = Field(min_length=1)
    gender_id: int = Field(ge=1, le=2)
    marca: str = Field(min_length=1)
    brand_id: Optional[int] = None
    data_inicio: datetime
    data_fim: datetime
    status: Optional[str] = None

    @field_validator("data_inicio", "data_fim")
    @classmethod
    def to_naive_utc(cls, value: datetime) -> datetime:
        return naive_utc(value)

    @model_validator(mode="after")
    def validate_dates(self):
        if self.data_fim < self.data_inicio:
            raise ValueError("data_fim must be a date after or equal to data_inicio")
        return self


class BrandCreate(BaseModel):
    nome: str = Field(min_length=1, max_length=255)


class ProductColorCreate(BaseModel):
    name: str = Field(min_length=1, max_length=255)


class SizePrice(BaseModel):
    size: str = Field(min_length=1)
    price: Optional[float] = Field(default=None, ge=0)


class ColorSizes(BaseModel):
    id: int
    sizes: List[SizePrice] = []


class ColorImages(BaseModel):
    color_id: int
    images: List[str] = []


class ProductCreate(BaseModel):
    nome: str = Field(min_length=1, max_length=255)
    descricao: Optional[str] = None
    campaign_id: int
    brand_id: Optional[int] = None
    preco: float = Field(ge=0)
    images: List[str] = []
    thumbnails: List[str] = []
    colors: List[ColorSizes] = Field(min_length=1)
    color_images: List[ColorImages] = []


class SizeUpdate(BaseModel):
    # id of an existing variant of the product; omitted for a new one
    id: Optional[int] = None
    size: str = Field(min_length=1)
    price: Optional[float] = Field(default=None, ge=0)


class ColorSizesUpdate(BaseModel):
    id: int
    sizes: List[SizeUpdate] = []


class ProductUpdate(BaseModel):
    """Partial update. ``colors`` and ``color_images`` replace the current sets when sent."""

    nome: Optional[str] = Field(default=None, min_length=1, max_length=255)
    descricao: Optional[str] = None
    campaign_id: Optional[int] = None
    brand_id: Optional[int] = None
    preco: Optional[float] = Field(default=None, ge=0)
    images: Optional[List[str]] = None
    thumbnails: Optional[List[str]] = None
    colors: Optional[List[ColorSizesUpdate]] = Field(default=None, min_length=1)
    color_images: Optional[List[ColorImages]] = None
