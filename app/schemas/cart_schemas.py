from pydantic import BaseModel, Field
from typing import List, Optional


class CartAddRequest(BaseModel):
    product_id: int
    product_size_id: int
    quantidade: int = Field(ge=1)
    cor: Optional[str] = Field(default=None, max_length=50)


class CartUpdateRequest(BaseModel):
    item_id: int
    quantidade: int = Field(ge=1)


class CartRemoveRequest(BaseModel):
    item_id: int


class CartLine(BaseModel):
    id: int
    product_id: int
    product_size_id: int
    nome: str
    size: str
    price: float
    quantidade: int
    cor: Optional[str] = None
    subtotal: float
    color_image: Optional[str] = None
    images: List[str] = []


class CartResponse(BaseModel):
    items: List[CartLine]
    total: float
