from pydantic import BaseModel, Field
from typing import List, Optional

from app.constants.order_status import PaymentStatus, StockStatus


class OrderItemRequest(BaseModel):
    product_id: int
    product_size_id: int
    quantidade: int = Field(ge=1)
    cor: Optional[str] = Field(default=None, max_length=255)


class OrderCreateRequest(BaseModel):
    items: List[OrderItemRequest] = Field(min_length=1)
    observacoes: Optional[str] = None
    telefone: str = Field(min_length=1, max_length=20)


class OrderCreatedResponse(BaseModel):
    message: str
    order_id: int


class ItemStatusUpdate(BaseModel):
    status_pagamento: Optional[PaymentStatus] = None
    status_estoque: Optional[StockStatus] = None


class PaymentNotificationRequest(BaseModel):
    order_id: int


class MarkProcessedRequest(BaseModel):
    produtos: List[int] = []


class MessageResponse(BaseModel):
    message: str
