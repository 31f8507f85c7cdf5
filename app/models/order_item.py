from sqlmodel import SQLModel, Field, Relationship
from typing import Optional, TYPE_CHECKING
from datetime import datetime

from app.constants.order_status import PaymentStatus, StockStatus

if TYPE_CHECKING:
    from app.models.order import Order


class OrderItem(SQLModel, table=True):
    __tablename__ = "order_product"
    id: Optional[int] = Field(default=None, primary_key=True)
    order_id: int = Field(foreign_key="orders.id", index=True)
    # weak references: catalog rows may be deleted, the line then shows as unavailable
    product_id: int = Field(index=True)
    product_size_id: int

    quantidade: int
    cor: Optional[str] = Field(default=None, max_length=255)

    status_pagamento: str = Field(default=PaymentStatus.pending.value)
    status_estoque: str = Field(default=StockStatus.pending.value)

    is_processed: bool = Field(default=False)
    processed_at: Optional[datetime] = None

    order: Optional["Order"] = Relationship(back_populates="items")
