from sqlmodel import SQLModel, Field, Relationship
from typing import Optional, List, TYPE_CHECKING
from datetime import datetime

from app.utils.dates import naive_utc

if TYPE_CHECKING:
    from app.models.product import Product

# campaign.status values that hide a campaign from the storefront
HIDDEN_CAMPAIGN_STATUSES = ("pausado", "finalizado")


class Brand(SQLModel, table=True):
    __tablename__ = "brands"
    id: Optional[int] = Field(default=None, primary_key=True)
    nome: str
    created_at: datetime = Field(default_factory=datetime.utcnow)


class Campaign(SQLModel, table=True):
    __tablename__ = "campaigns"
    id: Optional[int] = Field(default=None, primary_key=True)
    nome: str = Field(index=True)
    gender_id: int
    marca: str
    brand_id: Optional[int] = Field(default=None, foreign_key="brands.id")
    data_inicio: datetime
    data_fim: datetime
    status: Optional[str] = None
    created_at: datetime = Field(default_factory=datetime.utcnow)
    updated_at: datetime = Field(default_factory=datetime.utcnow)

    brand: Optional[Brand] = Relationship()
    products: List["Product"] = Relationship(back_populates="campaign")

    def is_active(self, now: Optional[datetime] = None) -> bool:
        now = naive_utc(now) or datetime.utcnow()
        return naive_utc(self.data_inicio) <= now <= naive_utc(self.data_fim)
