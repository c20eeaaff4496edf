from sqlmodel import SQLModel, Field, Relationship
from typing import Optional, TYPE_CHECKING
from datetime import datetime, timezone
from sqlalchemy import DateTime
import uuid

if TYPE_CHECKING:
    from .purchase_list import PurchaseList


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class ProductBase(SQLModel):
    name: str = Field(index=True)
    quantity: int
    category: str = Field(index=True)
    price: float
    place: str
    purchase_list_id: str = Field(foreign_key="purchase_lists.id", index=True)


class Product(ProductBase, table=True):
    __tablename__ = "products"

    id: str = Field(default_factory=lambda: str(uuid.uuid4()), primary_key=True)
    created_at: datetime = Field(default_factory=utc_now, sa_type=DateTime(timezone=True))
    created_by_id: str = Field(index=True)
    checked: bool = Field(default=False)
    checked_by_id: Optional[str] = Field(default=None)

    purchase_list: Optional["PurchaseList"] = Relationship(back_populates="products")


class ProductCreate(ProductBase):
    pass


class ProductRead(ProductBase):
    id: str
    created_at: datetime
    created_by_id: str
    checked: bool
    checked_by_id: Optional[str]


class ProductUpdate(SQLModel):
    name: Optional[str] = None
    quantity: Optional[int] = None
    category: Optional[str] = None
    price: Optional[float] = None
    place: Optional[str] = None
    checked: Optional[bool] = None
