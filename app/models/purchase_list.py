from sqlmodel import SQLModel, Field, Relationship
from sqlalchemy import Column, DateTime, JSON
from typing import Optional, List, TYPE_CHECKING
from datetime import datetime
import uuid
from .product import utc_now

if TYPE_CHECKING:
    from .product import Product


class PurchaseList(SQLModel, table=True):
    __tablename__ = "purchase_lists"

    id: str = Field(default_factory=lambda: str(uuid.uuid4()), primary_key=True)
    name: Optional[str] = None
    color: Optional[str] = None
    icon: Optional[str] = None
    concluded: bool = Field(default=False)
    total: Optional[float] = None
    delete: bool = Field(default=False)
    created_at: datetime = Field(default_factory=utc_now, sa_type=DateTime(timezone=True))
    created_by_id: str = Field(index=True)
    shared_ids: List[str] = Field(default_factory=list, sa_column=Column(JSON, nullable=False))

    products: List["Product"] = Relationship(back_populates="purchase_list")

    def is_visible_to(self, user_id: str) -> bool:
        """Owner or shared member, and the list is not soft-deleted."""
        if self.delete:
            return False
        return self.created_by_id == user_id or user_id in (self.shared_ids or [])
