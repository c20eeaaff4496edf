from typing import List
from sqlmodel import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from app.core.exceptions import StoreUnavailableError
from app.dao.base_dao import BaseDAO, validate_identifier
from app.models.product import Product
import structlog

logger = structlog.get_logger()


class ProductDAO(BaseDAO[Product]):
    identifier_fields = ("id", "purchase_list_id")

    def __init__(self):
        super().__init__(Product)

    async def get_by_purchase_list(self, db: AsyncSession, purchase_list_id: str) -> List[Product]:
        """Products of a list in insertion order."""
        purchase_list_id = validate_identifier("purchase_list_id", purchase_list_id)
        try:
            result = await db.execute(
                select(Product)
                .where(Product.purchase_list_id == purchase_list_id)
                .order_by(Product.created_at, Product.id)
            )
            return result.scalars().all()
        except SQLAlchemyError as e:
            logger.error("Error getting products by purchase list", purchase_list_id=purchase_list_id, error=str(e))
            raise StoreUnavailableError(str(e)) from e


product_dao = ProductDAO()
