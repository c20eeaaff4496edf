from typing import Optional
from sqlmodel import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from app.core.exceptions import StoreUnavailableError
from app.dao.base_dao import BaseDAO, validate_identifier
from app.models.purchase_list import PurchaseList
import structlog

logger = structlog.get_logger()


class PurchaseListDAO(BaseDAO[PurchaseList]):
    def __init__(self):
        super().__init__(PurchaseList)

    async def get_visible_to(self, db: AsyncSession, id: str, user_id: str) -> Optional[PurchaseList]:
        """
        Return the list when the user owns it or it is shared with them.
        Soft-deleted lists are never returned.
        """
        id = validate_identifier("id", id)
        try:
            result = await db.execute(
                select(PurchaseList)
                .where(PurchaseList.id == id)
                .where(PurchaseList.delete == False)  # noqa: E712
            )
            purchase_list = result.scalar_one_or_none()
        except SQLAlchemyError as e:
            logger.error("Error getting purchase list", id=id, user_id=user_id, error=str(e))
            raise StoreUnavailableError(str(e)) from e

        # shared_ids is a JSON array, so membership is checked in Python to
        # keep the query portable across dialects.
        if purchase_list is None or not purchase_list.is_visible_to(user_id):
            return None
        return purchase_list


purchase_list_dao = PurchaseListDAO()
