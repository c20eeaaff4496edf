from typing import Any, Dict, List, Optional
from sqlalchemy.ext.asyncio import AsyncSession
from app.core.exceptions import (
    INVALID_LIST_ID_MESSAGE,
    LIST_NOT_FOUND_MESSAGE,
    PRODUCT_NOT_FOUND_MESSAGE,
    InvalidIdentifierError,
    InvalidListIdentifierError,
    PermissionDeniedError,
    ProductValidationError,
    ResourceNotFoundError,
)
from app.core.security import TokenParser, token_parser
from app.dao.product_dao import ProductDAO, product_dao
from app.dao.purchase_list_dao import PurchaseListDAO, purchase_list_dao
from app.models.product import ProductRead
from app.schemas.product_schemas import (
    CategoryGroup,
    ProductSummary,
    group_by_category,
    parse_create_body,
    parse_update_body,
)
import structlog

logger = structlog.get_logger()


class ProductService:
    """Business rules for products on shared purchase lists"""

    def __init__(
        self,
        products: ProductDAO = product_dao,
        purchase_lists: PurchaseListDAO = purchase_list_dao,
        tokens: TokenParser = token_parser,
    ):
        self.product_dao = products
        self.purchase_list_dao = purchase_lists
        self.token_parser = tokens

    async def find(self, db: AsyncSession, filters: Dict[str, Any]) -> Optional[ProductSummary]:
        product = await self.product_dao.find_unique(db, filters)
        if product is None:
            logger.info("No product matched filter", filters=filters)
            return None
        return ProductSummary.model_validate(product)

    async def find_list_products(
        self, db: AsyncSession, list_id: Optional[str], credential: Optional[str]
    ) -> List[CategoryGroup]:
        """Products of a visible purchase list, grouped by category."""
        if not list_id:
            raise ProductValidationError("Informe um id da lista")

        user_id = self.token_parser.parse(credential)
        purchase_list = await self.purchase_list_dao.get_visible_to(db, list_id, user_id)
        if purchase_list is None:
            logger.warning("Purchase list not visible", list_id=list_id, user_id=user_id)
            raise ResourceNotFoundError(LIST_NOT_FOUND_MESSAGE)

        products = await self.product_dao.get_by_purchase_list(db, purchase_list.id)
        groups = group_by_category(products)
        logger.info("Retrieved list products", list_id=list_id, count=len(products), categories=len(groups))
        return groups

    async def create(
        self, db: AsyncSession, body: Dict[str, Any], credential: Optional[str]
    ) -> ProductRead:
        product_create = parse_create_body(body)

        # Existence only; owners and shared members are not checked here.
        try:
            purchase_list = await self.purchase_list_dao.get_by_id(db, product_create.purchase_list_id)
        except InvalidIdentifierError:
            raise InvalidListIdentifierError(INVALID_LIST_ID_MESSAGE)
        if purchase_list is None:
            raise ResourceNotFoundError(LIST_NOT_FOUND_MESSAGE)

        user_id = self.token_parser.parse(credential)
        product_data = product_create.model_dump()
        product_data["created_by_id"] = user_id

        product = await self.product_dao.create(db, obj_in=product_data)
        logger.info("Product created successfully", product_id=product.id, created_by_id=user_id)
        return ProductRead.model_validate(product)

    async def update(
        self,
        db: AsyncSession,
        product_id: Optional[str],
        body: Dict[str, Any],
        credential: Optional[str],
    ) -> ProductRead:
        if not product_id:
            raise ProductValidationError("Informe um id")
        if not body:
            raise ProductValidationError("Nenhum dado informado.")

        product_update = parse_update_body(body)
        update_data = product_update.model_dump(exclude_unset=True)

        if product_update.checked:
            update_data["checked_by_id"] = self.token_parser.parse(credential)
        else:
            update_data["checked_by_id"] = None

        product = await self.product_dao.update_by_id(db, id=product_id, obj_in=update_data)
        logger.info("Product updated successfully", product_id=product_id, fields=sorted(update_data))
        return ProductRead.model_validate(product)

    async def delete(
        self, db: AsyncSession, product_id: Optional[str], credential: Optional[str]
    ) -> None:
        if not product_id:
            raise ProductValidationError("Informe o id do produto")

        product = await self.product_dao.get_by_id(db, product_id)
        if product is None:
            raise ResourceNotFoundError(PRODUCT_NOT_FOUND_MESSAGE)

        user_id = self.token_parser.parse(credential)
        if user_id != product.created_by_id:
            logger.warning("Unauthorized product delete attempt", product_id=product_id, user_id=user_id)
            raise PermissionDeniedError("Você não possui permissão para deletar este produto.")

        await self.product_dao.delete(db, id=product_id)
        logger.info("Product deleted successfully", product_id=product_id, user_id=user_id)


product_service = ProductService()
