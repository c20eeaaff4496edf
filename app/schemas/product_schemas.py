from pydantic import BaseModel, ValidationError
from typing import Any, Dict, Iterable, List, Optional
from datetime import datetime
from app.core.exceptions import ProductValidationError
from app.models.product import Product, ProductCreate, ProductRead, ProductUpdate
import structlog

logger = structlog.get_logger()

CREATE_FIELDS = ("purchase_list_id", "name", "quantity", "category", "price", "place")
UPDATE_FIELDS = ("name", "quantity", "category", "price", "place", "checked")

CREATE_FIELDS_MESSAGE = (
    "Campos obrigatorios devem estar presente no objeto: " + ", ".join(CREATE_FIELDS)
)
UPDATE_FIELDS_MESSAGE = (
    "Pelo menos um dos campos válidos deve estar presente no objeto: " + ", ".join(UPDATE_FIELDS)
)
UPDATE_VALUES_MESSAGE = "Valores inválidos para os campos: " + ", ".join(UPDATE_FIELDS)


def has_value(value: Any) -> bool:
    """False, 0 and empty lists count as values; None and "" do not."""
    return value is not None and not (isinstance(value, str) and value == "")


def parse_create_body(body: Dict[str, Any]) -> ProductCreate:
    """
    Accept the body only when it carries exactly the create fields, each with
    a value. Any deviation is reported with one combined message.
    """
    if set(body) != set(CREATE_FIELDS) or not all(has_value(v) for v in body.values()):
        raise ProductValidationError(CREATE_FIELDS_MESSAGE)
    try:
        return ProductCreate.model_validate(body)
    except ValidationError as e:
        logger.warning("Invalid product create values", errors=e.errors())
        raise ProductValidationError(CREATE_FIELDS_MESSAGE)


def parse_update_body(body: Dict[str, Any]) -> ProductUpdate:
    """
    Keep only allow-listed fields that have a value. At least one must remain.
    Keys outside the allow-list are dropped, never written.
    """
    present = {key: value for key, value in body.items() if key in UPDATE_FIELDS and has_value(value)}
    if not present:
        raise ProductValidationError(UPDATE_FIELDS_MESSAGE)

    ignored = sorted(key for key in body if key not in UPDATE_FIELDS)
    if ignored:
        logger.warning("Ignoring fields outside the update allow-list", fields=ignored)

    try:
        return ProductUpdate.model_validate(present)
    except ValidationError as e:
        logger.warning("Invalid product update values", errors=e.errors())
        raise ProductValidationError(UPDATE_VALUES_MESSAGE)


class ProductSummary(BaseModel):
    id: str
    name: str
    quantity: int
    category: str
    price: float
    place: str
    created_at: datetime
    purchase_list_id: str

    class Config:
        from_attributes = True


class ProductListItem(BaseModel):
    id: str
    name: str
    quantity: int
    category: str
    price: float
    place: str

    class Config:
        from_attributes = True


class CategoryGroup(BaseModel):
    category: str
    products: List[ProductListItem]


def group_by_category(products: Iterable[Product]) -> List[CategoryGroup]:
    """Bucket products by category, keeping first-seen category order."""
    groups: Dict[str, CategoryGroup] = {}
    for product in products:
        group = groups.get(product.category)
        if group is None:
            group = groups[product.category] = CategoryGroup(category=product.category, products=[])
        group.products.append(ProductListItem.model_validate(product))
    return list(groups.values())


class FindProductResponse(BaseModel):
    success: bool
    products: Optional[ProductSummary]


class ProductListResponse(BaseModel):
    success: bool
    list: List[CategoryGroup]


class ProductResponse(BaseModel):
    success: bool
    product: ProductRead


class ProductUpdateResponse(BaseModel):
    success: bool
    update: ProductRead


class MessageResponse(BaseModel):
    success: bool
    message: str
