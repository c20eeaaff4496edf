from typing import Any, Dict, Optional
from fastapi import APIRouter, Body, Depends, HTTPException, Query, Request, status
from fastapi.security import HTTPAuthorizationCredentials
from sqlalchemy.ext.asyncio import AsyncSession
from app.core.database import get_async_session
from app.core.exceptions import (
    INVALID_PRODUCT_ID_MESSAGE,
    PRODUCT_NOT_FOUND_MESSAGE,
    InvalidIdentifierError,
    PermissionDeniedError,
    ProductValidationError,
    RecordNotFoundError,
    ResourceNotFoundError,
)
from app.core.security import CredentialError, bearer_scheme
from app.services.product_service import product_service
from app.schemas.product_schemas import (
    FindProductResponse,
    MessageResponse,
    ProductListResponse,
    ProductResponse,
    ProductUpdateResponse,
)
import structlog

logger = structlog.get_logger()

router = APIRouter(prefix="/products", tags=["Products"])


def _credential(credentials: Optional[HTTPAuthorizationCredentials]) -> Optional[str]:
    return credentials.credentials if credentials else None


def to_http_exception(exc: Exception, failure_detail: str) -> HTTPException:
    """Map service and store errors onto HTTP responses."""
    if isinstance(exc, HTTPException):
        return exc
    if isinstance(exc, CredentialError):
        return HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=str(exc),
            headers={"WWW-Authenticate": "Bearer"},
        )
    if isinstance(exc, PermissionDeniedError):
        return HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail=str(exc))
    if isinstance(exc, ResourceNotFoundError):
        return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc))
    if isinstance(exc, ProductValidationError):
        return HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc))
    if isinstance(exc, InvalidIdentifierError):
        return HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=INVALID_PRODUCT_ID_MESSAGE)
    if isinstance(exc, RecordNotFoundError):
        return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=PRODUCT_NOT_FOUND_MESSAGE)

    logger.error(failure_detail, error=str(exc), error_type=type(exc).__name__)
    return HTTPException(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        detail=failure_detail,
    )


@router.get("", response_model=FindProductResponse)
async def find_product(request: Request, db: AsyncSession = Depends(get_async_session)):
    """Look up a single product using the query string as an exact-match filter"""
    try:
        filters = dict(request.query_params)
        product = await product_service.find(db, filters)
        return FindProductResponse(success=True, products=product)
    except Exception as e:
        raise to_http_exception(e, "Failed to get product")


@router.get("/list", response_model=ProductListResponse)
async def find_list_products(
    id: Optional[str] = Query(None),
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    db: AsyncSession = Depends(get_async_session),
):
    """Get the products of a purchase list grouped by category"""
    try:
        groups = await product_service.find_list_products(db, id, _credential(credentials))
        return ProductListResponse(success=True, list=groups)
    except Exception as e:
        raise to_http_exception(e, "Failed to get purchase list products")


@router.post("", response_model=ProductResponse)
async def create_product(
    body: Dict[str, Any] = Body(...),
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    db: AsyncSession = Depends(get_async_session),
):
    """Add a product to an existing purchase list"""
    try:
        product = await product_service.create(db, body, _credential(credentials))
        return ProductResponse(success=True, product=product)
    except Exception as e:
        raise to_http_exception(e, "Failed to create product")


@router.put("", response_model=ProductUpdateResponse)
async def update_product(
    id: Optional[str] = Query(None),
    body: Optional[Dict[str, Any]] = Body(None),
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    db: AsyncSession = Depends(get_async_session),
):
    """Partially update a product; checking it records who checked it"""
    try:
        product = await product_service.update(db, id, body or {}, _credential(credentials))
        return ProductUpdateResponse(success=True, update=product)
    except Exception as e:
        raise to_http_exception(e, "Failed to update product")


@router.delete("", response_model=MessageResponse)
async def delete_product(
    id: Optional[str] = Query(None),
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    db: AsyncSession = Depends(get_async_session),
):
    """Delete a product; only its creator may do so"""
    try:
        await product_service.delete(db, id, _credential(credentials))
        return MessageResponse(success=True, message="Produto deletado.")
    except Exception as e:
        raise to_http_exception(e, "Failed to delete product")
