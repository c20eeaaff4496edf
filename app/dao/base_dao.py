from typing import Any, Dict, Generic, TypeVar, Type, Optional
from sqlmodel import SQLModel, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from app.core.exceptions import (
    InvalidIdentifierError,
    RecordNotFoundError,
    StoreError,
    StoreUnavailableError,
)
import uuid
import structlog

logger = structlog.get_logger()

ModelType = TypeVar("ModelType", bound=SQLModel)

_TRUE_VALUES = {"true", "1", "yes"}
_FALSE_VALUES = {"false", "0", "no"}


def validate_identifier(field: str, value: Any) -> str:
    """Reject anything that is not a well-formed UUID string."""
    try:
        uuid.UUID(str(value))
    except (TypeError, ValueError):
        raise InvalidIdentifierError(field, value)
    return str(value)


class BaseDAO(Generic[ModelType]):
    # Columns holding generated UUIDs; user ids from tokens are opaque strings.
    identifier_fields = ("id",)

    def __init__(self, model: Type[ModelType]):
        self.model = model

    def _coerce_filter_value(self, field: str, value: Any) -> Any:
        column = self.model.__table__.columns.get(field)
        if column is None:
            raise StoreError(f"Unknown field {field} for {self.model.__name__}")
        if field in self.identifier_fields and value is not None:
            return validate_identifier(field, value)
        if not isinstance(value, str):
            return value

        try:
            python_type = column.type.python_type
        except NotImplementedError:
            return value
        try:
            if python_type is bool:
                lowered = value.lower()
                if lowered in _TRUE_VALUES:
                    return True
                if lowered in _FALSE_VALUES:
                    return False
                raise ValueError(value)
            if python_type in (int, float):
                return python_type(value)
        except ValueError:
            raise StoreError(f"Invalid value for {self.model.__name__}.{field}: {value!r}")
        return value

    async def create(self, db: AsyncSession, *, obj_in: dict) -> ModelType:
        try:
            db_obj = self.model(**obj_in)
            db.add(db_obj)
            await db.commit()
            await db.refresh(db_obj)
            logger.info(f"Created {self.model.__name__}", id=str(db_obj.id))
            return db_obj
        except SQLAlchemyError as e:
            await db.rollback()
            logger.error(f"Error creating {self.model.__name__}", error=str(e))
            raise StoreUnavailableError(str(e)) from e

    async def get_by_id(self, db: AsyncSession, id: str) -> Optional[ModelType]:
        id = validate_identifier("id", id)
        try:
            result = await db.execute(select(self.model).where(self.model.id == id))
            return result.scalar_one_or_none()
        except SQLAlchemyError as e:
            logger.error(f"Error getting {self.model.__name__} by id", id=id, error=str(e))
            raise StoreUnavailableError(str(e)) from e

    async def find_unique(self, db: AsyncSession, filters: Dict[str, Any]) -> Optional[ModelType]:
        """Exact-match lookup that must select at most one row."""
        if not filters:
            raise StoreError(f"A unique filter is required to look up {self.model.__name__}")

        conditions = [
            getattr(self.model, field) == self._coerce_filter_value(field, value)
            for field, value in filters.items()
        ]
        try:
            result = await db.execute(select(self.model).where(*conditions).limit(2))
            rows = result.scalars().all()
        except SQLAlchemyError as e:
            logger.error(f"Error finding {self.model.__name__}", filters=filters, error=str(e))
            raise StoreUnavailableError(str(e)) from e

        if len(rows) > 1:
            raise StoreError(f"Filter {filters} does not identify a single {self.model.__name__}")
        return rows[0] if rows else None

    async def update(
        self, db: AsyncSession, *, db_obj: ModelType, obj_in: dict
    ) -> ModelType:
        # Every key is written, including explicit None values.
        try:
            for field, value in obj_in.items():
                if hasattr(db_obj, field):
                    setattr(db_obj, field, value)

            db.add(db_obj)
            await db.commit()
            await db.refresh(db_obj)
            logger.info(f"Updated {self.model.__name__}", id=str(db_obj.id))
            return db_obj
        except SQLAlchemyError as e:
            await db.rollback()
            logger.error(f"Error updating {self.model.__name__}", error=str(e))
            raise StoreUnavailableError(str(e)) from e

    async def update_by_id(self, db: AsyncSession, *, id: str, obj_in: dict) -> ModelType:
        db_obj = await self.get_by_id(db, id)
        if db_obj is None:
            raise RecordNotFoundError(self.model.__name__, id)
        return await self.update(db, db_obj=db_obj, obj_in=obj_in)

    async def delete(self, db: AsyncSession, *, id: str) -> Optional[ModelType]:
        obj = await self.get_by_id(db, id)
        try:
            if obj:
                await db.delete(obj)
                await db.commit()
                logger.info(f"Deleted {self.model.__name__}", id=str(id))
            return obj
        except SQLAlchemyError as e:
            await db.rollback()
            logger.error(f"Error deleting {self.model.__name__}", id=str(id), error=str(e))
            raise StoreUnavailableError(str(e)) from e
