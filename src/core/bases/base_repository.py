from typing import (
    Any,
    AsyncContextManager,
    Callable,
    Dict,
    Generic,
    List,
    NoReturn,
    Optional,
    Type,
    TypeVar,
    Union,
)
from sqlmodel import SQLModel, func, select
from sqlmodel.ext.asyncio.session import AsyncSession
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from pydantic import BaseModel
import structlog

from src.core.exceptions import ConflictException, NotFoundException, ServiceException

T = TypeVar("T", bound=SQLModel)

logger = structlog.get_logger(__name__)


class RepositoryError(ServiceException):
    """Custom exception for repository errors."""

    pass


class BaseRepository(Generic[T]):
    """Async CRUD over one table, addressed by a natural key column."""

    model: Type[T]
    key_field: str = "id"

    def __init__(self, get_session: Callable[..., AsyncContextManager[AsyncSession]]):
        self.get_session = get_session

    @property
    def _key_column(self) -> Any:
        return getattr(self.model, self.key_field)

    def _handle_db_error(self, error: SQLAlchemyError, operation: str) -> NoReturn:
        """Handle database errors and raise appropriate exceptions."""
        logger.error(
            "repository_error",
            model=self.model.__name__,
            operation=operation,
            error=str(error),
        )
        if isinstance(error, IntegrityError):
            raise RepositoryError(
                f"Database integrity error during {operation}: {error}"
            ) from error
        raise RepositoryError(f"Database error during {operation}: {error}") from error

    def _build_select_stmt(self, **filters) -> Any:
        """Build select statement with optional equality filters."""
        stmt = select(self.model)

        for field, value in filters.items():
            if hasattr(self.model, field):
                stmt = stmt.where(getattr(self.model, field) == value)

        return stmt

    def _not_found(self, key: Any) -> NotFoundException:
        return NotFoundException(
            f"{self.model.__name__} not found: {self.key_field}={key!r}"
        )

    @staticmethod
    def _as_dict(obj_in: Union[Dict[str, Any], BaseModel]) -> Dict[str, Any]:
        if isinstance(obj_in, BaseModel):
            return obj_in.model_dump(exclude_unset=True)
        return dict(obj_in)

    # ----------------- READ ----------------- #
    async def get_all(self, **filters) -> List[T]:  # type:ignore
        """Get every item matching the filters, in store order."""
        async with self.get_session() as db:
            try:
                result = await db.exec(self._build_select_stmt(**filters))
                return list(result.all())
            except SQLAlchemyError as e:
                self._handle_db_error(e, "get_all")

    async def get_by_key(self, key: Any) -> Optional[T]:  # type:ignore
        """Get a single item by its key, or None."""
        async with self.get_session() as db:
            try:
                stmt = self._build_select_stmt().where(self._key_column == key)
                result = await db.exec(stmt)
                return result.first()
            except SQLAlchemyError as e:
                self._handle_db_error(e, "get_by_key")

    async def exists(self, key: Any) -> bool:  # type:ignore
        """Check if an item exists."""
        async with self.get_session() as db:
            try:
                stmt = select(self._key_column).where(self._key_column == key)
                result = await db.exec(stmt)
                return result.first() is not None
            except SQLAlchemyError as e:
                self._handle_db_error(e, "exists")

    async def count(self, **filters) -> int:  # type:ignore
        """Count items matching optional filters."""
        async with self.get_session() as db:
            try:
                stmt = self._build_select_stmt(**filters)
                count_stmt = select(func.count()).select_from(stmt.subquery())
                result = await db.exec(count_stmt)
                return result.one()
            except SQLAlchemyError as e:
                self._handle_db_error(e, "count")

    # ----------------- WRITE ----------------- #
    async def create(self, obj_in: Union[Dict[str, Any], BaseModel]) -> T:  # type:ignore
        """Insert a new item; a taken key raises ConflictException."""
        data = self._as_dict(obj_in)
        key = data.get(self.key_field)

        async with self.get_session() as db:
            try:
                obj = self.model(**data)  # type: ignore
                db.add(obj)
                await db.commit()
                await db.refresh(obj)
                return obj
            except IntegrityError as e:
                await db.rollback()
                raise ConflictException(
                    f"{self.model.__name__} already exists: {self.key_field}={key!r}"
                ) from e
            except SQLAlchemyError as e:
                await db.rollback()
                self._handle_db_error(e, "create")

    async def update_by_key(
        self, key: Any, obj_in: Union[Dict[str, Any], BaseModel]
    ) -> T:  # type:ignore
        """Replace the given fields on the item matching key."""
        update_data = self._as_dict(obj_in)
        # The key is the match target, never part of the change set
        update_data.pop(self.key_field, None)

        if not update_data:
            raise RepositoryError("No data provided for update")

        async with self.get_session() as db:
            try:
                db_obj = await db.get(self.model, key)
                if db_obj is None:
                    raise self._not_found(key)

                for field, value in update_data.items():
                    if hasattr(db_obj, field):
                        setattr(db_obj, field, value)

                await db.commit()
                await db.refresh(db_obj)
                return db_obj
            except SQLAlchemyError as e:
                await db.rollback()
                self._handle_db_error(e, "update_by_key")

    async def delete_by_key(self, key: Any) -> None:
        """Permanently delete the item matching key."""
        async with self.get_session() as db:
            try:
                db_obj = await db.get(self.model, key)
                if db_obj is None:
                    raise self._not_found(key)

                await db.delete(db_obj)
                await db.commit()
            except SQLAlchemyError as e:
                await db.rollback()
                self._handle_db_error(e, "delete_by_key")
