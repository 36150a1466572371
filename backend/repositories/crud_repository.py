"""
Generic repository providing CRUD operations for any mapped entity.

One CrudRepository is built per entity type and bound to a session supplied
by the caller (normally UnitOfWork.session). Several repositories sharing
the same session take part in the same transaction: every write is flushed
immediately so sibling repositories see it before commit. The repository
never commits, rolls back or closes the session.

Not-found is a normal result (None / False). Storage faults raised by
SQLAlchemy are logged and re-raised unchanged; asyncio cancellation passes
through untouched.
"""

from typing import Generic, Iterable, List, Optional, Type, TypeVar

from sqlalchemy import func, inspect as sa_inspect, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from domain.entities import Identifiable, supports_soft_delete
from domain.value_objects import RecordState
from utils.logging_utils import StructuredLogger
from utils.time_helper import utcnow
from .specifications import IsLive, Specification, all_of

T = TypeVar('T', bound=Identifiable)

logger = StructuredLogger(__name__)


class CrudRepository(Generic[T]):
    """
    Generic entity accessor.

    The model must expose an ``id`` column (see domain.entities.Identifiable).
    Models that also carry ``deleted_at`` / ``deleted_by`` support soft delete,
    and their soft-deleted rows are hidden from reads unless asked for.
    """

    def __init__(self, session: AsyncSession, model: Type[T]):
        """
        Initialize the repository.

        Args:
            session: Async session borrowed from the caller's unit of work
            model: SQLAlchemy model class

        Raises:
            TypeError: If the model has no id attribute
        """
        if not hasattr(model, 'id'):
            raise TypeError(f"{model.__name__} has no 'id' attribute")

        self.session = session
        self.model = model
        self.soft_delete_enabled = supports_soft_delete(model)
        self._columns = [attr.key for attr in sa_inspect(model).column_attrs]

    def _where(self, filters: Optional[Iterable[Specification[T]]], include_deleted: bool):
        specs = list(filters or [])
        if self.soft_delete_enabled and not include_deleted:
            specs.append(IsLive(self.model))
        return all_of(specs).to_sql_filter()

    def _log_fault(self, operation: str, key: Optional[str] = None):
        logger.error(
            f"{operation} failed for {self.model.__name__}",
            extra={"operation": operation, "entity": self.model.__name__, "key": key},
            exc_info=True,
        )

    async def find_one(
        self,
        filters: Optional[Iterable[Specification[T]]] = None,
        include_deleted: bool = False,
    ) -> Optional[T]:
        """
        Find the first record matching all filters.

        No ordering is applied: when a non-unique filter matches several
        records, the first one in storage iteration order is returned.

        Args:
            filters: Specifications combined with AND
            include_deleted: Also consider soft-deleted records

        Returns:
            Model instance or None if nothing matches
        """
        stmt = select(self.model).where(self._where(filters, include_deleted)).limit(1)
        try:
            result = await self.session.execute(stmt)
        except SQLAlchemyError:
            self._log_fault("find_one")
            raise
        return result.scalars().first()

    async def find_all(
        self,
        filters: Optional[Iterable[Specification[T]]] = None,
        include_deleted: bool = False,
    ) -> List[T]:
        """
        Find every record matching all filters.

        Args:
            filters: Specifications combined with AND; None means every record
            include_deleted: Also return soft-deleted records

        Returns:
            List of model instances (possibly empty)
        """
        stmt = select(self.model).where(self._where(filters, include_deleted))
        try:
            result = await self.session.execute(stmt)
        except SQLAlchemyError:
            self._log_fault("find_all")
            raise
        return list(result.scalars().all())

    async def save(self, entity: T, key: str) -> bool:
        """
        Insert the entity, or overwrite the stored record with the same key.

        On overwrite every column of the stored record is replaced by the
        entity's value, including columns left as None on the entity.

        Args:
            entity: Model instance carrying the full record
            key: Identity of the record; must equal entity.id

        Returns:
            True once the write is flushed

        Raises:
            ValueError: If key does not match entity.id
            SQLAlchemyError: On constraint violations or engine errors
        """
        if getattr(entity, 'id', None) != key:
            raise ValueError(f"Key {key!r} does not match {self.model.__name__}.id {getattr(entity, 'id', None)!r}")

        try:
            existing = await self.session.get(self.model, key)
            if existing is None:
                self.session.add(entity)
                operation = "insert"
            else:
                if existing is not entity:
                    for column in self._columns:
                        setattr(existing, column, getattr(entity, column))
                operation = "update"
            await self.session.flush()
        except SQLAlchemyError:
            self._log_fault("save", key)
            raise

        logger.debug(
            f"Saved {self.model.__name__}",
            extra={"operation": operation, "entity": self.model.__name__, "key": key},
        )
        return True

    async def hard_delete(self, key: str) -> bool:
        """
        Permanently remove a record.

        Soft-deleted records can still be hard-deleted.

        Args:
            key: Identity of the record

        Returns:
            True if deleted, False if no record with that key exists
        """
        try:
            entity = await self.session.get(self.model, key)
            if entity is None:
                return False
            await self.session.delete(entity)
            await self.session.flush()
        except SQLAlchemyError:
            self._log_fault("hard_delete", key)
            raise

        logger.debug(
            f"Hard-deleted {self.model.__name__}",
            extra={"operation": "hard_delete", "entity": self.model.__name__, "key": key},
        )
        return True

    async def soft_delete(self, key: str, actor_id: Optional[str] = None) -> bool:
        """
        Mark a record as logically removed.

        The row is kept with deleted_at / deleted_by set and disappears from
        find_one, find_all, count and exists.

        Args:
            key: Identity of the record
            actor_id: Who performed the deletion

        Returns:
            True if marked, False if missing or already soft-deleted

        Raises:
            TypeError: If the model does not carry soft-delete columns
        """
        if not self.soft_delete_enabled:
            raise TypeError(f"{self.model.__name__} does not support soft delete")

        try:
            entity = await self.session.get(self.model, key)
            if not RecordState.of(entity).can_transition_to(RecordState.SOFT_DELETED):
                return False
            entity.deleted_at = utcnow()
            entity.deleted_by = actor_id
            await self.session.flush()
        except SQLAlchemyError:
            self._log_fault("soft_delete", key)
            raise

        logger.debug(
            f"Soft-deleted {self.model.__name__}",
            extra={"operation": "soft_delete", "entity": self.model.__name__, "key": key},
        )
        return True

    async def count(self, filters: Optional[Iterable[Specification[T]]] = None) -> int:
        """
        Count live records matching all filters.

        Returns:
            Number of matching records
        """
        stmt = select(func.count()).select_from(self.model).where(self._where(filters, False))
        try:
            result = await self.session.execute(stmt)
        except SQLAlchemyError:
            self._log_fault("count")
            raise
        return result.scalar_one()

    async def exists(self, key: str) -> bool:
        """
        Check if a live record exists by ID.

        Returns:
            True if exists, False otherwise
        """
        stmt = select(self.model.id).where(self.model.id == key)
        if self.soft_delete_enabled:
            stmt = stmt.where(self.model.deleted_at.is_(None))
        try:
            result = await self.session.execute(stmt.limit(1))
        except SQLAlchemyError:
            self._log_fault("exists", key)
            raise
        return result.first() is not None
