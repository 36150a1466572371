"""
Unit of Work

Owns the transaction boundary for one logical operation. Every repository
built for that operation borrows ``uow.session``; none of them commits.

Usage:
    async with UnitOfWork(get_session_factory()) as uow:
        repo = TestRepository(uow.session)
        await repo.create(request)
    # committed here, or rolled back if the block raised (cancellation included)
"""

import logging
from types import TracebackType
from typing import Optional, Type

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from exceptions import TransactionStateError

logger = logging.getLogger(__name__)


class UnitOfWork:
    """Async context manager wrapping one AsyncSession and its transaction."""

    PENDING = "pending"
    ACTIVE = "active"
    CLOSED = "closed"

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]):
        """
        Args:
            session_factory: Factory producing sessions bound to the engine
        """
        self._session_factory = session_factory
        self._session: Optional[AsyncSession] = None
        self.state = self.PENDING

    @property
    def session(self) -> AsyncSession:
        """The shared session; only available inside the async with block."""
        if self.state != self.ACTIVE or self._session is None:
            raise TransactionStateError(self.state, "access session")
        return self._session

    async def __aenter__(self) -> "UnitOfWork":
        if self.state != self.PENDING:
            raise TransactionStateError(self.state, "enter")
        self._session = self._session_factory()
        self.state = self.ACTIVE
        return self

    async def __aexit__(
        self,
        exc_type: Optional[Type[BaseException]],
        exc: Optional[BaseException],
        tb: Optional[TracebackType],
    ) -> None:
        try:
            if exc_type is None:
                await self.commit()
            else:
                logger.warning(f"Rolling back unit of work after {exc_type.__name__}")
                await self.rollback()
        finally:
            await self._session.close()
            self.state = self.CLOSED

    async def commit(self) -> None:
        """Commit everything flushed so far; the session stays usable."""
        await self.session.commit()

    async def rollback(self) -> None:
        """Discard everything since the last commit."""
        await self.session.rollback()
