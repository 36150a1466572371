"""
Dependency injection providers for FastAPI.

This module provides factory functions for creating the unit of work and
repository instances, following the Dependency Inversion Principle. Handlers
depend on TestRepository; the unit of work commits when the request finishes
without error and rolls back otherwise.
"""

from typing import AsyncGenerator

from fastapi import Depends

from database import get_session_factory
from repositories.assessment_repository import TestRepository
from unit_of_work import UnitOfWork


async def get_unit_of_work() -> AsyncGenerator[UnitOfWork, None]:
    """
    Yield a unit of work spanning one request.

    Yields:
        Active UnitOfWork; committed or rolled back on exit
    """
    async with UnitOfWork(get_session_factory()) as uow:
        yield uow


def get_test_repository(uow: UnitOfWork = Depends(get_unit_of_work)) -> TestRepository:
    """
    Factory function for creating TestRepository instances.

    Args:
        uow: Unit of work (injected)

    Returns:
        TestRepository bound to the unit of work's session
    """
    return TestRepository(uow.session)
