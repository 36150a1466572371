import sys
from pathlib import Path

# Add backend directory to Python path FIRST
backend_dir = Path(__file__).parent.parent
sys.path.insert(0, str(backend_dir))

# Now import after path is set
import pytest
import pytest_asyncio

from database import create_db_engine, create_session_factory
from init_db import init_database
from repositories.assessment_repository import TestRepository
from unit_of_work import UnitOfWork
from utils.logging_utils import clear_logging_context


@pytest_asyncio.fixture
async def engine():
    """Create in-memory database for testing"""
    engine = create_db_engine('sqlite+aiosqlite:///:memory:')
    await init_database(engine)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(engine):
    return create_session_factory(engine)


@pytest_asyncio.fixture
async def db_session(session_factory):
    """A bare session; tests using it never commit"""
    async with session_factory() as session:
        yield session
        await session.rollback()


@pytest_asyncio.fixture
async def uow(session_factory):
    """An active unit of work, committed when the test body succeeds"""
    async with UnitOfWork(session_factory) as unit:
        yield unit


@pytest.fixture
def repo(db_session):
    return TestRepository(db_session)


@pytest.fixture(autouse=True)
def _reset_logging_context():
    yield
    clear_logging_context()
