import pytest
import pytest_asyncio
from sqlalchemy.pool import StaticPool

from database import create_db_engine, create_session_factory, is_memory_sqlite
from dtos.request import TestCreateRequest
from exceptions import TransactionStateError
from init_db import init_database
from models import Test
from repositories.assessment_repository import TestRepository
from repositories.crud_repository import CrudRepository
from unit_of_work import UnitOfWork
from utils.uuid_helper import generate_uuid


async def _count_tests(session_factory) -> int:
    async with UnitOfWork(session_factory) as uow:
        return await CrudRepository(uow.session, Test).count()


@pytest.mark.asyncio
async def test_commits_on_success(session_factory):
    async with UnitOfWork(session_factory) as uow:
        entity = Test(id=generate_uuid(), title="Algebra Quiz")
        await CrudRepository(uow.session, Test).save(entity, entity.id)

    assert uow.state == UnitOfWork.CLOSED
    assert await _count_tests(session_factory) == 1


@pytest.mark.asyncio
async def test_rolls_back_on_error(session_factory):
    with pytest.raises(ValueError):
        async with UnitOfWork(session_factory) as uow:
            entity = Test(id=generate_uuid(), title="Algebra Quiz")
            await CrudRepository(uow.session, Test).save(entity, entity.id)
            raise ValueError("boom")

    assert await _count_tests(session_factory) == 0


@pytest.mark.asyncio
async def test_explicit_rollback_discards_pending_writes(session_factory):
    async with UnitOfWork(session_factory) as uow:
        repo = CrudRepository(uow.session, Test)
        entity = Test(id=generate_uuid(), title="Algebra Quiz")
        await repo.save(entity, entity.id)
        await uow.rollback()

    assert await _count_tests(session_factory) == 0


@pytest.mark.asyncio
async def test_explicit_commit_keeps_session_usable(session_factory):
    async with UnitOfWork(session_factory) as uow:
        repo = CrudRepository(uow.session, Test)
        first = Test(id=generate_uuid(), title="first")
        await repo.save(first, first.id)
        await uow.commit()
        second = Test(id=generate_uuid(), title="second")
        await repo.save(second, second.id)

    assert await _count_tests(session_factory) == 2


@pytest.mark.asyncio
async def test_session_unavailable_outside_block(session_factory):
    uow = UnitOfWork(session_factory)
    with pytest.raises(TransactionStateError, match="pending"):
        uow.session

    async with uow:
        pass

    with pytest.raises(TransactionStateError) as exc_info:
        uow.session
    assert exc_info.value.details == {"state": "closed", "operation": "access session"}


@pytest.mark.asyncio
async def test_cannot_be_reentered(session_factory):
    uow = UnitOfWork(session_factory)
    async with uow:
        pass

    with pytest.raises(TransactionStateError, match="Cannot enter"):
        async with uow:
            pass


@pytest_asyncio.fixture
async def file_session_factory(tmp_path):
    """Session factory over a file-backed database with a real connection pool"""
    engine = create_db_engine(f"sqlite+aiosqlite:///{tmp_path / 'assessments.db'}")
    await init_database(engine)
    yield create_session_factory(engine)
    await engine.dispose()


class IsolationTests:
    @pytest.mark.asyncio
    async def test_uncommitted_writes_are_invisible_to_other_units(self, file_session_factory):
        async with UnitOfWork(file_session_factory) as writer:
            await TestRepository(writer.session).create(TestCreateRequest(title="Algebra Quiz"))

            async with UnitOfWork(file_session_factory) as reader:
                seen = await TestRepository(reader.session).get_all()

        assert seen == []

    @pytest.mark.asyncio
    async def test_rollback_of_one_unit_keeps_the_other_units_writes(self, file_session_factory):
        async with UnitOfWork(file_session_factory) as writer:
            await TestRepository(writer.session).create(TestCreateRequest(title="Algebra Quiz"))

            with pytest.raises(RuntimeError):
                async with UnitOfWork(file_session_factory) as other:
                    await TestRepository(other.session).get_all()
                    raise RuntimeError("abort the other unit")

        async with UnitOfWork(file_session_factory) as uow:
            titles = [t.title for t in await TestRepository(uow.session).get_all()]

        assert titles == ["Algebra Quiz"]


class EnginePoolTests:
    @pytest.mark.parametrize("url", [
        "sqlite+aiosqlite:///:memory:",
        "sqlite+aiosqlite://",
        "sqlite+aiosqlite:///file:shared?mode=memory&uri=true",
    ])
    def test_memory_urls(self, url):
        assert is_memory_sqlite(url)

    @pytest.mark.parametrize("url", [
        "sqlite+aiosqlite:////var/lib/assessments.db",
        "postgresql+asyncpg://user@localhost/assessments",
    ])
    def test_non_memory_urls(self, url):
        assert not is_memory_sqlite(url)

    @pytest.mark.asyncio
    async def test_file_database_does_not_share_one_connection(self, tmp_path):
        engine = create_db_engine(f"sqlite+aiosqlite:///{tmp_path / 'pool.db'}")
        try:
            assert not isinstance(engine.sync_engine.pool, StaticPool)
        finally:
            await engine.dispose()

    @pytest.mark.asyncio
    async def test_memory_database_shares_one_connection(self):
        engine = create_db_engine("sqlite+aiosqlite:///:memory:")
        try:
            assert isinstance(engine.sync_engine.pool, StaticPool)
        finally:
            await engine.dispose()
