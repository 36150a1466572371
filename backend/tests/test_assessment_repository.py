import asyncio

import pytest

from dtos.request import AnswerCreateRequest, QuestionCreateRequest, TestCreateRequest, TestUpdateRequest
from models import Answer, Question
from repositories.assessment_repository import TestRepository
from repositories.crud_repository import CrudRepository
from unit_of_work import UnitOfWork
from utils.uuid_helper import generate_uuid


async def create_and_fetch(repo: TestRepository, title="Algebra Quiz", description="Basic algebra", **kwargs):
    assert await repo.create(TestCreateRequest(title=title, description=description), **kwargs) is True
    return next(t for t in await repo.get_all() if t.title == title)


def quiz_with_questions() -> TestCreateRequest:
    return TestCreateRequest(
        title="Algebra Quiz",
        description="Basic algebra",
        questions=[
            QuestionCreateRequest(
                text="2 + 2 = ?",
                answers=[AnswerCreateRequest(text="4", is_correct=True), AnswerCreateRequest(text="5")],
            ),
            QuestionCreateRequest(text="x + 1 = 3, x = ?", answers=[AnswerCreateRequest(text="2", is_correct=True)]),
        ],
    )


class CreateTests:
    @pytest.mark.asyncio
    async def test_create_then_get_by_id(self, repo):
        created = await create_and_fetch(repo)

        fetched = await repo.get_by_id(created.id)

        assert fetched is not None
        assert fetched.id
        assert fetched.created_at is not None
        assert fetched.title == "Algebra Quiz"
        assert fetched.description == "Basic algebra"

    @pytest.mark.asyncio
    async def test_each_create_gets_a_fresh_id(self, repo):
        await repo.create(TestCreateRequest(title="Same"))
        await repo.create(TestCreateRequest(title="Same"))

        ids = [t.id for t in await repo.get_all()]

        assert len(ids) == 2
        assert len(set(ids)) == 2

    @pytest.mark.asyncio
    async def test_records_creator(self, repo):
        created = await create_and_fetch(repo, creator_id="instructor-7")

        assert created.created_by == "instructor-7"
        assert created.updated_at is None

    @pytest.mark.asyncio
    async def test_create_with_questions_and_answers(self, repo):
        assert await repo.create(quiz_with_questions()) is True
        test_id = (await repo.get_all())[0].id

        detail = await repo.get_with_questions(test_id)

        assert [q.text for q in detail.questions] == ["2 + 2 = ?", "x + 1 = 3, x = ?"]
        assert [q.position for q in detail.questions] == [0, 1]
        assert [(a.text, a.is_correct) for a in detail.questions[0].answers] == [("4", True), ("5", False)]
        assert len(detail.questions[1].answers) == 1


class ReadTests:
    @pytest.mark.asyncio
    async def test_get_by_id_missing(self, repo):
        assert await repo.get_by_id(generate_uuid()) is None

    @pytest.mark.asyncio
    async def test_get_with_questions_missing(self, repo):
        assert await repo.get_with_questions(generate_uuid()) is None

    @pytest.mark.asyncio
    async def test_get_with_questions_without_questions(self, repo):
        created = await create_and_fetch(repo)

        detail = await repo.get_with_questions(created.id)

        assert detail.title == "Algebra Quiz"
        assert detail.questions == []

    @pytest.mark.asyncio
    async def test_get_all_empty(self, repo):
        assert await repo.get_all() == []


class UpdateTests:
    @pytest.mark.asyncio
    async def test_changes_only_mutable_fields(self, repo):
        created = await create_and_fetch(repo)

        ok = await repo.update(
            TestUpdateRequest(id=created.id, title="Algebra Quiz v2", description="Harder algebra"),
            updater_id="instructor-9",
        )

        updated = await repo.get_by_id(created.id)
        assert ok is True
        assert updated.id == created.id
        assert updated.created_at == created.created_at
        assert updated.title == "Algebra Quiz v2"
        assert updated.description == "Harder algebra"
        assert updated.updated_by == "instructor-9"
        assert updated.updated_at is not None

    @pytest.mark.asyncio
    async def test_missing_record_returns_false_and_writes_nothing(self, repo):
        await create_and_fetch(repo)
        before = await repo.get_all()

        ok = await repo.update(TestUpdateRequest(id=generate_uuid(), title="Ghost"))

        assert ok is False
        assert await repo.get_all() == before


class DeleteTests:
    @pytest.mark.asyncio
    async def test_removes_record(self, repo):
        created = await create_and_fetch(repo)

        assert await repo.delete(created.id) is True
        assert await repo.get_by_id(created.id) is None
        assert await repo.get_all() == []

    @pytest.mark.asyncio
    async def test_missing_record(self, repo):
        assert await repo.delete(generate_uuid()) is False

    @pytest.mark.asyncio
    async def test_second_delete_reports_false(self, repo):
        created = await create_and_fetch(repo)

        assert await repo.delete(created.id) is True
        assert await repo.delete(created.id) is False

    @pytest.mark.asyncio
    async def test_removes_questions_and_answers(self, repo, db_session):
        await repo.create(quiz_with_questions())
        test_id = (await repo.get_all())[0].id

        assert await repo.delete(test_id) is True

        assert await CrudRepository(db_session, Question).find_all(include_deleted=True) == []
        assert await CrudRepository(db_session, Answer).find_all(include_deleted=True) == []

    @pytest.mark.asyncio
    async def test_get_all_excludes_deleted_records(self, repo):
        kept = await create_and_fetch(repo, title="Geometry")
        removed = await create_and_fetch(repo, title="Algebra Quiz")

        await repo.delete(removed.id)

        assert [t.id for t in await repo.get_all()] == [kept.id]


class ArchiveTests:
    @pytest.mark.asyncio
    async def test_archived_test_disappears_from_reads(self, repo):
        created = await create_and_fetch(repo)

        assert await repo.archive(created.id, actor_id="admin-1") is True

        assert await repo.get_by_id(created.id) is None
        assert await repo.get_with_questions(created.id) is None
        assert await repo.get_all() == []

    @pytest.mark.asyncio
    async def test_archived_test_cannot_be_updated(self, repo):
        created = await create_and_fetch(repo)
        await repo.archive(created.id)

        assert await repo.update(TestUpdateRequest(id=created.id, title="Revived")) is False

    @pytest.mark.asyncio
    async def test_archive_twice(self, repo):
        created = await create_and_fetch(repo)

        assert await repo.archive(created.id) is True
        assert await repo.archive(created.id) is False

    @pytest.mark.asyncio
    async def test_archived_test_can_still_be_deleted(self, repo):
        created = await create_and_fetch(repo)
        await repo.archive(created.id)

        assert await repo.delete(created.id) is True
        assert await repo.delete(created.id) is False


@pytest.mark.asyncio
async def test_algebra_quiz_lifecycle(session_factory):
    async with UnitOfWork(session_factory) as uow:
        repo = TestRepository(uow.session)
        assert await repo.create(TestCreateRequest(title="Algebra Quiz", description="Basic algebra"))

    async with UnitOfWork(session_factory) as uow:
        repo = TestRepository(uow.session)
        listed = await repo.get_all()
        assert [t.title for t in listed] == ["Algebra Quiz"]
        test_id, created_at = listed[0].id, listed[0].created_at

        assert await repo.update(TestUpdateRequest(id=test_id, title="Algebra Quiz v2", description="Basic algebra"))

    async with UnitOfWork(session_factory) as uow:
        repo = TestRepository(uow.session)
        fetched = await repo.get_by_id(test_id)
        assert fetched.title == "Algebra Quiz v2"
        assert fetched.created_at == created_at

        assert await repo.delete(test_id) is True

    async with UnitOfWork(session_factory) as uow:
        repo = TestRepository(uow.session)
        assert await repo.get_by_id(test_id) is None
        assert await repo.get_all() == []
        assert await repo.delete(test_id) is False


class AtomicityTests:
    @pytest.mark.asyncio
    async def test_failed_operation_rolls_back_every_entity(self, session_factory):
        with pytest.raises(RuntimeError):
            async with UnitOfWork(session_factory) as uow:
                repo = TestRepository(uow.session)
                await repo.create(quiz_with_questions())
                raise RuntimeError("abort after the questions were written")

        async with UnitOfWork(session_factory) as uow:
            assert await TestRepository(uow.session).get_all() == []
            assert await CrudRepository(uow.session, Question).count() == 0
            assert await CrudRepository(uow.session, Answer).count() == 0

    @pytest.mark.asyncio
    async def test_rolled_back_delete_restores_children(self, session_factory):
        async with UnitOfWork(session_factory) as uow:
            await TestRepository(uow.session).create(quiz_with_questions())

        with pytest.raises(RuntimeError):
            async with UnitOfWork(session_factory) as uow:
                repo = TestRepository(uow.session)
                test_id = (await repo.get_all())[0].id
                assert await repo.delete(test_id)
                raise RuntimeError("abort after delete")

        async with UnitOfWork(session_factory) as uow:
            detail = await TestRepository(uow.session).get_with_questions(test_id)
            assert len(detail.questions) == 2
            assert sum(len(q.answers) for q in detail.questions) == 3

    @pytest.mark.asyncio
    async def test_cancelled_operation_is_rolled_back(self, session_factory):
        started = asyncio.Event()

        async def create_then_wait():
            async with UnitOfWork(session_factory) as uow:
                await TestRepository(uow.session).create(TestCreateRequest(title="Never committed"))
                started.set()
                await asyncio.sleep(10)

        task = asyncio.create_task(create_then_wait())
        await started.wait()
        task.cancel()
        with pytest.raises(asyncio.CancelledError):
            await task

        async with UnitOfWork(session_factory) as uow:
            assert await TestRepository(uow.session).get_all() == []
