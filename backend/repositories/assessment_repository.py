"""
Test repository: the aggregate façade over tests, questions and answers.

All three generic repositories share the session handed in by the caller, so
a multi-entity operation (a test created with its questions and answers, or a
test deleted together with them) commits or rolls back as one unit with the
caller's UnitOfWork.
"""

from datetime import datetime
from typing import Dict, List, Optional

from sqlalchemy.ext.asyncio import AsyncSession

from dtos.request import QuestionCreateRequest, TestCreateRequest, TestUpdateRequest
from dtos.response import AnswerResponse, QuestionResponse, TestDetailResponse, TestResponse
from models import Answer, Question, Test
from utils.logging_utils import StructuredLogger, log_operation
from utils.time_helper import utcnow
from utils.uuid_helper import generate_uuid
from .crud_repository import CrudRepository
from .specifications import FieldEquals, IdEquals

logger = StructuredLogger(__name__)


def _to_response(entity: Test) -> TestResponse:
    return TestResponse.model_validate(entity)


def _to_detail(entity: Test, questions: List[Question], answers: Dict[str, List[Answer]]) -> TestDetailResponse:
    return TestDetailResponse(
        **_to_response(entity).model_dump(),
        questions=[
            QuestionResponse(
                id=question.id,
                text=question.text,
                position=question.position,
                answers=[AnswerResponse.model_validate(answer) for answer in answers.get(question.id, [])],
            )
            for question in sorted(questions, key=lambda q: q.position)
        ],
    )


class TestRepository:
    """Repository for Test aggregate operations, expressed in DTOs."""

    def __init__(self, session: AsyncSession):
        """
        Args:
            session: Session of the caller's unit of work, shared by all accessors
        """
        self.session = session
        self.tests = CrudRepository(session, Test)
        self.questions = CrudRepository(session, Question)
        self.answers = CrudRepository(session, Answer)

    async def get_by_id(self, test_id: str) -> Optional[TestResponse]:
        """
        Get a test by its ID.

        Returns:
            TestResponse, or None if missing or archived
        """
        entity = await self.tests.find_one([IdEquals(Test, test_id)])
        if entity is None:
            return None
        return _to_response(entity)

    async def get_all(self) -> List[TestResponse]:
        """Get every live test."""
        entities = await self.tests.find_all()
        return [_to_response(entity) for entity in entities]

    async def get_with_questions(self, test_id: str) -> Optional[TestDetailResponse]:
        """
        Get a test with its questions (ordered by position) and their answers.

        Returns:
            TestDetailResponse, or None if the test is missing or archived
        """
        entity = await self.tests.find_one([IdEquals(Test, test_id)])
        if entity is None:
            return None

        questions = await self.questions.find_all([FieldEquals(Question, 'test_id', test_id)])
        answers: Dict[str, List[Answer]] = {}
        for question in questions:
            answers[question.id] = await self.answers.find_all([FieldEquals(Answer, 'question_id', question.id)])

        return _to_detail(entity, questions, answers)

    @log_operation("create_test")
    async def create(self, request: TestCreateRequest, creator_id: Optional[str] = None) -> bool:
        """
        Create a test, plus any questions and answers carried by the request.

        The test always gets a fresh ID and the current UTC time as created_at;
        an ID on the request is never reused.

        Args:
            request: Test fields and optional questions
            creator_id: Recorded as created_by on every new row

        Returns:
            True if every row was saved
        """
        now = utcnow()
        entity = Test(
            id=generate_uuid(),
            title=request.title,
            description=request.description,
            created_at=now,
            created_by=creator_id,
        )
        if not await self.tests.save(entity, entity.id):
            return False

        for position, question_request in enumerate(request.questions):
            if not await self._create_question(entity.id, position, question_request, now, creator_id):
                return False

        logger.info("Test created", extra={"test_id": entity.id, "questions": len(request.questions)})
        return True

    async def _create_question(
        self,
        test_id: str,
        position: int,
        request: QuestionCreateRequest,
        now: datetime,
        creator_id: Optional[str],
    ) -> bool:
        question = Question(
            id=generate_uuid(),
            test_id=test_id,
            text=request.text,
            position=position,
            created_at=now,
            created_by=creator_id,
        )
        if not await self.questions.save(question, question.id):
            return False

        for answer_request in request.answers:
            answer = Answer(
                id=generate_uuid(),
                question_id=question.id,
                text=answer_request.text,
                is_correct=answer_request.is_correct,
                created_at=now,
                created_by=creator_id,
            )
            if not await self.answers.save(answer, answer.id):
                return False
        return True

    @log_operation("update_test")
    async def update(self, request: TestUpdateRequest, updater_id: Optional[str] = None) -> bool:
        """
        Update title and description of an existing test.

        id and created_at are never changed.

        Args:
            request: Target ID and new values
            updater_id: Recorded as updated_by

        Returns:
            False if the test does not exist (nothing is written), otherwise
            whether the save succeeded
        """
        entity = await self.tests.find_one([IdEquals(Test, request.id)])
        if entity is None:
            logger.info("Update skipped, test not found", extra={"test_id": request.id})
            return False

        entity.title = request.title
        entity.description = request.description
        entity.updated_at = utcnow()
        entity.updated_by = updater_id

        return await self.tests.save(entity, entity.id)

    @log_operation("delete_test")
    async def delete(self, test_id: str) -> bool:
        """
        Permanently delete a test with its questions and answers.

        Returns:
            True if the test was deleted, False if it did not exist
        """
        if await self.tests.find_one([IdEquals(Test, test_id)], include_deleted=True) is None:
            return False

        questions = await self.questions.find_all(
            [FieldEquals(Question, 'test_id', test_id)], include_deleted=True
        )
        for question in questions:
            answers = await self.answers.find_all(
                [FieldEquals(Answer, 'question_id', question.id)], include_deleted=True
            )
            for answer in answers:
                await self.answers.hard_delete(answer.id)
            await self.questions.hard_delete(question.id)

        deleted = await self.tests.hard_delete(test_id)
        if deleted:
            logger.info("Test deleted", extra={"test_id": test_id, "questions": len(questions)})
        return deleted

    @log_operation("archive_test")
    async def archive(self, test_id: str, actor_id: Optional[str] = None) -> bool:
        """
        Soft-delete a test; it disappears from every read of this repository.

        Questions and answers are left untouched.

        Returns:
            True if archived, False if missing or already archived
        """
        return await self.tests.soft_delete(test_id, actor_id)
