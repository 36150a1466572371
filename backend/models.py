from sqlalchemy import Column, String, Integer, Boolean, Text, DateTime, ForeignKey, CheckConstraint, Index
from database import Base
from utils.uuid_helper import generate_uuid
from utils.time_helper import utcnow


class AuditMixin:
    """
    Audit and soft-delete columns shared by every entity.

    created_by / updated_by / deleted_by hold the opaque id of the acting user.
    A row with deleted_at set is soft-deleted and hidden from normal reads.
    """
    created_at = Column(DateTime, nullable=False, default=utcnow)
    created_by = Column(String, nullable=True)
    updated_at = Column(DateTime, nullable=True)
    updated_by = Column(String, nullable=True)
    deleted_at = Column(DateTime, nullable=True)
    deleted_by = Column(String, nullable=True)


class Test(AuditMixin, Base):
    """
    An assessment made of ordered questions.

    Aggregate root for Question and Answer.
    """
    __tablename__ = 'tests'

    id = Column(String, primary_key=True, default=generate_uuid)
    title = Column(String, nullable=False)
    description = Column(Text, nullable=True)

    __table_args__ = (
        CheckConstraint("title != ''", name='ck_tests_title_not_empty'),
        Index('idx_tests_deleted_at', 'deleted_at'),
    )

    def __repr__(self) -> str:
        return f"<Test id={self.id} title={self.title!r}>"


class Question(AuditMixin, Base):
    __tablename__ = 'questions'

    id = Column(String, primary_key=True, default=generate_uuid)
    test_id = Column(String, ForeignKey('tests.id'), nullable=False)
    text = Column(Text, nullable=False)
    position = Column(Integer, nullable=False, default=0)  # 0-based order within the test

    __table_args__ = (
        Index('idx_questions_test_id', 'test_id'),
    )


class Answer(AuditMixin, Base):
    __tablename__ = 'answers'

    id = Column(String, primary_key=True, default=generate_uuid)
    question_id = Column(String, ForeignKey('questions.id'), nullable=False)
    text = Column(Text, nullable=False)
    is_correct = Column(Boolean, nullable=False, default=False)

    __table_args__ = (
        Index('idx_answers_question_id', 'question_id'),
    )
