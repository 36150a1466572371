"""
Test Response DTOs

DTOs for test reads. Soft-delete columns are never exposed.
"""

from pydantic import BaseModel, ConfigDict, Field
from datetime import datetime
from typing import List, Optional


class TestResponse(BaseModel):
    """
    Response DTO for test information.

    This DTO separates the returned shape from the database model,
    allowing them to evolve independently.
    """

    id: str = Field(description="Test ID")
    title: str = Field(description="Human-readable title")
    description: Optional[str] = Field(None, description="Free-form description")
    created_at: datetime = Field(description="Creation timestamp (UTC)")
    created_by: Optional[str] = Field(None, description="Creator ID")
    updated_at: Optional[datetime] = Field(None, description="Last update timestamp (UTC)")
    updated_by: Optional[str] = Field(None, description="Last updater ID")

    model_config = ConfigDict(from_attributes=True)  # Allow creation from ORM models


class AnswerResponse(BaseModel):
    id: str = Field(description="Answer ID")
    text: str = Field(description="Answer text")
    is_correct: bool = Field(description="Whether this answer is correct")

    model_config = ConfigDict(from_attributes=True)


class QuestionResponse(BaseModel):
    id: str = Field(description="Question ID")
    text: str = Field(description="Question text")
    position: int = Field(description="0-based position within the test")
    answers: List[AnswerResponse] = Field(default_factory=list, description="Answer options")

    model_config = ConfigDict(from_attributes=True)


class TestDetailResponse(TestResponse):
    """
    Response DTO for a test with its questions and answers.

    Questions are ordered by position.
    """

    questions: List[QuestionResponse] = Field(default_factory=list, description="Questions in order")
