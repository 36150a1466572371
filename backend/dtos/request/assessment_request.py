"""
Test Request DTOs

DTOs for creating and updating tests, their questions and answers.
"""

from pydantic import BaseModel, ConfigDict, Field, field_validator
from typing import List, Optional

from utils.uuid_helper import is_valid_uuid


def _require_text(value: str, field_name: str) -> str:
    if not value or not value.strip():
        raise ValueError(f"{field_name} must not be blank")
    return value.strip()


class AnswerCreateRequest(BaseModel):
    """Request DTO for one answer option of a question."""

    text: str = Field(description="Answer text")
    is_correct: bool = Field(False, description="Whether this answer is correct")

    @field_validator("text")
    @classmethod
    def validate_text(cls, v):
        return _require_text(v, "Answer text")


class QuestionCreateRequest(BaseModel):
    """Request DTO for a question created together with its test."""

    text: str = Field(description="Question text")
    answers: List[AnswerCreateRequest] = Field(default_factory=list, description="Answer options")

    @field_validator("text")
    @classmethod
    def validate_text(cls, v):
        return _require_text(v, "Question text")


class TestCreateRequest(BaseModel):
    """
    Request DTO for creating a test.

    Questions are optional; when present they are created in the same
    transaction as the test, in list order.
    """

    title: str = Field(description="Human-readable title")
    description: Optional[str] = Field(None, description="Free-form description")
    questions: List[QuestionCreateRequest] = Field(default_factory=list, description="Questions in order")

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "title": "Algebra Quiz",
                "description": "Basic algebra",
                "questions": [
                    {"text": "2 + 2 = ?", "answers": [{"text": "4", "is_correct": True}, {"text": "5"}]}
                ],
            }
        }
    )

    @field_validator("title")
    @classmethod
    def validate_title(cls, v):
        """Ensure title is not blank."""
        return _require_text(v, "Title")


class TestUpdateRequest(BaseModel):
    """
    Request DTO for updating a test.

    Only title and description are mutable; id selects the record.
    """

    id: str = Field(description="ID of the test to update")
    title: str = Field(description="New title")
    description: Optional[str] = Field(None, description="New description")

    @field_validator("id")
    @classmethod
    def validate_id(cls, v):
        """Ensure id is a UUID."""
        if not is_valid_uuid(v):
            raise ValueError("id must be a UUID")
        return v

    @field_validator("title")
    @classmethod
    def validate_title(cls, v):
        """Ensure title is not blank."""
        return _require_text(v, "Title")
