"""
Request DTOs

DTOs for incoming create/update calls. These decouple callers from database
models and provide a clear contract for what data a write expects.
"""

from .assessment_request import AnswerCreateRequest, QuestionCreateRequest, TestCreateRequest, TestUpdateRequest

__all__ = ["AnswerCreateRequest", "QuestionCreateRequest", "TestCreateRequest", "TestUpdateRequest"]
