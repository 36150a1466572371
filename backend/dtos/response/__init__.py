"""
Response DTOs

DTOs returned by repository reads. These hide the internal database structure
and control exactly what data is exposed.
"""

from .assessment_response import AnswerResponse, QuestionResponse, TestDetailResponse, TestResponse

__all__ = ["AnswerResponse", "QuestionResponse", "TestDetailResponse", "TestResponse"]
