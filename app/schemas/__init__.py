"""Pydantic schemas for API request/response validation."""

from app.schemas.common import ApiResponse
from app.schemas.identity import ValidationResponse
from app.schemas.puzzle import (
    SafeQuestion,
    ProgressInfo,
    QuestionResponse,
    AnswerRequest,
    AnswerResponse,
    HintRequest,
    HintResponse,
)
from app.schemas.dashboard import DashboardResponse, UserProgressItem

__all__ = [
    "ApiResponse",
    "ValidationResponse",
    "SafeQuestion",
    "ProgressInfo",
    "QuestionResponse",
    "AnswerRequest",
    "AnswerResponse",
    "HintRequest",
    "HintResponse",
    "DashboardResponse",
    "UserProgressItem",
]
