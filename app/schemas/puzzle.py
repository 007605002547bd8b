"""Puzzle schemas: current question, answers and hints."""

from typing import List, Optional

from pydantic import BaseModel, Field

from app.models.question import Question


class SafeQuestion(BaseModel):
    """Question as shown to players. Never carries the answer, hints or password."""
    id: str
    text: str
    order: int
    has_hints: bool = False
    hints_require_password: bool = False

    @classmethod
    def from_question(cls, question: Question) -> "SafeQuestion":
        return cls(
            id=question.id,
            text=question.text,
            order=question.order,
            has_hints=bool(question.hints),
            hints_require_password=question.requires_password,
        )


class ProgressInfo(BaseModel):
    current: int
    total: int
    percentage: int


class QuestionResponse(BaseModel):
    question: Optional[SafeQuestion] = None
    is_last_question: bool = False
    completed: bool = False
    progress: ProgressInfo


class AnswerRequest(BaseModel):
    """Schema for answer submission."""
    uuid: str = Field(min_length=1, max_length=50)
    question_id: str = Field(min_length=1, max_length=100)
    answer: str = Field(min_length=1, max_length=500)


class AnswerResponse(BaseModel):
    correct: bool
    locked: bool = False
    remaining_seconds: Optional[int] = None  # set only while locked
    next_question: Optional[SafeQuestion] = None
    completed: Optional[bool] = None
    progress: ProgressInfo


class HintRequest(BaseModel):
    """Schema for hint requests. Omit the password to ask whether one is needed."""
    uuid: str = Field(min_length=1, max_length=50)
    question_id: str = Field(min_length=1, max_length=100)
    password: Optional[str] = Field(None, max_length=100)


class HintResponse(BaseModel):
    hints: Optional[List[str]] = None  # always the complete set when present
    requires_password: bool
    locked: bool = False
    remaining_seconds: Optional[int] = None
