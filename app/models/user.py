"""User record and its embedded rate-limit state."""

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, Field

from app.core.clock import utc_now


class RateLimitState(BaseModel):
    """
    Failure counters and lock deadlines for the two attempt channels.

    Created lazily on the first failure. ``*_locked_until`` of None means the
    channel is not locked.
    """

    answer_failures: int = 0
    answer_locked_until: Optional[datetime] = None
    total_answer_failures: int = 0  # lifetime, never reset

    hint_failures: int = 0
    hint_locked_until: Optional[datetime] = None


class User(BaseModel):
    """Puzzle participant."""

    id: str
    name: str
    current_question: int = Field(default=1, ge=1)
    completed_questions: List[str] = Field(default_factory=list)
    created_at: datetime = Field(default_factory=utc_now)
    last_activity: datetime = Field(default_factory=utc_now)
    rate_limit: Optional[RateLimitState] = None

    def mark_completed(self, question_id: str) -> bool:
        """Record a solved question. Returns False if it was already recorded."""
        if question_id in self.completed_questions:
            return False
        self.completed_questions.append(question_id)
        return True

    def __repr__(self) -> str:
        return f"<User(id={self.id}, current_question={self.current_question})>"
