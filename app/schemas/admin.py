"""Admin schemas: users, questions, configuration, rate limits, hint routes."""

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, Field

from app.models.admin_config import GameState, RateLimitConfig


class UserCreate(BaseModel):
    """Schema for creating a participant. The UUID is generated server-side."""
    name: str = Field(min_length=1, max_length=50)


class DeleteResponse(BaseModel):
    deleted: bool


class QuestionIn(BaseModel):
    """Schema for one question in a full question-set replacement."""
    id: str = Field(min_length=1, max_length=100)
    text: str
    answer: str
    hints: List[str] = Field(default_factory=list)
    hint_password: Optional[str] = None
    order: int = Field(ge=1)


class ConfigUpdate(BaseModel):
    """Partial configuration update. Omitted fields keep their stored values."""
    admin_uuid: Optional[str] = Field(None, min_length=8, max_length=50)
    dashboard_uuid: Optional[str] = Field(None, min_length=8, max_length=50)
    rate_limit_config: Optional[RateLimitConfig] = None
    game_state: Optional[GameState] = None


class RateLimitResetRequest(BaseModel):
    user_uuid: str = Field(min_length=1, max_length=50)
    channel: str = Field("both", description="answer, hint (or hint-password), or both")


class RateLimitResetResponse(BaseModel):
    success: bool


class ChannelStatus(BaseModel):
    failures: int
    locked: bool
    remaining_seconds: int
    locked_until: Optional[datetime] = None


class UserRateLimitOverview(BaseModel):
    uuid: str
    name: str
    answer: ChannelStatus
    hint: ChannelStatus
    total_answer_failures: int


class HintRouteCreate(BaseModel):
    content: str
    expires_at: Optional[datetime] = None


class PublicHintRoute(BaseModel):
    """Hint route as served publicly: content only."""
    content: str


class GameStateResponse(BaseModel):
    game_state: GameState
