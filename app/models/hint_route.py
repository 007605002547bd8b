"""Standalone hint page reachable through a ``hint-`` UUID."""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field

from app.core.clock import utc_now


class HintRoute(BaseModel):
    id: str
    content: str
    created_at: datetime = Field(default_factory=utc_now)
    expires_at: Optional[datetime] = None
    is_active: bool = True

    def is_expired(self, now: datetime) -> bool:
        return self.expires_at is not None and now > self.expires_at

    def __repr__(self) -> str:
        return f"<HintRoute(id={self.id}, active={self.is_active})>"
