"""Dashboard schemas for API responses."""

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel


class UserProgressItem(BaseModel):
    """One participant's progress. ``uuid`` is only filled for admins."""
    name: str
    percentage: int
    completed_count: int
    total_questions: int
    last_activity: datetime
    uuid: Optional[str] = None


class DashboardResponse(BaseModel):
    total_users: int
    average_completion: int
    total_completions: int
    users: List[UserProgressItem]
    last_updated: datetime
