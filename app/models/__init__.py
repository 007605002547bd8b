"""Persisted records and storage models."""

from app.models.user import User, RateLimitState
from app.models.question import Question
from app.models.admin_config import AdminConfig, RateLimitConfig, RateLimitPolicy
from app.models.hint_route import HintRoute
from app.models.identity import Identity, Role

__all__ = [
    "User",
    "RateLimitState",
    "Question",
    "AdminConfig",
    "RateLimitConfig",
    "RateLimitPolicy",
    "HintRoute",
    "Identity",
    "Role",
]
