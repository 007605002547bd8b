"""Resolved caller identity."""

from dataclasses import dataclass
from enum import Enum
from typing import Optional

from app.models.user import User


class Role(str, Enum):
    ADMIN = "admin"
    DASHBOARD = "dashboard"
    USER = "user"
    NONE = "none"


@dataclass(frozen=True)
class Identity:
    valid: bool
    role: Role
    user: Optional[User] = None

    @classmethod
    def anonymous(cls) -> "Identity":
        return cls(valid=False, role=Role.NONE)
