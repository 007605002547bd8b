"""Identity validation schemas."""

from pydantic import BaseModel

from app.models.identity import Role


class ValidationResponse(BaseModel):
    """Result of validating a UUID. Never carries the user record."""
    valid: bool
    role: Role
