"""
Domain error taxonomy.

Expected business outcomes (wrong answer, locked channel, password required)
are return values, not exceptions. Only the cases below raise.
"""

from fastapi import status


class EnigmaError(Exception):
    """Base class for errors surfaced to API callers."""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_message: str = "An error occurred"

    def __init__(self, message: str = ""):
        self.message = message or self.default_message
        super().__init__(self.message)


class ValidationError(EnigmaError):
    """Malformed input, rejected before the store is touched."""

    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "Invalid input"


class UnauthorizedError(EnigmaError):
    """Unknown identity, wrong role, or a question that is not the caller's current one."""

    status_code = status.HTTP_403_FORBIDDEN
    default_message = "Access denied"


class NotFoundError(EnigmaError):
    status_code = status.HTTP_404_NOT_FOUND
    default_message = "Not found"


class GoneError(EnigmaError):
    """Resource existed but has expired."""

    status_code = status.HTTP_410_GONE
    default_message = "Resource has expired"


class InfrastructureError(EnigmaError):
    """Store unreachable or timed out. Never means 'unauthorized' or 'not locked'."""

    status_code = status.HTTP_503_SERVICE_UNAVAILABLE
    default_message = "Storage temporarily unavailable"
