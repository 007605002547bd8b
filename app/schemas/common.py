"""Response envelope shared by every endpoint."""

from typing import Generic, Optional, TypeVar

from pydantic import BaseModel

T = TypeVar("T")


class ApiResponse(BaseModel, Generic[T]):
    """``{success, data?, error?}`` envelope."""
    success: bool = True
    data: Optional[T] = None
    error: Optional[str] = None

