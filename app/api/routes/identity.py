"""UUID validation endpoint."""

from fastapi import APIRouter, Query

from app.core.dependencies import Services
from app.schemas.common import ApiResponse
from app.schemas.identity import ValidationResponse

router = APIRouter()


@router.get("/validate", response_model=ApiResponse[ValidationResponse])
async def validate_uuid(
    services: Services,
    uuid: str = Query(..., description="UUID to check"),
):
    """
    Resolve a UUID to its role.

    Unknown or malformed UUIDs come back as ``valid: false`` with role
    ``none``; the user record itself is never returned.
    """
    identity = await services.identity.resolve(uuid)
    return ApiResponse(data=ValidationResponse(valid=identity.valid, role=identity.role))
