"""Progress dashboard endpoint."""

from fastapi import APIRouter

from app.core.dependencies import Services, ViewerIdentity
from app.schemas.common import ApiResponse
from app.schemas.dashboard import DashboardResponse

router = APIRouter()


@router.get("", response_model=ApiResponse[DashboardResponse])
async def get_dashboard(
    viewer: ViewerIdentity,
    services: Services,
):
    """Aggregate progress. Participant UUIDs are included for admins only."""
    data = await services.dashboard.get_dashboard(viewer)
    return ApiResponse(data=data)
