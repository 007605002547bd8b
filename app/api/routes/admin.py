"""Admin endpoints: users, questions, configuration, rate limits, hint routes."""

from typing import List

from fastapi import APIRouter, Query, status

from app.core.dependencies import AdminIdentity, Services
from app.core.sanitizer import validate_uuid
from app.models.admin_config import AdminConfig
from app.models.hint_route import HintRoute
from app.models.question import Question
from app.models.user import User
from app.schemas.admin import (
    ConfigUpdate,
    DeleteResponse,
    HintRouteCreate,
    QuestionIn,
    RateLimitResetRequest,
    RateLimitResetResponse,
    UserCreate,
    UserRateLimitOverview,
)
from app.schemas.common import ApiResponse

router = APIRouter()


# ─── Users ──────────────────────────────────────
@router.get("/users", response_model=ApiResponse[List[User]])
async def list_users(_: AdminIdentity, services: Services):
    """All participants, including their rate-limit state."""
    return ApiResponse(data=await services.admin.list_users())


@router.post("/users", response_model=ApiResponse[User], status_code=status.HTTP_201_CREATED)
async def create_user(body: UserCreate, _: AdminIdentity, services: Services):
    return ApiResponse(data=await services.admin.create_user(body.name))


@router.delete("/users/{user_uuid}", response_model=ApiResponse[DeleteResponse])
async def delete_user(user_uuid: str, _: AdminIdentity, services: Services):
    await services.admin.delete_user(user_uuid)
    return ApiResponse(data=DeleteResponse(deleted=True))


# ─── Questions ──────────────────────────────────
@router.get("/questions", response_model=ApiResponse[List[Question]])
async def list_questions(_: AdminIdentity, services: Services):
    """Full questions, answers and hint passwords included."""
    return ApiResponse(data=await services.admin.list_questions())


@router.post("/questions", response_model=ApiResponse[List[Question]])
async def save_questions(body: List[QuestionIn], _: AdminIdentity, services: Services):
    """Replace the whole question set."""
    return ApiResponse(data=await services.admin.save_questions(body))


# ─── Configuration ──────────────────────────────
@router.get("/config", response_model=ApiResponse[AdminConfig])
async def get_config(_: AdminIdentity, services: Services):
    return ApiResponse(data=await services.admin.get_config())


@router.put("/config", response_model=ApiResponse[AdminConfig])
async def update_config(body: ConfigUpdate, _: AdminIdentity, services: Services):
    """
    Partially update the configuration.

    Changing ``admin_uuid`` takes effect immediately: the next request must
    use the new value.
    """
    return ApiResponse(data=await services.admin.update_config(body))


# ─── Rate limits ────────────────────────────────
@router.get("/rate-limits", response_model=ApiResponse[List[UserRateLimitOverview]])
async def list_rate_limits(_: AdminIdentity, services: Services):
    """Live lock status per user. Listing never clears an expired lock."""
    return ApiResponse(data=await services.admin.list_rate_limits())


@router.post("/rate-limits/reset", response_model=ApiResponse[RateLimitResetResponse])
async def reset_rate_limit(
    body: RateLimitResetRequest,
    services: Services,
    uuid: str = Query(..., description="Caller UUID"),
):
    """Clear the answer channel, the hint channel, or both, on one user."""
    validate_uuid(uuid)
    success = await services.admin.reset_rate_limit(uuid, body.user_uuid, body.channel)
    return ApiResponse(data=RateLimitResetResponse(success=success))


# ─── Hint routes ────────────────────────────────
@router.get("/hint-routes", response_model=ApiResponse[List[HintRoute]])
async def list_hint_routes(_: AdminIdentity, services: Services):
    return ApiResponse(data=await services.admin.list_hint_routes())


@router.post("/hint-routes", response_model=ApiResponse[HintRoute], status_code=status.HTTP_201_CREATED)
async def create_hint_route(body: HintRouteCreate, _: AdminIdentity, services: Services):
    route = await services.admin.create_hint_route(body.content, body.expires_at)
    return ApiResponse(data=route)


@router.delete("/hint-routes/{route_uuid}", response_model=ApiResponse[DeleteResponse])
async def delete_hint_route(route_uuid: str, _: AdminIdentity, services: Services):
    await services.admin.delete_hint_route(route_uuid)
    return ApiResponse(data=DeleteResponse(deleted=True))
