"""FastAPI dependencies: service container and identity checks."""

from typing import Annotated

from fastapi import Depends, Query, Request

from app.core.sanitizer import validate_uuid
from app.models.identity import Identity, Role
from app.services import ServiceContainer


def get_services(request: Request) -> ServiceContainer:
    """Service container built during application startup."""
    return request.app.state.services


Services = Annotated[ServiceContainer, Depends(get_services)]


async def resolve_player(services: ServiceContainer, uuid: str) -> Identity:
    """Check the format first, then insist on a participant UUID."""
    validate_uuid(uuid)
    return await services.identity.require_role(uuid, Role.USER, message="Invalid user")


async def require_admin(
    services: Services,
    uuid: str = Query(..., description="Caller UUID"),
) -> Identity:
    validate_uuid(uuid)
    return await services.identity.require_role(uuid, Role.ADMIN, message="Admin access required")


async def require_viewer(
    services: Services,
    uuid: str = Query(..., description="Caller UUID"),
) -> Identity:
    """Admin or read-only dashboard."""
    validate_uuid(uuid)
    return await services.identity.require_role(uuid, Role.ADMIN, Role.DASHBOARD)


async def require_player(
    services: Services,
    uuid: str = Query(..., description="Caller UUID"),
) -> Identity:
    return await resolve_player(services, uuid)


AdminIdentity = Annotated[Identity, Depends(require_admin)]
ViewerIdentity = Annotated[Identity, Depends(require_viewer)]
PlayerIdentity = Annotated[Identity, Depends(require_player)]
