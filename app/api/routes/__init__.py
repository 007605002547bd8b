"""API routes package."""

from fastapi import APIRouter

from app.api.routes import (
    admin,
    dashboard,
    health,
    identity,
    public,
    puzzle,
)

api_router = APIRouter()

api_router.include_router(health.router, tags=["Health"])
api_router.include_router(identity.router, tags=["Identity"])
api_router.include_router(puzzle.router, tags=["Puzzle"])
api_router.include_router(dashboard.router, prefix="/dashboard", tags=["Dashboard"])
api_router.include_router(admin.router, prefix="/admin", tags=["Admin"])
api_router.include_router(public.router, prefix="/public", tags=["Public"])
