"""Health check endpoints."""

from fastapi import APIRouter

from app.core.dependencies import Services

router = APIRouter()


@router.get("/health")
async def health_check(services: Services):
    """Check that the API is running and the store answers."""
    await services.store.get_config()
    return {"status": "healthy", "storage": services.store.describe()}


@router.get("/")
async def root():
    """Root endpoint."""
    return {
        "name": "Enigma Hub API",
        "version": "1.0.0",
        "description": "Sequential riddle hunt with per-player rate limiting",
    }
