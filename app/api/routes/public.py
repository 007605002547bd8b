"""Unauthenticated endpoints."""

from fastapi import APIRouter

from app.core.dependencies import Services
from app.schemas.admin import GameStateResponse, PublicHintRoute
from app.schemas.common import ApiResponse

router = APIRouter()


@router.get("/hint-route/{route_uuid}", response_model=ApiResponse[PublicHintRoute])
async def get_hint_route(route_uuid: str, services: Services):
    data = await services.public.get_hint_route(route_uuid)
    return ApiResponse(data=data)


@router.get("/game-state", response_model=ApiResponse[GameStateResponse])
async def get_game_state(services: Services):
    game_state = await services.public.get_game_state()
    return ApiResponse(data=GameStateResponse(game_state=game_state))
