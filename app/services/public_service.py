"""Unauthenticated reads: standalone hint pages and the game state."""

import logging

from app.core.clock import Clock, utc_now
from app.core.exceptions import GoneError, InfrastructureError, NotFoundError, ValidationError
from app.models.admin_config import GameState
from app.schemas.admin import PublicHintRoute
from app.services.store_service import CredentialStore

logger = logging.getLogger(__name__)

HINT_ROUTE_PREFIX = "hint-"


class PublicService:
    def __init__(self, store: CredentialStore, clock: Clock = utc_now):
        self.store = store
        self.clock = clock

    async def get_hint_route(self, route_uuid: str) -> PublicHintRoute:
        if not route_uuid or not route_uuid.startswith(HINT_ROUTE_PREFIX):
            raise ValidationError("Invalid hint route")

        routes = await self.store.get_hint_routes()
        route = next((r for r in routes if r.id == route_uuid and r.is_active), None)
        if route is None:
            raise NotFoundError("Hint route not found")
        if route.is_expired(self.clock()):
            raise GoneError("Hint route has expired")

        return PublicHintRoute(content=route.content)

    async def get_game_state(self) -> GameState:
        """Public game state. Falls back to ``coming-soon`` when storage is unavailable."""
        try:
            config = await self.store.get_config()
        except InfrastructureError:
            logger.warning("Game state unavailable; reporting coming-soon")
            return "coming-soon"
        return config.game_state if config else "coming-soon"
