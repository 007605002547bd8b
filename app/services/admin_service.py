"""Admin operations: rate-limit override and content / user management."""

import logging
import uuid as uuid_lib
from datetime import datetime, timezone
from typing import List, Optional

from pydantic import ValidationError as PydanticValidationError

from app.core.exceptions import NotFoundError, ValidationError
from app.core.rate_limiter import Channel, RateLimitEngine, ResetScope
from app.core.sanitizer import (
    validate_answer,
    validate_hint_password,
    validate_hints,
    validate_question_text,
    validate_user_name,
    validate_uuid,
)
from app.models.admin_config import AdminConfig
from app.models.hint_route import HintRoute
from app.models.identity import Role
from app.models.question import Question
from app.models.user import User
from app.schemas.admin import ChannelStatus, ConfigUpdate, QuestionIn, UserRateLimitOverview
from app.services.identity_service import IdentityResolver
from app.services.store_service import CredentialStore

logger = logging.getLogger(__name__)


class AdminService:
    """Privileged operations. Callers are admin-checked upstream, except the reset."""

    def __init__(self, store: CredentialStore, engine: RateLimitEngine, identity: IdentityResolver):
        self.store = store
        self.engine = engine
        self.identity = identity

    # ─── Rate limit override ────────────────────
    async def reset_rate_limit(self, caller_uuid: str, target_uuid: str, channel: str) -> bool:
        """
        Clear the requested channel(s) on a target user.

        Progress is never touched, and the other channel only when
        ``channel`` is ``both``.
        """
        scope = ResetScope.parse(channel)
        await self.identity.require_role(caller_uuid, Role.ADMIN, message="Admin access required")
        return await self.engine.admin_reset(target_uuid, scope)

    def _channel_status(self, user: User, channel: Channel) -> ChannelStatus:
        state = user.rate_limit
        status = self.engine.peek(user, channel)
        if channel is Channel.ANSWER:
            failures = state.answer_failures if state else 0
            locked_until = state.answer_locked_until if state else None
        else:
            failures = state.hint_failures if state else 0
            locked_until = state.hint_locked_until if state else None
        return ChannelStatus(
            failures=failures,
            locked=status.locked,
            remaining_seconds=status.remaining_seconds,
            locked_until=locked_until,
        )

    async def list_rate_limits(self) -> List[UserRateLimitOverview]:
        """Live lock status of every user. Read-only: does not trigger lazy expiry."""
        overview = []
        for user in await self.store.list_users():
            overview.append(
                UserRateLimitOverview(
                    uuid=user.id,
                    name=user.name,
                    answer=self._channel_status(user, Channel.ANSWER),
                    hint=self._channel_status(user, Channel.HINT),
                    total_answer_failures=user.rate_limit.total_answer_failures if user.rate_limit else 0,
                )
            )
        return overview

    # ─── Users ──────────────────────────────────
    async def list_users(self) -> List[User]:
        return await self.store.list_users()

    async def create_user(self, name: str) -> User:
        clean_name = validate_user_name(name)
        now = self.engine.clock()
        user = User(
            id=f"user-{uuid_lib.uuid4()}",
            name=clean_name,
            created_at=now,
            last_activity=now,
        )
        if not await self.store.add_user(user):
            raise ValidationError("User UUID already exists")

        logger.info(f"Created user {user.id[:12]}...")
        return user

    async def delete_user(self, target_uuid: str) -> None:
        async with self.engine.guard(target_uuid):
            deleted = await self.store.delete_user(target_uuid)
        self.engine.forget(target_uuid)
        if not deleted:
            raise NotFoundError("User not found")

        logger.info(f"Deleted user {target_uuid[:12]}...")

    # ─── Questions ──────────────────────────────
    async def list_questions(self) -> List[Question]:
        return await self.store.get_questions()

    async def save_questions(self, items: List[QuestionIn]) -> List[Question]:
        """Replace the whole question set after validating and sanitizing it."""
        questions = []
        seen_ids = set()
        seen_orders = set()

        for item in items:
            question_id = item.id.strip()
            if not question_id or question_id in seen_ids:
                raise ValidationError(f"Duplicate or empty question id: {item.id!r}")
            if item.order in seen_orders:
                raise ValidationError(f"Duplicate question order: {item.order}")
            seen_ids.add(question_id)
            seen_orders.add(item.order)

            questions.append(
                Question(
                    id=question_id,
                    text=validate_question_text(item.text),
                    answer=validate_answer(item.answer),
                    hints=validate_hints(item.hints),
                    hint_password=validate_hint_password(item.hint_password),
                    order=item.order,
                )
            )

        await self.store.save_questions(questions)
        logger.info(f"Question set replaced ({len(questions)} questions)")
        return sorted(questions, key=lambda q: q.order)

    # ─── Configuration ──────────────────────────
    async def get_config(self) -> AdminConfig:
        config = await self.store.get_config()
        if config is None:
            raise NotFoundError("Configuration has not been initialized")
        return config

    async def update_config(self, update: ConfigUpdate) -> AdminConfig:
        current = await self.get_config()

        changes = update.model_dump(exclude_none=True)
        for field in ("admin_uuid", "dashboard_uuid"):
            if field in changes:
                validate_uuid(changes[field], label=field)

        try:
            config = AdminConfig.model_validate({**current.model_dump(), **changes})
        except PydanticValidationError as exc:
            raise ValidationError(exc.errors()[0].get("msg", "Invalid configuration"))

        user_ids = set(await self.store.list_user_ids())
        if config.admin_uuid in user_ids or config.dashboard_uuid in user_ids:
            raise ValidationError("Admin and dashboard UUIDs must not match a user UUID")

        await self.store.save_config(config)
        logger.info(f"Configuration updated: {sorted(changes)}")
        return config

    # ─── Hint routes ────────────────────────────
    async def list_hint_routes(self) -> List[HintRoute]:
        return await self.store.get_hint_routes()

    async def create_hint_route(self, content: str, expires_at: Optional[datetime] = None) -> HintRoute:
        if expires_at is not None and expires_at.tzinfo is None:
            expires_at = expires_at.replace(tzinfo=timezone.utc)
        route = HintRoute(
            id=f"hint-{uuid_lib.uuid4()}",
            content=validate_question_text(content, label="Content"),
            created_at=self.engine.clock(),
            expires_at=expires_at,
        )
        routes = await self.store.get_hint_routes()
        routes.append(route)
        await self.store.save_hint_routes(routes)
        return route

    async def delete_hint_route(self, route_uuid: str) -> None:
        routes = await self.store.get_hint_routes()
        remaining = [r for r in routes if r.id != route_uuid]
        if len(remaining) == len(routes):
            raise NotFoundError("Hint route not found")
        await self.store.save_hint_routes(remaining)
