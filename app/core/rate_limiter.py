"""
Per-identity Rate Limit Engine.

Each user carries two independent channels, ``answer`` and ``hint``, and each
channel is a two-state machine:

    Open   --failure, counter < max-->  Open     (counter + 1)
    Open   --failure, counter = max-->  Locked   (locked_until = now + lock)
    Locked --check, now <  until----->  Locked   (no mutation)
    Locked --check, now >= until----->  Open     (both channels cleared)
    Any    --success----------------->  Open     (both channels cleared)
    Any    --admin reset------------->  Open     (targeted channels only)

Expiry is lazy: nothing clears a lock in the background, the next check that
finds it expired performs the reset and persists it.

Read-modify-write of a user's record happens under a per-UUID asyncio lock.
Callers that need a longer critical section (answer evaluation, hint unlock)
take ``guard(uuid)`` themselves and use the in-lock primitives ``evaluate``,
``apply_failure``, ``apply_success`` and ``apply_reset`` on the loaded record.
"""

import asyncio
import logging
import math
from dataclasses import dataclass
from datetime import datetime, timedelta
from enum import Enum
from typing import TYPE_CHECKING, Dict, Optional, Tuple

from app.core.clock import Clock, utc_now
from app.core.exceptions import NotFoundError, ValidationError
from app.models.admin_config import RateLimitPolicy
from app.models.user import RateLimitState, User

if TYPE_CHECKING:
    from app.services.store_service import CredentialStore

logger = logging.getLogger(__name__)


class Channel(str, Enum):
    ANSWER = "answer"
    HINT = "hint"


class ResetScope(str, Enum):
    ANSWER = "answer"
    HINT = "hint"
    BOTH = "both"

    @classmethod
    def parse(cls, value: str) -> "ResetScope":
        normalized = (value or "").strip().lower()
        if normalized == "hint-password":
            return cls.HINT
        try:
            return cls(normalized)
        except ValueError:
            raise ValidationError("Channel must be one of: answer, hint, both")

    @property
    def channels(self) -> Tuple[Channel, ...]:
        if self is ResetScope.BOTH:
            return (Channel.ANSWER, Channel.HINT)
        return (Channel(self.value),)


# (failure counter, lock deadline) attribute names on RateLimitState
_FIELDS: Dict[Channel, Tuple[str, str]] = {
    Channel.ANSWER: ("answer_failures", "answer_locked_until"),
    Channel.HINT: ("hint_failures", "hint_locked_until"),
}
ALL_CHANNELS: Tuple[Channel, ...] = (Channel.ANSWER, Channel.HINT)


@dataclass(frozen=True)
class LimitStatus:
    """Outcome of a check or a failure. ``remaining_seconds`` is 0 when open."""

    locked: bool
    remaining_seconds: int = 0


OPEN = LimitStatus(locked=False)


def remaining_seconds(locked_until: datetime, now: datetime) -> int:
    """Whole seconds left on a lock, rounded up, never negative."""
    return max(0, math.ceil((locked_until - now).total_seconds()))


def _short(uuid: str) -> str:
    return f"{uuid[:12]}..."


class RateLimitEngine:
    """Failure tracking and lockouts for the answer and hint-password channels."""

    def __init__(self, store: "CredentialStore", clock: Clock = utc_now):
        self.store = store
        self.clock = clock
        self._locks: Dict[str, asyncio.Lock] = {}

    # ─── Per-user mutual exclusion ──────────────
    def guard(self, uuid: str) -> asyncio.Lock:
        lock = self._locks.get(uuid)
        if lock is None:
            lock = self._locks[uuid] = asyncio.Lock()
        return lock

    def forget(self, uuid: str) -> None:
        """Drop the lock object of a deleted user."""
        self._locks.pop(uuid, None)

    # ─── In-lock primitives ─────────────────────
    def peek(self, user: User, channel: Channel) -> LimitStatus:
        """Current status without lazy expiry. For read-only listings."""
        state = user.rate_limit
        if state is None:
            return OPEN
        locked_until = getattr(state, _FIELDS[channel][1])
        if locked_until is None:
            return OPEN
        remaining = remaining_seconds(locked_until, self.clock())
        return LimitStatus(locked=True, remaining_seconds=remaining) if remaining > 0 else OPEN

    def evaluate(self, user: User, channel: Channel) -> Tuple[LimitStatus, bool]:
        """
        Check a channel, applying lazy expiry.

        Returns the status and whether the record was modified (an expired
        lock was cleared, together with the other channel) and must be saved.
        """
        state = user.rate_limit
        if state is None or getattr(state, _FIELDS[channel][1]) is None:
            return OPEN, False

        status = self.peek(user, channel)
        if status.locked:
            return status, False

        self._clear(state, ALL_CHANNELS)
        logger.info(f"{channel.value} lock expired for {_short(user.id)}; both channels reset")
        return OPEN, True

    def apply_failure(self, user: User, channel: Channel, policy: RateLimitPolicy) -> LimitStatus:
        """Count one failure and lock the channel once the threshold is reached."""
        if user.rate_limit is None:
            user.rate_limit = RateLimitState()
        state = user.rate_limit
        failures_attr, until_attr = _FIELDS[channel]
        now = self.clock()

        failures = getattr(state, failures_attr) + 1
        setattr(state, failures_attr, failures)
        if channel is Channel.ANSWER:
            state.total_answer_failures += 1
        user.last_activity = now

        if failures >= policy.max_failures:
            setattr(state, until_attr, now + timedelta(minutes=policy.lock_minutes))
            logger.warning(
                f"{channel.value} channel locked for {_short(user.id)} "
                f"after {failures} failures ({policy.lock_minutes} min)"
            )
            return LimitStatus(locked=True, remaining_seconds=policy.lock_minutes * 60)

        return OPEN

    def apply_success(self, user: User) -> None:
        """A correct answer or hint password forgives both channels."""
        if user.rate_limit is not None:
            self._clear(user.rate_limit, ALL_CHANNELS)

    def apply_reset(self, user: User, scope: ResetScope) -> None:
        """Manual reset: only the targeted channels, no coupling."""
        if user.rate_limit is not None:
            self._clear(user.rate_limit, scope.channels)

    @staticmethod
    def _clear(state: RateLimitState, channels: Tuple[Channel, ...]) -> None:
        for channel in channels:
            failures_attr, until_attr = _FIELDS[channel]
            setattr(state, failures_attr, 0)
            setattr(state, until_attr, None)

    async def policy_for(self, channel: Channel) -> RateLimitPolicy:
        config = await self.store.get_rate_limit_config()
        return config.answer if channel is Channel.ANSWER else config.hint_password

    # ─── Self-locking operations ────────────────
    async def _check(self, uuid: str, channel: Channel) -> LimitStatus:
        async with self.guard(uuid):
            user = await self.store.require_user(uuid)
            status, changed = self.evaluate(user, channel)
            if changed:
                await self.store.save_user(user)
            return status

    async def _record_failure(self, uuid: str, channel: Channel) -> LimitStatus:
        # Not idempotent: callers must never retry this automatically.
        async with self.guard(uuid):
            user = await self.store.require_user(uuid)
            self.evaluate(user, channel)
            policy = await self.policy_for(channel)
            status = self.apply_failure(user, channel, policy)
            await self.store.save_user(user)
            return status

    async def check_answer_limit(self, uuid: str) -> LimitStatus:
        return await self._check(uuid, Channel.ANSWER)

    async def record_answer_failure(self, uuid: str) -> LimitStatus:
        return await self._record_failure(uuid, Channel.ANSWER)

    async def check_hint_limit(self, uuid: str) -> LimitStatus:
        return await self._check(uuid, Channel.HINT)

    async def record_hint_failure(self, uuid: str) -> LimitStatus:
        return await self._record_failure(uuid, Channel.HINT)

    async def reset_on_success(self, uuid: str) -> None:
        async with self.guard(uuid):
            user = await self.store.require_user(uuid)
            if user.rate_limit is None:
                return
            self.apply_success(user)
            await self.store.save_user(user)

    async def admin_reset(self, uuid: str, scope: ResetScope) -> bool:
        async with self.guard(uuid):
            user: Optional[User] = await self.store.get_user(uuid)
            if user is not None:
                self.apply_reset(user, scope)
                await self.store.save_user(user)

        if user is None:
            self.forget(uuid)
            raise NotFoundError("Target user not found")

        logger.info(f"Admin reset of {scope.value} rate limit for {_short(uuid)}")
        return True
