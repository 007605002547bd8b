"""
Hint Delivery: password-gated hints behind the hint channel.

Asking whether a password is needed is free; only a wrong guess counts as a
failure. A correct password forgives both channels. Hints always come back as
the full list.
"""

import logging
from typing import Optional

from app.core.exceptions import NotFoundError, UnauthorizedError
from app.core.rate_limiter import Channel, RateLimitEngine
from app.schemas.puzzle import HintResponse
from app.services.store_service import CredentialStore

logger = logging.getLogger(__name__)


class HintService:
    def __init__(self, store: CredentialStore, engine: RateLimitEngine):
        self.store = store
        self.engine = engine

    async def request_hints(
        self,
        uuid: str,
        question_id: str,
        password: Optional[str] = None,
    ) -> HintResponse:
        async with self.engine.guard(uuid):
            user = await self.store.require_user(uuid)

            status, changed = self.engine.evaluate(user, Channel.HINT)
            if changed:
                await self.store.save_user(user)
            if status.locked:
                return HintResponse(
                    requires_password=True,
                    locked=True,
                    remaining_seconds=status.remaining_seconds,
                )

            questions = await self.store.get_questions()
            question = next((q for q in questions if q.id == question_id), None)
            if question is None:
                raise NotFoundError("Question not found")
            if question.order != user.current_question:
                raise UnauthorizedError("Question is not your current question")
            if not question.hints:
                raise NotFoundError("No hints available for this question")

            user.last_activity = self.engine.clock()

            if not question.requires_password:
                await self.store.save_user(user)
                return HintResponse(hints=list(question.hints), requires_password=False)

            supplied = (password or "").strip()
            if not supplied:
                await self.store.save_user(user)
                return HintResponse(requires_password=True)

            if supplied == question.hint_password:
                self.engine.apply_success(user)
                await self.store.save_user(user)
                logger.info(f"Hints unlocked for {uuid[:12]}... on {question.id}")
                return HintResponse(hints=list(question.hints), requires_password=False)

            policy = await self.engine.policy_for(Channel.HINT)
            status = self.engine.apply_failure(user, Channel.HINT, policy)
            await self.store.save_user(user)
            return HintResponse(
                requires_password=True,
                locked=status.locked,
                remaining_seconds=status.remaining_seconds if status.locked else None,
            )
