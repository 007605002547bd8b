"""
Progress Tracker: current question lookup and answer evaluation.

The answer channel is checked before anything about the question is looked
at, so a locked user cannot use submissions as an oracle. Evaluation, progress
update and failure accounting all happen under the user's rate-limit guard.
"""

import logging
import math
from typing import List, Optional

from app.core.exceptions import NotFoundError, UnauthorizedError
from app.core.rate_limiter import Channel, RateLimitEngine
from app.models.question import Question
from app.models.user import User
from app.schemas.puzzle import AnswerResponse, ProgressInfo, QuestionResponse, SafeQuestion
from app.services.store_service import CredentialStore

logger = logging.getLogger(__name__)


def normalize_answer(text: str) -> str:
    return text.strip().lower()


def answers_match(submitted: str, expected: str) -> bool:
    """Case-insensitive, whitespace-trimmed exact match."""
    return normalize_answer(submitted) == normalize_answer(expected)


def completion_percentage(completed: int, total: int) -> int:
    if total <= 0:
        return 0
    return int(math.floor(completed / total * 100 + 0.5))


def find_question_by_order(questions: List[Question], order: int) -> Optional[Question]:
    return next((q for q in questions if q.order == order), None)


def build_progress(user: User, questions: List[Question]) -> ProgressInfo:
    return ProgressInfo(
        current=user.current_question,
        total=len(questions),
        percentage=completion_percentage(len(user.completed_questions), len(questions)),
    )


class ProgressTracker:
    """Advances users through the question sequence."""

    def __init__(self, store: CredentialStore, engine: RateLimitEngine):
        self.store = store
        self.engine = engine

    async def get_current_question(self, user: User) -> QuestionResponse:
        questions = await self.store.get_questions()
        current = find_question_by_order(questions, user.current_question)
        progress = build_progress(user, questions)

        if current is None:
            return QuestionResponse(question=None, completed=True, progress=progress)

        return QuestionResponse(
            question=SafeQuestion.from_question(current),
            is_last_question=not any(q.order > current.order for q in questions),
            progress=progress,
        )

    async def submit_answer(self, uuid: str, question_id: str, text: str) -> AnswerResponse:
        async with self.engine.guard(uuid):
            user = await self.store.require_user(uuid)

            status, changed = self.engine.evaluate(user, Channel.ANSWER)
            if changed:
                await self.store.save_user(user)
            if status.locked:
                questions = await self.store.get_questions()
                return AnswerResponse(
                    correct=False,
                    locked=True,
                    remaining_seconds=status.remaining_seconds,
                    progress=build_progress(user, questions),
                )

            questions = await self.store.get_questions()
            question = next((q for q in questions if q.id == question_id), None)
            if question is None:
                raise NotFoundError("Question not found")
            if question.order != user.current_question:
                raise UnauthorizedError("Question is not your current question")

            if answers_match(text, question.answer):
                return await self._accept(user, question, questions)

            policy = await self.engine.policy_for(Channel.ANSWER)
            status = self.engine.apply_failure(user, Channel.ANSWER, policy)
            await self.store.save_user(user)

            return AnswerResponse(
                correct=False,
                locked=status.locked,
                remaining_seconds=status.remaining_seconds if status.locked else None,
                progress=build_progress(user, questions),
            )

    async def _accept(self, user: User, question: Question, questions: List[Question]) -> AnswerResponse:
        """Commit a correct answer. Caller holds the user's guard."""
        user.mark_completed(question.id)
        user.current_question += 1
        user.last_activity = self.engine.clock()
        self.engine.apply_success(user)
        await self.store.save_user(user)

        next_question = find_question_by_order(questions, user.current_question)
        logger.info(f"{user.id[:12]}... solved {question.id}; now on {user.current_question}")

        return AnswerResponse(
            correct=True,
            next_question=SafeQuestion.from_question(next_question) if next_question else None,
            completed=next_question is None,
            progress=build_progress(user, questions),
        )
