"""Player endpoints: current question, answers and hints."""

from fastapi import APIRouter

from app.core.dependencies import PlayerIdentity, Services, resolve_player
from app.schemas.common import ApiResponse
from app.schemas.puzzle import (
    AnswerRequest,
    AnswerResponse,
    HintRequest,
    HintResponse,
    QuestionResponse,
)

router = APIRouter()


@router.get("/question", response_model=ApiResponse[QuestionResponse])
async def get_current_question(
    identity: PlayerIdentity,
    services: Services,
):
    """Current question without answer, hints or password."""
    data = await services.progress.get_current_question(identity.user)
    return ApiResponse(data=data)


@router.post("/answer", response_model=ApiResponse[AnswerResponse])
async def submit_answer(
    body: AnswerRequest,
    services: Services,
):
    """
    Submit an answer for the current question.

    A wrong answer or an active lock is a normal result, not an error:
    check ``correct``, ``locked`` and ``remaining_seconds``.
    """
    await resolve_player(services, body.uuid)
    data = await services.progress.submit_answer(body.uuid, body.question_id, body.answer)
    return ApiResponse(data=data)


@router.post("/hint", response_model=ApiResponse[HintResponse])
async def request_hints(
    body: HintRequest,
    services: Services,
):
    """Ask for hints. Omit ``password`` to learn whether one is required."""
    await resolve_player(services, body.uuid)
    data = await services.hints.request_hints(body.uuid, body.question_id, body.password)
    return ApiResponse(data=data)
