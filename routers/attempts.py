"""Attempt history endpoints."""

from fastapi import APIRouter, Depends

from app_state import get_quiz_engine
from quiz.auth import get_current_user
from quiz.engine import QuizEngine
from quiz.models import AttemptHistoryEntry, User

router = APIRouter(prefix="/api/attempts", tags=["Attempts"])


@router.get("/history", response_model=list[AttemptHistoryEntry])
async def attempt_history(
    user: User = Depends(get_current_user),
    engine: QuizEngine = Depends(get_quiz_engine),
):
    """Tentativas do usuario, mais recentes primeiro."""
    return await engine.attempt_history(user)
