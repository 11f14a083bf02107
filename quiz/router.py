"""Quiz Router - Endpoints FastAPI de quizzes.

Rotas estaticas (``/bookmarked``, ``/grade``) sao declaradas antes de
``/{quiz_id}`` para nao serem capturadas pelo parametro de caminho.
"""

import logging

from fastapi import APIRouter, Depends, Request, status

from app_state import get_quiz_engine

from .auth import get_current_user, get_optional_user
from .engine.quiz_engine import QuizEngine
from .models.schemas import (
    CreateQuizRequest,
    CreateQuizResponse,
    GradeQuizRequest,
    GradeResponse,
    Quiz,
    QuizStats,
    QuizSummary,
    SuccessResponse,
    User,
)
from .rate_limit import RATE_LIMITS, limiter

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/quizzes", tags=["Quiz"])


# =============================================================================
# CRIACAO / LISTAGEM
# =============================================================================


@router.post("", response_model=CreateQuizResponse, status_code=status.HTTP_201_CREATED)
@limiter.limit(RATE_LIMITS["create_quiz"])
async def create_quiz(
    request: Request,
    body: CreateQuizRequest,
    user: User = Depends(get_current_user),
    engine: QuizEngine = Depends(get_quiz_engine),
):
    """Gera um quiz novo (texto + imagem) sobre o topico informado.

    - 400 se o topico for vazio ou os campos estiverem fora dos limites
    - 500 (upstream_failure) se a IA falhar ou devolver conteudo invalido
    - Nada e gravado quando a geracao falha
    """
    logger.info(
        "Generating quiz for %s: topic=%r difficulty=%s n=%d",
        user.id,
        body.topic,
        body.difficulty.value,
        body.num_questions,
    )
    quiz_id = await engine.create_quiz(user, body)
    return CreateQuizResponse(quiz_id=quiz_id)


@router.get("", response_model=list[QuizSummary])
async def list_quizzes(
    stats: bool = True,
    mine: bool = False,
    user: User | None = Depends(get_optional_user),
    engine: QuizEngine = Depends(get_quiz_engine),
):
    """Lista quizzes (mais recentes primeiro).

    Query params:
        stats: Inclui estatisticas agregadas de cada quiz
        mine: Apenas quizzes do usuario autenticado
    """
    return await engine.list_quizzes(user, include_stats=stats, mine=mine)


@router.get("/bookmarked", response_model=list[QuizSummary])
async def list_bookmarked(
    user: User = Depends(get_current_user),
    engine: QuizEngine = Depends(get_quiz_engine),
):
    """Quizzes favoritados pelo usuario."""
    return await engine.list_bookmarked(user)


# =============================================================================
# CORRECAO
# =============================================================================


@router.post("/grade", response_model=GradeResponse)
async def grade_quiz(
    body: GradeQuizRequest,
    user: User = Depends(get_current_user),
    engine: QuizEngine = Depends(get_quiz_engine),
):
    """Corrige as respostas e registra a tentativa.

    ``answers`` mapeia o numero da questao (1..N, string) para o indice da
    opcao escolhida (string). Questoes sem resposta contam como erradas.
    """
    return await engine.grade_attempt(user, body.quiz_id, body.answers, body.time_spent)


# =============================================================================
# QUIZ INDIVIDUAL
# =============================================================================


@router.get("/{quiz_id}", response_model=Quiz)
async def get_quiz(quiz_id: str, engine: QuizEngine = Depends(get_quiz_engine)):
    return await engine.get_quiz(quiz_id)


@router.get("/{quiz_id}/stats", response_model=QuizStats)
async def get_quiz_stats(
    quiz_id: str,
    user: User | None = Depends(get_optional_user),
    engine: QuizEngine = Depends(get_quiz_engine),
):
    """Estatisticas do quiz, com ``userAttempts`` quando autenticado."""
    return await engine.get_quiz_stats(quiz_id, user)


@router.post("/{quiz_id}/bookmark", response_model=SuccessResponse)
async def add_bookmark(
    quiz_id: str,
    user: User = Depends(get_current_user),
    engine: QuizEngine = Depends(get_quiz_engine),
):
    await engine.add_bookmark(user, quiz_id)
    return SuccessResponse()


@router.delete("/{quiz_id}/bookmark", response_model=SuccessResponse)
async def remove_bookmark(
    quiz_id: str,
    user: User = Depends(get_current_user),
    engine: QuizEngine = Depends(get_quiz_engine),
):
    await engine.remove_bookmark(user, quiz_id)
    return SuccessResponse()
