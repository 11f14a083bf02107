"""Quiz Engine - Orquestracao de geracao, correcao, estatisticas e favoritos."""

from __future__ import annotations

import logging
import mimetypes
import uuid
from collections.abc import Mapping
from datetime import datetime, timezone
from typing import TYPE_CHECKING

from pymongo.errors import PyMongoError

from ..exceptions import NotFoundError, PersistenceFailure, UnauthorizedError
from ..models.schemas import (
    Attempt,
    AttemptHistoryEntry,
    CreateQuizRequest,
    GradeResponse,
    Quiz,
    QuizStats,
    QuizSummary,
    User,
)
from .scoring_engine import QuizScoringEngine
from .stats_engine import QuizStatsAggregator

if TYPE_CHECKING:
    from ..llm.generator import QuizGenerator
    from ..storage import AttemptStore, ImageStore, QuizStore, StoredImage, UserStore

logger = logging.getLogger(__name__)


class QuizEngine:
    """Camada de orquestracao usada pelos endpoints.

    Recebe todas as dependencias prontas (montadas em ``app_state``) e
    nao guarda estado mutavel entre requests.

    Fluxos:
        - create_quiz: IA -> GridFS -> ``quizzes`` -> contador do criador
        - grade_attempt: gabarito -> correcao -> ``quizAttempts`` -> stats do usuario
        - estatisticas sempre recalculadas na leitura

    Example:
        >>> engine = QuizEngine(quizzes, attempts, users, images, generator)
        >>> quiz_id = await engine.create_quiz(user, CreateQuizRequest(topic="Rust"))
        >>> result = await engine.grade_attempt(user, quiz_id, {"1": "0"})
    """

    def __init__(
        self,
        quizzes: QuizStore,
        attempts: AttemptStore,
        users: UserStore,
        images: ImageStore,
        generator: QuizGenerator,
        scoring: QuizScoringEngine | None = None,
        stats: QuizStatsAggregator | None = None,
    ):
        self.quizzes = quizzes
        self.attempts = attempts
        self.users = users
        self.images = images
        self.generator = generator
        self.scoring = scoring or QuizScoringEngine()
        self.stats = stats or QuizStatsAggregator()

    # =========================================================================
    # CRIACAO
    # =========================================================================

    async def create_quiz(self, user: User, request: CreateQuizRequest) -> str:
        """Gera e persiste um quiz.

        Nenhum documento de quiz e gravado se a geracao falhar; se a
        insercao do quiz falhar, a imagem ja enviada e removida.

        Raises:
            UpstreamFailure: Falha na IA ou no download da imagem
            PersistenceFailure: Falha ao gravar imagem ou quiz
        """
        generated = await self.generator.generate(
            request.topic, request.difficulty, request.num_questions
        )

        extension = mimetypes.guess_extension(generated.image.content_type) or ".png"
        filename = f"quiz-{uuid.uuid4().hex}{extension}"

        try:
            image_id = await self.images.upload(
                generated.image.content, filename, generated.image.content_type
            )
        except PyMongoError as e:
            logger.error("Image upload failed: %s", e)
            raise PersistenceFailure(details={"reason": str(e)}) from e

        try:
            quiz_id = await self.quizzes.create(
                title=generated.title,
                description=generated.description,
                questions=generated.questions,
                created_by=user.id,
                metadata=generated.metadata,
                image_id=image_id,
            )
        except PyMongoError as e:
            logger.error("Quiz insert failed, removing image %s: %s", image_id, e)
            await self.images.delete(image_id)
            raise PersistenceFailure(details={"reason": str(e)}) from e

        try:
            await self.users.increment_quizzes_created(user.id)
        except PyMongoError as e:
            # Quiz ja gravado; o contador nao invalida a criacao
            logger.error("Creator counter update failed for user %s: %s", user.id, e)

        logger.info("Quiz %s created by %s (%d questions)", quiz_id, user.id, len(generated.questions))
        return quiz_id

    # =========================================================================
    # LEITURA
    # =========================================================================

    async def get_quiz(self, quiz_id: str) -> Quiz:
        """Busca quiz completo.

        Raises:
            NotFoundError: Se o quiz nao existir (ou o ID for invalido)
        """
        quiz = await self.quizzes.get(quiz_id)
        if quiz is None:
            raise NotFoundError("Quiz not found", details={"quiz_id": quiz_id})
        return quiz

    def _summarize(
        self,
        quiz: Quiz,
        attempts: list[Attempt] | None,
        user: User | None,
        bookmarked: set[str],
    ) -> QuizSummary:
        stats = None
        if attempts is not None:
            stats = self.stats.quiz_stats_for_user(attempts, user.id if user else None)

        return QuizSummary(
            id=quiz.id,
            title=quiz.title,
            description=quiz.description,
            difficulty=quiz.metadata.difficulty,
            question_count=len(quiz.questions),
            image_id=quiz.image_id,
            created_by=quiz.created_by,
            created_at=quiz.created_at,
            stats=stats,
            is_bookmarked=(quiz.id in bookmarked) if user else None,
        )

    async def list_quizzes(
        self, user: User | None, include_stats: bool = True, mine: bool = False
    ) -> list[QuizSummary]:
        """Lista quizzes, mais recentes primeiro.

        Args:
            user: Usuario autenticado (ou None)
            include_stats: Embute ``QuizStats`` em cada item
            mine: Apenas quizzes criados pelo usuario (exige autenticacao)
        """
        if mine and user is None:
            raise UnauthorizedError()

        quizzes = await self.quizzes.list_quizzes(created_by=user.id if mine and user else None)

        grouped = None
        if include_stats:
            grouped = await self.attempts.list_for_quizzes([q.id for q in quizzes])

        bookmarked = set(user.bookmarked_quizzes) if user else set()
        return [
            self._summarize(q, grouped.get(q.id, []) if grouped is not None else None, user, bookmarked)
            for q in quizzes
        ]

    async def get_quiz_stats(self, quiz_id: str, user: User | None = None) -> QuizStats:
        """Agregado de um quiz (com ``userAttempts`` se autenticado)."""
        if not await self.quizzes.exists(quiz_id):
            raise NotFoundError("Quiz not found", details={"quiz_id": quiz_id})

        attempts = await self.attempts.list_for_quiz(quiz_id)
        return self.stats.quiz_stats_for_user(attempts, user.id if user else None)

    # =========================================================================
    # CORRECAO
    # =========================================================================

    async def grade_attempt(
        self,
        user: User,
        quiz_id: str,
        answers: Mapping[str, str],
        time_spent: float | None = None,
    ) -> GradeResponse:
        """Corrige e registra uma tentativa.

        Raises:
            NotFoundError: Quiz inexistente
            ValidationError: Payload de respostas malformado
        """
        quiz = await self.get_quiz(quiz_id)
        result = self.scoring.grade(quiz.questions, answers)

        now = datetime.now(timezone.utc)
        first_attempt = not await self.attempts.has_attempted(user.id, quiz.id)

        attempt_id = await self.attempts.record(
            Attempt(
                quiz_id=quiz.id,
                user_id=user.id,
                answers=result.to_question_results(),
                score=result.correct,
                total_questions=result.total,
                completed_at=now,
                time_spent=time_spent,
            )
        )

        streak = self.stats.advance_streak(user.stats, now)
        try:
            await self.users.record_attempt(
                user.id, when=now, streak=streak, first_attempt=first_attempt
            )
        except PyMongoError as e:
            # Tentativa ja gravada; so as stats do usuario ficam defasadas
            logger.error("User stats update failed for user %s: %s", user.id, e)

        logger.info(
            "Attempt %s on quiz %s: %d/%d (%.0f%%)",
            attempt_id,
            quiz.id,
            result.correct,
            result.total,
            result.percentage,
        )
        return GradeResponse(
            correct=result.correct,
            total=result.total,
            feedback=result.feedback,
            attempt_id=attempt_id,
        )

    async def attempt_history(self, user: User) -> list[AttemptHistoryEntry]:
        """Historico do usuario com referencia ao quiz."""
        attempts = await self.attempts.list_for_user(user.id)
        refs = await self.quizzes.get_refs([a.quiz_id for a in attempts])

        return [
            AttemptHistoryEntry(**a.model_dump(), quiz=refs.get(a.quiz_id))
            for a in attempts
        ]

    # =========================================================================
    # FAVORITOS
    # =========================================================================

    async def add_bookmark(self, user: User, quiz_id: str) -> None:
        """Favorita um quiz (repetir nao duplica)."""
        if not await self.quizzes.exists(quiz_id):
            raise NotFoundError("Quiz not found", details={"quiz_id": quiz_id})
        await self.users.add_bookmark(user.id, quiz_id)

    async def remove_bookmark(self, user: User, quiz_id: str) -> None:
        """Remove favorito (no-op se nao estava favoritado)."""
        await self.users.remove_bookmark(user.id, quiz_id)

    async def list_bookmarked(self, user: User) -> list[QuizSummary]:
        """Quizzes favoritados pelo usuario."""
        ids = await self.users.bookmarked_ids(user.id)
        quizzes = await self.quizzes.list_by_ids(ids)
        grouped = await self.attempts.list_for_quizzes([q.id for q in quizzes])

        bookmarked = set(ids)
        return [self._summarize(q, grouped.get(q.id, []), user, bookmarked) for q in quizzes]

    # =========================================================================
    # IMAGENS
    # =========================================================================

    async def get_image(self, image_id: str) -> StoredImage:
        image = await self.images.get(image_id)
        if image is None:
            raise NotFoundError("Image not found", details={"image_id": image_id})
        return image
