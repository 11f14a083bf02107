"""Attempt Store - Registro imutavel de tentativas (``quizAttempts``)."""

from __future__ import annotations

import logging
from collections import defaultdict
from typing import TYPE_CHECKING, Any

from ..models.schemas import Attempt, QuestionResult
from .database import ATTEMPTS, LEGACY_USER_ID, id_to_str, to_object_id

if TYPE_CHECKING:
    from pymongo.asynchronous.database import AsyncDatabase

logger = logging.getLogger(__name__)


class AttemptStore:
    """Persistencia de tentativas.

    Tentativas sao inseridas uma unica vez e nunca alteradas ou removidas.
    Duas submissoes concorrentes do mesmo usuario/quiz viram dois
    documentos independentes.

    Estrutura do documento:
        - quizId, userId -> ObjectId
        - answers -> [{questionId, selectedOption, isCorrect}]
        - score (acertos), totalQuestions
        - completedAt, timeSpent (opcional)
    """

    def __init__(self, db: AsyncDatabase):
        self.collection = db[ATTEMPTS]

    @staticmethod
    def _to_model(doc: dict[str, Any]) -> Attempt:
        user_id = doc.get("userId")
        return Attempt(
            id=id_to_str(doc["_id"]),
            quiz_id=id_to_str(doc["quizId"]),
            user_id=LEGACY_USER_ID if user_id is None else str(user_id),
            answers=[QuestionResult.model_validate(a) for a in doc.get("answers", [])],
            score=doc["score"],
            total_questions=doc["totalQuestions"],
            completed_at=doc["completedAt"],
            time_spent=doc.get("timeSpent"),
        )

    async def record(self, attempt: Attempt) -> str:
        """Grava a tentativa.

        Args:
            attempt: Tentativa corrigida (``id`` e ignorado)

        Returns:
            ID da tentativa criada
        """
        doc = {
            "quizId": to_object_id(attempt.quiz_id),
            "userId": to_object_id(attempt.user_id),
            "answers": [a.model_dump(by_alias=True) for a in attempt.answers],
            "score": attempt.score,
            "totalQuestions": attempt.total_questions,
            "completedAt": attempt.completed_at,
        }
        if attempt.time_spent is not None:
            doc["timeSpent"] = attempt.time_spent

        result = await self.collection.insert_one(doc)
        logger.debug("Tentativa registrada: %s (quiz %s)", result.inserted_id, attempt.quiz_id)
        return str(result.inserted_id)

    async def list_for_quiz(self, quiz_id: str, user_id: str | None = None) -> list[Attempt]:
        """Tentativas de um quiz, mais recentes primeiro.

        Args:
            quiz_id: ID do quiz
            user_id: Restringe a um usuario (opcional)
        """
        oid = to_object_id(quiz_id)
        if oid is None:
            return []

        query: dict[str, Any] = {"quizId": oid}
        if user_id is not None:
            query["userId"] = to_object_id(user_id)

        cursor = self.collection.find(query).sort("completedAt", -1)
        return [self._to_model(doc) async for doc in cursor]

    async def list_for_quizzes(self, quiz_ids: list[str]) -> dict[str, list[Attempt]]:
        """Tentativas de varios quizzes agrupadas por quiz (uma unica consulta)."""
        oids = [oid for oid in (to_object_id(q) for q in quiz_ids) if oid is not None]
        grouped: dict[str, list[Attempt]] = defaultdict(list)
        if not oids:
            return grouped

        cursor = self.collection.find({"quizId": {"$in": oids}}).sort("completedAt", -1)
        async for doc in cursor:
            attempt = self._to_model(doc)
            grouped[attempt.quiz_id].append(attempt)
        return grouped

    async def list_for_user(self, user_id: str) -> list[Attempt]:
        """Historico do usuario, mais recente primeiro."""
        oid = to_object_id(user_id)
        if oid is None:
            return []

        cursor = self.collection.find({"userId": oid}).sort("completedAt", -1)
        return [self._to_model(doc) async for doc in cursor]

    async def has_attempted(self, user_id: str, quiz_id: str) -> bool:
        """Verifica se o usuario ja tentou o quiz."""
        user_oid, quiz_oid = to_object_id(user_id), to_object_id(quiz_id)
        if user_oid is None or quiz_oid is None:
            return False
        return await self.collection.count_documents({"userId": user_oid, "quizId": quiz_oid}, limit=1) > 0
