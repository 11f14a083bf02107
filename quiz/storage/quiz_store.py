"""Quiz Store - Abstracao sobre a colecao ``quizzes`` (gabarito)."""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import TYPE_CHECKING, Any

from ..models.schemas import AttemptQuizRef, Quiz, QuizMetadata, QuizQuestion
from .database import QUIZZES, id_to_str, to_object_id

if TYPE_CHECKING:
    from pymongo.asynchronous.database import AsyncDatabase

logger = logging.getLogger(__name__)


class QuizStore:
    """Persistencia de quizzes no MongoDB.

    Estrutura do documento:
        - _id -> ObjectId (identificador publico do quiz)
        - title, description
        - questions -> [{id, text, options, correctAnswer, explanation}]
        - createdBy -> ObjectId do usuario
        - createdAt, updatedAt
        - metadata -> {difficulty, generatedAt, modelUsed, seed}
        - imageId -> id do arquivo no GridFS

    IDs malformados sao tratados como inexistentes (retornam None).

    Example:
        >>> store = QuizStore(db)
        >>> quiz_id = await store.create(title="...", questions=[...], ...)
        >>> quiz = await store.get(quiz_id)
    """

    def __init__(self, db: AsyncDatabase):
        """Inicializa store com o banco.

        Args:
            db: Banco MongoDB (assincrono)
        """
        self.collection = db[QUIZZES]

    @staticmethod
    def _to_model(doc: dict[str, Any]) -> Quiz:
        """Converte documento Mongo em ``Quiz``."""
        return Quiz(
            id=id_to_str(doc["_id"]),
            title=doc.get("title", ""),
            description=doc.get("description", ""),
            questions=[QuizQuestion.model_validate(q) for q in doc.get("questions", [])],
            created_by=id_to_str(doc.get("createdBy")),
            created_at=doc["createdAt"],
            updated_at=doc.get("updatedAt", doc["createdAt"]),
            metadata=QuizMetadata.model_validate(doc["metadata"]),
            image_id=doc.get("imageId", ""),
        )

    async def create(
        self,
        *,
        title: str,
        description: str,
        questions: list[QuizQuestion],
        created_by: str,
        metadata: QuizMetadata,
        image_id: str,
    ) -> str:
        """Insere um novo quiz.

        Returns:
            ID do quiz criado
        """
        now = datetime.now(timezone.utc)
        doc = {
            "title": title,
            "description": description,
            "questions": [q.model_dump(by_alias=True) for q in questions],
            "createdBy": to_object_id(created_by),
            "createdAt": now,
            "updatedAt": now,
            "metadata": metadata.model_dump(by_alias=True, mode="json"),
            "imageId": image_id,
        }

        result = await self.collection.insert_one(doc)
        logger.debug("Quiz criado: %s", result.inserted_id)
        return str(result.inserted_id)

    async def get(self, quiz_id: str) -> Quiz | None:
        """Busca quiz completo (com gabarito).

        Args:
            quiz_id: ID do quiz

        Returns:
            Quiz se encontrado, None caso contrario
        """
        oid = to_object_id(quiz_id)
        if oid is None:
            return None

        doc = await self.collection.find_one({"_id": oid})
        if not doc:
            logger.debug("Quiz nao encontrado: %s", quiz_id)
            return None

        return self._to_model(doc)

    async def exists(self, quiz_id: str) -> bool:
        oid = to_object_id(quiz_id)
        if oid is None:
            return False
        return await self.collection.count_documents({"_id": oid}, limit=1) > 0

    async def list_quizzes(self, created_by: str | None = None) -> list[Quiz]:
        """Lista quizzes, mais recentes primeiro.

        Args:
            created_by: Filtra pelo criador (opcional)
        """
        query: dict[str, Any] = {}
        if created_by is not None:
            query["createdBy"] = to_object_id(created_by)

        cursor = self.collection.find(query).sort("createdAt", -1)
        return [self._to_model(doc) async for doc in cursor]

    async def list_by_ids(self, quiz_ids: list[str]) -> list[Quiz]:
        """Busca varios quizzes pelo ID, mais recentes primeiro."""
        oids = [oid for oid in (to_object_id(q) for q in quiz_ids) if oid is not None]
        if not oids:
            return []

        cursor = self.collection.find({"_id": {"$in": oids}}).sort("createdAt", -1)
        return [self._to_model(doc) async for doc in cursor]

    async def get_refs(self, quiz_ids: list[str]) -> dict[str, AttemptQuizRef]:
        """Retorna {id, title, imageId} de varios quizzes (para historico)."""
        oids = [oid for oid in (to_object_id(q) for q in set(quiz_ids)) if oid is not None]
        if not oids:
            return {}

        cursor = self.collection.find({"_id": {"$in": oids}}, {"title": 1, "imageId": 1})
        refs = {}
        async for doc in cursor:
            quiz_id = str(doc["_id"])
            refs[quiz_id] = AttemptQuizRef(
                id=quiz_id, title=doc.get("title"), image_id=doc.get("imageId")
            )
        return refs
