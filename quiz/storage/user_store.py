"""User Store - Usuarios, estatisticas embutidas e favoritos."""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import TYPE_CHECKING, Any

from pymongo import ReturnDocument

from ..models.schemas import User, UserStats
from .database import USERS, id_to_str, to_object_id

if TYPE_CHECKING:
    from pymongo.asynchronous.database import AsyncDatabase

logger = logging.getLogger(__name__)


def default_stats_document() -> dict[str, Any]:
    return UserStats().model_dump(by_alias=True)


class UserStore:
    """Persistencia de usuarios.

    Contadores usam ``$inc`` e favoritos usam ``$addToSet``/``$pull``, entao
    nenhuma operacao depende de ler-e-regravar o documento inteiro.
    """

    def __init__(self, db: AsyncDatabase):
        self.collection = db[USERS]

    @staticmethod
    def _to_model(doc: dict[str, Any]) -> User:
        return User(
            id=id_to_str(doc["_id"]),
            email=doc["email"],
            name=doc.get("name", ""),
            image=doc.get("image"),
            stats=UserStats.model_validate(doc.get("stats") or {}),
            bookmarked_quizzes=[str(q) for q in doc.get("bookmarkedQuizzes", [])],
            created_at=doc.get("createdAt"),
            updated_at=doc.get("updatedAt"),
        )

    async def get_or_create(self, email: str, name: str = "", image: str | None = None) -> User:
        """Retorna o usuario pelo email, criando no primeiro acesso.

        Args:
            email: Email vindo do token de sessao
            name: Nome de exibicao (apenas na criacao)
            image: Avatar (apenas na criacao)
        """
        now = datetime.now(timezone.utc)
        doc = await self.collection.find_one_and_update(
            {"email": email},
            {
                "$setOnInsert": {
                    "email": email,
                    "name": name,
                    "image": image,
                    "stats": default_stats_document(),
                    "bookmarkedQuizzes": [],
                    "createdAt": now,
                    "updatedAt": now,
                }
            },
            upsert=True,
            return_document=ReturnDocument.AFTER,
        )
        return self._to_model(doc)

    async def increment_quizzes_created(self, user_id: str) -> None:
        await self.collection.update_one(
            {"_id": to_object_id(user_id)},
            {
                "$inc": {"stats.totalQuizzesCreated": 1},
                "$set": {"updatedAt": datetime.now(timezone.utc)},
            },
        )

    async def record_attempt(
        self, user_id: str, *, when: datetime, streak: int, first_attempt: bool
    ) -> None:
        """Atualiza estatisticas apos uma tentativa.

        Args:
            user_id: ID do usuario
            when: Momento da tentativa
            streak: Nova sequencia diaria (ja calculada)
            first_attempt: Se e a primeira tentativa do usuario neste quiz
        """
        update: dict[str, Any] = {
            "$set": {
                "stats.lastQuizDate": when,
                "stats.currentStreak": streak,
                "updatedAt": datetime.now(timezone.utc),
            }
        }
        if first_attempt:
            update["$inc"] = {"stats.totalQuizzesAttempted": 1}

        await self.collection.update_one({"_id": to_object_id(user_id)}, update)

    async def add_bookmark(self, user_id: str, quiz_id: str) -> None:
        """Adiciona favorito (idempotente)."""
        await self.collection.update_one(
            {"_id": to_object_id(user_id)},
            {
                "$addToSet": {"bookmarkedQuizzes": to_object_id(quiz_id)},
                "$set": {"updatedAt": datetime.now(timezone.utc)},
            },
        )

    async def remove_bookmark(self, user_id: str, quiz_id: str) -> None:
        """Remove favorito (idempotente; ausente nao e erro)."""
        quiz_oid = to_object_id(quiz_id)
        if quiz_oid is None:
            return
        await self.collection.update_one(
            {"_id": to_object_id(user_id)},
            {
                "$pull": {"bookmarkedQuizzes": quiz_oid},
                "$set": {"updatedAt": datetime.now(timezone.utc)},
            },
        )

    async def bookmarked_ids(self, user_id: str) -> list[str]:
        doc = await self.collection.find_one(
            {"_id": to_object_id(user_id)}, {"bookmarkedQuizzes": 1}
        )
        if not doc:
            return []
        return [str(q) for q in doc.get("bookmarkedQuizzes", [])]
