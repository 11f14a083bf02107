"""Database - Conexao MongoDB, indices e migracoes.

Nada aqui roda na importacao do modulo: ``ensure_indexes`` e
``migrate_legacy_quizzes`` sao chamados explicitamente pelo lifespan da
aplicacao ou por ``scripts/migrate.py``.
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import TYPE_CHECKING, Any

from bson import ObjectId
from pymongo import ASCENDING, DESCENDING, AsyncMongoClient, UpdateOne

if TYPE_CHECKING:
    from pymongo.asynchronous.database import AsyncDatabase

    from config import Settings

logger = logging.getLogger(__name__)

# Colecoes
QUIZZES = "quizzes"
ATTEMPTS = "quizAttempts"
USERS = "users"
IMAGES_BUCKET = "quizImages"

# Indices canonicos por colecao: (nome, chaves, opcoes)
INDEXES: dict[str, list[tuple[str, list[tuple[str, int]], dict[str, Any]]]] = {
    QUIZZES: [
        ("createdAt_-1", [("createdAt", DESCENDING)], {}),
        ("createdBy_1", [("createdBy", ASCENDING)], {}),
    ],
    ATTEMPTS: [
        ("quizId_1", [("quizId", ASCENDING)], {}),
        ("userId_1_completedAt_-1", [("userId", ASCENDING), ("completedAt", DESCENDING)], {}),
        ("legacySource_1", [("legacySource", ASCENDING)], {"sparse": True}),
    ],
    USERS: [
        ("email_1", [("email", ASCENDING)], {"unique": True}),
    ],
}

# Usuario sintetico para tentativas antigas gravadas sem dono
LEGACY_USER_ID = "legacy"


def connect(settings: Settings) -> AsyncMongoClient:
    """Cria o cliente MongoDB (pool compartilhado pela aplicacao)."""
    return AsyncMongoClient(
        settings.mongodb_url,
        tz_aware=True,
        serverSelectionTimeoutMS=5000,
        maxPoolSize=50,
    )


def to_object_id(value: str | None) -> ObjectId | None:
    """Converte string em ObjectId; None se o formato for invalido."""
    if value is None or not ObjectId.is_valid(value):
        return None
    return ObjectId(value)


def id_to_str(value: Any) -> str:
    """Converte ObjectId (ou None) para string."""
    return "" if value is None else str(value)


async def ensure_indexes(db: AsyncDatabase) -> list[str]:
    """Cria os indices canonicos (idempotente).

    Indices com nomes fora do conjunto canonico sao removidos, exceto
    ``_id_``. Rodar duas vezes nao altera nada.

    Returns:
        Nomes dos indices criados ou confirmados
    """
    ensured: list[str] = []

    for collection_name, specs in INDEXES.items():
        collection = db[collection_name]
        wanted = {name for name, _, _ in specs}

        existing = await collection.index_information()
        for index_name in existing:
            if index_name != "_id_" and index_name not in wanted:
                logger.info("Dropping stale index %s.%s", collection_name, index_name)
                await collection.drop_index(index_name)

        for name, keys, options in specs:
            await collection.create_index(keys, name=name, **options)
            ensured.append(f"{collection_name}.{name}")

    logger.info("Indexes ensured: %s", ", ".join(ensured))
    return ensured


def _parse_legacy_date(value: Any) -> datetime:
    if isinstance(value, datetime):
        return value if value.tzinfo else value.replace(tzinfo=timezone.utc)
    if isinstance(value, str) and value:
        try:
            parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
            return parsed if parsed.tzinfo else parsed.replace(tzinfo=timezone.utc)
        except ValueError:
            pass
    return datetime.now(timezone.utc)


def _legacy_metadata(doc: dict[str, Any], created_at: datetime) -> dict[str, Any]:
    metadata = doc.get("metadata") or {}
    difficulty = str(metadata.get("difficulty", "")).lower()
    return {
        "difficulty": difficulty if difficulty in {"easy", "medium", "hard"} else "medium",
        "generatedAt": metadata.get("generatedAt") or created_at.isoformat(),
        "modelUsed": metadata.get("modelUsed") or "unknown",
        "seed": int(metadata.get("seed") or 0),
    }


def legacy_attempt_to_document(
    quiz_oid: ObjectId, questions: list[dict[str, Any]], legacy: dict[str, Any]
) -> dict[str, Any]:
    """Converte uma tentativa embutida (formato antigo) para ``quizAttempts``.

    O formato antigo guardava ``answers`` como id da questao -> texto da
    alternativa. A correcao e refeita contra o gabarito gravado no quiz.
    """
    answers = legacy.get("answers") or {}
    results = []
    for question in questions:
        selected = answers.get(str(question.get("id")), "") or ""
        results.append(
            {
                "questionId": question.get("id"),
                "selectedOption": selected,
                "isCorrect": bool(selected) and selected == question.get("correctAnswer"),
            }
        )

    return {
        "quizId": quiz_oid,
        "userId": None,
        "answers": results,
        "score": int(legacy.get("score", sum(1 for r in results if r["isCorrect"]))),
        "totalQuestions": int(legacy.get("totalQuestions", len(questions))),
        "completedAt": _parse_legacy_date(legacy.get("gradedAt")),
        "legacy": True,
    }


async def migrate_legacy_quizzes(db: AsyncDatabase) -> int:
    """Migra quizzes no formato antigo para o formato canonico (uma vez).

    Formato antigo: chave ``quizId`` (string gerada), ``topic``,
    ``imageUrl`` e tentativas embutidas em ``attempts``. Formato canonico:
    ``title``, ``imageId`` e tentativas na colecao ``quizAttempts``.

    Cada tentativa migrada carrega ``legacySource`` (quiz + posicao) e e
    gravada com upsert, entao uma migracao interrompida entre a copia das
    tentativas e a atualizacao do quiz pode ser repetida sem duplicar
    tentativas. Quizzes ja migrados (sem ``attempts``) nao sao tocados.

    Returns:
        Numero de quizzes migrados
    """
    quizzes = db[QUIZZES]
    attempts = db[ATTEMPTS]
    migrated = 0

    async for doc in quizzes.find({"attempts": {"$exists": True}}):
        questions = doc.get("questions") or []
        legacy_attempts = doc.get("attempts") or []

        if legacy_attempts:
            operations = []
            for index, legacy in enumerate(legacy_attempts):
                source = {"quizId": doc["_id"], "index": index}
                attempt_doc = legacy_attempt_to_document(doc["_id"], questions, legacy)
                attempt_doc["legacySource"] = source
                operations.append(
                    UpdateOne({"legacySource": source}, {"$setOnInsert": attempt_doc}, upsert=True)
                )
            await attempts.bulk_write(operations, ordered=False)

        created_at = _parse_legacy_date(doc.get("createdAt"))
        await quizzes.update_one(
            {"_id": doc["_id"]},
            {
                "$set": {
                    "title": doc.get("title") or doc.get("topic") or "Untitled quiz",
                    "description": doc.get("description", ""),
                    "createdBy": doc.get("createdBy"),
                    "createdAt": created_at,
                    "updatedAt": created_at,
                    "imageId": doc.get("imageId", ""),
                    "metadata": _legacy_metadata(doc, created_at),
                    "legacyImageUrl": doc.get("imageUrl"),
                },
                "$unset": {"attempts": "", "quizId": "", "topic": "", "imageUrl": ""},
            },
        )
        migrated += 1
        logger.info(
            "Migrated legacy quiz %s (%d attempts)", doc.get("quizId", doc["_id"]), len(legacy_attempts)
        )

    return migrated
