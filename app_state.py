"""Core module - composition root e dependencias compartilhadas.

Todos os componentes (cliente Mongo, clientes de IA, stores, engines) sao
montados uma vez em ``AppState.create`` durante o lifespan da aplicacao e
guardados em ``app.state.quiz``. Os endpoints recebem o que precisam via
``Depends``; nao existe registro global inicializado sob demanda.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from fastapi import Depends, Request

from config import Settings
from quiz.engine import QuizEngine
from quiz.llm import LLMClientFactory, QuizGenerator
from quiz.storage import (
    AttemptStore,
    ImageStore,
    QuizStore,
    UserStore,
    connect,
    ensure_indexes,
    migrate_legacy_quizzes,
)

if TYPE_CHECKING:
    import httpx
    from anthropic import AsyncAnthropic
    from pymongo import AsyncMongoClient

logger = logging.getLogger(__name__)


# =============================================================================
# STATE
# =============================================================================


@dataclass
class AppState:
    """Dependencias da aplicacao.

    Attributes:
        settings: Configuracao carregada do ambiente
        engine: Orquestrador de quizzes
        users: Store de usuarios (usado pela autenticacao)
        mongo: Cliente MongoDB (pool compartilhado)
        http: Cliente HTTP (imagens)
        text_client: Cliente Anthropic
    """

    settings: Settings
    engine: QuizEngine
    users: UserStore
    mongo: AsyncMongoClient | None = None
    http: httpx.AsyncClient | None = None
    text_client: AsyncAnthropic | None = None

    @classmethod
    async def create(cls, settings: Settings, run_migrations: bool = True) -> AppState:
        """Monta todos os componentes.

        Args:
            settings: Configuracao
            run_migrations: Garante indices e migra documentos antigos
        """
        mongo = connect(settings)
        db = mongo[settings.mongodb_db]

        if run_migrations:
            await ensure_indexes(db)
            migrated = await migrate_legacy_quizzes(db)
            if migrated:
                logger.info("Migrated %d legacy quizzes", migrated)

        factory = LLMClientFactory(settings)
        http = factory.create_http_client()
        text_client = factory.create_text_client()

        users = UserStore(db)
        engine = QuizEngine(
            quizzes=QuizStore(db),
            attempts=AttemptStore(db),
            users=users,
            images=ImageStore(db),
            generator=QuizGenerator(factory, text_client, http),
        )

        return cls(
            settings=settings,
            engine=engine,
            users=users,
            mongo=mongo,
            http=http,
            text_client=text_client,
        )

    async def ping(self) -> bool:
        """Verifica se o MongoDB responde."""
        if self.mongo is None:
            return False
        try:
            await self.mongo.admin.command("ping")
            return True
        except Exception as e:
            logger.warning("MongoDB ping failed: %s", e)
            return False

    async def close(self) -> None:
        """Libera conexoes."""
        if self.http is not None:
            await self.http.aclose()
        if self.text_client is not None:
            await self.text_client.close()
        if self.mongo is not None:
            await self.mongo.close()


# =============================================================================
# DEPENDENCIES
# =============================================================================


def get_app_state(request: Request) -> AppState:
    """Dependency: estado montado no lifespan."""
    return request.app.state.quiz


def get_quiz_engine(state: AppState = Depends(get_app_state)) -> QuizEngine:
    """Dependency: orquestrador de quizzes."""
    return state.engine


def health_payload(db_ok: bool, settings: Settings) -> dict[str, Any]:
    return {
        "status": "healthy" if db_ok else "degraded",
        "environment": settings.environment,
        "database": "connected" if db_ok else "disconnected",
    }
