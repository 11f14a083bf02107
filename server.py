"""
Quiz API Server

FastAPI server with:
- AI quiz generation (Claude text + image model)
- Grading, attempt history and aggregate statistics
- MongoDB/GridFS persistence
- Session auth (JWT), rate limiting, CORS
"""

import logging
import os
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pymongo.errors import PyMongoError
from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded

from app_state import AppState, health_payload
from config import Settings
from quiz.exceptions import PersistenceFailure, QuizAppError, ValidationError
from quiz.rate_limit import limiter
from routers import attempts_router, images_router, quiz_router, users_router

logger = logging.getLogger(__name__)


# =============================================================================
# LOGGING
# =============================================================================


def configure_logging(settings: Settings) -> None:
    logging.basicConfig(
        level=getattr(logging, settings.log_level, logging.INFO),
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )


# =============================================================================
# EXCEPTION HANDLERS
# =============================================================================

_LOCATION_PREFIXES = {"body", "query", "path", "header"}


def first_validation_message(exc: RequestValidationError) -> str:
    """Formata o primeiro erro como ``"<campo>: <mensagem>"``."""
    errors = exc.errors()
    if not errors:
        return "Invalid request"

    first = errors[0]
    loc = [str(part) for part in first.get("loc", ()) if part not in _LOCATION_PREFIXES]
    field = ".".join(loc) or "body"
    message = str(first.get("msg", "Invalid value")).removeprefix("Value error, ")
    return f"{field}: {message}"


async def quiz_error_handler(request: Request, exc: QuizAppError) -> JSONResponse:
    if exc.status_code >= 500:
        logger.error("%s on %s %s: %s %s", exc.code, request.method, request.url.path, exc.message, exc.details)
    else:
        logger.debug("%s on %s: %s", exc.code, request.url.path, exc.message)
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict())


async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    error = ValidationError(first_validation_message(exc))
    return JSONResponse(status_code=error.status_code, content=error.to_dict())


async def mongo_error_handler(request: Request, exc: PyMongoError) -> JSONResponse:
    logger.error("Database error on %s %s: %s", request.method, request.url.path, exc)
    error = PersistenceFailure()
    return JSONResponse(status_code=error.status_code, content=error.to_dict())


# =============================================================================
# FASTAPI APP
# =============================================================================


def create_app(state: AppState | None = None) -> FastAPI:
    """Cria a aplicacao.

    Args:
        state: Estado pronto (testes). Quando ausente, o lifespan conecta ao
            MongoDB, garante indices, migra dados antigos e fecha tudo no
            shutdown.
    """
    settings = state.settings if state is not None else Settings.from_env()
    configure_logging(settings)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Manage app lifecycle."""
        owned = getattr(app.state, "quiz", None) is None
        if owned:
            logger.info("Starting Quiz API (%s)", settings.environment)
            app.state.quiz = await AppState.create(settings)
        yield
        if owned:
            await app.state.quiz.close()
            logger.info("Quiz API stopped")

    app = FastAPI(
        title="Quiz API",
        description="AI-generated quizzes with grading and statistics",
        version="1.0.0",
        lifespan=lifespan,
        # Sem documentacao interativa em producao
        docs_url=None if settings.is_production else "/docs",
        redoc_url=None if settings.is_production else "/redoc",
        openapi_url=None if settings.is_production else "/openapi.json",
    )
    if state is not None:
        app.state.quiz = state

    # CORS
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Rate limiter
    app.state.limiter = limiter
    app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)

    app.add_exception_handler(QuizAppError, quiz_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
    app.add_exception_handler(PyMongoError, mongo_error_handler)

    app.include_router(quiz_router)
    app.include_router(attempts_router)
    app.include_router(images_router)
    app.include_router(users_router)

    @app.get("/health")
    async def health_check(request: Request):
        """Liveness + ping no MongoDB."""
        quiz_state: AppState = request.app.state.quiz
        db_ok = await quiz_state.ping()
        return health_payload(db_ok, quiz_state.settings)

    return app


app = create_app()


def main() -> None:
    import uvicorn

    uvicorn.run(
        "server:app",
        host=os.getenv("HOST", "0.0.0.0"),
        port=int(os.getenv("PORT", "8001")),
    )


if __name__ == "__main__":
    main()
