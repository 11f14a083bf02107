"""Quiz Module - Geracao, correcao e estatisticas de quizzes.

Arquitetura:
- models/: Enums e Schemas Pydantic (camelCase no JSON)
- engine/: QuizEngine, QuizScoringEngine, QuizStatsAggregator
- llm/: LLMClientFactory, QuizGenerator (texto + imagem)
- storage/: MongoDB (quizzes, quizAttempts, users) e GridFS (imagens)
- prompts/: Templates de prompts
- auth.py: Token de sessao (JWT) e usuario corrente
- router.py: FastAPI endpoints
"""

from .engine import QuizEngine, QuizScoringEngine, QuizStatsAggregator
from .exceptions import (
    NotFoundError,
    PersistenceFailure,
    QuizAppError,
    UnauthorizedError,
    UpstreamFailure,
    ValidationError,
)
from .llm import LLMClientFactory, QuizGenerator
from .models import Attempt, Quiz, QuizDifficulty, QuizQuestion, QuizStats, User
from .storage import AttemptStore, ImageStore, QuizStore, UserStore

__all__ = [
    # Models
    "QuizDifficulty",
    "Quiz",
    "QuizQuestion",
    "Attempt",
    "User",
    "QuizStats",
    # Engines
    "QuizEngine",
    "QuizScoringEngine",
    "QuizStatsAggregator",
    # LLM
    "LLMClientFactory",
    "QuizGenerator",
    # Storage
    "QuizStore",
    "AttemptStore",
    "UserStore",
    "ImageStore",
    # Errors
    "QuizAppError",
    "UnauthorizedError",
    "NotFoundError",
    "ValidationError",
    "UpstreamFailure",
    "PersistenceFailure",
]
