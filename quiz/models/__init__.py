"""Quiz Models - Enums e Schemas."""

from .enums import QuizDifficulty
from .schemas import (
    Attempt,
    AttemptHistoryEntry,
    AttemptQuizRef,
    CreateQuizRequest,
    CreateQuizResponse,
    FeedbackEntry,
    GradeQuizRequest,
    GradeResponse,
    QuestionResult,
    Quiz,
    QuizMetadata,
    QuizQuestion,
    QuizStats,
    QuizSummary,
    SuccessResponse,
    User,
    UserQuizStats,
    UserStats,
)

__all__ = [
    # Enums
    "QuizDifficulty",
    # Documentos
    "Quiz",
    "QuizQuestion",
    "QuizMetadata",
    "Attempt",
    "QuestionResult",
    "User",
    "UserStats",
    # Estatisticas
    "QuizStats",
    "UserQuizStats",
    # Requests / Responses
    "CreateQuizRequest",
    "CreateQuizResponse",
    "GradeQuizRequest",
    "GradeResponse",
    "FeedbackEntry",
    "QuizSummary",
    "AttemptHistoryEntry",
    "AttemptQuizRef",
    "SuccessResponse",
]
