"""Quiz Schemas - Modelos Pydantic para documentos, request e response.

Todos os modelos serializam em camelCase (formato consumido pelo frontend)
e aceitam tanto o alias quanto o nome Python na entrada.
"""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

from .enums import QuizDifficulty


class CamelModel(BaseModel):
    """Base com aliases camelCase."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


# =============================================================================
# DOCUMENTOS
# =============================================================================


class QuizQuestion(CamelModel):
    """Questao de multipla escolha.

    A resposta correta e guardada como o *texto* da alternativa, nao o indice.
    """

    id: int = Field(..., ge=1, description="Posicao da questao (1-N)")
    text: str = Field(..., description="Enunciado")
    options: list[str] = Field(..., description="Alternativas (normalmente 4)")
    correct_answer: str = Field(..., description="Texto da alternativa correta")
    explanation: str | None = Field(None, description="Explicacao da resposta")


class QuizMetadata(CamelModel):
    """Metadados da geracao."""

    difficulty: QuizDifficulty = QuizDifficulty.MEDIUM
    generated_at: str = Field(..., description="ISO-8601 da geracao")
    model_used: str
    seed: int


class Quiz(CamelModel):
    """Quiz persistido na colecao ``quizzes``."""

    id: str
    title: str
    description: str = ""
    questions: list[QuizQuestion]
    created_by: str
    created_at: datetime
    updated_at: datetime
    metadata: QuizMetadata
    image_id: str


class QuestionResult(CamelModel):
    """Resultado de uma questao dentro de uma tentativa."""

    question_id: int
    selected_option: str = ""
    is_correct: bool


class Attempt(CamelModel):
    """Tentativa imutavel (colecao ``quizAttempts``)."""

    id: str | None = None
    quiz_id: str
    user_id: str
    answers: list[QuestionResult]
    score: int = Field(..., ge=0, description="Numero de acertos")
    total_questions: int = Field(..., ge=0)
    completed_at: datetime
    time_spent: float | None = Field(None, ge=0, description="Segundos gastos")


class UserStats(CamelModel):
    """Estatisticas embutidas no documento do usuario."""

    total_quizzes_created: int = 0
    total_quizzes_attempted: int = 0
    last_quiz_date: datetime | None = None
    current_streak: int = 0


class User(CamelModel):
    """Usuario (colecao ``users``)."""

    id: str
    email: str
    name: str = ""
    image: str | None = None
    stats: UserStats = Field(default_factory=UserStats)
    bookmarked_quizzes: list[str] = Field(default_factory=list)
    created_at: datetime | None = None
    updated_at: datetime | None = None


# =============================================================================
# ESTATISTICAS (derivadas, nunca persistidas)
# =============================================================================


class UserQuizStats(CamelModel):
    """Agregado de um usuario em um quiz."""

    attempts: int
    average_score: float
    best_score: float
    last_attempt: datetime


class QuizStats(CamelModel):
    """Agregado global de um quiz."""

    total_attempts: int = 0
    average_score: float = 0.0
    best_score: float = 0.0
    unique_users: int = 0
    user_attempts: UserQuizStats | None = None


# =============================================================================
# REQUESTS
# =============================================================================


class CreateQuizRequest(CamelModel):
    """Request de geracao de quiz."""

    topic: str = Field(..., min_length=1, max_length=200, description="Tema do quiz")
    difficulty: QuizDifficulty = Field(QuizDifficulty.MEDIUM, description="easy | medium | hard")
    num_questions: int = Field(5, ge=1, le=20, description="Numero de questoes (1-20)")

    @field_validator("topic")
    @classmethod
    def topic_not_blank(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("Topic is required")
        return value


class GradeQuizRequest(CamelModel):
    """Request de correcao.

    ``answers`` mapeia a posicao da questao (string, 1-based) para o indice
    da alternativa escolhida (string, 0-based).
    """

    quiz_id: str = Field(..., min_length=1, description="ID do quiz")
    answers: dict[str, str] = Field(..., description="posicao -> indice da alternativa")
    time_spent: float | None = Field(None, ge=0, description="Segundos gastos")


# =============================================================================
# RESPONSES
# =============================================================================


class CreateQuizResponse(CamelModel):
    quiz_id: str


class FeedbackEntry(CamelModel):
    """Feedback por questao."""

    id: int
    your_answer: str
    correct_answer: str
    is_correct: bool


class GradeResponse(CamelModel):
    """Resultado da correcao."""

    correct: int
    total: int
    feedback: list[FeedbackEntry]
    attempt_id: str


class QuizSummary(CamelModel):
    """Quiz na listagem (sem gabarito)."""

    id: str
    title: str
    description: str = ""
    difficulty: QuizDifficulty
    question_count: int
    image_id: str
    created_by: str
    created_at: datetime
    stats: QuizStats | None = None
    is_bookmarked: bool | None = None


class AttemptQuizRef(CamelModel):
    id: str
    title: str | None = None
    image_id: str | None = None


class AttemptHistoryEntry(Attempt):
    """Tentativa com referencia resumida ao quiz."""

    quiz: AttemptQuizRef | None = None


class SuccessResponse(CamelModel):
    success: bool = True
