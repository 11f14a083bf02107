# =============================================================================
# CONFIGURACAO - Quiz API
# =============================================================================
# Settings carregadas do ambiente (.env suportado via python-dotenv)
# =============================================================================

import logging
import os
from dataclasses import dataclass, field

from dotenv import load_dotenv

logger = logging.getLogger(__name__)

DEFAULT_QUIZ_MODEL = "claude-3-5-haiku-latest"
DEFAULT_MAX_TOKENS = 2000
DEFAULT_TEMPERATURE = 0.7


def _parse_max_tokens(raw: str | None) -> int:
    """Le MAX_TOKENS, voltando ao default quando invalido."""
    try:
        value = int(raw) if raw is not None else DEFAULT_MAX_TOKENS
    except ValueError:
        value = -1
    if value <= 0:
        logger.warning("Invalid MAX_TOKENS %r, defaulting to %s", raw, DEFAULT_MAX_TOKENS)
        return DEFAULT_MAX_TOKENS
    return value


def _parse_temperature(raw: str | None) -> float:
    """Le TEMPERATURE (0-1), voltando ao default quando invalido."""
    try:
        value = float(raw) if raw is not None else DEFAULT_TEMPERATURE
    except ValueError:
        value = -1.0
    if not 0 <= value <= 1:
        logger.warning("Invalid TEMPERATURE %r, defaulting to %s", raw, DEFAULT_TEMPERATURE)
        return DEFAULT_TEMPERATURE
    return value


def _parse_origins(raw: str) -> list[str]:
    return [origin.strip() for origin in raw.split(",") if origin.strip()]


@dataclass
class Settings:
    """Configuracao centralizada da aplicacao.

    Attributes:
        mongodb_url: URL de conexao do MongoDB
        mongodb_db: Nome do banco
        anthropic_api_key: Chave da API Anthropic (geracao de texto)
        quiz_model: Modelo Claude usado para gerar questoes
        max_tokens: Limite de tokens da resposta
        temperature: Temperatura de amostragem (0-1)
        openai_api_key: Chave da API OpenAI (geracao de imagem)
        image_model: Modelo de imagem
        image_size: Dimensao da imagem gerada
        session_secret: Segredo para validar tokens de sessao (JWT)
        session_algorithm: Algoritmo JWT
        cors_origins: Origens liberadas no CORS
        http_timeout: Timeout (s) das chamadas HTTP externas
        log_level: Nivel de log
        environment: development | production | test
    """

    mongodb_url: str = "mongodb://localhost:27017"
    mongodb_db: str = "quizzes"
    anthropic_api_key: str = ""
    quiz_model: str = DEFAULT_QUIZ_MODEL
    max_tokens: int = DEFAULT_MAX_TOKENS
    temperature: float = DEFAULT_TEMPERATURE
    openai_api_key: str = ""
    image_model: str = "dall-e-2"
    image_size: str = "512x512"
    session_secret: str = "change-me"
    session_algorithm: str = "HS256"
    cors_origins: list[str] = field(default_factory=lambda: ["http://localhost:3000"])
    http_timeout: float = 60.0
    log_level: str = "INFO"
    environment: str = "development"

    @classmethod
    def from_env(cls) -> "Settings":
        """Cria Settings a partir das variaveis de ambiente."""
        load_dotenv()

        return cls(
            mongodb_url=os.getenv("MONGODB_URL", cls.mongodb_url),
            mongodb_db=os.getenv("MONGODB_DB", cls.mongodb_db),
            anthropic_api_key=os.getenv("ANTHROPIC_API_KEY", ""),
            quiz_model=os.getenv("QUIZ_MODEL", DEFAULT_QUIZ_MODEL),
            max_tokens=_parse_max_tokens(os.getenv("MAX_TOKENS")),
            temperature=_parse_temperature(os.getenv("TEMPERATURE")),
            openai_api_key=os.getenv("OPENAI_API_KEY", ""),
            image_model=os.getenv("IMAGE_MODEL", cls.image_model),
            image_size=os.getenv("IMAGE_SIZE", cls.image_size),
            session_secret=os.getenv("SESSION_SECRET", cls.session_secret),
            session_algorithm=os.getenv("SESSION_ALGORITHM", cls.session_algorithm),
            cors_origins=_parse_origins(os.getenv("CORS_ORIGINS", "http://localhost:3000")),
            http_timeout=float(os.getenv("HTTP_TIMEOUT", str(cls.http_timeout))),
            log_level=os.getenv("LOG_LEVEL", cls.log_level).upper(),
            environment=os.getenv("ENVIRONMENT", cls.environment),
        )

    @property
    def is_production(self) -> bool:
        return self.environment == "production"
