"""Quiz Exceptions - Taxonomia de erros da API.

Cada erro carrega uma mensagem para o usuario, um ``code`` legivel por
maquina e o status HTTP correspondente. ``details`` guarda contexto extra
para log (nunca e exposto ao cliente em falhas upstream/persistencia).
"""

from typing import Any


class QuizAppError(Exception):
    """Erro base da aplicacao."""

    status_code: int = 500
    code: str = "internal_error"
    default_message: str = "Internal server error"

    def __init__(self, message: str | None = None, details: dict[str, Any] | None = None):
        self.message = message or self.default_message
        self.details = details or {}
        super().__init__(self.message)

    def to_dict(self) -> dict[str, str]:
        return {"error": self.message, "code": self.code}


class UnauthorizedError(QuizAppError):
    """Sessao ausente ou invalida."""

    status_code = 401
    code = "unauthorized"
    default_message = "Unauthorized"


class NotFoundError(QuizAppError):
    """Quiz, usuario ou imagem inexistente."""

    status_code = 404
    code = "not_found"
    default_message = "Not found"


class ValidationError(QuizAppError):
    """Payload fora do schema esperado."""

    status_code = 400
    code = "validation_error"
    default_message = "Invalid request"


class UpstreamFailure(QuizAppError):
    """Provedor de IA ou download de imagem falhou / retornou lixo."""

    status_code = 500
    code = "upstream_failure"
    default_message = "Failed to generate quiz"


class PersistenceFailure(QuizAppError):
    """Banco indisponivel ou escrita falhou."""

    status_code = 500
    code = "persistence_failure"
    default_message = "Database operation failed"
