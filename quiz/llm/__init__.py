"""Quiz LLM - Clientes e gerador de quiz."""

from .factory import LLMClientFactory
from .generator import GeneratedImage, GeneratedQuiz, QuizGenerator, parse_quiz_payload

__all__ = [
    "LLMClientFactory",
    "QuizGenerator",
    "GeneratedQuiz",
    "GeneratedImage",
    "parse_quiz_payload",
]
