"""Quiz Enums - Dificuldade."""

from enum import Enum


class QuizDifficulty(str, Enum):
    """Niveis de dificuldade do quiz."""

    EASY = "easy"
    MEDIUM = "medium"
    HARD = "hard"
