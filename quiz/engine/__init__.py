"""Quiz Engines - Logica de negocios."""

from .quiz_engine import QuizEngine
from .scoring_engine import GradeResult, QuizScoringEngine
from .stats_engine import QuizStatsAggregator

__all__ = ["QuizEngine", "QuizScoringEngine", "GradeResult", "QuizStatsAggregator"]
