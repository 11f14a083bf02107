"""Quiz Stats Aggregator - Estatisticas derivadas das tentativas."""

from collections.abc import Sequence
from datetime import datetime

from ..models.schemas import Attempt, QuizStats, UserQuizStats, UserStats


class QuizStatsAggregator:
    """Calcula agregados a partir de um conjunto de tentativas.

    Funcoes puras: a mesma entrada produz sempre a mesma saida e a lista
    recebida nunca e alterada.

    Percentual de uma tentativa = acertos / total * 100, usando o total
    gravado na propria tentativa (0% quando o quiz nao tinha questoes).

    Example:
        >>> aggregator = QuizStatsAggregator()
        >>> stats = aggregator.quiz_stats(attempts)
        >>> print(stats.average_score, stats.best_score, stats.unique_users)
    """

    @staticmethod
    def percent_score(attempt: Attempt) -> float:
        """Percentual de acerto de uma tentativa."""
        if attempt.total_questions <= 0:
            return 0.0
        return attempt.score / attempt.total_questions * 100

    def quiz_stats(self, attempts: Sequence[Attempt]) -> QuizStats:
        """Agregado global de um quiz.

        Args:
            attempts: Todas as tentativas do quiz

        Returns:
            QuizStats (zerado se nao houver tentativas)
        """
        if not attempts:
            return QuizStats()

        scores = [self.percent_score(a) for a in attempts]

        return QuizStats(
            total_attempts=len(attempts),
            average_score=sum(scores) / len(scores),
            best_score=max(scores),
            unique_users=len({a.user_id for a in attempts}),
            user_attempts=None,
        )

    def user_stats(self, attempts: Sequence[Attempt]) -> UserQuizStats | None:
        """Agregado de um usuario em um quiz.

        Args:
            attempts: Tentativas ja filtradas para um usuario

        Returns:
            UserQuizStats, ou None se nao houver tentativas
        """
        if not attempts:
            return None

        scores = [self.percent_score(a) for a in attempts]
        latest = sorted(attempts, key=lambda a: a.completed_at, reverse=True)[0]

        return UserQuizStats(
            attempts=len(attempts),
            average_score=sum(scores) / len(scores),
            best_score=max(scores),
            last_attempt=latest.completed_at,
        )

    def quiz_stats_for_user(
        self, attempts: Sequence[Attempt], user_id: str | None
    ) -> QuizStats:
        """Agregado global com ``user_attempts`` preenchido para ``user_id``."""
        stats = self.quiz_stats(attempts)
        if user_id is None:
            return stats

        own = [a for a in attempts if a.user_id == user_id]
        return stats.model_copy(update={"user_attempts": self.user_stats(own)})

    @staticmethod
    def advance_streak(stats: UserStats, now: datetime) -> int:
        """Calcula a nova sequencia diaria apos uma tentativa em ``now``.

        - Mesmo dia da ultima tentativa: mantem
        - Exatamente um dia depois: incrementa
        - Mais de um dia, ou sem tentativa anterior: reinicia em 1
        """
        last = stats.last_quiz_date
        if last is None:
            return 1

        day_diff = (now.date() - last.date()).days
        if day_diff == 0:
            return max(stats.current_streak, 1)
        if day_diff == 1:
            return stats.current_streak + 1
        return 1
