"""Quiz Scoring Engine - Correcao de tentativas contra o gabarito."""

from collections.abc import Mapping
from dataclasses import dataclass, field

from ..exceptions import ValidationError
from ..models.schemas import FeedbackEntry, QuestionResult, QuizQuestion


@dataclass
class GradeResult:
    """Resultado puro de uma correcao (ainda nao persistido).

    Attributes:
        correct: Numero de acertos
        total: Numero de questoes do quiz no momento da correcao
        feedback: Uma entrada por questao, na ordem do quiz
    """

    correct: int
    total: int
    feedback: list[FeedbackEntry] = field(default_factory=list)

    @property
    def percentage(self) -> float:
        return (self.correct / self.total * 100) if self.total > 0 else 0.0

    def to_question_results(self) -> list[QuestionResult]:
        """Converte o feedback para o formato gravado na tentativa."""
        return [
            QuestionResult(
                question_id=entry.id,
                selected_option=entry.your_answer,
                is_correct=entry.is_correct,
            )
            for entry in self.feedback
        ]


class QuizScoringEngine:
    """Motor de correcao de quizzes.

    O payload de respostas mapeia a posicao da questao (string, 1-based)
    para o indice da alternativa escolhida (string, 0-based). O indice e
    resolvido para o texto da alternativa antes de comparar com o gabarito.

    Regras:
        - Chave ausente: resposta vazia, questao errada
        - Indice nao numerico ou fora do intervalo: resposta vazia, errada
        - Chaves que nao enderecam nenhuma questao sao ignoradas
        - Nenhum efeito colateral; persistir a tentativa e papel do chamador

    Example:
        >>> engine = QuizScoringEngine()
        >>> result = engine.grade(questions, {"1": "0", "2": "1"})
        >>> print(result.correct, result.total)  # 2 2
    """

    @staticmethod
    def validate_answers(answers: object) -> Mapping[str, str]:
        """Garante que o payload e um mapeamento string -> string.

        Raises:
            ValidationError: Se o payload estiver malformado
        """
        if not isinstance(answers, Mapping):
            raise ValidationError("answers: must be an object")

        for key, value in answers.items():
            if not isinstance(key, str) or not isinstance(value, str):
                raise ValidationError(
                    "answers: keys and values must be strings",
                    details={"key": repr(key)},
                )
        return answers

    @staticmethod
    def resolve_answer(question: QuizQuestion, raw_index: str | None) -> str:
        """Converte o indice submetido no texto da alternativa.

        Args:
            question: Questao respondida
            raw_index: Indice enviado pelo cliente (string) ou None

        Returns:
            Texto da alternativa, ou "" se ausente/invalido/fora do intervalo
        """
        if raw_index is None:
            return ""

        digits = raw_index.strip()
        if not (digits.isascii() and digits.isdigit()):
            return ""

        index = int(digits)

        if 0 <= index < len(question.options):
            return question.options[index]
        return ""

    def evaluate_answer(self, question: QuizQuestion, raw_index: str | None) -> FeedbackEntry:
        """Avalia uma resposta individual."""
        your_answer = self.resolve_answer(question, raw_index)
        is_correct = bool(your_answer) and your_answer == question.correct_answer

        return FeedbackEntry(
            id=question.id,
            your_answer=your_answer,
            correct_answer=question.correct_answer,
            is_correct=is_correct,
        )

    def grade(self, questions: list[QuizQuestion], answers: Mapping[str, str]) -> GradeResult:
        """Corrige uma tentativa completa.

        Args:
            questions: Questoes do quiz, na ordem armazenada
            answers: posicao (1-based, string) -> indice da alternativa (string)

        Returns:
            GradeResult com feedback por questao e agregados
        """
        self.validate_answers(answers)

        feedback = [
            self.evaluate_answer(question, answers.get(str(position)))
            for position, question in enumerate(questions, start=1)
        ]

        return GradeResult(
            correct=sum(1 for entry in feedback if entry.is_correct),
            total=len(questions),
            feedback=feedback,
        )
