# =============================================================================
# TESTES - Quiz Scoring Engine
# =============================================================================
# Testes unitarios para correcao de tentativas contra o gabarito
# =============================================================================

import pytest


class TestResolveAnswer:
    """Testes para conversao indice -> texto da alternativa."""

    def test_valid_index(self, sample_questions):
        from quiz.engine.scoring_engine import QuizScoringEngine

        assert QuizScoringEngine.resolve_answer(sample_questions[0], "0") == "Paris"
        assert QuizScoringEngine.resolve_answer(sample_questions[0], "3") == "Lille"

    def test_index_with_whitespace(self, sample_questions):
        from quiz.engine.scoring_engine import QuizScoringEngine

        assert QuizScoringEngine.resolve_answer(sample_questions[1], " 1 ") == "4"

    @pytest.mark.parametrize("raw", ["-1", "4", "99", "abc", "", "1.5", None])
    def test_invalid_index_is_empty(self, sample_questions, raw):
        """Indices negativos, fora do intervalo ou nao numericos viram ""."""
        from quiz.engine.scoring_engine import QuizScoringEngine

        assert QuizScoringEngine.resolve_answer(sample_questions[0], raw) == ""

    @pytest.mark.parametrize("raw", ["+1", "0_1", "١", "1e0"])
    def test_only_plain_decimal_digits(self, sample_questions, raw):
        """Sinal, separador "_" e digitos nao ASCII nao sao indices."""
        from quiz.engine.scoring_engine import QuizScoringEngine

        assert QuizScoringEngine.resolve_answer(sample_questions[0], raw) == ""


class TestGrade:
    """Testes para correcao completa."""

    def test_all_correct(self, sample_questions):
        from quiz.engine.scoring_engine import QuizScoringEngine

        result = QuizScoringEngine().grade(sample_questions, {"1": "0", "2": "1"})

        assert result.correct == 2
        assert result.total == 2
        assert result.percentage == 100.0
        assert all(entry.is_correct for entry in result.feedback)

    def test_partial(self, sample_questions):
        """Paris certo, "3" errado."""
        from quiz.engine.scoring_engine import QuizScoringEngine

        result = QuizScoringEngine().grade(sample_questions, {"1": "0", "2": "0"})

        assert result.correct == 1
        assert result.total == 2
        first, second = result.feedback
        assert first.id == 1 and first.your_answer == "Paris" and first.is_correct
        assert second.id == 2
        assert second.your_answer == "3"
        assert second.correct_answer == "4"
        assert second.is_correct is False

    def test_missing_answers_count_as_wrong(self, sample_questions):
        from quiz.engine.scoring_engine import QuizScoringEngine

        result = QuizScoringEngine().grade(sample_questions, {})

        assert result.correct == 0
        assert result.total == 2
        assert [entry.your_answer for entry in result.feedback] == ["", ""]

    def test_negative_index_is_incorrect(self, sample_questions):
        from quiz.engine.scoring_engine import QuizScoringEngine

        result = QuizScoringEngine().grade(sample_questions, {"1": "-1", "2": "1"})

        assert result.correct == 1
        assert result.feedback[0].is_correct is False
        assert result.feedback[0].your_answer == ""

    def test_extra_keys_ignored(self, sample_questions):
        from quiz.engine.scoring_engine import QuizScoringEngine

        result = QuizScoringEngine().grade(sample_questions, {"1": "0", "2": "1", "7": "0"})

        assert result.correct == 2
        assert len(result.feedback) == 2

    def test_feedback_follows_quiz_order(self, sample_questions):
        from quiz.engine.scoring_engine import QuizScoringEngine

        result = QuizScoringEngine().grade(sample_questions, {"2": "1", "1": "0"})

        assert [entry.id for entry in result.feedback] == [1, 2]

    def test_empty_quiz(self):
        from quiz.engine.scoring_engine import QuizScoringEngine

        result = QuizScoringEngine().grade([], {"1": "0"})

        assert result.correct == 0
        assert result.total == 0
        assert result.percentage == 0.0

    def test_question_results_mirror_feedback(self, sample_questions):
        from quiz.engine.scoring_engine import QuizScoringEngine

        result = QuizScoringEngine().grade(sample_questions, {"1": "1"})
        stored = result.to_question_results()

        assert [(r.question_id, r.selected_option, r.is_correct) for r in stored] == [
            (1, "Lyon", False),
            (2, "", False),
        ]


class TestValidateAnswers:
    """Testes para validacao do payload."""

    def test_rejects_non_mapping(self, sample_questions):
        from quiz.engine.scoring_engine import QuizScoringEngine
        from quiz.exceptions import ValidationError

        with pytest.raises(ValidationError):
            QuizScoringEngine().grade(sample_questions, ["0", "1"])

    def test_rejects_non_string_values(self, sample_questions):
        from quiz.engine.scoring_engine import QuizScoringEngine
        from quiz.exceptions import ValidationError

        with pytest.raises(ValidationError) as exc_info:
            QuizScoringEngine().grade(sample_questions, {"1": 0})

        assert exc_info.value.status_code == 400
