"""Tests for QuizSession answer judging, lockout and completion."""

import pytest

from quizbreak.quiz.catalog import PhoneticsCatalog
from quizbreak.quiz.models import QuizConfig, QuizPhase
from quizbreak.quiz.session import QuizSession


def make_config(
    quiz_type="math", level=1, required_correct=1, incorrect_delay_seconds=2.0
) -> QuizConfig:
    return QuizConfig(
        quiz_type=quiz_type,
        level=level,
        required_correct=required_correct,
        incorrect_delay_seconds=incorrect_delay_seconds,
        volume=0.8,
    )


def wrong_choice(question):
    return next(c for c in question.choices if c.key != question.answer_key)


@pytest.fixture
def completions() -> list[str]:
    return []


@pytest.fixture
def make_session(stats, mock_output, scheduler, clock, rng, completions):
    """Factory for sessions wired to the shared fakes."""

    def _make(config: QuizConfig, catalog: PhoneticsCatalog | None = None) -> QuizSession:
        return QuizSession(
            config,
            stats,
            mock_output,
            scheduler,
            clock,
            on_complete=lambda: completions.append("done"),
            catalog=catalog,
            rng=rng,
        )

    return _make


class TestQuestions:
    """Question presentation."""

    def test_start_shows_and_speaks_question(self, make_session, mock_output):
        session = make_session(make_config())
        session.start()

        assert session.phase == QuizPhase.THINKING
        assert mock_output.names() == ["show_question", "speak"]
        assert mock_output.events[0] == ("show_question", "math-diff-1", 0, 1)
        assert mock_output.events[1][2] == 0.8

    def test_phonetics_question(self, make_session, mock_output):
        session = make_session(make_config(quiz_type="phonetics", level=4))
        session.start()

        question = mock_output.current_question
        assert question.item_id.startswith("letter-")
        assert len(question.choices) == 4
        assert question.answer_key == question.item_id

    def test_empty_catalog_holds_gate(self, make_session, mock_output, completions):
        """No question means nothing can be answered and nothing completes."""
        session = make_session(
            make_config(quiz_type="phonetics"), catalog=PhoneticsCatalog([])
        )
        session.start()

        assert session.has_question is False
        assert session.submit_answer("letter-a") is False
        assert mock_output.events == []
        assert completions == []


class TestCorrectAnswers:
    """Scoring and completion."""

    def test_single_correct_completes_after_delay(
        self, make_session, mock_output, scheduler, completions
    ):
        """Completion is emitted once, three seconds after the final answer."""
        session = make_session(make_config())
        session.start()

        assert session.submit_answer(mock_output.current_question.answer_key) is True
        assert session.phase == QuizPhase.COMPLETE
        assert "show_complete" in mock_output.names()

        scheduler.advance(2.9)
        assert completions == []
        scheduler.advance(0.1)
        assert completions == ["done"]

        scheduler.advance(10)
        assert completions == ["done"]

    def test_correct_then_next_question(self, make_session, mock_output, scheduler):
        session = make_session(make_config(required_correct=2))
        session.start()

        session.submit_answer(mock_output.current_question.answer_key)

        assert session.phase == QuizPhase.CELEBRATING
        assert session.score == 1
        scheduler.advance(2)
        assert session.phase == QuizPhase.THINKING
        assert len(mock_output.questions) == 2

    def test_answers_rejected_while_celebrating(self, make_session, mock_output, stats):
        session = make_session(make_config(required_correct=2))
        session.start()
        question = mock_output.current_question
        session.submit_answer(question.answer_key)

        assert session.submit_answer(question.answer_key) is False
        assert session.score == 1

    def test_answers_rejected_after_complete(self, make_session, mock_output, app_state):
        session = make_session(make_config())
        session.start()
        question = mock_output.current_question
        session.submit_answer(question.answer_key)

        assert session.submit_answer(question.answer_key) is False
        assert app_state.persisted.stats.math.total_attempts == 1


class TestIncorrectAnswers:
    """Lockout after a wrong answer."""

    def test_lockout_rejects_and_reshows_same_question(
        self, make_session, mock_output, scheduler
    ):
        session = make_session(make_config(incorrect_delay_seconds=2.0))
        session.start()
        question = mock_output.current_question

        assert session.submit_answer(wrong_choice(question)) is True
        assert session.phase == QuizPhase.LOCKED
        assert session.submit_answer(question.answer_key) is False

        scheduler.advance(1.0)
        assert session.phase == QuizPhase.LOCKED
        assert 0 < session.lockout_remaining <= 1.0

        scheduler.advance(1.2)
        assert session.phase == QuizPhase.THINKING
        assert mock_output.current_question is question
        assert session.score == 0

    def test_lockout_countdown_reported(self, make_session, mock_output, scheduler):
        session = make_session(make_config(incorrect_delay_seconds=1.0))
        session.start()
        session.submit_answer(wrong_choice(mock_output.current_question))

        scheduler.advance(0.5)

        remaining = [e[1] for e in mock_output.events if e[0] == "show_lockout_remaining"]
        assert len(remaining) >= 4
        assert remaining == sorted(remaining, reverse=True)

    def test_incorrect_replays_prompt(self, make_session, mock_output):
        session = make_session(make_config())
        session.start()
        question = mock_output.current_question

        session.submit_answer(wrong_choice(question))

        assert mock_output.events[-2] == ("show_incorrect", question.item_id, 2.0)
        assert mock_output.events[-1] == ("speak", question.audio_cue, 0.8)

    def test_zero_delay_unlocks_on_next_tick(self, make_session, mock_output, scheduler):
        session = make_session(make_config(incorrect_delay_seconds=0))
        session.start()
        session.submit_answer(wrong_choice(mock_output.current_question))

        scheduler.advance(0.1)

        assert session.phase == QuizPhase.THINKING


class TestTwoCorrectRequired:
    """The full gating scenario with mistakes along the way."""

    def test_completion_with_wrong_answers(
        self, make_session, mock_output, scheduler, completions, app_state
    ):
        """Sequence incorrect, correct, incorrect, correct completes once."""
        session = make_session(make_config(required_correct=2, incorrect_delay_seconds=1.0))
        session.start()

        first = mock_output.current_question
        session.submit_answer(wrong_choice(first))
        scheduler.advance(1.2)
        assert mock_output.current_question is first
        session.submit_answer(first.answer_key)
        assert session.score == 1

        scheduler.advance(2)
        second = mock_output.current_question
        assert second is not first
        session.submit_answer(wrong_choice(second))
        scheduler.advance(1.2)
        session.submit_answer(second.answer_key)

        assert session.phase == QuizPhase.COMPLETE
        scheduler.advance(3)
        assert completions == ["done"]

        math = app_state.persisted.stats.math
        assert math.total_attempts == 4
        assert math.total_correct == 2


class TestCancel:
    """Discarding a session."""

    def test_cancel_stops_completion(self, make_session, mock_output, scheduler, completions):
        session = make_session(make_config())
        session.start()
        session.submit_answer(mock_output.current_question.answer_key)

        session.cancel()
        scheduler.advance(10)

        assert completions == []
        assert session.phase == QuizPhase.CANCELLED
        assert scheduler.pending == []

    def test_cancel_during_lockout(self, make_session, mock_output, scheduler):
        session = make_session(make_config())
        session.start()
        session.submit_answer(wrong_choice(mock_output.current_question))

        session.cancel()

        assert scheduler.pending == []
        assert session.submit_answer(mock_output.current_question.answer_key) is False
        assert session.is_active is False


class TestQuizConfig:
    """Config validation."""

    def test_rejects_zero_required(self):
        with pytest.raises(ValueError):
            make_config(required_correct=0)

    def test_rejects_negative_delay(self):
        with pytest.raises(ValueError):
            make_config(incorrect_delay_seconds=-1)
