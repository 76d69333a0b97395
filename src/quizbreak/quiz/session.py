"""QuizSession for running a single gating quiz."""

import logging
import random
from typing import Any, Callable

from quizbreak.config import constants
from quizbreak.quiz.catalog import PhoneticsCatalog
from quizbreak.quiz.generators import generate_question
from quizbreak.quiz.models import Question, QuizConfig, QuizPhase, choice_key
from quizbreak.quiz.protocols import QuizOutput
from quizbreak.stats import StatisticsAggregator
from quizbreak.timers import Clock, Scheduler, TimerHandle

logger = logging.getLogger(__name__)


class QuizSession:
    """Runs one quiz until the required number of correct answers is reached.

    Only the THINKING phase accepts answers. Every accepted answer is judged,
    recorded exactly once, and moves the session to CELEBRATING, LOCKED or
    COMPLETE. The completion callback fires once, after a short delay, and
    never after cancel().
    """

    def __init__(
        self,
        config: QuizConfig,
        stats: StatisticsAggregator,
        output: QuizOutput,
        scheduler: Scheduler,
        clock: Clock,
        on_complete: Callable[[], None],
        catalog: PhoneticsCatalog | None = None,
        rng: random.Random | None = None,
        next_question_delay: float = constants.NEXT_QUESTION_DELAY_SECONDS,
        completion_delay: float = constants.COMPLETION_DELAY_SECONDS,
    ):
        self.config = config
        self.stats = stats
        self.output = output
        self.scheduler = scheduler
        self.clock = clock
        self._on_complete = on_complete
        self._catalog = catalog or PhoneticsCatalog()
        self._rng = rng or random.Random()
        self._next_question_delay = max(0.0, next_question_delay)
        self._completion_delay = max(0.0, completion_delay)

        self.phase = QuizPhase.THINKING
        self.score = 0
        self.question: Question | None = None
        self._lockout_started: float | None = None
        self._timer: TimerHandle | None = None

    @property
    def is_active(self) -> bool:
        return self.phase not in (QuizPhase.COMPLETE, QuizPhase.CANCELLED)

    @property
    def has_question(self) -> bool:
        """False when the catalog had nothing to ask."""
        return self.question is not None

    @property
    def lockout_remaining(self) -> float:
        """Seconds of lockout left, 0 when not locked."""
        if self.phase != QuizPhase.LOCKED or self._lockout_started is None:
            return 0.0
        elapsed = self.clock.now() - self._lockout_started
        return max(0.0, self.config.incorrect_delay_seconds - elapsed)

    def start(self) -> None:
        """Show the first question."""
        logger.info(
            f"Starting {self.config.quiz_type} quiz, "
            f"{self.config.required_correct} correct answer(s) required"
        )
        self._next_question()

    def submit_answer(self, choice: Any) -> bool:
        """Judge an answer.

        Args:
            choice: The selected Choice, or its key.

        Returns:
            True if the answer was accepted and judged, False if it was
            rejected because the session is not waiting for an answer.
        """
        if self.phase != QuizPhase.THINKING or self.question is None:
            logger.debug(f"Rejected answer {choice!r} while {self.phase.name}")
            return False

        question = self.question
        is_correct = question.is_correct(choice_key(choice))
        self.stats.record_quiz_attempt(
            self.config.quiz_type, question.item_id, is_correct
        )

        if is_correct:
            self._handle_correct(question)
        else:
            self._handle_incorrect(question)
        return True

    def cancel(self) -> None:
        """Discard the session and its timers. Already recorded attempts stay."""
        if self.phase == QuizPhase.CANCELLED:
            return
        self._cancel_timer()
        self.phase = QuizPhase.CANCELLED
        logger.info(f"Cancelled {self.config.quiz_type} quiz at score {self.score}")

    def _handle_correct(self, question: Question) -> None:
        self.score += 1
        self.output.show_correct(question, self.score, self.config.required_correct)

        if self.score >= self.config.required_correct:
            self.phase = QuizPhase.COMPLETE
            self.output.show_complete()
            self._timer = self.scheduler.call_later(
                self._completion_delay, self._emit_complete
            )
        else:
            self.phase = QuizPhase.CELEBRATING
            self._timer = self.scheduler.call_later(
                self._next_question_delay, self._next_question
            )

    def _handle_incorrect(self, question: Question) -> None:
        self.phase = QuizPhase.LOCKED
        self._lockout_started = self.clock.now()
        self.output.show_incorrect(question, self.config.incorrect_delay_seconds)
        # Replay the prompt to help the child
        self.output.speak(question.audio_cue, self.config.volume)
        self._timer = self.scheduler.call_every(
            constants.LOCKOUT_TICK_SECONDS, self._lockout_tick
        )

    def _lockout_tick(self) -> None:
        if self.phase != QuizPhase.LOCKED:
            self._cancel_timer()
            return

        remaining = self.lockout_remaining
        if remaining > 0:
            self.output.show_lockout_remaining(remaining)
            return

        self._cancel_timer()
        self._lockout_started = None
        self.phase = QuizPhase.THINKING
        # Same question again; it is never regenerated after a wrong answer
        if self.question is not None:
            self.output.show_question(
                self.question, self.score, self.config.required_correct
            )

    def _next_question(self) -> None:
        self._timer = None
        if self.phase == QuizPhase.CANCELLED:
            return

        self.question = generate_question(self.config, self._catalog, self._rng)
        self.phase = QuizPhase.THINKING
        if self.question is None:
            logger.warning(
                f"No {self.config.quiz_type} questions available, waiting for override"
            )
            return

        self.output.show_question(
            self.question, self.score, self.config.required_correct
        )
        self.output.speak(self.question.audio_cue, self.config.volume)

    def _emit_complete(self) -> None:
        self._timer = None
        if self.phase != QuizPhase.COMPLETE:
            return
        logger.info(f"Completed {self.config.quiz_type} quiz")
        self._on_complete()

    def _cancel_timer(self) -> None:
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None
