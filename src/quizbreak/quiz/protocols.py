"""Protocol definitions for quiz presentation."""

from typing import Protocol

from quizbreak.quiz.models import Question


class QuizOutput(Protocol):
    """Protocol for quiz rendering and audio.

    Implementations own all user-visible and audible output of a quiz session:
    drawing the question and score stars, celebration effects, the lockout
    overlay and speech. The session only tells them what happened.
    """

    def show_question(self, question: Question, score: int, required: int) -> None:
        """Display a question and accept input.

        Called for every new question and again, with the same question, when
        a lockout ends.

        Args:
            question: The active question.
            score: Correct answers so far in this session.
            required: Correct answers needed to finish.
        """
        ...

    def show_correct(self, question: Question, score: int, required: int) -> None:
        """Celebrate a correct answer."""
        ...

    def show_incorrect(self, question: Question, lockout_seconds: float) -> None:
        """Signal a wrong answer and show the lockout overlay."""
        ...

    def show_lockout_remaining(self, seconds: float) -> None:
        """Update the lockout countdown."""
        ...

    def show_complete(self) -> None:
        """Show the final celebration before playback resumes."""
        ...

    def speak(self, audio_cue: str, volume: float) -> None:
        """Play a sound file or speak text at the given volume (0.0 - 1.0)."""
        ...
