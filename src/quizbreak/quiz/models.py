"""Data models for quiz sessions."""

from dataclasses import dataclass
from enum import Enum, auto
from typing import Any

from quizbreak.models import QuizSettings, QuizType


class QuizPhase(Enum):
    """Sub-state of a single quiz session."""

    THINKING = auto()  # Waiting for an answer
    CELEBRATING = auto()  # Answered correctly, next question pending
    LOCKED = auto()  # Answered incorrectly, input locked out
    COMPLETE = auto()  # Required score reached, completion pending or sent
    CANCELLED = auto()  # Discarded before completion


@dataclass(frozen=True)
class Choice:
    """One answer button."""

    key: str
    label: str
    color_hint: str | None = None


@dataclass(frozen=True)
class Question:
    """A question with its candidate answers."""

    item_id: str
    prompt: str
    audio_cue: str
    choices: tuple[Choice, ...]
    answer_key: str

    def is_correct(self, key: str) -> bool:
        return key == self.answer_key


@dataclass(frozen=True)
class QuizConfig:
    """Everything a quiz session needs to know about its rules."""

    quiz_type: QuizType
    level: int  # Math difficulty, or phonetics option count
    required_correct: int
    incorrect_delay_seconds: float
    volume: float

    def __post_init__(self) -> None:
        if self.required_correct < 1:
            raise ValueError("required_correct must be at least 1")
        if self.incorrect_delay_seconds < 0:
            raise ValueError("incorrect_delay_seconds must not be negative")

    @staticmethod
    def from_settings(quiz_type: QuizType, settings: QuizSettings) -> "QuizConfig":
        level = (
            settings.math_difficulty
            if quiz_type == "math"
            else settings.phonetics_options_count
        )
        return QuizConfig(
            quiz_type=quiz_type,
            level=level,
            required_correct=settings.required_correct_answers,
            incorrect_delay_seconds=settings.incorrect_delay_seconds,
            volume=settings.quiz_volume,
        )


def choice_key(choice: Any) -> str:
    """Normalize a submitted answer (a Choice, key string or number) to a key."""
    if isinstance(choice, Choice):
        return choice.key
    return str(choice)
