"""Quiz package: question generation and single-session quiz control."""

from quizbreak.quiz.catalog import CatalogItem, PhoneticsCatalog
from quizbreak.quiz.models import Choice, Question, QuizConfig, QuizPhase
from quizbreak.quiz.session import QuizSession

__all__ = [
    "CatalogItem",
    "Choice",
    "PhoneticsCatalog",
    "Question",
    "QuizConfig",
    "QuizPhase",
    "QuizSession",
]
