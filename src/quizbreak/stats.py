"""Quiz accuracy and watch time statistics."""

import logging
from dataclasses import dataclass
from datetime import date, timedelta
from typing import Callable

from quizbreak.models import DailyUsage, QuizItemStats, QuizType, Stats
from quizbreak.state import AppState

logger = logging.getLogger(__name__)


@dataclass
class ItemAccuracy:
    """Accuracy row for a single quiz item."""

    item_id: str
    attempts: int
    correct: int
    accuracy: float


@dataclass
class DayUsage:
    """Watch time for one day of the recent-usage view."""

    date: date
    minutes: int


class StatisticsAggregator:
    """Records quiz attempts and watch time into the shared document."""

    def __init__(self, state: AppState, today: Callable[[], date] = date.today):
        """Initialize the aggregator.

        Args:
            state: The shared root state.
            today: Returns the current local calendar date.
        """
        self._state = state
        self._today = today

    @property
    def _stats(self) -> Stats:
        return self._state.persisted.stats

    def record_quiz_attempt(
        self, quiz_type: QuizType, item_id: str, is_correct: bool
    ) -> None:
        """Count one judged answer against the quiz type totals and the item."""
        category = self._stats.for_type(quiz_type)
        item = category.items.get(item_id) or QuizItemStats()

        category.total_attempts += 1
        item.attempts += 1
        if is_correct:
            category.total_correct += 1
            item.correct += 1
        category.items[item_id] = item

        self._state.commit()
        logger.debug(
            f"Recorded {quiz_type} attempt on {item_id}: "
            f"{'correct' if is_correct else 'incorrect'}"
        )

    def record_watch_time(self, seconds: float) -> None:
        """Add watch time to today's usage entry, creating it if needed."""
        if seconds <= 0:
            return

        today = self._today().isoformat()
        usage = self._stats.usage
        for entry in usage:
            if entry.date == today:
                entry.watch_time_seconds += seconds
                break
        else:
            usage.append(DailyUsage(date=today, watch_time_seconds=seconds))

        self._state.commit()

    def item_accuracy(
        self, quiz_type: QuizType, worst_first: bool = True
    ) -> list[ItemAccuracy]:
        """Per-item accuracy, sorted by accuracy.

        Args:
            quiz_type: Which quiz category to report on.
            worst_first: Sort ascending (items needing practice first).
        """
        rows = [
            ItemAccuracy(
                item_id=item_id,
                attempts=item.attempts,
                correct=item.correct,
                accuracy=item.accuracy,
            )
            for item_id, item in self._stats.for_type(quiz_type).items.items()
        ]
        rows.sort(key=lambda row: row.accuracy, reverse=not worst_first)
        return rows

    def accuracy_percent(self, quiz_type: QuizType) -> int:
        category = self._stats.for_type(quiz_type)
        if category.total_attempts == 0:
            return 0
        return round(category.total_correct / category.total_attempts * 100)

    def total_watch_minutes(self) -> int:
        return round(sum(entry.watch_time_seconds for entry in self._stats.usage) / 60)

    def recent_usage(self, days: int = 7) -> list[DayUsage]:
        """Watch minutes for the last `days` days, oldest first, zero-filled."""
        by_date = {entry.date: entry.watch_time_seconds for entry in self._stats.usage}
        today = self._today()
        result = []
        for offset in range(days - 1, -1, -1):
            day = today - timedelta(days=offset)
            seconds = by_date.get(day.isoformat(), 0.0)
            result.append(DayUsage(date=day, minutes=round(seconds / 60)))
        return result
