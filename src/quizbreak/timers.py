"""Clock and timer capabilities used by the playback and quiz state machines.

Components never sleep or read the system clock directly; they ask a Scheduler
for one-shot or recurring callbacks and a Clock for the current time. The
asyncio implementations below run everything on the event loop thread, so
callbacks never race each other.
"""

import asyncio
import logging
import time
from typing import Callable, Protocol

logger = logging.getLogger(__name__)


class Clock(Protocol):
    """Source of monotonic time in seconds."""

    def now(self) -> float:
        """Return the current time in seconds. Only differences are meaningful."""
        ...


class TimerHandle(Protocol):
    """A scheduled callback that can be cancelled."""

    def cancel(self) -> None:
        """Prevent any further firing. Safe to call more than once."""
        ...

    @property
    def cancelled(self) -> bool:
        """Whether cancel() has been called (or a one-shot timer already fired)."""
        ...


class Scheduler(Protocol):
    """Schedules callbacks on the single logical thread of the kiosk."""

    def call_later(self, delay: float, callback: Callable[[], None]) -> TimerHandle:
        """Run `callback` once after `delay` seconds."""
        ...

    def call_every(self, interval: float, callback: Callable[[], None]) -> TimerHandle:
        """Run `callback` every `interval` seconds until cancelled.

        The first call happens one interval after scheduling.
        """
        ...


class MonotonicClock:
    """Clock backed by time.monotonic()."""

    def now(self) -> float:
        return time.monotonic()


class _OneShotTimer:
    def __init__(
        self, loop: asyncio.AbstractEventLoop, delay: float, callback: Callable[[], None]
    ):
        self._callback = callback
        self._cancelled = False
        self._handle = loop.call_later(max(0.0, delay), self._fire)

    def _fire(self) -> None:
        if self._cancelled:
            return
        self._cancelled = True
        self._callback()

    def cancel(self) -> None:
        self._cancelled = True
        self._handle.cancel()

    @property
    def cancelled(self) -> bool:
        return self._cancelled


class _RecurringTimer:
    def __init__(
        self,
        loop: asyncio.AbstractEventLoop,
        interval: float,
        callback: Callable[[], None],
    ):
        if interval <= 0:
            raise ValueError(f"Recurring timer interval must be positive, got {interval}")
        self._loop = loop
        self._interval = interval
        self._callback = callback
        self._cancelled = False
        self._handle = loop.call_later(interval, self._fire)

    def _fire(self) -> None:
        if self._cancelled:
            return
        try:
            self._callback()
        except Exception:
            logger.exception("Recurring timer callback failed")
        # The callback may have cancelled us
        if not self._cancelled:
            self._handle = self._loop.call_later(self._interval, self._fire)

    def cancel(self) -> None:
        self._cancelled = True
        self._handle.cancel()

    @property
    def cancelled(self) -> bool:
        return self._cancelled


class AsyncioScheduler:
    """Scheduler running callbacks on an asyncio event loop."""

    def __init__(self, loop: asyncio.AbstractEventLoop | None = None):
        """Initialize the scheduler.

        Args:
            loop: Event loop to schedule on. Defaults to the running loop at the
                time each timer is created.
        """
        self._loop = loop

    def _get_loop(self) -> asyncio.AbstractEventLoop:
        return self._loop or asyncio.get_running_loop()

    def call_later(self, delay: float, callback: Callable[[], None]) -> TimerHandle:
        return _OneShotTimer(self._get_loop(), delay, callback)

    def call_every(self, interval: float, callback: Callable[[], None]) -> TimerHandle:
        return _RecurringTimer(self._get_loop(), interval, callback)
