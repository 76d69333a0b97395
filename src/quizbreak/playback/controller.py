"""PlaybackController for video playback and quiz interruptions."""

import logging
from typing import Callable

from quizbreak.config import constants
from quizbreak.models import VideoSource
from quizbreak.playback.models import (
    Ended,
    Error,
    InterruptionCause,
    PlaybackPhase,
    PlayerEvent,
    Ready,
    StateChanged,
)
from quizbreak.playback.protocols import MediaPlayer
from quizbreak.state import AppState
from quizbreak.stats import StatisticsAggregator
from quizbreak.timers import Clock, Scheduler, TimerHandle

logger = logging.getLogger(__name__)


class PlaybackController:
    """Drives the media player and decides when playback is interrupted.

    The interruption timer is wall-clock based: it keeps running while the
    video is paused and is only re-armed when an interruption ends.
    """

    def __init__(
        self,
        state: AppState,
        media_player: MediaPlayer,
        scheduler: Scheduler,
        clock: Clock,
        stats: StatisticsAggregator,
        on_interrupted: Callable[[InterruptionCause], None] | None = None,
    ):
        self.state = state
        self.media_player = media_player
        self.scheduler = scheduler
        self.clock = clock
        self.stats = stats
        self._on_interrupted = on_interrupted

        self.phase = PlaybackPhase.PAUSED
        self._check_timer: TimerHandle | None = None
        self._interruption_cause: InterruptionCause | None = None
        self._playing_since: float | None = None
        self._loaded_video: VideoSource | None = None

    @property
    def is_interrupted(self) -> bool:
        return self.phase == PlaybackPhase.INTERRUPTED

    @property
    def interruption_cause(self) -> InterruptionCause | None:
        return self._interruption_cause

    @property
    def is_empty(self) -> bool:
        """True when the active playlist has nothing to play."""
        return self.state.current_video is None

    @property
    def current_video(self) -> VideoSource | None:
        return self.state.current_video

    @property
    def current_index(self) -> int:
        return self.state.session.current_video_index

    def start(self) -> None:
        """Begin the session: cue the current video and arm the interruption check."""
        session = self.state.session
        session.is_interrupted = False
        session.last_interruption_timestamp = self.clock.now()
        self.phase = PlaybackPhase.PAUSED if self.is_empty else PlaybackPhase.PLAYING
        self._cue_current()
        self._arm_check_timer()

        logger.info(
            f"Playback started with {len(self.state.videos)} video(s), "
            f"phase {self.phase.name}"
        )

    def close(self) -> None:
        """Tear down timers and flush watch time."""
        self._cancel_check_timer()
        self._flush_watch_time()

    def handle_event(self, event: PlayerEvent) -> None:
        """Apply an event reported by the media player."""
        if isinstance(event, Ready):
            self._on_ready()
        elif isinstance(event, StateChanged):
            self._on_state_changed(event.playing)
        elif isinstance(event, (Ended, Error)) and self.is_interrupted:
            # The gated video stays current until the quiz is done
            logger.debug(f"Ignoring {type(event).__name__} while interrupted")
        elif isinstance(event, Ended):
            self._on_ended()
        elif isinstance(event, Error):
            logger.warning(f"Video error ({event.reason or 'unknown'}), skipping")
            self._flush_watch_time()
            self.next_video()
        else:
            logger.warning(f"Ignoring unknown player event {event!r}")

    def check_interruption(self) -> bool:
        """Run one interruption check against the wall clock.

        Returns:
            True if this check interrupted playback.
        """
        if self.is_interrupted:
            return False
        if self.state.persisted.settings.interruption_mode != "time":
            return False

        limit = self.state.persisted.settings.interval_seconds
        elapsed = self.clock.now() - self.state.session.last_interruption_timestamp
        if limit > 0 and elapsed >= limit:
            self.interrupt(InterruptionCause.TIMER)
            return True
        return False

    def time_until_interruption(self) -> float | None:
        """Seconds left before the timer interrupts, or None when not in time mode."""
        settings = self.state.persisted.settings
        if settings.interruption_mode != "time":
            return None
        if self.is_interrupted:
            return 0.0
        elapsed = self.clock.now() - self.state.session.last_interruption_timestamp
        return max(0.0, settings.interval_seconds - elapsed)

    def interrupt(self, cause: InterruptionCause) -> None:
        """Gate playback behind a quiz."""
        if self.is_interrupted:
            return

        self._cancel_check_timer()
        self._flush_watch_time()
        self.phase = PlaybackPhase.INTERRUPTED
        self._interruption_cause = cause
        self.state.session.is_interrupted = True
        self.media_player.pause()
        logger.info(f"Playback interrupted ({cause.name})")

        if self._on_interrupted is not None:
            self._on_interrupted(cause)

    def complete_quiz(self) -> bool:
        """Resume playback after a successful quiz.

        Returns:
            True if playback was interrupted and has now resumed.
        """
        return self._resume("quiz completed")

    def override(self) -> bool:
        """Resume playback without a completed quiz (guardian escape hatch)."""
        return self._resume("guardian override")

    def toggle_pause(self) -> PlaybackPhase:
        """Toggle between PLAYING and PAUSED. Ignored while interrupted or empty."""
        if self.is_interrupted or self.is_empty:
            return self.phase

        if self.phase == PlaybackPhase.PLAYING:
            self.phase = PlaybackPhase.PAUSED
            self.media_player.pause()
        else:
            self.phase = PlaybackPhase.PLAYING
            self.media_player.play()
        return self.phase

    def next_video(self) -> None:
        """Advance to the next video, wrapping to the start of the playlist."""
        count = len(self.state.videos)
        session = self.state.session
        if count == 0:
            session.current_video_index = 0
        else:
            session.current_video_index = (session.current_video_index + 1) % count
        self._cue_current(force=True)

    def set_video_index(self, index: int) -> bool:
        """Jump to a video in the active playlist.

        Returns:
            True if the index was valid.
        """
        if not 0 <= index < len(self.state.videos):
            logger.warning(f"Ignoring out of range video index {index}")
            return False
        self.state.session.current_video_index = index
        self._cue_current(force=True)
        return True

    def reload(self, restart: bool = False) -> None:
        """Re-sync with the active playlist after it was switched or edited.

        Args:
            restart: Cue the current video again even if it is already loaded.
        """
        if not self.is_interrupted:
            if self.is_empty:
                self._flush_watch_time()
                self.phase = PlaybackPhase.PAUSED
                self.media_player.pause()
            elif self._loaded_video is None:
                # Nothing was playable before
                self.phase = PlaybackPhase.PLAYING
        self._cue_current(force=restart)

    def _resume(self, reason: str) -> bool:
        if not self.is_interrupted:
            return False

        # Reset the baseline before leaving INTERRUPTED so a stale elapsed time
        # cannot trigger again on the next check.
        session = self.state.session
        session.last_interruption_timestamp = self.clock.now()
        session.is_interrupted = False
        self._interruption_cause = None
        self.phase = PlaybackPhase.PAUSED if self.is_empty else PlaybackPhase.PLAYING
        logger.info(f"Playback resumed ({reason})")

        if self.phase == PlaybackPhase.PLAYING:
            self.media_player.play()

        self._arm_check_timer()
        return True

    def _on_ready(self) -> None:
        if self.phase == PlaybackPhase.PLAYING:
            self.media_player.play()
        else:
            self.media_player.pause()

    def _on_state_changed(self, playing: bool) -> None:
        self.state.session.is_playing = playing
        if playing and self.is_interrupted:
            # Never let the video run behind the quiz
            self.media_player.pause()
            return

        if playing:
            if self._playing_since is None:
                self._playing_since = self.clock.now()
        else:
            self._flush_watch_time()

    def _on_ended(self) -> None:
        self._flush_watch_time()
        if self.state.persisted.settings.interruption_mode == "video_end":
            self.interrupt(InterruptionCause.VIDEO_END)
        else:
            self.next_video()

    def _cue_current(self, force: bool = False) -> None:
        video = self.current_video
        if video is None:
            self._loaded_video = None
            return
        if force or video != self._loaded_video:
            self._flush_watch_time()
            self._loaded_video = video
            self.media_player.load(video)

    def _flush_watch_time(self) -> None:
        if self._playing_since is None:
            return
        watched = self.clock.now() - self._playing_since
        self._playing_since = None
        self.stats.record_watch_time(watched)

    def _arm_check_timer(self) -> None:
        self._cancel_check_timer()
        self._check_timer = self.scheduler.call_every(
            constants.INTERRUPTION_CHECK_SECONDS, self.check_interruption
        )

    def _cancel_check_timer(self) -> None:
        if self._check_timer is not None:
            self._check_timer.cancel()
            self._check_timer = None
