"""KioskSession, the application root that wires playback and quizzes together."""

import logging
import random
from datetime import date
from typing import Any, Callable, Iterable

from quizbreak import library
from quizbreak.config.settings import QuizbreakSettings
from quizbreak.errors import CatalogError
from quizbreak.models import QuizSettings, QuizType, VideoSource
from quizbreak.persistent_state import PersistentState
from quizbreak.playback.controller import PlaybackController
from quizbreak.playback.models import InterruptionCause, PlayerEvent
from quizbreak.playback.protocols import MediaPlayer
from quizbreak.quiz.catalog import PhoneticsCatalog
from quizbreak.quiz.models import QuizConfig
from quizbreak.quiz.protocols import QuizOutput
from quizbreak.quiz.session import QuizSession
from quizbreak.settings_store import SettingsStore
from quizbreak.state import AppState, SessionState
from quizbreak.stats import StatisticsAggregator
from quizbreak.timers import Clock, Scheduler
from quizbreak.youtube import VideoCatalog, YouTubeCatalog

logger = logging.getLogger(__name__)

CatalogFactory = Callable[[str], VideoCatalog]


class KioskSession:
    """Owns the root state and every component for one run of the kiosk.

    The kiosk starts a quiz whenever playback is interrupted and hands control
    back to playback when the quiz completes or a guardian overrides it.
    Playlist switches and removal of the current video discard a running quiz.
    """

    def __init__(
        self,
        settings: QuizbreakSettings,
        persistence: PersistentState,
        media_player: MediaPlayer,
        quiz_output: QuizOutput,
        scheduler: Scheduler,
        clock: Clock,
        catalog_factory: CatalogFactory | None = None,
        phonetics_catalog: PhoneticsCatalog | None = None,
        rng: random.Random | None = None,
        today: Callable[[], date] = date.today,
    ):
        self.settings = settings
        self.quiz_output = quiz_output
        self.scheduler = scheduler
        self.clock = clock
        self._catalog_factory = catalog_factory or self._youtube_catalog
        self._phonetics_catalog = phonetics_catalog or PhoneticsCatalog()
        self._rng = rng or random.Random()

        self.state = AppState(
            persisted=persistence.load(),
            session=SessionState.fresh(clock.now()),
            persistence=persistence,
        )
        self.store = SettingsStore(self.state)
        self.stats = StatisticsAggregator(self.state, today=today)
        self.playback = PlaybackController(
            self.state,
            media_player,
            scheduler,
            clock,
            self.stats,
            on_interrupted=self._on_interrupted,
        )
        self.quiz: QuizSession | None = None

    @property
    def quiz_settings(self) -> QuizSettings:
        return self.state.persisted.settings

    def start(self) -> None:
        self.playback.start()

    def close(self) -> None:
        """Tear down timers, flush watch time and save."""
        self._discard_quiz()
        self.playback.close()
        self.state.commit()
        logger.info("Kiosk session closed")

    # Media player and quiz UI input

    def handle_player_event(self, event: PlayerEvent) -> None:
        self.playback.handle_event(event)

    def submit_answer(self, choice: Any) -> bool:
        """Forward an answer to the running quiz.

        Returns:
            True if the answer was judged, False if no quiz accepts it now.
        """
        if self.quiz is None:
            return False
        return self.quiz.submit_answer(choice)

    def guardian_override(self) -> bool:
        """End an interruption without finishing the quiz.

        Returns:
            True if playback was interrupted and has resumed.
        """
        self._discard_quiz()
        return self.playback.override()

    # Navigation

    def toggle_pause(self) -> None:
        self.playback.toggle_pause()

    def next_video(self) -> None:
        self.playback.next_video()

    def select_video(self, index: int) -> bool:
        return self.playback.set_video_index(index)

    # Playlist management

    def add_playlist(self, name: str) -> str:
        playlist_id = self.store.add_playlist(name)
        self._on_playlist_switched()
        return playlist_id

    def delete_playlist(self, playlist_id: str) -> None:
        was_active = playlist_id == self.store.active_playlist_id
        self.store.delete_playlist(playlist_id)
        if was_active:
            self._on_playlist_switched()

    def rename_playlist(self, playlist_id: str, name: str) -> None:
        self.store.rename_playlist(playlist_id, name)

    def set_active_playlist(self, playlist_id: str) -> bool:
        if not self.store.set_active_playlist(playlist_id):
            return False
        self._on_playlist_switched()
        return True

    def add_video(self, url: str, title: str | None = None) -> VideoSource | None:
        video = self.store.add_video(url, title=title)
        self.playback.reload()
        return video

    def add_videos(self, videos: Iterable[VideoSource]) -> int:
        added = self.store.add_videos(videos)
        self.playback.reload()
        return added

    def add_from_url(self, url: str) -> list[VideoSource]:
        """Add a pasted video or playlist URL to the active playlist.

        Raises:
            CatalogError: If a playlist URL could not be fetched.
        """
        result = library.add_from_url(self.store, self._catalog(), url)
        self.playback.reload()
        return result.added

    def remove_video(self, video_id: str) -> bool:
        """Remove a video from the active playlist.

        Returns:
            True if the removed video was the current one.
        """
        was_current = self.store.remove_video(video_id)
        if was_current:
            self._discard_quiz()
            self._restart_gate_if_interrupted()
        self.playback.reload(restart=was_current)
        return was_current

    def link_playlist(
        self, playlist_id: str, link_text: str
    ) -> list[VideoSource] | None:
        """Link a playlist to a YouTube playlist and sync it when possible.

        Raises:
            CatalogError: If the link is invalid or the sync failed.
        """
        videos = library.link_playlist(
            self.store, self._catalog(), playlist_id, link_text
        )
        self._after_sync(playlist_id)
        return videos

    def unlink_playlist(self, playlist_id: str) -> None:
        library.unlink_playlist(self.store, playlist_id)

    def sync_playlist(self, playlist_id: str) -> list[VideoSource]:
        """Replace a linked playlist's videos from YouTube.

        Raises:
            CatalogError: If no API key is configured or the sync failed.
        """
        catalog = self._catalog()
        if catalog is None:
            raise CatalogError("A YouTube API key is required to sync")
        videos = library.sync_playlist(self.store, catalog, playlist_id)
        self._after_sync(playlist_id)
        return videos

    # Settings and statistics

    def update_settings(self, **changes: Any) -> QuizSettings:
        return self.store.update_settings(**changes)

    def time_until_interruption(self) -> float | None:
        return self.playback.time_until_interruption()

    # Internals

    def _on_interrupted(self, cause: InterruptionCause) -> None:
        self._start_quiz()

    def _start_quiz(self) -> None:
        self._discard_quiz()

        enabled = self.quiz_settings.enabled_quiz_types
        if not enabled:
            logger.warning("No quiz types enabled, waiting for guardian override")
            return

        quiz_type: QuizType = self._rng.choice(list(enabled))
        config = QuizConfig.from_settings(quiz_type, self.quiz_settings)
        self.quiz = QuizSession(
            config,
            self.stats,
            self.quiz_output,
            self.scheduler,
            self.clock,
            on_complete=self._on_quiz_complete,
            catalog=self._phonetics_catalog,
            rng=self._rng,
            next_question_delay=self.settings.next_question_delay,
            completion_delay=self.settings.completion_delay,
        )
        self.quiz.start()

    def _on_quiz_complete(self) -> None:
        self.quiz = None
        self.playback.complete_quiz()

    def _discard_quiz(self) -> None:
        if self.quiz is not None:
            self.quiz.cancel()
            self.quiz = None

    def _restart_gate_if_interrupted(self) -> None:
        # The gate stays closed; only the quiz in progress is thrown away
        if self.playback.is_interrupted:
            self._start_quiz()

    def _on_playlist_switched(self) -> None:
        self._discard_quiz()
        self._restart_gate_if_interrupted()
        self.playback.reload(restart=True)

    def _after_sync(self, playlist_id: str) -> None:
        if playlist_id == self.store.active_playlist_id:
            self.playback.reload()

    def _catalog(self) -> VideoCatalog | None:
        api_key = self.quiz_settings.youtube_api_key
        if not api_key:
            return None
        return self._catalog_factory(api_key)

    def _youtube_catalog(self, api_key: str) -> VideoCatalog:
        return YouTubeCatalog(
            api_key,
            base_url=self.settings.youtube_api_base_url,
            timeout=self.settings.youtube_request_timeout,
        )
