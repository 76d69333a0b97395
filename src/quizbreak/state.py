"""The single root state object shared by all kiosk components."""

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING

from quizbreak.models import PersistedState, Playlist, VideoSource

if TYPE_CHECKING:
    from quizbreak.persistent_state import PersistentState

logger = logging.getLogger(__name__)


@dataclass
class SessionState:
    """Process-lifetime playback state. Never persisted."""

    current_video_index: int
    is_interrupted: bool
    last_interruption_timestamp: float
    is_playing: bool = False

    @staticmethod
    def fresh(now: float) -> "SessionState":
        return SessionState(
            current_video_index=0,
            is_interrupted=False,
            last_interruption_timestamp=now,
        )


class AppState:
    """Owns the persisted document and the session state.

    Components hold a reference to one AppState and mutate it through explicit
    calls; every persisted mutation finishes with `commit()`, which writes the
    whole document back through the persistence adapter.
    """

    def __init__(
        self,
        persisted: PersistedState,
        session: SessionState,
        persistence: "PersistentState | None" = None,
    ):
        self.persisted = persisted
        self.session = session
        self._persistence = persistence

    @property
    def active_playlist(self) -> Playlist | None:
        return self.persisted.active_playlist

    @property
    def videos(self) -> list[VideoSource]:
        playlist = self.active_playlist
        if playlist is None:
            return []
        return playlist.videos

    @property
    def current_video(self) -> VideoSource | None:
        videos = self.videos
        index = self.session.current_video_index
        if 0 <= index < len(videos):
            return videos[index]
        return None

    def commit(self) -> bool:
        """Persist the document. Failures are logged by the adapter, never raised.

        Returns:
            True if the document was written (or there is nowhere to write it).
        """
        if self._persistence is None:
            return True
        return self._persistence.save(self.persisted)
