"""Playlist, video and quiz-setting mutations on the shared kiosk document."""

import logging
import secrets
from typing import Any, Iterable

from quizbreak import youtube
from quizbreak.config import constants
from quizbreak.config.validation import coerce_setting
from quizbreak.models import SETTING_DOCUMENT_KEYS, Playlist, QuizSettings, VideoSource
from quizbreak.state import AppState

logger = logging.getLogger(__name__)


def _new_id(taken: Iterable[str]) -> str:
    """Generate a random opaque id not present in `taken`."""
    taken = set(taken)
    while True:
        candidate = secrets.token_hex(4)
        if candidate not in taken:
            return candidate


class SettingsStore:
    """Manages playlists, videos and quiz settings.

    Every operation is a read-modify-write of the whole document followed by a
    save, so the on-disk copy always reflects the last completed operation.
    """

    def __init__(self, state: AppState):
        """Initialize the store.

        Args:
            state: The shared root state.
        """
        self._state = state

    @property
    def playlists(self) -> list[Playlist]:
        return self._state.persisted.playlists

    @property
    def active_playlist_id(self) -> str:
        return self._state.persisted.active_playlist_id

    @property
    def active_playlist(self) -> Playlist | None:
        return self._state.persisted.active_playlist

    @property
    def settings(self) -> QuizSettings:
        return self._state.persisted.settings

    def get_playlist(self, playlist_id: str) -> Playlist | None:
        return self._state.persisted.get_playlist(playlist_id)

    # Playlists

    def add_playlist(self, name: str) -> str:
        """Create an empty playlist and make it active.

        Args:
            name: Display name of the playlist.

        Returns:
            The id of the new playlist.
        """
        playlist_id = _new_id(p.id for p in self.playlists)
        self.playlists.append(Playlist(id=playlist_id, name=name))
        self._activate(playlist_id)
        self._state.commit()
        logger.info(f"Created playlist {name!r} ({playlist_id})")
        return playlist_id

    def delete_playlist(self, playlist_id: str) -> None:
        """Delete a playlist, keeping at least one playlist and one active.

        Args:
            playlist_id: Id of the playlist to delete.
        """
        persisted = self._state.persisted
        remaining = [p for p in persisted.playlists if p.id != playlist_id]
        if len(remaining) == len(persisted.playlists):
            logger.warning(f"Cannot delete unknown playlist {playlist_id}")
            return

        persisted.playlists[:] = remaining
        if not remaining:
            persisted.playlists.append(Playlist.default())
            logger.info("Deleted the last playlist, created an empty default")

        if persisted.active_playlist is None:
            self._activate(persisted.playlists[0].id)

        self._state.commit()
        logger.info(f"Deleted playlist {playlist_id}")

    def rename_playlist(self, playlist_id: str, name: str) -> None:
        playlist = self.get_playlist(playlist_id)
        if playlist is None:
            logger.warning(f"Cannot rename unknown playlist {playlist_id}")
            return
        playlist.name = name
        self._state.commit()

    def set_active_playlist(self, playlist_id: str) -> bool:
        """Switch the active playlist and rewind to its first video.

        Args:
            playlist_id: Id of the playlist to activate.

        Returns:
            True if the playlist exists and is now active.
        """
        if self.get_playlist(playlist_id) is None:
            logger.warning(f"Cannot activate unknown playlist {playlist_id}")
            return False
        self._activate(playlist_id)
        self._state.commit()
        return True

    def set_playlist_external_id(
        self, playlist_id: str, external_id: str | None
    ) -> None:
        """Link (or with None, unlink) a playlist to a remote catalog playlist."""
        playlist = self.get_playlist(playlist_id)
        if playlist is None:
            logger.warning(f"Cannot link unknown playlist {playlist_id}")
            return
        playlist.external_source_id = external_id
        self._state.commit()

    def replace_playlist_videos(
        self, playlist_id: str, videos: Iterable[VideoSource]
    ) -> None:
        """Replace all videos of a playlist in one step."""
        playlist = self.get_playlist(playlist_id)
        if playlist is None:
            logger.warning(f"Cannot replace videos of unknown playlist {playlist_id}")
            return
        playlist.videos = list(videos)
        if playlist_id == self.active_playlist_id:
            self._clamp_index()
        self._state.commit()

    # Videos in the active playlist

    def add_video(
        self, url: str, title: str | None = None, video_id: str | None = None
    ) -> VideoSource | None:
        """Append a video to the active playlist.

        Args:
            url: Video URL.
            title: Optional title, defaults to a generic label.
            video_id: Optional explicit id. Derived from the URL when possible,
                otherwise a random id.

        Returns:
            The added video, or None if there is no active playlist.
        """
        playlist = self.active_playlist
        if playlist is None:
            return None

        taken = {video.id for video in playlist.videos}
        video_id = video_id or youtube.extract_video_id(url)
        if not video_id or video_id in taken:
            video_id = _new_id(taken)

        video = VideoSource(
            id=video_id, url=url, title=title or constants.DEFAULT_VIDEO_TITLE
        )
        playlist.videos.append(video)
        self._state.commit()
        return video

    def add_videos(self, videos: Iterable[VideoSource]) -> int:
        """Append a batch of videos to the active playlist.

        Videos whose id is already present in the playlist are skipped.

        Returns:
            Number of videos added.
        """
        playlist = self.active_playlist
        if playlist is None:
            return 0

        taken = {video.id for video in playlist.videos}
        added = 0
        for video in videos:
            if video.id in taken:
                continue
            playlist.videos.append(video)
            taken.add(video.id)
            added += 1

        self._state.commit()
        return added

    def remove_video(self, video_id: str) -> bool:
        """Remove a video from the active playlist.

        The current index keeps pointing at the same video when an earlier one
        is removed, and wraps to the start when it falls off the end.

        Returns:
            True if the currently playing video was the one removed.
        """
        playlist = self.active_playlist
        if playlist is None:
            return False

        index = playlist.find_video_index(video_id)
        if index is None:
            return False

        session = self._state.session
        was_current = index == session.current_video_index
        del playlist.videos[index]
        if index < session.current_video_index:
            session.current_video_index -= 1
        self._clamp_index()
        self._state.commit()
        return was_current

    # Settings

    def update_settings(self, **changes: Any) -> QuizSettings:
        """Merge setting changes, clamping invalid values.

        Args:
            **changes: QuizSettings field names and new values. Unknown names
                are ignored with a warning.

        Returns:
            The updated settings.
        """
        settings = self.settings
        for name, value in changes.items():
            if name not in SETTING_DOCUMENT_KEYS:
                logger.warning(f"Ignoring unknown setting {name!r}")
                continue
            setattr(settings, name, coerce_setting(name, value))

        self._state.commit()
        return settings

    def _activate(self, playlist_id: str) -> None:
        self._state.persisted.active_playlist_id = playlist_id
        self._state.session.current_video_index = 0

    def _clamp_index(self) -> None:
        session = self._state.session
        if session.current_video_index >= len(self._state.videos):
            session.current_video_index = 0
