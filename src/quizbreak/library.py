"""Playlist operations that talk to a remote video catalog.

Remote data is always fetched completely before the store is touched, so a
failed sync never leaves a playlist half replaced.
"""

import logging
from dataclasses import dataclass

from quizbreak import youtube
from quizbreak.errors import CatalogError, PlaylistNotFoundError
from quizbreak.models import VideoSource
from quizbreak.settings_store import SettingsStore
from quizbreak.youtube import VideoCatalog

logger = logging.getLogger(__name__)


@dataclass
class AddResult:
    """Outcome of adding from a pasted URL."""

    added: list[VideoSource]
    from_playlist: bool


def sync_playlist(
    store: SettingsStore, catalog: VideoCatalog, playlist_id: str
) -> list[VideoSource]:
    """Replace a linked playlist's videos with the remote playlist contents.

    Args:
        store: Settings store owning the playlist.
        catalog: Remote catalog to query.
        playlist_id: Local id of the linked playlist.

    Returns:
        The new video list.

    Raises:
        PlaylistNotFoundError: If the playlist does not exist.
        CatalogError: If the playlist is not linked or the catalog fails. The
            playlist is left untouched.
    """
    playlist = store.get_playlist(playlist_id)
    if playlist is None:
        raise PlaylistNotFoundError(playlist_id)
    if not playlist.external_source_id:
        raise CatalogError(f"Playlist {playlist.name!r} is not linked to YouTube")

    videos = catalog.fetch_playlist_videos(playlist.external_source_id)
    store.replace_playlist_videos(playlist_id, videos)
    logger.info(f"Synced playlist {playlist.name!r} with {len(videos)} video(s)")
    return videos


def link_playlist(
    store: SettingsStore,
    catalog: VideoCatalog | None,
    playlist_id: str,
    link_text: str,
    sync: bool = True,
) -> list[VideoSource] | None:
    """Link a playlist to a remote playlist given its URL or id.

    Args:
        store: Settings store owning the playlist.
        catalog: Remote catalog, or None to link without syncing.
        playlist_id: Local playlist to link.
        link_text: Remote playlist URL (with `list=`) or raw id.
        sync: Replace the videos right away.

    Returns:
        The synced videos, or None if no sync was performed.

    Raises:
        CatalogError: If the link text has no playlist id or the sync fails.
            A failed sync keeps the link but not a partial video list.
    """
    external_id = youtube.parse_playlist_id(link_text)
    if external_id is None:
        raise CatalogError(f"Could not find a playlist id in {link_text!r}")

    if store.get_playlist(playlist_id) is None:
        raise PlaylistNotFoundError(playlist_id)

    store.set_playlist_external_id(playlist_id, external_id)
    if not sync or catalog is None:
        return None
    return sync_playlist(store, catalog, playlist_id)


def unlink_playlist(store: SettingsStore, playlist_id: str) -> None:
    store.set_playlist_external_id(playlist_id, None)


def add_from_url(
    store: SettingsStore, catalog: VideoCatalog | None, url: str
) -> AddResult:
    """Add a pasted URL to the active playlist.

    A URL naming a playlist adds all of its videos when a catalog is available.
    Anything else is added as a single video, with its title looked up
    best-effort.

    Raises:
        CatalogError: If fetching a playlist fails. Nothing is added.
    """
    url = url.strip()
    if not url:
        return AddResult(added=[], from_playlist=False)

    remote_playlist_id = youtube.parse_playlist_id(url) if "list=" in url else None
    if remote_playlist_id and catalog is not None:
        videos = catalog.fetch_playlist_videos(remote_playlist_id)
        active = store.active_playlist
        before = {v.id for v in active.videos} if active else set()
        store.add_videos(videos)
        added = [v for v in videos if v.id not in before]
        return AddResult(added=added, from_playlist=True)

    video_id = youtube.extract_video_id(url)
    title = None
    if video_id and catalog is not None:
        title = catalog.fetch_video_title(video_id)

    video = store.add_video(url, title=title, video_id=video_id)
    return AddResult(added=[video] if video else [], from_playlist=False)
