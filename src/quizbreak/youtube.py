"""YouTube Data API client and URL helpers for playlist sync."""

import logging
import re
from typing import Any, Protocol
from urllib.parse import parse_qs, urlparse

import requests

from quizbreak.config import constants
from quizbreak.errors import CatalogError
from quizbreak.models import VideoSource

logger = logging.getLogger(__name__)

_VIDEO_ID_PATTERN = re.compile(r"^[A-Za-z0-9_-]{11}$")
_PATH_PREFIXES = ("/embed/", "/shorts/", "/v/", "/live/")


def extract_video_id(url: str) -> str | None:
    """Extract the 11 character video id from a YouTube URL.

    Supports watch, youtu.be, embed, shorts, v/ and live/ URLs.

    Returns:
        The video id, or None if the URL is not a recognisable YouTube video URL.
    """
    url = url.strip()
    if not url:
        return None
    if "://" not in url:
        url = "https://" + url

    parsed = urlparse(url)
    host = (parsed.hostname or "").lower()
    candidate: str | None = None

    if host == "youtu.be":
        candidate = parsed.path.lstrip("/").split("/")[0]
    elif host.endswith("youtube.com") or host.endswith("youtube-nocookie.com"):
        if parsed.path == "/watch":
            candidate = parse_qs(parsed.query).get("v", [None])[0]
        else:
            for prefix in _PATH_PREFIXES:
                if parsed.path.startswith(prefix):
                    candidate = parsed.path[len(prefix) :].split("/")[0]
                    break

    if candidate and _VIDEO_ID_PATTERN.match(candidate):
        return candidate
    return None


def parse_playlist_id(text: str) -> str | None:
    """Get a playlist id from a URL with a `list=` parameter, or a raw id.

    Returns:
        The playlist id, or None for blank input.
    """
    text = text.strip()
    if not text:
        return None
    match = re.search(r"[&?]list=([^&#]+)", text, re.IGNORECASE)
    if match:
        return match.group(1)
    if "://" in text or "/" in text:
        return None
    return text


def watch_url(video_id: str) -> str:
    return constants.YOUTUBE_WATCH_URL.format(video_id=video_id)


class VideoCatalog(Protocol):
    """Protocol for a remote catalog that can list playlist contents."""

    def fetch_playlist_videos(self, playlist_id: str) -> list[VideoSource]:
        """List the playable videos of a remote playlist, in order.

        Raises:
            CatalogError: If the catalog could not be queried.
        """
        ...

    def fetch_video_title(self, video_id: str) -> str | None:
        """Look up a video title. Returns None if unknown or on failure."""
        ...


class YouTubeCatalog:
    """VideoCatalog backed by the YouTube Data API v3."""

    def __init__(
        self,
        api_key: str,
        base_url: str = constants.YOUTUBE_API_BASE_URL,
        timeout: float = constants.YOUTUBE_REQUEST_TIMEOUT,
        session: requests.Session | None = None,
    ):
        self.api_key = api_key
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self._session = session or requests.Session()

    @property
    def is_configured(self) -> bool:
        return bool(self.api_key)

    def _get(self, endpoint: str, params: dict[str, Any]) -> dict[str, Any]:
        if not self.api_key:
            raise CatalogError("A YouTube API key is required")

        try:
            response = self._session.get(
                f"{self.base_url}/{endpoint}",
                params={**params, "key": self.api_key},
                timeout=self.timeout,
            )
        except requests.RequestException as e:
            raise CatalogError(f"Could not reach YouTube: {e}") from e

        try:
            data = response.json()
        except ValueError as e:
            raise CatalogError(
                f"YouTube returned an unreadable response (HTTP {response.status_code})"
            ) from e

        if isinstance(data, dict) and "error" in data:
            error = data["error"]
            message = error.get("message") if isinstance(error, dict) else str(error)
            raise CatalogError(message or f"YouTube error (HTTP {response.status_code})")

        if not response.ok:
            raise CatalogError(f"YouTube request failed (HTTP {response.status_code})")

        if not isinstance(data, dict):
            raise CatalogError("YouTube returned an unexpected response")
        return data

    def fetch_playlist_videos(self, playlist_id: str) -> list[VideoSource]:
        videos: list[VideoSource] = []
        page_token: str | None = None

        while True:
            params: dict[str, Any] = {
                "part": "snippet",
                "maxResults": constants.YOUTUBE_PAGE_SIZE,
                "playlistId": playlist_id,
            }
            if page_token:
                params["pageToken"] = page_token

            data = self._get("playlistItems", params)
            for item in data.get("items", []):
                video = _playlist_item_to_video(item)
                if video is not None:
                    videos.append(video)

            page_token = data.get("nextPageToken")
            if not page_token:
                break

        logger.info(f"Fetched {len(videos)} video(s) from YouTube playlist {playlist_id}")
        return videos

    def fetch_video_title(self, video_id: str) -> str | None:
        try:
            data = self._get("videos", {"part": "snippet", "id": video_id})
        except CatalogError as e:
            logger.warning(f"Failed to fetch title for video {video_id}: {e}")
            return None

        items = data.get("items") or []
        if not items:
            return None
        return items[0].get("snippet", {}).get("title")


def _playlist_item_to_video(item: dict[str, Any]) -> VideoSource | None:
    snippet = item.get("snippet") or {}
    title = snippet.get("title")
    if title in constants.UNAVAILABLE_VIDEO_TITLES:
        return None

    video_id = (snippet.get("resourceId") or {}).get("videoId")
    if not video_id:
        logger.debug(f"Skipping playlist item without a video id: {item.get('id')}")
        return None

    return VideoSource(id=video_id, url=watch_url(video_id), title=title)
