"""Data models for the persisted kiosk document.

Every type here round-trips through the camelCase JSON document written by
`quizbreak.persistent_state`. Session-only state lives in `quizbreak.state`.
"""

from dataclasses import dataclass, field, fields
from typing import Any, Literal

from quizbreak.config import constants
from quizbreak.config.validation import (
    coerce_counter,
    coerce_seconds,
    coerce_setting,
)

QuizType = Literal["phonetics", "math"]
InterruptionMode = Literal["time", "video_end"]


@dataclass(frozen=True)
class VideoSource:
    """A single playable video."""

    id: str
    url: str
    title: str | None = None

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {"id": self.id, "url": self.url}
        if self.title is not None:
            data["title"] = self.title
        return data

    @staticmethod
    def from_dict(data: dict[str, Any]) -> "VideoSource":
        return VideoSource(
            id=str(data["id"]),
            url=str(data["url"]),
            title=data.get("title"),
        )


@dataclass
class Playlist:
    """An ordered list of videos, optionally linked to a remote playlist."""

    id: str
    name: str
    videos: list[VideoSource] = field(default_factory=list)
    external_source_id: str | None = None

    def find_video_index(self, video_id: str) -> int | None:
        for index, video in enumerate(self.videos):
            if video.id == video_id:
                return index
        return None

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {
            "id": self.id,
            "name": self.name,
            "videos": [video.to_dict() for video in self.videos],
        }
        if self.external_source_id is not None:
            data["youtubePlaylistId"] = self.external_source_id
        return data

    @staticmethod
    def from_dict(data: dict[str, Any]) -> "Playlist":
        return Playlist(
            id=str(data["id"]),
            name=str(data.get("name", constants.DEFAULT_PLAYLIST_NAME)),
            videos=[VideoSource.from_dict(video) for video in data.get("videos", [])],
            external_source_id=data.get("youtubePlaylistId"),
        )

    @staticmethod
    def default() -> "Playlist":
        return Playlist(
            id=constants.DEFAULT_PLAYLIST_ID, name=constants.DEFAULT_PLAYLIST_NAME
        )


@dataclass
class QuizItemStats:
    """Attempt counters for one quiz item."""

    attempts: int = 0
    correct: int = 0

    @property
    def accuracy(self) -> float:
        """Percentage of correct attempts, 0 when never attempted."""
        if self.attempts == 0:
            return 0.0
        return self.correct / self.attempts * 100


@dataclass
class QuizStats:
    """Attempt counters for one quiz type, totals plus per item."""

    total_attempts: int = 0
    total_correct: int = 0
    items: dict[str, QuizItemStats] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        return {
            "totalAttempts": self.total_attempts,
            "totalCorrect": self.total_correct,
            "items": {
                item_id: {"attempts": item.attempts, "correct": item.correct}
                for item_id, item in self.items.items()
            },
        }

    @staticmethod
    def from_dict(data: dict[str, Any]) -> "QuizStats":
        items = {}
        for item_id, item in data.get("items", {}).items():
            attempts = coerce_counter(item.get("attempts", 0))
            correct = min(coerce_counter(item.get("correct", 0)), attempts)
            items[str(item_id)] = QuizItemStats(attempts=attempts, correct=correct)
        # Totals are derived from the items so a hand-edited document cannot
        # break the sum invariant.
        return QuizStats(
            total_attempts=sum(item.attempts for item in items.values()),
            total_correct=sum(item.correct for item in items.values()),
            items=items,
        )


@dataclass
class DailyUsage:
    """Watch time accumulated on one calendar day."""

    date: str
    watch_time_seconds: float = 0.0

    def to_dict(self) -> dict[str, Any]:
        return {"date": self.date, "watchTimeSeconds": self.watch_time_seconds}

    @staticmethod
    def from_dict(data: dict[str, Any]) -> "DailyUsage":
        return DailyUsage(
            date=str(data["date"]),
            watch_time_seconds=coerce_seconds(data.get("watchTimeSeconds", 0)),
        )


@dataclass
class Stats:
    """All statistics kept by the kiosk."""

    phonetics: QuizStats = field(default_factory=QuizStats)
    math: QuizStats = field(default_factory=QuizStats)
    usage: list[DailyUsage] = field(default_factory=list)

    def for_type(self, quiz_type: QuizType) -> QuizStats:
        if quiz_type == "phonetics":
            return self.phonetics
        if quiz_type == "math":
            return self.math
        raise ValueError(f"Unknown quiz type: {quiz_type!r}")

    def to_dict(self) -> dict[str, Any]:
        return {
            "phonetics": self.phonetics.to_dict(),
            "math": self.math.to_dict(),
            "usage": [entry.to_dict() for entry in self.usage],
        }

    @staticmethod
    def from_dict(data: dict[str, Any]) -> "Stats":
        # Merge duplicate days that older documents may contain
        usage: dict[str, DailyUsage] = {}
        for raw in data.get("usage", []):
            entry = DailyUsage.from_dict(raw)
            if entry.date in usage:
                usage[entry.date].watch_time_seconds += entry.watch_time_seconds
            else:
                usage[entry.date] = entry

        return Stats(
            phonetics=QuizStats.from_dict(data.get("phonetics", {})),
            math=QuizStats.from_dict(data.get("math", {})),
            usage=list(usage.values()),
        )


# Persisted document key for every QuizSettings field
SETTING_DOCUMENT_KEYS = {
    "interruption_mode": "interruptionMode",
    "interruption_interval_minutes": "interruptionIntervalMinutes",
    "enabled_quiz_types": "enabledQuizTypes",
    "math_difficulty": "mathDifficulty",
    "required_correct_answers": "requiredCorrectAnswers",
    "incorrect_delay_seconds": "incorrectDelaySeconds",
    "phonetics_options_count": "phoneticsOptionsCount",
    "quiz_volume": "quizVolume",
    "youtube_api_key": "youtubeApiKey",
}


@dataclass
class QuizSettings:
    """Quiz and interruption configuration chosen by the guardian."""

    interruption_mode: InterruptionMode = constants.DEFAULT_INTERRUPTION_MODE
    interruption_interval_minutes: int = constants.DEFAULT_INTERVAL_MINUTES
    enabled_quiz_types: list[QuizType] = field(
        default_factory=lambda: list(constants.DEFAULT_ENABLED_QUIZ_TYPES)
    )
    math_difficulty: int = constants.DEFAULT_MATH_DIFFICULTY
    required_correct_answers: int = constants.DEFAULT_REQUIRED_CORRECT
    incorrect_delay_seconds: float = constants.DEFAULT_INCORRECT_DELAY_SECONDS
    phonetics_options_count: int = constants.DEFAULT_PHONETICS_OPTIONS
    quiz_volume: float = constants.DEFAULT_QUIZ_VOLUME
    youtube_api_key: str = ""

    @property
    def interval_seconds(self) -> float:
        return self.interruption_interval_minutes * 60.0

    def to_dict(self) -> dict[str, Any]:
        return {
            SETTING_DOCUMENT_KEYS[f.name]: (
                list(getattr(self, f.name))
                if f.name == "enabled_quiz_types"
                else getattr(self, f.name)
            )
            for f in fields(self)
        }

    @staticmethod
    def from_dict(data: dict[str, Any]) -> "QuizSettings":
        values = {
            name: coerce_setting(name, data[key])
            for name, key in SETTING_DOCUMENT_KEYS.items()
            if key in data
        }
        return QuizSettings(**values)


@dataclass
class PersistedState:
    """The root document: everything that survives a restart."""

    playlists: list[Playlist] = field(default_factory=lambda: [Playlist.default()])
    active_playlist_id: str = constants.DEFAULT_PLAYLIST_ID
    settings: QuizSettings = field(default_factory=QuizSettings)
    stats: Stats = field(default_factory=Stats)

    def get_playlist(self, playlist_id: str) -> Playlist | None:
        for playlist in self.playlists:
            if playlist.id == playlist_id:
                return playlist
        return None

    @property
    def active_playlist(self) -> Playlist | None:
        return self.get_playlist(self.active_playlist_id)

    def ensure_invariants(self) -> None:
        """Repair a document so at least one playlist exists and one is active."""
        if not self.playlists:
            self.playlists.append(Playlist.default())
        if self.active_playlist is None:
            self.active_playlist_id = self.playlists[0].id

    def to_document(self) -> dict[str, Any]:
        """Serialize to the versioned JSON document shape."""
        document: dict[str, Any] = {
            "version": constants.SCHEMA_VERSION,
            "playlists": [playlist.to_dict() for playlist in self.playlists],
            "activePlaylistId": self.active_playlist_id,
        }
        document.update(self.settings.to_dict())
        document["stats"] = self.stats.to_dict()
        return document

    @staticmethod
    def from_document(document: dict[str, Any]) -> "PersistedState":
        """Build state from an already migrated document.

        Raises:
            KeyError, TypeError, ValueError, AttributeError: If the document is malformed.
        """
        state = PersistedState(
            playlists=[Playlist.from_dict(p) for p in document.get("playlists", [])],
            active_playlist_id=str(
                document.get("activePlaylistId", constants.DEFAULT_PLAYLIST_ID)
            ),
            settings=QuizSettings.from_dict(document),
            stats=Stats.from_dict(document.get("stats", {})),
        )
        state.ensure_invariants()
        return state
