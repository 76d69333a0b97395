"""Data models for the playback state machine."""

from dataclasses import dataclass
from enum import Enum, auto


class PlaybackPhase(Enum):
    """Represents the current phase of playback."""

    PLAYING = auto()  # Videos should be playing
    PAUSED = auto()  # Paused by hand, or nothing to play
    INTERRUPTED = auto()  # Gated behind a quiz


class InterruptionCause(Enum):
    """Why playback was interrupted."""

    TIMER = auto()
    VIDEO_END = auto()


# Inbound events reported by the media player


@dataclass(frozen=True)
class Ready:
    """The player has loaded the cued video and can play it."""


@dataclass(frozen=True)
class StateChanged:
    """The player started or stopped playing."""

    playing: bool


@dataclass(frozen=True)
class Ended:
    """The current video played to its end."""


@dataclass(frozen=True)
class Error:
    """The player could not play the current video."""

    reason: str | None = None


PlayerEvent = Ready | StateChanged | Ended | Error
