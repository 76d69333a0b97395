"""Playback package for driving the video player and interruptions."""

from quizbreak.playback.controller import PlaybackController
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

__all__ = [
    "Ended",
    "Error",
    "InterruptionCause",
    "MediaPlayer",
    "PlaybackController",
    "PlaybackPhase",
    "PlayerEvent",
    "Ready",
    "StateChanged",
]
