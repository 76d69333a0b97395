"""Protocol definitions for dependency injection in PlaybackController."""

from typing import Protocol

from quizbreak.models import VideoSource


class MediaPlayer(Protocol):
    """Protocol for the embedded video player.

    The controller interacts with this protocol without knowing which player
    backs it. Implementations report what happens through
    `PlaybackController.handle_event`.
    """

    def load(self, video: VideoSource) -> None:
        """Cue a video. The player reports `Ready` once it can be played.

        Args:
            video: The video to cue.
        """
        ...

    def play(self) -> None:
        """Start or resume playback of the cued video.

        Safe to call when already playing.
        """
        ...

    def pause(self) -> None:
        """Pause playback.

        Safe to call when nothing is playing.
        """
        ...
