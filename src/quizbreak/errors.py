"""Exception types raised by quizbreak."""


class QuizbreakError(Exception):
    """Base class for all quizbreak errors."""


class CatalogError(QuizbreakError):
    """The remote video catalog could not be queried.

    The message is meant to be shown to a guardian as-is.
    """


class PlaylistNotFoundError(QuizbreakError):
    """An operation named a playlist id that does not exist."""

    def __init__(self, playlist_id: str):
        super().__init__(f"No playlist with id {playlist_id!r}")
        self.playlist_id = playlist_id
