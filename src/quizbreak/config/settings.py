"""Runtime settings for quizbreak.

Settings loaded from environment variables and provided to components via dependency injection.
These describe the host process; the child-facing quiz settings live in the persisted document.
"""

import logging
import os
from dataclasses import dataclass
from pathlib import Path

from quizbreak.config import constants


@dataclass(frozen=True)
class QuizbreakSettings:
    """Runtime settings for a quizbreak kiosk process."""

    # File paths
    state_dir: Path
    state_file: Path

    # Logging
    log_level: int

    # YouTube Data API
    youtube_api_base_url: str
    youtube_request_timeout: float

    # Quiz pacing
    next_question_delay: float
    completion_delay: float

    @staticmethod
    def from_environment() -> "QuizbreakSettings":
        """Load settings from environment variables.

        Returns:
            QuizbreakSettings instance with values from environment variables.
        """
        state_dir = Path(os.environ.get("QUIZBREAK_STATE_DIR", "data/state"))
        state_file = Path(
            os.environ.get("QUIZBREAK_STATE_FILE", str(state_dir / "quizbreak.json"))
        )

        log_level_name = os.environ.get("QUIZBREAK_LOG_LEVEL", "INFO").upper()
        log_level = logging.getLevelName(log_level_name)
        if not isinstance(log_level, int):
            log_level = logging.INFO

        return QuizbreakSettings(
            state_dir=state_dir,
            state_file=state_file,
            log_level=log_level,
            youtube_api_base_url=os.environ.get(
                "QUIZBREAK_YOUTUBE_API_URL", constants.YOUTUBE_API_BASE_URL
            ),
            youtube_request_timeout=float(
                os.environ.get(
                    "QUIZBREAK_YOUTUBE_TIMEOUT", str(constants.YOUTUBE_REQUEST_TIMEOUT)
                )
            ),
            next_question_delay=float(
                os.environ.get(
                    "QUIZBREAK_NEXT_QUESTION_DELAY",
                    str(constants.NEXT_QUESTION_DELAY_SECONDS),
                )
            ),
            completion_delay=float(
                os.environ.get(
                    "QUIZBREAK_COMPLETION_DELAY", str(constants.COMPLETION_DELAY_SECONDS)
                )
            ),
        )

    def validate(self, logger: logging.Logger) -> None:
        """Log warnings for questionable configuration.

        Args:
            logger: Logger instance to use for warnings.
        """
        if self.state_file.parent != self.state_dir:
            logger.warning(
                f"QUIZBREAK_STATE_FILE ({self.state_file}) is outside of the state directory ({self.state_dir})"
            )

        if self.youtube_request_timeout <= 0:
            logger.warning(
                "QUIZBREAK_YOUTUBE_TIMEOUT is not positive, catalog requests may hang"
            )

        if self.next_question_delay < 0 or self.completion_delay < 0:
            logger.warning("Negative quiz delays are treated as zero")
