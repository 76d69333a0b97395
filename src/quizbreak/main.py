import logging
import sys

import colorlog

from quizbreak.config.settings import QuizbreakSettings
from quizbreak.config.validation import validate_and_setup_directories
from quizbreak.kiosk import CatalogFactory, KioskSession
from quizbreak.persistent_state import PersistentState
from quizbreak.playback.protocols import MediaPlayer
from quizbreak.quiz.protocols import QuizOutput
from quizbreak.state import AppState, SessionState
from quizbreak.stats import StatisticsAggregator
from quizbreak.timers import AsyncioScheduler, Clock, MonotonicClock, Scheduler

logger = logging.getLogger(__name__)


def setup_logging(log_level: int) -> None:
    formatter = colorlog.ColoredFormatter(
        "%(cyan)s%(asctime)s%(reset)s %(log_color)s%(levelname)-8s%(reset)s %(light_purple)s%(name)s:%(reset)s %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
        log_colors={
            "DEBUG": "purple",
            "INFO": "blue",
            "WARNING": "yellow",
            "ERROR": "red",
            "CRITICAL": "red,bg_white",
        },
    )

    handler = logging.StreamHandler(stream=sys.stdout)
    handler.setFormatter(formatter)

    logger = logging.getLogger()
    logger.setLevel(log_level)
    logger.addHandler(handler)


def load_settings() -> QuizbreakSettings | None:
    """Load settings from the environment and prepare the state directory.

    Returns:
        The settings, or None if the state directory is unusable.
    """
    settings = QuizbreakSettings.from_environment()
    settings.validate(logger)

    validation_errors = validate_and_setup_directories(settings)
    if validation_errors:
        for error in validation_errors:
            logger.error(error)
        return None
    return settings


def create_kiosk(
    media_player: MediaPlayer,
    quiz_output: QuizOutput,
    settings: QuizbreakSettings,
    scheduler: Scheduler | None = None,
    clock: Clock | None = None,
    catalog_factory: CatalogFactory | None = None,
) -> KioskSession:
    """Build a kiosk session backed by the configured state file.

    The default scheduler runs on the asyncio event loop, so the session must be
    started from within a running loop.

    Args:
        media_player: Embedded video player implementation.
        quiz_output: Quiz presentation implementation.
        settings: Process settings.
        scheduler: Timer source, defaults to the asyncio loop.
        clock: Time source, defaults to the monotonic clock.
        catalog_factory: Builds a video catalog from an API key.

    Returns:
        A KioskSession that has not been started yet.
    """
    return KioskSession(
        settings,
        PersistentState(settings.state_file),
        media_player,
        quiz_output,
        scheduler or AsyncioScheduler(),
        clock or MonotonicClock(),
        catalog_factory=catalog_factory,
    )


def print_report(settings: QuizbreakSettings) -> None:
    """Log playlists and progress statistics from the stored document."""
    persistence = PersistentState(settings.state_file)
    state = AppState(persistence.load(), SessionState.fresh(0.0))
    stats = StatisticsAggregator(state)

    active_id = state.persisted.active_playlist_id
    for playlist in state.persisted.playlists:
        marker = "*" if playlist.id == active_id else " "
        logger.info(f"{marker} {playlist.name} ({len(playlist.videos)} videos)")

    for quiz_type in ("phonetics", "math"):
        category = state.persisted.stats.for_type(quiz_type)
        logger.info(
            f"{quiz_type}: {category.total_correct}/{category.total_attempts} correct "
            f"({stats.accuracy_percent(quiz_type)}%)"
        )
        for row in stats.item_accuracy(quiz_type)[:5]:
            logger.info(f"  {row.item_id}: {row.correct}/{row.attempts}")

    logger.info(f"Total watch time: {stats.total_watch_minutes()} minutes")
    for day in stats.recent_usage():
        logger.info(f"  {day.date.isoformat()}: {day.minutes} min")


def run_report() -> None:
    """Entry point for the quizbreak-report script."""
    setup_logging(logging.INFO)

    settings = load_settings()
    if settings is None:
        logger.critical("Startup validation failed, exiting")
        sys.exit(1)

    logging.getLogger().setLevel(settings.log_level)
    print_report(settings)


if __name__ == "__main__":
    run_report()
