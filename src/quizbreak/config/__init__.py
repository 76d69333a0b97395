"""Configuration module for quizbreak.

This module provides a two-tier configuration system:
- constants: Pure constants that never change (schema version, setting bounds, defaults)
- settings: Runtime settings loaded from environment variables
"""

# Re-export commonly used constants
from quizbreak.config.constants import (
    DEFAULT_PLAYLIST_ID,
    DEFAULT_PLAYLIST_NAME,
    INTERRUPTION_CHECK_SECONDS,
    LOCKOUT_TICK_SECONDS,
    SCHEMA_VERSION,
)

# Re-export settings class
from quizbreak.config.settings import QuizbreakSettings

__all__ = [
    # Constants
    "DEFAULT_PLAYLIST_ID",
    "DEFAULT_PLAYLIST_NAME",
    "INTERRUPTION_CHECK_SECONDS",
    "LOCKOUT_TICK_SECONDS",
    "SCHEMA_VERSION",
    # Settings class
    "QuizbreakSettings",
]
