"""Constants for quizbreak.

These are true constants that never change - schema versions, setting bounds, defaults, etc.
"""

from typing import Final

# Persisted document
SCHEMA_VERSION: Final = 1
DEFAULT_PLAYLIST_ID: Final = "default"
DEFAULT_PLAYLIST_NAME: Final = "My Playlist"
DEFAULT_VIDEO_TITLE: Final = "Video"

# Setting bounds
MIN_INTERVAL_MINUTES: Final = 1
MIN_MATH_DIFFICULTY: Final = 1
MAX_MATH_DIFFICULTY: Final = 3
MIN_REQUIRED_CORRECT: Final = 1
MIN_INCORRECT_DELAY_SECONDS: Final = 0
MIN_PHONETICS_OPTIONS: Final = 2
MAX_PHONETICS_OPTIONS: Final = 8
MIN_QUIZ_VOLUME: Final = 0.0
MAX_QUIZ_VOLUME: Final = 1.0

# Setting defaults
DEFAULT_INTERRUPTION_MODE: Final = "time"
DEFAULT_INTERVAL_MINUTES: Final = 5
DEFAULT_ENABLED_QUIZ_TYPES: Final = ("phonetics", "math")
DEFAULT_MATH_DIFFICULTY: Final = 1
DEFAULT_REQUIRED_CORRECT: Final = 1
DEFAULT_INCORRECT_DELAY_SECONDS: Final = 2
DEFAULT_PHONETICS_OPTIONS: Final = 2
DEFAULT_QUIZ_VOLUME: Final = 1.0

# Timer resolutions (seconds)
INTERRUPTION_CHECK_SECONDS: Final = 1.0
LOCKOUT_TICK_SECONDS: Final = 0.1

# Quiz pacing (seconds)
NEXT_QUESTION_DELAY_SECONDS: Final = 2.0
COMPLETION_DELAY_SECONDS: Final = 3.0
MATH_CHOICE_COUNT: Final = 3

# YouTube Data API
YOUTUBE_API_BASE_URL: Final = "https://www.googleapis.com/youtube/v3"
YOUTUBE_PAGE_SIZE: Final = 50
YOUTUBE_REQUEST_TIMEOUT: Final = 10.0
YOUTUBE_WATCH_URL: Final = "https://www.youtube.com/watch?v={video_id}"
UNAVAILABLE_VIDEO_TITLES: Final = frozenset({"Private video", "Deleted video"})
