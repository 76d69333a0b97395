"""Startup validation and setting coercion for quizbreak."""

import logging
import math
from typing import TYPE_CHECKING, Any, Callable

from quizbreak.config import constants

if TYPE_CHECKING:
    from quizbreak.config.settings import QuizbreakSettings

logger = logging.getLogger(__name__)

QUIZ_TYPES = ("phonetics", "math")
INTERRUPTION_MODES = ("time", "video_end")


def validate_and_setup_directories(settings: "QuizbreakSettings") -> list[str]:
    """Validate the state directory exists and is writable, create if needed.

    Args:
        settings: QuizbreakSettings instance containing directory paths.

    Returns:
        List of error messages (empty if all OK).
    """
    errors = []

    writable_dirs = [
        (settings.state_dir, "state directory"),
        (settings.state_file.parent, "state file directory"),
    ]

    for dir_path, description in writable_dirs:
        try:
            dir_path.mkdir(parents=True, exist_ok=True)
            # Test writability
            test_file = dir_path / ".write_test"
            test_file.touch()
            test_file.unlink()
        except OSError as e:
            errors.append(f"Cannot write to {description} ({dir_path}): {e}")

    return errors


def _to_float(value: Any) -> float | None:
    if isinstance(value, bool):
        return None
    try:
        result = float(value)
    except (TypeError, ValueError, OverflowError):
        return None
    # NaN and infinities are garbage, not extremes to clamp
    if not math.isfinite(result):
        return None
    return result


def _to_int(value: Any) -> int | None:
    number = _to_float(value)
    if number is None:
        return None
    return int(number)


def _clamp(value: float, low: float | None, high: float | None) -> float:
    if low is not None:
        value = max(low, value)
    if high is not None:
        value = min(high, value)
    return value


def _coerce_interruption_mode(value: Any) -> str:
    if value in INTERRUPTION_MODES:
        return value
    return constants.DEFAULT_INTERRUPTION_MODE


def _coerce_interval(value: Any) -> int:
    number = _to_int(value)
    if number is None or number == 0:
        return constants.DEFAULT_INTERVAL_MINUTES
    return int(_clamp(number, constants.MIN_INTERVAL_MINUTES, None))


def _coerce_quiz_types(value: Any) -> list[str]:
    if isinstance(value, str) or not hasattr(value, "__iter__"):
        return list(constants.DEFAULT_ENABLED_QUIZ_TYPES)
    try:
        members = list(value)
    except TypeError:
        return list(constants.DEFAULT_ENABLED_QUIZ_TYPES)
    requested = {member for member in members if member in QUIZ_TYPES}
    unknown = [member for member in members if member not in QUIZ_TYPES]
    if unknown:
        logger.warning(f"Ignoring unknown quiz types: {[str(m) for m in unknown]}")
    # Canonical order keeps the list order-insensitive and duplicate free
    return [quiz_type for quiz_type in QUIZ_TYPES if quiz_type in requested]


def _coerce_math_difficulty(value: Any) -> int:
    number = _to_int(value)
    if number is None:
        return constants.DEFAULT_MATH_DIFFICULTY
    return int(
        _clamp(number, constants.MIN_MATH_DIFFICULTY, constants.MAX_MATH_DIFFICULTY)
    )


def _coerce_required_correct(value: Any) -> int:
    number = _to_int(value)
    if number is None:
        return constants.DEFAULT_REQUIRED_CORRECT
    return int(_clamp(number, constants.MIN_REQUIRED_CORRECT, None))


def _coerce_incorrect_delay(value: Any) -> float:
    number = _to_float(value)
    if number is None:
        return float(constants.MIN_INCORRECT_DELAY_SECONDS)
    return _clamp(number, constants.MIN_INCORRECT_DELAY_SECONDS, None)


def _coerce_phonetics_options(value: Any) -> int:
    number = _to_int(value)
    if number is None:
        return constants.DEFAULT_PHONETICS_OPTIONS
    return int(
        _clamp(
            number, constants.MIN_PHONETICS_OPTIONS, constants.MAX_PHONETICS_OPTIONS
        )
    )


def _coerce_quiz_volume(value: Any) -> float:
    number = _to_float(value)
    if number is None:
        return constants.DEFAULT_QUIZ_VOLUME
    return _clamp(number, constants.MIN_QUIZ_VOLUME, constants.MAX_QUIZ_VOLUME)


def _coerce_api_key(value: Any) -> str:
    if value is None:
        return ""
    return str(value).strip()


def coerce_counter(value: Any) -> int:
    """Read a stored counter, treating garbage and negatives as 0."""
    number = _to_int(value)
    if number is None:
        return 0
    return max(number, 0)


def coerce_seconds(value: Any) -> float:
    """Read a stored duration in seconds, treating garbage and negatives as 0."""
    number = _to_float(value)
    if number is None:
        return 0.0
    return max(number, 0.0)


SETTING_COERCERS: dict[str, Callable[[Any], Any]] = {
    "interruption_mode": _coerce_interruption_mode,
    "interruption_interval_minutes": _coerce_interval,
    "enabled_quiz_types": _coerce_quiz_types,
    "math_difficulty": _coerce_math_difficulty,
    "required_correct_answers": _coerce_required_correct,
    "incorrect_delay_seconds": _coerce_incorrect_delay,
    "phonetics_options_count": _coerce_phonetics_options,
    "quiz_volume": _coerce_quiz_volume,
    "youtube_api_key": _coerce_api_key,
}


def coerce_setting(name: str, value: Any) -> Any:
    """Clamp or default a single quiz setting to its valid range.

    Invalid values never raise; they are replaced and a warning is logged.

    Args:
        name: Setting name, e.g. "interruption_interval_minutes".
        value: Raw value as supplied by the presentation layer.

    Returns:
        The value to store.

    Raises:
        KeyError: If the setting name is unknown.
    """
    coerced = SETTING_COERCERS[name](value)
    if name != "enabled_quiz_types" and coerced != value:
        logger.warning(f"Setting {name}={value!r} is invalid, using {coerced!r}")
    return coerced
