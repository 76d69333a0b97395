import copy
import json
import logging
import os
from pathlib import Path
from typing import Any

from quizbreak.config import constants
from quizbreak.models import PersistedState, Playlist, VideoSource

logger = logging.getLogger(__name__)


def migrate(document: dict[str, Any]) -> dict[str, Any]:
    """Upgrade a stored document to the current schema version.

    Each step is a pure function of the previous version's document. Documents
    from a newer version are returned unchanged; we never downgrade.

    Args:
        document: The raw document as parsed from disk.

    Returns:
        A new document at `constants.SCHEMA_VERSION` (or the newer stored version).
    """
    document = copy.deepcopy(document)
    version = document.get("version", 0)
    if not isinstance(version, int) or isinstance(version, bool):
        raise ValueError(f"Invalid schema version: {version!r}")

    if version > constants.SCHEMA_VERSION:
        logger.warning(
            f"Stored state has schema version {version}, newer than "
            f"{constants.SCHEMA_VERSION}. Loading it without migration."
        )
        return document

    if version == 0:
        # Version 0 had a single flat video list and no playlists.
        videos = document.pop("videos", None) or []
        document["playlists"] = [
            Playlist(
                id=constants.DEFAULT_PLAYLIST_ID,
                name=constants.DEFAULT_PLAYLIST_NAME,
                videos=[VideoSource.from_dict(video) for video in videos],
            ).to_dict()
        ]
        document["activePlaylistId"] = constants.DEFAULT_PLAYLIST_ID
        version = 1
        logger.info(f"Migrated stored state to schema version {version}")

    document["version"] = version
    return document


class PersistentState:
    """Loads and saves the kiosk document with JSON file backing."""

    def __init__(self, state_file: Path) -> None:
        """Initialize the persistence adapter.

        Args:
            state_file: Path to the state file.
        """
        self._state_file = Path(state_file)

    @property
    def state_file(self) -> Path:
        return self._state_file

    def load(self) -> PersistedState:
        """Read, migrate and parse the stored document.

        Never raises: a missing, unreadable or corrupt file yields the default state.

        Returns:
            The stored state, or a fresh default state.
        """
        try:
            with open(self._state_file, "rb") as f:
                raw = f.read()
        except FileNotFoundError:
            # Expected on first run or after setting a new custom state filepath.
            logger.info("No existing state file found, starting fresh")
            return PersistedState()
        except OSError as e:
            logger.error(f"Could not read state from {self._state_file}: {e}")
            return PersistedState()

        if not raw.strip():
            logger.info(f"State file {self._state_file} is empty, starting fresh")
            return PersistedState()

        try:
            document = json.loads(raw.decode("utf-8"))
            if not isinstance(document, dict):
                raise ValueError("top-level JSON value is not an object")
            state = PersistedState.from_document(migrate(document))
        except (ValueError, KeyError, TypeError, AttributeError, OverflowError) as e:
            logger.error(
                f"State file {self._state_file} is corrupt ({e}), falling back to defaults"
            )
            return PersistedState()

        logger.info(f"Loaded state from {self._state_file}")
        return state

    def save(self, state: PersistedState) -> bool:
        """Write the persisted subset of the state to disk.

        This function should not be made async! We do not want to yield between
        mutating the state in memory and writing it, as the document model assumes
        a single writer.

        Args:
            state: The state to write. Only persisted fields are serialized.

        Returns:
            True if the write succeeded, False if it failed (the failure is logged).
        """
        tmp_file = self._state_file.with_name(self._state_file.name + ".tmp")
        try:
            # We add indenting into the file to make it easy for a human to look
            # through in case of the need for debugging.
            state_str = json.dumps(state.to_document(), indent=2)
            self._state_file.parent.mkdir(parents=True, exist_ok=True)
            with open(tmp_file, "w") as f:
                f.write(state_str)
            os.replace(tmp_file, self._state_file)
        except (OSError, TypeError, ValueError) as e:
            logger.error(f"Unable to save state to {self._state_file}: {e}")
            return False

        return True
