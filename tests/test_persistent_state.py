"""Tests for PersistentState loading, saving and schema migration."""

import json

from quizbreak.models import PersistedState, Playlist, QuizItemStats
from quizbreak.persistent_state import PersistentState, migrate
from tests.conftest import make_video


class TestRoundTrip:
    """Saved state loads back unchanged."""

    def test_round_trip_preserves_everything(self, tmp_path):
        """Playlists, active id, settings and stats survive save and load."""
        state_file = tmp_path / "state.json"
        state = PersistedState(
            playlists=[
                Playlist(
                    id="default",
                    name="My Playlist",
                    videos=[make_video("aaaaaaaaaaa"), make_video("bbbbbbbbbbb")],
                ),
                Playlist(id="p2", name="Cartoons", external_source_id="PLxyz"),
            ],
            active_playlist_id="p2",
        )
        state.settings.interruption_mode = "video_end"
        state.settings.required_correct_answers = 3
        state.settings.enabled_quiz_types = ["math"]
        state.stats.math.total_attempts = 2
        state.stats.math.total_correct = 1
        state.stats.math.items["math-diff-1"] = QuizItemStats(attempts=2, correct=1)

        persistence = PersistentState(state_file)
        assert persistence.save(state) is True

        loaded = persistence.load()
        assert loaded == state

    def test_document_uses_camel_case_keys(self, tmp_path):
        """The stored document uses the documented key names."""
        state_file = tmp_path / "state.json"
        PersistentState(state_file).save(PersistedState())

        document = json.loads(state_file.read_text())
        assert document["version"] == 1
        assert document["activePlaylistId"] == "default"
        assert document["interruptionMode"] == "time"
        assert document["interruptionIntervalMinutes"] == 5
        assert document["enabledQuizTypes"] == ["phonetics", "math"]
        assert "stats" in document
        assert "currentVideoIndex" not in document
        assert "isInterrupted" not in document

    def test_external_id_stored_as_youtube_playlist_id(self, tmp_path):
        """Linked playlists serialize their external id under youtubePlaylistId."""
        state_file = tmp_path / "state.json"
        state = PersistedState(
            playlists=[Playlist(id="p", name="P", external_source_id="PL123")],
            active_playlist_id="p",
        )
        PersistentState(state_file).save(state)

        document = json.loads(state_file.read_text())
        assert document["playlists"][0]["youtubePlaylistId"] == "PL123"

    def test_save_leaves_no_temporary_file(self, tmp_path):
        """The temporary sibling file is renamed into place."""
        state_file = tmp_path / "state.json"
        PersistentState(state_file).save(PersistedState())

        assert [p.name for p in tmp_path.iterdir()] == ["state.json"]

    def test_save_creates_parent_directory(self, tmp_path):
        """Saving into a missing directory creates it."""
        state_file = tmp_path / "nested" / "dir" / "state.json"
        assert PersistentState(state_file).save(PersistedState()) is True
        assert state_file.exists()


class TestLoadFallbacks:
    """Unusable data falls back to defaults without raising."""

    def test_missing_file_gives_defaults(self, tmp_path):
        state = PersistentState(tmp_path / "missing.json").load()
        assert state == PersistedState()

    def test_corrupt_json_gives_defaults(self, tmp_path):
        """Unparsable content is logged and ignored."""
        state_file = tmp_path / "state.json"
        state_file.write_text("{not json")

        state = PersistentState(state_file).load()
        assert state == PersistedState()

    def test_non_object_document_gives_defaults(self, tmp_path):
        state_file = tmp_path / "state.json"
        state_file.write_text("[1, 2, 3]")

        assert PersistentState(state_file).load() == PersistedState()

    def test_empty_file_gives_defaults(self, tmp_path):
        state_file = tmp_path / "state.json"
        state_file.write_text("")

        assert PersistentState(state_file).load() == PersistedState()

    def test_default_state_has_one_empty_active_playlist(self):
        """Defaults contain exactly one active empty playlist."""
        state = PersistedState()
        assert len(state.playlists) == 1
        assert state.active_playlist.id == "default"
        assert state.active_playlist.name == "My Playlist"
        assert state.active_playlist.videos == []

    def test_dangling_active_id_is_repaired(self, tmp_path):
        """An active id naming no playlist falls back to the first playlist."""
        state_file = tmp_path / "state.json"
        state_file.write_text(
            json.dumps(
                {
                    "version": 1,
                    "playlists": [{"id": "a", "name": "A", "videos": []}],
                    "activePlaylistId": "gone",
                }
            )
        )

        state = PersistentState(state_file).load()
        assert state.active_playlist_id == "a"

    def test_invalid_settings_are_clamped_on_load(self, tmp_path):
        """Out of range settings in the file are clamped, not rejected."""
        state_file = tmp_path / "state.json"
        state_file.write_text(
            json.dumps(
                {
                    "version": 1,
                    "playlists": [{"id": "default", "name": "My Playlist"}],
                    "activePlaylistId": "default",
                    "mathDifficulty": 9,
                    "phoneticsOptionsCount": 1,
                    "quizVolume": 2.5,
                    "requiredCorrectAnswers": 0,
                }
            )
        )

        settings = PersistentState(state_file).load().settings
        assert settings.math_difficulty == 3
        assert settings.phonetics_options_count == 2
        assert settings.quiz_volume == 1.0
        assert settings.required_correct_answers == 1

    def test_infinite_numbers_load_as_defaults(self, tmp_path):
        """JSON accepts 1e999 and Infinity; neither may stop the kiosk loading."""
        state_file = tmp_path / "state.json"
        state_file.write_text(
            '{"version": 1, "interruptionIntervalMinutes": 1e999,'
            ' "quizVolume": -Infinity,'
            ' "stats": {"math": {"items": {"math-diff-1":'
            ' {"attempts": Infinity, "correct": 1}}},'
            ' "usage": [{"date": "2024-05-01", "watchTimeSeconds": NaN}]}}'
        )

        state = PersistentState(state_file).load()
        assert state.settings.interruption_interval_minutes == 5
        assert state.settings.quiz_volume == 1.0
        assert state.stats.math.items["math-diff-1"] == QuizItemStats(0, 0)
        assert state.stats.usage[0].watch_time_seconds == 0.0

    def test_stats_counters_clamped_on_load(self, tmp_path):
        """Correct answers never exceed attempts and no counter is negative."""
        state_file = tmp_path / "state.json"
        state_file.write_text(
            json.dumps(
                {
                    "version": 1,
                    "stats": {
                        "math": {
                            "totalAttempts": 1,
                            "totalCorrect": 5,
                            "items": {
                                "math-diff-1": {"attempts": 1, "correct": 5},
                                "math-diff-2": {"attempts": -3, "correct": 2},
                                "math-diff-3": {"attempts": 4, "correct": -1},
                            },
                        }
                    },
                }
            )
        )

        math = PersistentState(state_file).load().stats.math
        assert math.items["math-diff-1"] == QuizItemStats(attempts=1, correct=1)
        assert math.items["math-diff-2"] == QuizItemStats(attempts=0, correct=0)
        assert math.items["math-diff-3"] == QuizItemStats(attempts=4, correct=0)
        assert math.total_attempts == 5
        assert math.total_correct == 1

    def test_invalid_utf8_gives_defaults(self, tmp_path):
        state_file = tmp_path / "state.json"
        state_file.write_bytes(b'{"version": 1, "playlists": [{"id": "\xff\xfe"}]}')

        assert PersistentState(state_file).load() == PersistedState()


class TestSaveFailure:
    """Write failures are reported, never raised."""

    def test_save_into_file_path_returns_false(self, tmp_path):
        """A parent that is a regular file makes the save fail."""
        blocker = tmp_path / "blocker"
        blocker.write_text("")

        persistence = PersistentState(blocker / "state.json")
        assert persistence.save(PersistedState()) is False


class TestMigration:
    """Schema migration from older document versions."""

    def test_version_zero_wraps_videos_into_default_playlist(self):
        """A flat video list becomes the active default playlist."""
        document = {
            "videos": [
                {"id": "v1", "url": "https://youtu.be/aaaaaaaaaaa", "title": "One"},
                {"id": "v2", "url": "https://youtu.be/bbbbbbbbbbb"},
            ],
            "interruptionIntervalMinutes": 10,
        }

        migrated = migrate(document)

        assert migrated["version"] == 1
        assert "videos" not in migrated
        assert migrated["activePlaylistId"] == "default"
        assert migrated["playlists"] == [
            {
                "id": "default",
                "name": "My Playlist",
                "videos": [
                    {"id": "v1", "url": "https://youtu.be/aaaaaaaaaaa", "title": "One"},
                    {"id": "v2", "url": "https://youtu.be/bbbbbbbbbbb"},
                ],
            }
        ]
        assert migrated["interruptionIntervalMinutes"] == 10

    def test_migration_does_not_mutate_input(self):
        document = {"videos": [{"id": "v1", "url": "u"}]}
        migrate(document)
        assert document == {"videos": [{"id": "v1", "url": "u"}]}

    def test_version_zero_without_videos(self):
        """A version 0 document with no videos gets an empty default playlist."""
        migrated = migrate({})
        assert migrated["playlists"][0]["videos"] == []
        assert migrated["activePlaylistId"] == "default"

    def test_current_version_unchanged(self):
        document = {
            "version": 1,
            "playlists": [{"id": "x", "name": "X", "videos": []}],
            "activePlaylistId": "x",
        }
        assert migrate(document) == document

    def test_newer_version_not_downgraded(self):
        """Documents from a newer release load as-is."""
        document = {
            "version": 7,
            "playlists": [{"id": "x", "name": "X", "videos": []}],
            "activePlaylistId": "x",
        }
        assert migrate(document)["version"] == 7

    def test_load_migrates_version_zero_file(self, tmp_path):
        """Loading a version 0 file gives a playable version 1 state."""
        state_file = tmp_path / "state.json"
        state_file.write_text(
            json.dumps({"videos": [{"id": "v1", "url": "https://youtu.be/aaaaaaaaaaa"}]})
        )

        state = PersistentState(state_file).load()

        assert state.active_playlist_id == "default"
        assert [v.id for v in state.active_playlist.videos] == ["v1"]

    def test_invalid_version_gives_defaults(self, tmp_path):
        state_file = tmp_path / "state.json"
        state_file.write_text(json.dumps({"version": "one"}))

        assert PersistentState(state_file).load() == PersistedState()
