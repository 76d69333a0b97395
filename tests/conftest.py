"""Shared test fixtures and utilities."""

import logging
import random
from datetime import date
from pathlib import Path

import pytest

from quizbreak.config.settings import QuizbreakSettings
from quizbreak.models import PersistedState, Playlist, VideoSource
from quizbreak.playback.controller import PlaybackController
from quizbreak.settings_store import SettingsStore
from quizbreak.state import AppState, SessionState
from quizbreak.stats import StatisticsAggregator
from tests.mocks.fake_timers import FakeClock, FakeScheduler
from tests.mocks.mock_player import MockMediaPlayer
from tests.mocks.mock_quiz_output import MockQuizOutput

TODAY = date(2024, 3, 15)


@pytest.fixture
def settings(tmp_path: Path) -> QuizbreakSettings:
    """QuizbreakSettings writing into a temporary directory."""
    state_dir = tmp_path / "state"
    return QuizbreakSettings(
        state_dir=state_dir,
        state_file=state_dir / "quizbreak.json",
        log_level=logging.INFO,
        youtube_api_base_url="https://youtube.test/v3",
        youtube_request_timeout=1.0,
        next_question_delay=2.0,
        completion_delay=3.0,
    )


@pytest.fixture
def clock() -> FakeClock:
    """Fresh FakeClock instance."""
    return FakeClock()


@pytest.fixture
def scheduler(clock: FakeClock) -> FakeScheduler:
    """FakeScheduler driving the shared clock."""
    return FakeScheduler(clock)


@pytest.fixture
def mock_player() -> MockMediaPlayer:
    """Fresh MockMediaPlayer instance."""
    return MockMediaPlayer()


@pytest.fixture
def mock_output() -> MockQuizOutput:
    """Fresh MockQuizOutput instance."""
    return MockQuizOutput()


@pytest.fixture
def rng() -> random.Random:
    """Seeded random generator for repeatable questions."""
    return random.Random(1234)


def make_video(video_id: str, title: str | None = None) -> VideoSource:
    """Helper to create test VideoSource instances."""
    return VideoSource(
        id=video_id,
        url=f"https://www.youtube.com/watch?v={video_id}",
        title=title or f"Video {video_id}",
    )


def make_state(
    videos: list[VideoSource] | None = None, clock: FakeClock | None = None
) -> AppState:
    """Helper to create an AppState whose default playlist holds `videos`."""
    playlist = Playlist(id="default", name="My Playlist", videos=list(videos or []))
    persisted = PersistedState(playlists=[playlist], active_playlist_id="default")
    now = clock.now() if clock is not None else 0.0
    return AppState(persisted, SessionState.fresh(now))


@pytest.fixture
def sample_videos() -> list[VideoSource]:
    """Three videos for playlist tests."""
    return [make_video("aaaaaaaaaaa"), make_video("bbbbbbbbbbb"), make_video("ccccccccccc")]


@pytest.fixture
def app_state(sample_videos, clock) -> AppState:
    """AppState with the sample videos in the active playlist."""
    return make_state(sample_videos, clock)


@pytest.fixture
def store(app_state) -> SettingsStore:
    return SettingsStore(app_state)


@pytest.fixture
def stats(app_state) -> StatisticsAggregator:
    """StatisticsAggregator pinned to a fixed date."""
    return StatisticsAggregator(app_state, today=lambda: TODAY)


@pytest.fixture
def controller(app_state, mock_player, scheduler, clock, stats) -> PlaybackController:
    """PlaybackController over the sample videos, not started."""
    return PlaybackController(app_state, mock_player, scheduler, clock, stats)
