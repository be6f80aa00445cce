"""
Unit tests for Session, PlaybackTiming and SessionStore.
"""

import pytest

from bofang.types import Candidate, PlaybackState
from bofang.session import PlaybackTiming, Session, SessionStore


CANDIDATE = Candidate(remote_id="abc", title="Title", link="https://youtu.be/abc")


@pytest.fixture
def session() -> Session:
    return Session(user_id="user-1")


@pytest.fixture
def playing() -> Session:
    s = Session(user_id="user-1")
    s.load("https://backend/abc.mp3")
    s.start_stream("t1", now_ms=1_000)
    return s


# =============================================================================
# TIMING
# =============================================================================

class TestPlaybackTiming:

    def test_offset_is_stop_minus_start(self):
        assert PlaybackTiming(started_at_ms=1_000, stopped_at_ms=4_500).resume_offset() == 3_500

    def test_no_pause_recorded(self):
        assert PlaybackTiming(started_at_ms=1_000).resume_offset() is None

    def test_never_started(self):
        assert PlaybackTiming().resume_offset() is None

    def test_stale_pause_is_ignored(self):
        """A pause older than the last start never yields a negative offset."""
        assert PlaybackTiming(started_at_ms=9_000, stopped_at_ms=4_000).resume_offset() is None

    def test_zero_offset(self):
        assert PlaybackTiming(started_at_ms=5_000, stopped_at_ms=5_000).resume_offset() == 0


# =============================================================================
# SESSION
# =============================================================================

class TestSession:

    def test_fresh_session_is_idle(self, session):
        assert session.state == PlaybackState.IDLE
        assert not session.has_video
        assert not session.is_streaming
        assert session.repeat_once is False
        assert session.repeat_forever is False

    def test_offer_and_clear_candidate(self, session):
        session.offer(CANDIDATE)
        assert session.state == PlaybackState.AWAITING_CONFIRMATION

        session.clear_candidate()
        assert session.pending_candidate is None
        assert session.state == PlaybackState.IDLE

    def test_offer_replaces_previous(self, session):
        other = Candidate(remote_id="xyz", title="Other", link="https://youtu.be/xyz")
        session.offer(CANDIDATE)
        session.offer(other)
        assert session.pending_candidate == other

    def test_downloading_wins(self, session):
        session.offer(CANDIDATE)
        session.begin_download()
        assert session.state == PlaybackState.DOWNLOADING

    def test_downloading_until_last_confirm_ends(self, session):
        session.begin_download()
        session.begin_download()

        session.end_download()
        assert session.state == PlaybackState.DOWNLOADING

        session.end_download()
        assert not session.downloading
        assert session.downloads_in_flight == 0

    def test_paused_is_not_finished(self, playing):
        playing.pause(now_ms=3_000)
        assert playing.is_paused
        assert not playing.is_finished

        playing.start_stream("t2", now_ms=4_000)
        playing.end_stream()
        assert playing.is_finished

    def test_cannot_stream_without_asset(self, session):
        with pytest.raises(ValueError):
            session.start_stream("t1", now_ms=0)
        assert session.stream_token is None

    def test_start_stream_returns_previous_token(self, playing):
        previous = playing.start_stream("t2", now_ms=2_000)

        assert previous == "t1"
        assert playing.stream_token == "t2"
        assert playing.timing.started_at_ms == 2_000

    def test_pause(self, playing):
        playing.pause(now_ms=3_000)

        assert playing.stream_token is None
        assert playing.timing.stopped_at_ms == 3_000
        assert playing.state == PlaybackState.PAUSED

    def test_end_stream_is_finished(self, playing):
        playing.end_stream()
        assert playing.state == PlaybackState.FINISHED

    def test_unload_clears_token(self, playing):
        playing.unload()

        assert playing.active_asset is None
        assert playing.stream_token is None
        assert playing.state == PlaybackState.IDLE

    def test_load_drops_old_token(self, playing):
        playing.load("https://backend/other.mp3")
        assert playing.stream_token is None
        assert playing.active_asset == "https://backend/other.mp3"


# =============================================================================
# STORE
# =============================================================================

class TestSessionStore:

    def test_lazy_creation(self):
        store = SessionStore()
        assert "u" not in store

        session = store.get("u")
        assert "u" in store
        assert len(store) == 1
        assert session.user_id == "u"

    def test_same_object_per_user(self):
        store = SessionStore()
        assert store.get("u") is store.get("u")

    def test_users_are_separate(self):
        store = SessionStore()
        store.get("a").offer(CANDIDATE)

        assert store.get("b").pending_candidate is None
        assert {s.user_id for s in store} == {"a", "b"}
