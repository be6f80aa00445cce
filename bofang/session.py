"""
Per-user session state.

One Session per user id, created lazily and kept for the life of the
process. Only the orchestrator mutates sessions, and only through the
methods below, which keep the invariants:

    streaming  =>  active asset
    no asset   =>  no stream token
"""

from dataclasses import dataclass, field
from typing import Dict, Iterator, Optional

from .types import Candidate, PlaybackState


@dataclass
class PlaybackTiming:
    """Wall-clock moments (epoch ms) playback last started and was paused."""
    started_at_ms: Optional[int] = None
    stopped_at_ms: Optional[int] = None

    def resume_offset(self) -> Optional[int]:
        """
        Milliseconds into the stream to resume from.

        None unless a pause was recorded after the last start.
        """
        if self.started_at_ms is None or self.stopped_at_ms is None:
            return None
        if self.stopped_at_ms < self.started_at_ms:
            return None
        return self.stopped_at_ms - self.started_at_ms


@dataclass
class Session:
    """Everything remembered about one user between requests."""
    user_id: str
    pending_candidate: Optional[Candidate] = None
    active_asset: Optional[str] = None
    stream_token: Optional[str] = None
    timing: PlaybackTiming = field(default_factory=PlaybackTiming)
    repeat_once: bool = False
    repeat_forever: bool = False
    downloads_in_flight: int = 0

    @property
    def downloading(self) -> bool:
        return self.downloads_in_flight > 0

    @property
    def has_video(self) -> bool:
        return self.active_asset is not None

    @property
    def is_streaming(self) -> bool:
        return self.stream_token is not None

    @property
    def is_paused(self) -> bool:
        return self.has_video and not self.is_streaming and self.timing.resume_offset() is not None

    @property
    def is_finished(self) -> bool:
        """Asset loaded, stream ended on its own (not paused)."""
        return self.has_video and not self.is_streaming and not self.is_paused

    @property
    def state(self) -> PlaybackState:
        if self.downloading:
            return PlaybackState.DOWNLOADING
        if self.pending_candidate is not None:
            return PlaybackState.AWAITING_CONFIRMATION
        if self.is_streaming:
            return PlaybackState.PLAYING
        if self.is_paused:
            return PlaybackState.PAUSED
        if self.has_video:
            return PlaybackState.FINISHED
        return PlaybackState.IDLE

    # ── Candidate ────────────────────────────────────────────────────

    def offer(self, candidate: Candidate) -> None:
        """Remember a search result; replaces any earlier one."""
        self.pending_candidate = candidate

    def clear_candidate(self) -> None:
        self.pending_candidate = None

    # ── Download ─────────────────────────────────────────────────────

    def begin_download(self) -> None:
        self.downloads_in_flight += 1

    def end_download(self) -> None:
        """Count one confirm as finished; DOWNLOADING lasts until all have."""
        self.downloads_in_flight = max(0, self.downloads_in_flight - 1)

    # ── Asset ────────────────────────────────────────────────────────

    def load(self, asset_url: str) -> None:
        """Make asset_url the current video. Any old stream token is dropped."""
        self.active_asset = asset_url
        self.stream_token = None

    def unload(self) -> None:
        """Forget the current video (and with it the stream)."""
        self.active_asset = None
        self.stream_token = None

    # ── Stream ───────────────────────────────────────────────────────

    def start_stream(self, token: str, now_ms: int) -> Optional[str]:
        """
        Record that a new stream instance started.

        Returns the previous token so callers can chain an enqueue.
        """
        if self.active_asset is None:
            raise ValueError("cannot stream without an active asset")
        previous = self.stream_token
        self.stream_token = token
        self.timing.started_at_ms = now_ms
        return previous

    def pause(self, now_ms: int) -> None:
        self.timing.stopped_at_ms = now_ms
        self.stream_token = None

    def end_stream(self) -> None:
        self.stream_token = None


class SessionStore:
    """
    In-memory map of user id -> Session.

    No locking: overlapping requests for the same user share one Session
    object and the last write wins.
    """

    def __init__(self) -> None:
        self._sessions: Dict[str, Session] = {}

    def get(self, user_id: str) -> Session:
        """Return the user's session, creating it on first access."""
        session = self._sessions.get(user_id)
        if session is None:
            session = Session(user_id=user_id)
            self._sessions[user_id] = session
        return session

    def __contains__(self, user_id: object) -> bool:
        return user_id in self._sessions

    def __len__(self) -> int:
        return len(self._sessions)

    def __iter__(self) -> Iterator[Session]:
        return iter(list(self._sessions.values()))
