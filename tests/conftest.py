"""
Shared fakes for the bofang tests.

FakeGateway stands in for the media backend; Clock and TokenMint make
time and stream tokens deterministic.
"""

from typing import List, Optional, Tuple

import pytest

from bofang.types import Candidate
from bofang.session import SessionStore
from bofang.orchestrator import PlaybackOrchestrator
from bofang.services.media_gateway import GatewayError
from bofang.services.poller import CompletionPoller


LOFI = Candidate(
    remote_id="jfKfPfyJRdk",
    title="lofi hip hop radio",
    link="https://www.youtube.com/watch?v=jfKfPfyJRdk",
)

ASSET_URL = "https://backend.test/alexa/v3/file/jfKfPfyJRdk.mp3"


class FakeGateway:
    """Records calls; cache_status reports ready on the Nth check."""

    def __init__(
        self,
        candidate: Optional[Candidate] = LOFI,
        asset_url: str = ASSET_URL,
        ready_after: int = 1,
        fail_search: bool = False,
        fail_download: bool = False,
    ):
        self.candidate = candidate
        self.asset_url = asset_url
        self.ready_after = ready_after
        self.fail_search = fail_search
        self.fail_download = fail_download

        self.searches: List[Tuple[str, str]] = []
        self.downloads: List[str] = []
        self.status_checks: List[str] = []

    async def search(self, query: str, locale: str = "en-US") -> Optional[Candidate]:
        self.searches.append((query, locale))
        if self.fail_search:
            raise GatewayError("connection refused")
        return self.candidate

    async def download(self, remote_id: str) -> str:
        self.downloads.append(remote_id)
        if self.fail_download:
            raise GatewayError("connection refused")
        return self.asset_url

    async def cache_status(self, remote_id: str) -> bool:
        self.status_checks.append(remote_id)
        return len(self.status_checks) >= self.ready_after


class Clock:
    """Settable epoch-ms clock."""

    def __init__(self, now: int = 1_700_000_000_000):
        self.now = now

    def __call__(self) -> int:
        return self.now

    def advance(self, ms: int) -> None:
        self.now += ms


class TokenMint:
    """token-1, token-2, ..."""

    def __init__(self) -> None:
        self.issued: List[str] = []

    def __call__(self) -> str:
        token = f"token-{len(self.issued) + 1}"
        self.issued.append(token)
        return token


async def no_sleep(_seconds: float) -> None:
    pass


# =============================================================================
# FIXTURES
# =============================================================================

@pytest.fixture
def gateway() -> FakeGateway:
    return FakeGateway()


@pytest.fixture
def clock() -> Clock:
    return Clock()


@pytest.fixture
def mint() -> TokenMint:
    return TokenMint()


@pytest.fixture
def orchestrator(gateway, clock, mint) -> PlaybackOrchestrator:
    poller = CompletionPoller(gateway, interval=2.0, sleep=no_sleep)
    return PlaybackOrchestrator(SessionStore(), gateway, poller, clock=clock, new_token=mint)
