"""
Type definitions for bofang.

Events, directives and replies are immutable dataclasses.
Session state is mutable and lives in session.py.
"""

from dataclasses import dataclass, field
from enum import Enum, auto
from typing import Optional, Union, List


# =============================================================================
# STATE
# =============================================================================

class PlaybackState(Enum):
    """Logical playback state, derived from a Session (never stored)."""
    IDLE = auto()                    # No asset
    AWAITING_CONFIRMATION = auto()   # Search result waiting for yes/no
    DOWNLOADING = auto()             # Confirmed, backend fetch in flight
    PLAYING = auto()                 # Stream token set
    PAUSED = auto()                  # Asset, no token, pause recorded
    FINISHED = auto()                # Asset, no token, stream ended


@dataclass(frozen=True)
class Candidate:
    """A search result awaiting the user's yes/no."""
    remote_id: str
    title: str
    link: str


# =============================================================================
# EVENTS (inputs to the system)
# =============================================================================

@dataclass(frozen=True)
class SearchEvent:
    """User asked to find something."""
    query: str


@dataclass(frozen=True)
class ConfirmYesEvent:
    pass


@dataclass(frozen=True)
class ConfirmNoEvent:
    pass


@dataclass(frozen=True)
class StartOverEvent:
    pass


@dataclass(frozen=True)
class StopEvent:
    """Stop or Cancel."""
    pass


@dataclass(frozen=True)
class ResumeEvent:
    pass


@dataclass(frozen=True)
class PauseEvent:
    pass


@dataclass(frozen=True)
class RepeatOnceEvent:
    pass


@dataclass(frozen=True)
class LoopOnEvent:
    pass


@dataclass(frozen=True)
class LoopOffEvent:
    pass


@dataclass(frozen=True)
class HelpEvent:
    pass


@dataclass(frozen=True)
class LaunchEvent:
    pass


@dataclass(frozen=True)
class SessionEndedEvent:
    pass


@dataclass(frozen=True)
class PlaybackNearlyFinishedEvent:
    """Platform says the current stream is about to end."""
    token: Optional[str] = None


@dataclass(frozen=True)
class PlaybackFailedEvent:
    """Platform could not play a stream."""
    token: Optional[str] = None
    error: Optional[dict] = None


@dataclass(frozen=True)
class PlaybackProgressEvent:
    """PlaybackStarted / PlaybackStopped / PlaybackFinished (acknowledged only)."""
    kind: str
    token: Optional[str] = None
    offset_ms: int = 0


Event = Union[
    SearchEvent, ConfirmYesEvent, ConfirmNoEvent,
    StartOverEvent, StopEvent, ResumeEvent, PauseEvent,
    RepeatOnceEvent, LoopOnEvent, LoopOffEvent,
    HelpEvent, LaunchEvent, SessionEndedEvent,
    PlaybackNearlyFinishedEvent, PlaybackFailedEvent, PlaybackProgressEvent,
]

# Events raised by the audio player rather than spoken by the user.
# Replies to these must not carry speech.
PLAYER_EVENTS = (PlaybackNearlyFinishedEvent, PlaybackFailedEvent, PlaybackProgressEvent)


# =============================================================================
# DIRECTIVES (outputs to the audio player)
# =============================================================================

@dataclass(frozen=True)
class ReplaceAllDirective:
    """Start a stream immediately, replacing anything playing or queued."""
    url: str
    token: str
    offset_ms: int = 0


@dataclass(frozen=True)
class EnqueueDirective:
    """Queue a stream to follow the one identified by expected_previous_token."""
    url: str
    token: str
    expected_previous_token: Optional[str]
    offset_ms: int = 0


@dataclass(frozen=True)
class StopDirective:
    pass


@dataclass(frozen=True)
class ClearQueueDirective:
    pass


Directive = Union[
    ReplaceAllDirective,
    EnqueueDirective,
    StopDirective,
    ClearQueueDirective,
]


# =============================================================================
# REPLY (what goes back to the platform)
# =============================================================================

@dataclass(frozen=True)
class Card:
    """Companion-app card."""
    title: str
    content: str


@dataclass(frozen=True)
class Reply:
    """
    Response bundle for a single request.

    speech is plain text; the Alexa adapter wraps it as SSML.
    """
    speech: Optional[str] = None
    card: Optional[Card] = None
    directives: List[Directive] = field(default_factory=list)
    reprompt: Optional[str] = None
    keep_session_open: bool = False
