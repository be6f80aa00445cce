"""
Alexa skill wire format -- request parsing and response rendering.

Inbound:  skill request JSON  -> AlexaRequest (with a typed Event)
Outbound: Reply               -> skill response JSON
"""

from dataclasses import dataclass
from typing import Optional

from ..types import (
    Event, PLAYER_EVENTS,
    SearchEvent, ConfirmYesEvent, ConfirmNoEvent,
    StartOverEvent, StopEvent, ResumeEvent, PauseEvent,
    RepeatOnceEvent, LoopOnEvent, LoopOffEvent,
    HelpEvent, LaunchEvent, SessionEndedEvent,
    PlaybackNearlyFinishedEvent, PlaybackFailedEvent, PlaybackProgressEvent,
    Reply, Directive,
    ReplaceAllDirective, EnqueueDirective, StopDirective, ClearQueueDirective,
)
from ..responses import DEFAULT_LOCALE, to_ssml
from ..log import ServiceLogger

log = ServiceLogger("Alexa")

QUERY_SLOT = "VideoQuery"

# Search intents carry their own language; replies use it too.
SEARCH_INTENTS = {
    "GetVideoIntent": "en-US",
    "GetVideoGermanIntent": "de-DE",
    "GetVideoFrenchIntent": "fr-FR",
    "GetVideoItalianIntent": "it-IT",
}

INTENTS = {
    "AMAZON.YesIntent": ConfirmYesEvent,
    "AMAZON.NoIntent": ConfirmNoEvent,
    "AMAZON.StartOverIntent": StartOverEvent,
    "AMAZON.StopIntent": StopEvent,
    "AMAZON.CancelIntent": StopEvent,
    "AMAZON.ResumeIntent": ResumeEvent,
    "AMAZON.PauseIntent": PauseEvent,
    "AMAZON.RepeatIntent": RepeatOnceEvent,
    "AMAZON.LoopOnIntent": LoopOnEvent,
    "AMAZON.LoopOffIntent": LoopOffEvent,
    "AMAZON.HelpIntent": HelpEvent,
}

PROGRESS_EVENTS = (
    "AudioPlayer.PlaybackStarted",
    "AudioPlayer.PlaybackStopped",
    "AudioPlayer.PlaybackFinished",
)


@dataclass(frozen=True)
class AlexaRequest:
    """The parts of a skill request the dispatcher needs."""
    application_id: Optional[str]
    user_id: Optional[str]
    locale: str
    request_type: str
    event: Optional[Event]

    @property
    def allows_speech(self) -> bool:
        """AudioPlayer events and SessionEnded may not be answered with speech."""
        if self.event is None:
            return not self.request_type.startswith("AudioPlayer.")
        return not isinstance(self.event, PLAYER_EVENTS + (SessionEndedEvent,))


# =============================================================================
# PARSING
# =============================================================================

def _identity(data: dict) -> tuple:
    """(application_id, user_id) from session, falling back to context.System."""
    session = data.get("session")
    if session is not None:
        application = session.get("application") or {}
        user = session.get("user") or {}
    else:
        system = (data.get("context") or {}).get("System") or {}
        application = system.get("application") or {}
        user = system.get("user") or {}
    return application.get("applicationId"), user.get("userId")


def _parse_event(request: dict) -> tuple:
    """(event, locale override) for a request body."""
    request_type = request.get("type", "")

    if request_type == "IntentRequest":
        intent = request.get("intent") or {}
        name = intent.get("name", "")

        if name in SEARCH_INTENTS:
            slot = (intent.get("slots") or {}).get(QUERY_SLOT) or {}
            return SearchEvent(query=slot.get("value") or ""), SEARCH_INTENTS[name]

        event_cls = INTENTS.get(name)
        return (event_cls() if event_cls else None), None

    if request_type == "LaunchRequest":
        return LaunchEvent(), None

    if request_type == "SessionEndedRequest":
        return SessionEndedEvent(), None

    if request_type == "AudioPlayer.PlaybackNearlyFinished":
        return PlaybackNearlyFinishedEvent(token=request.get("token")), None

    if request_type == "AudioPlayer.PlaybackFailed":
        return PlaybackFailedEvent(token=request.get("token"), error=request.get("error")), None

    if request_type in PROGRESS_EVENTS:
        return PlaybackProgressEvent(
            kind=request_type.split(".", 1)[1],
            token=request.get("token"),
            offset_ms=int(request.get("offsetInMilliseconds") or 0),
        ), None

    return None, None


def parse_alexa_request(data: dict) -> AlexaRequest:
    """
    Parse a raw skill request into an AlexaRequest.

    Raises ValueError if the body has no request object.
    Unknown intents and request types yield event=None.
    """
    if not isinstance(data, dict) or not isinstance(data.get("request"), dict):
        raise ValueError("not a skill request")

    request = data["request"]
    application_id, user_id = _identity(data)
    event, locale_override = _parse_event(request)
    locale = locale_override or request.get("locale") or DEFAULT_LOCALE

    if event is None:
        log.warning(f"unhandled request {request.get('type')!r}")

    return AlexaRequest(
        application_id=application_id,
        user_id=user_id,
        locale=locale,
        request_type=request.get("type", ""),
        event=event,
    )


# =============================================================================
# RENDERING
# =============================================================================

def _stream(url: str, token: str, offset_ms: int) -> dict:
    return {
        "url": url,
        "streamFormat": "AUDIO_MPEG",
        "token": token,
        "offsetInMilliseconds": offset_ms,
    }


def render_directive(directive: Directive) -> dict:
    if isinstance(directive, ReplaceAllDirective):
        return {
            "type": "AudioPlayer.Play",
            "playBehavior": "REPLACE_ALL",
            "audioItem": {"stream": _stream(directive.url, directive.token, directive.offset_ms)},
        }

    if isinstance(directive, EnqueueDirective):
        stream = _stream(directive.url, directive.token, directive.offset_ms)
        stream["expectedPreviousToken"] = directive.expected_previous_token
        return {
            "type": "AudioPlayer.Play",
            "playBehavior": "ENQUEUE",
            "audioItem": {"stream": stream},
        }

    if isinstance(directive, StopDirective):
        return {"type": "AudioPlayer.Stop"}

    if isinstance(directive, ClearQueueDirective):
        return {"type": "AudioPlayer.ClearQueue", "clearBehavior": "CLEAR_ALL"}

    raise TypeError(f"unknown directive {directive!r}")


def render_reply(reply: Reply, allows_speech: bool = True) -> dict:
    """Build the skill response JSON for a Reply."""
    response: dict = {}

    if allows_speech:
        if reply.speech:
            response["outputSpeech"] = {"type": "SSML", "ssml": to_ssml(reply.speech)}
        if reply.card:
            response["card"] = {
                "type": "Simple",
                "title": reply.card.title,
                "content": reply.card.content,
            }
        if reply.reprompt:
            response["reprompt"] = {
                "outputSpeech": {"type": "SSML", "ssml": to_ssml(reply.reprompt)},
            }
        response["shouldEndSession"] = not reply.keep_session_open

    if reply.directives:
        response["directives"] = [render_directive(d) for d in reply.directives]

    return {"version": "1.0", "response": response}


def render_failure() -> dict:
    """Generic failure body returned when a request is refused."""
    return {"error": "Invalid application"}
