"""
Playback orchestrator -- the per-user state machine.

    handle(user, locale, event):
        session = store.get(user)
        reply   = <handler for event>(session)   # may await gateway / poller
        return reply                              # speech + directives

States are derived from the Session (see Session.state):

    IDLE --search--> AWAITING_CONFIRMATION --yes--> DOWNLOADING --ready--> PLAYING
    PLAYING --pause--> PAUSED --resume--> PLAYING
    PLAYING --nearly finished (no repeat)--> FINISHED --repeat/loop--> PLAYING
    any --stop--> IDLE

Every (re)play mints a fresh stream token. Backend failures become a
spoken apology and leave the session as it was.
"""

import time
import uuid
from typing import Callable, List, Optional

from .types import (
    Card, Reply,
    Event, SearchEvent, ConfirmYesEvent, ConfirmNoEvent,
    StartOverEvent, StopEvent, ResumeEvent, PauseEvent,
    RepeatOnceEvent, LoopOnEvent, LoopOffEvent,
    HelpEvent, LaunchEvent, SessionEndedEvent,
    PlaybackNearlyFinishedEvent, PlaybackFailedEvent, PlaybackProgressEvent,
    Directive, ReplaceAllDirective, EnqueueDirective, StopDirective, ClearQueueDirective,
)
from .session import Session, SessionStore
from .responses import message
from .services.media_gateway import GatewayError, MediaGateway
from .services.poller import CompletionPoller, PollTimeout
from .log import Logger


def _now_ms() -> int:
    return int(time.time() * 1000)


def _new_token() -> str:
    return str(uuid.uuid4())


class PlaybackOrchestrator:
    """
    Turns one inbound event into one Reply, reading and writing the
    caller's Session along the way.
    """

    def __init__(
        self,
        store: SessionStore,
        gateway: MediaGateway,
        poller: CompletionPoller,
        clock: Callable[[], int] = _now_ms,
        new_token: Callable[[], str] = _new_token,
        event_log: Optional[Logger] = None,
    ):
        self._store = store
        self._gateway = gateway
        self._poller = poller
        self._clock = clock
        self._new_token = new_token
        self._log = event_log or Logger()

    @property
    def store(self) -> SessionStore:
        return self._store

    async def handle(self, user_id: str, locale: str, event: Event) -> Reply:
        session = self._store.get(user_id)
        self._log.event(event)

        old_state = session.state
        reply = await self._route(session, locale, event)
        self._log.transition(old_state, session.state)

        for directive in reply.directives:
            self._log.directive(directive)
        return reply

    async def _route(self, session: Session, locale: str, event: Event) -> Reply:
        if isinstance(event, SearchEvent):
            return await self._search(session, locale, event.query)

        if isinstance(event, ConfirmYesEvent):
            return await self._confirm(session, locale)

        if isinstance(event, ConfirmNoEvent):
            session.clear_candidate()
            return Reply()

        if isinstance(event, StartOverEvent):
            if not session.has_video:
                return Reply(speech=message(locale, "NOTHING_TO_REPEAT"))
            return Reply(directives=[self._restart(session, 0)])

        if isinstance(event, StopEvent):
            return self._stop(session, locale)

        if isinstance(event, ResumeEvent):
            offset = session.timing.resume_offset()
            if not session.is_paused or offset is None:
                return Reply(speech=message(locale, "NOTHING_TO_RESUME"))
            return Reply(directives=[self._restart(session, offset)])

        if isinstance(event, PauseEvent):
            if not session.is_streaming:
                return Reply(speech=message(locale, "NOTHING_TO_RESUME"))
            session.pause(self._clock())
            return Reply(directives=[StopDirective()])

        if isinstance(event, RepeatOnceEvent):
            directives: List[Directive] = []
            if session.is_finished:
                directives.append(self._restart(session, 0))
            else:
                session.repeat_once = True
            return Reply(
                speech=message(locale, "REPEAT_TRIGGERED", self._which(session, locale)),
                directives=directives,
            )

        if isinstance(event, LoopOnEvent):
            session.repeat_forever = True
            directives = []
            if session.is_finished:
                directives.append(self._restart(session, 0))
            return Reply(
                speech=message(locale, "LOOP_ON_TRIGGERED", self._which(session, locale)),
                directives=directives,
            )

        if isinstance(event, LoopOffEvent):
            session.repeat_forever = False
            return Reply(speech=message(locale, "LOOP_OFF_TRIGGERED", self._which(session, locale)))

        if isinstance(event, PlaybackNearlyFinishedEvent):
            return self._nearly_finished(session, event)

        if isinstance(event, PlaybackFailedEvent):
            self._log.error(f"Playback failed for {session.user_id}: {event.error}")
            return Reply()

        if isinstance(event, HelpEvent):
            return Reply(speech=message(locale, "HELP_TRIGGERED"))

        if isinstance(event, LaunchEvent):
            help_text = message(locale, "HELP_TRIGGERED")
            return Reply(speech=help_text, reprompt=help_text, keep_session_open=True)

        if isinstance(event, (SessionEndedEvent, PlaybackProgressEvent)):
            return Reply()

        return Reply()

    # ── Handlers with I/O ────────────────────────────────────────────

    async def _search(self, session: Session, locale: str, query: str) -> Reply:
        if not query.strip():
            help_text = message(locale, "HELP_TRIGGERED")
            return Reply(speech=help_text, reprompt=help_text, keep_session_open=True)

        try:
            candidate = await self._gateway.search(query, locale)
        except GatewayError as e:
            self._log.error("Search", e)
            return Reply(speech=message(locale, "REQUEST_FAILED"))

        if candidate is None:
            return Reply(speech=message(locale, "NO_RESULTS_FOUND", query))

        session.offer(candidate)
        prompt = message(locale, "ASK_TO_PLAY", candidate.title)
        return Reply(
            speech=prompt,
            card=Card(
                title=f'Search for "{query}"',
                content=f'Found "{candidate.title}" at {candidate.link}.',
            ),
            reprompt=prompt,
            keep_session_open=True,
        )

    async def _confirm(self, session: Session, locale: str) -> Reply:
        candidate = session.pending_candidate
        if candidate is None:
            return Reply()

        session.begin_download()
        try:
            asset_url = await self._gateway.download(candidate.remote_id)
            await self._poller.wait_until_ready(candidate.remote_id)
        except PollTimeout as e:
            self._log.error("Download", e)
            return Reply(speech=message(locale, "DOWNLOAD_TIMEOUT"))
        except GatewayError as e:
            self._log.error("Download", e)
            return Reply(speech=message(locale, "REQUEST_FAILED"))
        finally:
            session.end_download()

        session.load(asset_url)
        # A newer search may have landed while we were waiting; keep it.
        if session.pending_candidate is candidate:
            session.clear_candidate()

        # Workaround: the platform sends an errant PlaybackNearlyFinished
        # right after a new stream starts. A one-shot repeat absorbs it.
        session.repeat_once = True
        session.repeat_forever = False

        return Reply(
            speech=message(locale, "NOW_PLAYING", candidate.title),
            directives=[self._restart(session, 0)],
        )

    # ── Pure handlers ────────────────────────────────────────────────

    def _stop(self, session: Session, locale: str) -> Reply:
        if not session.has_video:
            return Reply(speech=message(locale, "NOTHING_TO_REPEAT"))

        directives: List[Directive] = []
        if session.is_streaming:
            directives.append(StopDirective())
        session.unload()
        directives.append(ClearQueueDirective())
        return Reply(directives=directives)

    def _nearly_finished(self, session: Session, event: PlaybackNearlyFinishedEvent) -> Reply:
        if session.has_video and (session.repeat_forever or session.repeat_once):
            token = self._new_token()
            previous = session.start_stream(token, self._clock())
            session.repeat_once = False
            return Reply(directives=[EnqueueDirective(
                url=session.active_asset,
                token=token,
                expected_previous_token=previous or event.token,
                offset_ms=0,
            )])

        session.end_stream()
        return Reply()

    def _restart(self, session: Session, offset_ms: int) -> ReplaceAllDirective:
        """Replay the active asset from offset_ms under a new token."""
        token = self._new_token()
        session.start_stream(token, self._clock())
        return ReplaceAllDirective(url=session.active_asset, token=token, offset_ms=offset_ms)

    @staticmethod
    def _which(session: Session, locale: str) -> str:
        return message(locale, "CURRENT" if session.has_video else "NEXT")
