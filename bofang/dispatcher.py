"""
Request dispatcher -- the edge between the skill endpoint and the orchestrator.

    body -> parse -> identity check -> orchestrator.handle -> render
"""

from .types import Reply
from .orchestrator import PlaybackOrchestrator
from .services.alexa import parse_alexa_request, render_reply
from .log import Logger


class IdentityMismatch(Exception):
    """The request was signed for a different skill."""


class Dispatcher:

    def __init__(self, application_id: str, orchestrator: PlaybackOrchestrator):
        self._application_id = application_id
        self._orchestrator = orchestrator

    @property
    def orchestrator(self) -> PlaybackOrchestrator:
        return self._orchestrator

    async def dispatch(self, body: dict) -> dict:
        """
        Handle one skill request and return the response body.

        Raises:
            IdentityMismatch if the application id is not ours.
            ValueError if the body is not a usable skill request.
        """
        request = parse_alexa_request(body)

        if request.application_id != self._application_id:
            Logger.rejected(request.application_id)
            raise IdentityMismatch(str(request.application_id))

        if request.event is None:
            return render_reply(Reply(), allows_speech=request.allows_speech)

        if not request.user_id:
            raise ValueError("request has no user id")

        reply = await self._orchestrator.handle(request.user_id, request.locale, request.event)
        return render_reply(reply, allows_speech=request.allows_speech)
