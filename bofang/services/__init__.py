"""
External services for the bofang skill backend.

Media backend  -- search / download / cache status over HTTP
Poller         -- waits for a download to become playable
Alexa          -- skill request parsing + response rendering
"""

from .media_gateway import MediaGateway, GatewayError
from .poller import CompletionPoller, PollTimeout
from .alexa import AlexaRequest, parse_alexa_request, render_reply

__all__ = [
    "MediaGateway",
    "GatewayError",
    "CompletionPoller",
    "PollTimeout",
    "AlexaRequest",
    "parse_alexa_request",
    "render_reply",
]
