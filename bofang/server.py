"""
FastAPI server for bofang.

Endpoints:
- GET /health - Health check
- POST /alexa - Alexa skill endpoint (intents + AudioPlayer events)
"""

from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from .config import Settings
from .dispatcher import Dispatcher, IdentityMismatch
from .orchestrator import PlaybackOrchestrator
from .session import SessionStore
from .services.media_gateway import MediaGateway
from .services.poller import CompletionPoller
from .services.alexa import render_failure
from .log import Logger, get_logger

logger = get_logger("bofang.server")


def build_dispatcher(settings: Settings, gateway: Optional[MediaGateway] = None) -> Dispatcher:
    """Wire store, gateway, poller and orchestrator together."""
    gateway = gateway or MediaGateway(settings.backend_url, timeout=settings.http_timeout)
    poller = CompletionPoller(
        gateway,
        interval=settings.poll_interval,
        timeout=settings.poll_timeout,
    )
    orchestrator = PlaybackOrchestrator(SessionStore(), gateway, poller)
    return Dispatcher(settings.application_id, orchestrator)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Build the dispatcher from the environment unless one was installed already."""
    gateway: Optional[MediaGateway] = None
    if getattr(app.state, "dispatcher", None) is None:
        settings = Settings.from_env()
        gateway = MediaGateway(settings.backend_url, timeout=settings.http_timeout)
        app.state.dispatcher = build_dispatcher(settings, gateway)
        Logger.server_ready(settings.backend_url)
    try:
        yield
    finally:
        if gateway is not None:
            await gateway.close()
        Logger.shutdown()


app = FastAPI(title="bofang", docs_url=None, redoc_url=None, lifespan=lifespan)


@app.get("/health")
async def health():
    """Health check endpoint."""
    return {"status": "ok"}


@app.post("/alexa")
async def alexa(request: Request):
    """
    Alexa skill endpoint.

    Every intent and AudioPlayer event for every user arrives here.
    """
    dispatcher: Dispatcher = request.app.state.dispatcher
    try:
        body = await request.json()
    except ValueError:
        return JSONResponse({"error": "Invalid JSON"}, status_code=400)

    try:
        return await dispatcher.dispatch(body)
    except IdentityMismatch:
        return JSONResponse(render_failure(), status_code=403)
    except ValueError as e:
        logger.error(f"Bad request: {e}")
        return JSONResponse({"error": str(e)}, status_code=400)
