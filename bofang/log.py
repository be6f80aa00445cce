"""
Centralized logging for bofang.

Provides:
- Configured console logger with colors
- Logger for consistent event/lifecycle/directive logging
- ServiceLogger for individual services
"""

import logging
import sys
from typing import Optional, Union

from .types import (
    Event,
    SearchEvent, PlaybackNearlyFinishedEvent, PlaybackFailedEvent, PlaybackProgressEvent,
    Directive,
    ReplaceAllDirective, EnqueueDirective, StopDirective, ClearQueueDirective,
    PlaybackState,
)


# =============================================================================
# COLORS
# =============================================================================

class C:
    """ANSI color codes."""
    RESET = "\033[0m"
    BOLD = "\033[1m"
    DIM = "\033[2m"

    # Colors
    RED = "\033[31m"
    GREEN = "\033[32m"
    YELLOW = "\033[33m"
    BLUE = "\033[34m"
    MAGENTA = "\033[35m"
    CYAN = "\033[36m"
    WHITE = "\033[37m"

    # Bright colors
    BRIGHT_RED = "\033[91m"
    BRIGHT_GREEN = "\033[92m"
    BRIGHT_YELLOW = "\033[93m"
    BRIGHT_BLUE = "\033[94m"
    BRIGHT_MAGENTA = "\033[95m"
    BRIGHT_CYAN = "\033[96m"


def _c(color: str, text: str) -> str:
    """Wrap text in color codes."""
    return color + text + C.RESET


def _quote(text: str, color: str = C.WHITE) -> str:
    """Wrap text in quotes with color."""
    return _c(color, '"' + text + '"')


def _short(token: Optional[str]) -> str:
    return (token[:8] + "...") if token else "-"


# =============================================================================
# LOGGING SETUP
# =============================================================================

class ColorFormatter(logging.Formatter):
    """Custom formatter with colors and clean timestamp."""

    def format(self, record: logging.LogRecord) -> str:
        ms = int(record.msecs)
        ts = self.formatTime(record, "%H:%M:%S") + f".{ms:03d}"
        time_str = _c(C.DIM, ts)
        return time_str + " │ " + record.getMessage()


def setup_logging(level: Union[int, str] = logging.INFO) -> None:
    """Configure logging for the application."""
    console = logging.StreamHandler(sys.stdout)
    console.setFormatter(ColorFormatter())
    console.setLevel(level)

    root = logging.getLogger()
    root.setLevel(level)
    root.handlers = [console]

    # Quiet noisy libraries
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)


def get_logger(name: str) -> logging.Logger:
    """Get a logger instance."""
    return logging.getLogger(name)


# =============================================================================
# LOGGER (unified lifecycle + event + directive logging)
# =============================================================================

class Logger:
    """
    Unified logger for bofang.

    Class methods  -- lifecycle events (server)
    Instance methods -- event/directive/transition logging in the orchestrator
    """

    _logger = logging.getLogger("bofang")

    # ── Lifecycle (class methods) ────────────────────────────────────

    @classmethod
    def server_starting(cls, port: int) -> None:
        cls._logger.info("\U0001F680 " + _c(C.CYAN, "Server starting on port " + str(port)))

    @classmethod
    def server_ready(cls, backend_url: str) -> None:
        cls._logger.info(_c(C.GREEN, "✓  Ready") + " " + _c(C.DIM, "backend: " + backend_url))

    @classmethod
    def rejected(cls, application_id: Optional[str]) -> None:
        cls._logger.warning(
            _c(C.BRIGHT_RED, "⛔ Rejected request") + " " +
            _c(C.DIM, "application: " + str(application_id))
        )

    @classmethod
    def shutdown(cls) -> None:
        cls._logger.info("\U0001F44B " + _c(C.DIM, "Shutting down"))

    # ── Instance methods (orchestrator) ──────────────────────────────

    def __init__(self, verbose: bool = False):
        self._events_logger = logging.getLogger("bofang.events")
        self._verbose = verbose

    def event(self, event: Event) -> None:
        """Log an incoming event."""

        if isinstance(event, PlaybackProgressEvent):
            if self._verbose:
                self._events_logger.debug(
                    _c(C.DIM, "← " + event.kind + " @" + str(event.offset_ms) + "ms")
                )
            return

        if isinstance(event, SearchEvent):
            self._events_logger.info(
                _c(C.GREEN, "←") + " " +
                _c(C.BRIGHT_BLUE, "Search") + " " +
                _quote(event.query)
            )
            return

        if isinstance(event, PlaybackNearlyFinishedEvent):
            self._events_logger.info(
                _c(C.GREEN, "←") + " " +
                _c(C.BRIGHT_BLUE, "Player") + " " +
                _c(C.GREEN, "NearlyFinished") + " " +
                _c(C.DIM, _short(event.token))
            )
            return

        if isinstance(event, PlaybackFailedEvent):
            self._events_logger.info(
                _c(C.BRIGHT_RED, "⚡") + " " +
                _c(C.BRIGHT_BLUE, "Player") + " " +
                _c(C.BRIGHT_RED, "PlaybackFailed") + " " +
                _c(C.DIM, _short(event.token))
            )
            return

        name = type(event).__name__.replace("Event", "")
        self._events_logger.info(_c(C.GREEN, "←") + " " + _c(C.GREEN, name))

    def directive(self, directive: Directive) -> None:
        """Log an outgoing directive."""

        if isinstance(directive, ReplaceAllDirective):
            self._events_logger.info(
                _c(C.YELLOW, "→") + " " +
                _c(C.YELLOW, "Play") + " " +
                _c(C.BRIGHT_CYAN, "REPLACE_ALL") + " " +
                _c(C.DIM, _short(directive.token) + " @" + str(directive.offset_ms) + "ms")
            )
            return

        if isinstance(directive, EnqueueDirective):
            self._events_logger.info(
                _c(C.YELLOW, "→") + " " +
                _c(C.YELLOW, "Play") + " " +
                _c(C.BRIGHT_CYAN, "ENQUEUE") + " " +
                _c(C.DIM, _short(directive.token) + " after " + _short(directive.expected_previous_token))
            )
            return

        if isinstance(directive, StopDirective):
            self._events_logger.info(
                _c(C.YELLOW, "→") + " " +
                _c(C.BRIGHT_RED, "Stop")
            )
            return

        if isinstance(directive, ClearQueueDirective):
            self._events_logger.info(
                _c(C.YELLOW, "→") + " " +
                _c(C.BRIGHT_RED, "ClearQueue")
            )
            return

    def transition(self, old_state: PlaybackState, new_state: PlaybackState) -> None:
        """Log a state transition (magenta)."""
        if old_state != new_state:
            self._events_logger.info(
                _c(C.MAGENTA, "◆") + " " +
                _c(C.DIM, old_state.name) + " " +
                _c(C.MAGENTA, "→") + " " +
                _c(C.BRIGHT_MAGENTA, new_state.name)
            )

    def error(self, msg: str, exc: Optional[Exception] = None) -> None:
        """Log an error (red)."""
        if exc:
            self._events_logger.error(
                _c(C.RED, "✗ " + msg + ":") + " " + _c(C.DIM, str(exc))
            )
        else:
            self._events_logger.error(_c(C.RED, "✗ " + msg))


# =============================================================================
# SERVICE LOGGING
# =============================================================================

class ServiceLogger:
    """Logger for individual services (Gateway, Poller, Alexa)."""

    COLORS = {
        "Gateway": C.BRIGHT_BLUE,
        "Poller": C.BRIGHT_MAGENTA,
        "Alexa": C.BRIGHT_CYAN,
    }

    def __init__(self, service_name: str):
        self._logger = logging.getLogger("bofang." + service_name)
        self._name = service_name
        self._color = self.COLORS.get(service_name, C.WHITE)

    def error(self, msg: str, exc: Optional[Exception] = None) -> None:
        if exc:
            self._logger.error(
                _c(C.RED, "✗") + " " +
                _c(self._color, self._name + ":") + " " +
                msg + " " + _c(C.DIM, "(" + str(exc) + ")")
            )
        else:
            self._logger.error(
                _c(C.RED, "✗") + " " + _c(self._color, self._name + ":") + " " + msg
            )

    def warning(self, msg: str) -> None:
        self._logger.warning("  " + _c(C.YELLOW, self._name + ":") + " " + msg)

    def debug(self, msg: str) -> None:
        self._logger.debug("  " + _c(C.DIM, self._name + ": " + msg))

    def info(self, msg: str) -> None:
        self._logger.info("  " + _c(self._color, self._name + ":") + " " + msg)
