"""
Application configuration.

Read once from environment variables (after load_dotenv) into an
immutable Settings object that is passed down to the services.
"""

import os
from dataclasses import dataclass
from typing import Optional


DEFAULT_BACKEND_URL = "https://dmhacker-youtube.herokuapp.com"

REQUIRED_VARS = [
    "ALEXA_APPLICATION_ID",
]


@dataclass(frozen=True)
class Settings:
    application_id: str
    backend_url: str = DEFAULT_BACKEND_URL
    port: int = 3040
    poll_interval: float = 2.0
    poll_timeout: Optional[float] = None   # None = wait forever
    http_timeout: float = 30.0
    log_level: str = "INFO"

    @staticmethod
    def from_env() -> "Settings":
        """
        Build Settings from the process environment.

        Raises:
            KeyError if ALEXA_APPLICATION_ID is missing.
        """
        poll_timeout = os.getenv("BOFANG_POLL_TIMEOUT", "")
        return Settings(
            application_id=os.environ["ALEXA_APPLICATION_ID"],
            backend_url=os.getenv("BOFANG_BACKEND_URL", DEFAULT_BACKEND_URL).rstrip("/"),
            port=int(os.getenv("PORT", "3040")),
            poll_interval=float(os.getenv("BOFANG_POLL_INTERVAL", "2.0")),
            poll_timeout=float(poll_timeout) if poll_timeout else None,
            http_timeout=float(os.getenv("BOFANG_HTTP_TIMEOUT", "30.0")),
            log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
        )


def missing_vars() -> list:
    """Names of required environment variables that are unset or empty."""
    return [var for var in REQUIRED_VARS if not os.getenv(var)]
