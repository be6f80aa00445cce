#!/usr/bin/env python3
"""
bofang - voice-controlled video audio player (Alexa skill backend)

Usage:
    python main.py

Starts the skill endpoint on $PORT (default 3040). Point the skill's
HTTPS endpoint at https://<host>/alexa.
"""

import os
import sys

import uvicorn
from dotenv import load_dotenv

from bofang.config import Settings, missing_vars
from bofang.log import setup_logging, Logger, get_logger

# Load environment variables
load_dotenv()

# Setup logging
setup_logging(os.getenv("LOG_LEVEL", "INFO").upper())
logger = get_logger("bofang")


def check_environment() -> bool:
    """Check that all required environment variables are set."""
    missing = missing_vars()

    if missing:
        logger.error(f"Missing environment variables: {', '.join(missing)}")
        return False

    return True


def main():
    """Main entry point."""
    if not check_environment():
        sys.exit(1)

    settings = Settings.from_env()

    Logger.server_starting(settings.port)
    uvicorn.run(
        "bofang.server:app",
        host="0.0.0.0",
        port=settings.port,
        log_level="warning",  # Quiet uvicorn, we have our own logging
    )


if __name__ == "__main__":
    main()
