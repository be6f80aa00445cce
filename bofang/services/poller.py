"""
Completion poller -- waits for the backend to finish preparing an asset.

    while not ready:
        sleep(interval)
        ready = cache_status(id)

Errors during a tick are logged and treated as transient. There is no
backoff and no attempt limit; an optional timeout bounds the wait.
"""

import asyncio
import time
from typing import Awaitable, Callable, Optional

from .media_gateway import GatewayError, MediaGateway
from ..log import ServiceLogger

log = ServiceLogger("Poller")


class PollTimeout(GatewayError):
    """The asset did not become ready before the deadline."""


class CompletionPoller:

    def __init__(
        self,
        gateway: MediaGateway,
        interval: float = 2.0,
        timeout: Optional[float] = None,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
        clock: Callable[[], float] = time.monotonic,
    ):
        self._gateway = gateway
        self._interval = interval
        self._timeout = timeout
        self._sleep = sleep
        self._clock = clock

    async def wait_until_ready(self, remote_id: str) -> int:
        """
        Block until cache_status(remote_id) reports ready.

        Returns the number of status checks made.
        Raises PollTimeout if a timeout is configured and exceeded.
        """
        deadline = None if self._timeout is None else self._clock() + self._timeout
        attempts = 0

        log.info(f"waiting for {remote_id}")
        while True:
            await self._sleep(self._interval)
            attempts += 1

            try:
                if await self._gateway.cache_status(remote_id):
                    log.info(f"{remote_id} ready after {attempts} check(s)")
                    return attempts
            except GatewayError as e:
                log.error(f"status check #{attempts} for {remote_id} failed", e)

            if deadline is not None and self._clock() >= deadline:
                raise PollTimeout(f"{remote_id} not ready after {self._timeout:.0f}s")
