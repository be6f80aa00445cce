"""
Remote media backend -- search, download and cache status over HTTP.

    GET /alexa/v3/search/<base64 query>[?language=xx]
    GET /alexa/v3/download/<id>
    GET /alexa/v3/cache/<id>

All bodies are JSON. Transport failures and malformed bodies are raised
as GatewayError; "no results" is returned as None.
"""

import base64
from typing import Optional

import httpx

from ..types import Candidate
from ..responses import DEFAULT_LOCALE
from ..log import ServiceLogger

log = ServiceLogger("Gateway")

API_PREFIX = "/alexa/v3"
NO_RESULTS = "No results found"


class GatewayError(Exception):
    """The backend could not be reached or answered with something unusable."""


class MediaGateway:
    """
    Thin async client for the search/download backend.

    Pass an httpx.AsyncClient to share a connection pool (or to inject a
    MockTransport in tests); otherwise one is created and owned here.
    """

    def __init__(
        self,
        base_url: str,
        client: Optional[httpx.AsyncClient] = None,
        timeout: float = 30.0,
    ):
        self._base_url = base_url.rstrip("/")
        self._owns_client = client is None
        self._client = client or httpx.AsyncClient(timeout=timeout)

    @property
    def base_url(self) -> str:
        return self._base_url

    async def close(self) -> None:
        if self._owns_client and not self._client.is_closed:
            await self._client.aclose()

    async def search(self, query: str, locale: str = DEFAULT_LOCALE) -> Optional[Candidate]:
        """Find the best match for query. None if the backend found nothing."""
        encoded = base64.b64encode(query.encode("utf-8")).decode("ascii")
        params = {}
        if locale != DEFAULT_LOCALE:
            params["language"] = locale.split("-")[0].lower()

        log.debug(f"search {query!r} ({locale})")
        body = await self._get_json(f"/search/{encoded}", params=params)

        if body.get("status") == "error":
            if body.get("message") == NO_RESULTS:
                return None
            raise GatewayError(f"search failed: {body.get('message', 'unknown error')}")

        video = body.get("video")
        try:
            candidate = Candidate(
                remote_id=str(video["id"]),
                title=video["title"],
                link=video["link"],
            )
        except (KeyError, TypeError) as e:
            raise GatewayError(f"malformed search response: {body!r}") from e

        log.info(f"found {candidate.title!r} @ {candidate.link}")
        return candidate

    async def download(self, remote_id: str) -> str:
        """Ask the backend to fetch remote_id. Returns the absolute playable URL."""
        log.debug(f"download {remote_id}")
        body = await self._get_json(f"/download/{remote_id}")
        link = body.get("link")
        if not isinstance(link, str) or not link:
            raise GatewayError(f"malformed download response: {body!r}")
        if link.startswith(("http://", "https://")):
            return link
        return self._base_url + link

    async def cache_status(self, remote_id: str) -> bool:
        """True once the backend has the asset ready to stream."""
        body = await self._get_json(f"/cache/{remote_id}")
        if "downloaded" not in body:
            raise GatewayError(f"malformed cache response: {body!r}")
        return bool(body["downloaded"])

    async def _get_json(self, path: str, params: Optional[dict] = None) -> dict:
        url = self._base_url + API_PREFIX + path
        try:
            response = await self._client.get(url, params=params or None)
            response.raise_for_status()
            body = response.json()
        except httpx.HTTPError as e:
            raise GatewayError(f"GET {path} failed: {e}") from e
        except ValueError as e:
            raise GatewayError(f"GET {path} returned invalid JSON") from e

        if not isinstance(body, dict):
            raise GatewayError(f"GET {path} returned {type(body).__name__}, expected object")
        return body
