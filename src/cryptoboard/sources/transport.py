"""JSON-over-HTTPS transport.

Defines the minimal fetch contract the aggregator client depends on
(ok/status/body) and an aiohttp implementation sharing one session.
Network failures and timeouts surface as SourceUnavailable / SourceTimeout;
non-success statuses are returned, not raised, so callers decide.
"""

import asyncio
import json
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any
from urllib.parse import urlsplit

import aiohttp

from cryptoboard.exceptions import SourceTimeout, SourceUnavailable
from cryptoboard.logging import get_logger

logger = get_logger(__name__)


@dataclass(frozen=True)
class HttpResponse:
    """Outcome of one JSON GET. ``body`` is None when it was not valid JSON."""

    status: int
    body: Any = None

    @property
    def ok(self) -> bool:
        return 200 <= self.status < 300


class JsonTransport(ABC):
    """Abstract JSON fetch capability."""

    @abstractmethod
    async def get_json(self, url: str, params: dict[str, Any] | None = None) -> HttpResponse:
        """GET ``url`` and decode the JSON body."""
        ...

    @abstractmethod
    async def close(self) -> None:
        """Release network resources."""
        ...


class AiohttpTransport(JsonTransport):
    """aiohttp-backed transport with a lazily created shared ClientSession.

    Args:
        timeout_seconds: Total per-request bound.
        headers: Extra headers sent with every request (e.g. API keys).
    """

    def __init__(
        self, timeout_seconds: float = 10.0, headers: dict[str, str] | None = None
    ) -> None:
        self._timeout = aiohttp.ClientTimeout(total=timeout_seconds)
        self._headers = {"Accept": "application/json", "User-Agent": "cryptoboard/0.1"}
        if headers:
            self._headers.update(headers)
        self._session: aiohttp.ClientSession | None = None

    def _get_session(self) -> aiohttp.ClientSession:
        if self._session is None or self._session.closed:
            self._session = aiohttp.ClientSession(
                timeout=self._timeout, headers=self._headers
            )
        return self._session

    async def get_json(self, url: str, params: dict[str, Any] | None = None) -> HttpResponse:
        host = urlsplit(url).hostname or url
        session = self._get_session()
        try:
            async with session.get(url, params=params) as resp:
                raw = await resp.read()
                charset = resp.charset or "utf-8"
                status = resp.status
        except asyncio.TimeoutError as e:
            raise SourceTimeout(host, "request timed out") from e
        except aiohttp.ClientError as e:
            raise SourceUnavailable(host, str(e) or type(e).__name__) from e

        # Undecodable bytes and unknown charsets count as a non-JSON body
        try:
            body = json.loads(raw.decode(charset)) if raw else None
        except (ValueError, LookupError):
            logger.warning("non_json_response", host=host, status=status)
            body = None

        logger.debug("http_get", host=host, path=urlsplit(url).path, status=status)
        return HttpResponse(status=status, body=body)

    async def close(self) -> None:
        if self._session is not None and not self._session.closed:
            await self._session.close()
        self._session = None
