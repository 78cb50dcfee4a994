"""Concrete transports: requests for blocking calls, aiohttp for async calls."""

from __future__ import annotations

import logging
from types import TracebackType
from typing import Optional

import aiohttp
import requests

from .protocols import HttpResponse, PreparedRequest

logger = logging.getLogger(__name__)


class RequestsTransport:
    """
    Blocking transport backed by a ``requests.Session``.

    Network errors and timeouts are raised as ``requests`` exceptions,
    unmodified. Non-2xx statuses are returned, not raised: the Pastebin API
    reports its errors in the body.
    """

    def __init__(
        self,
        user_agent: str,
        timeout: float = 30.0,
        session: Optional[requests.Session] = None,
    ) -> None:
        """
        Initialize the transport.

        Args:
            user_agent: User-Agent header sent with every request
            timeout: Request timeout in seconds
            session: Existing session to reuse (created lazily otherwise)
        """
        self._user_agent = user_agent
        self._timeout = timeout
        self._session = session
        self._owns_session = session is None

    def _ensure_session(self) -> requests.Session:
        if self._session is None:
            self._session = requests.Session()
            self._session.headers["User-Agent"] = self._user_agent
        return self._session

    def send(self, request: PreparedRequest) -> HttpResponse:
        session = self._ensure_session()
        headers = {"User-Agent": self._user_agent, **request.headers}
        response = session.request(
            request.method,
            request.url,
            data=request.body,
            headers=headers,
            timeout=self._timeout,
        )
        return HttpResponse(
            status_code=response.status_code,
            content=response.content,
            content_type=response.headers.get("Content-Type", ""),
            headers=dict(response.headers),
            url=response.url,
        )

    def close(self) -> None:
        if self._session is not None and self._owns_session:
            self._session.close()
            self._session = None


class AiohttpTransport:
    """
    Async transport backed by an ``aiohttp.ClientSession``.

    The session is created on first use (or in ``__aenter__``) because
    aiohttp sessions must be created inside a running event loop.
    """

    def __init__(
        self,
        user_agent: str,
        timeout: float = 30.0,
        session: Optional[aiohttp.ClientSession] = None,
    ) -> None:
        self._user_agent = user_agent
        self._timeout = timeout
        self._session = session
        self._owns_session = session is None

    async def _ensure_session(self) -> aiohttp.ClientSession:
        if self._session is None or self._session.closed:
            self._session = aiohttp.ClientSession(headers={"User-Agent": self._user_agent})
            self._owns_session = True
        return self._session

    async def __aenter__(self) -> AiohttpTransport:
        await self._ensure_session()
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        await self.close()

    async def send(self, request: PreparedRequest) -> HttpResponse:
        session = await self._ensure_session()
        headers = {"User-Agent": self._user_agent, **request.headers}
        async with session.request(
            request.method,
            request.url,
            data=request.body,
            headers=headers,
            timeout=aiohttp.ClientTimeout(total=self._timeout),
        ) as response:
            content = await response.read()
            return HttpResponse(
                status_code=response.status,
                content=content,
                content_type=response.headers.get("Content-Type", ""),
                headers=dict(response.headers),
                url=str(response.url),
            )

    async def close(self) -> None:
        if self._session is not None and self._owns_session:
            await self._session.close()
            self._session = None
