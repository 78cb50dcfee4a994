"""Protocol definitions for transport and time-source abstraction."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Protocol


@dataclass(frozen=True)
class PreparedRequest:
    """
    Fully encoded request, ready to hand to a transport.

    Attributes:
        method: HTTP method ("GET" or "POST")
        url: Target URL (query string already appended for GET)
        body: Encoded form body for POST, None for GET
        headers: Request headers
    """

    method: str
    url: str
    body: bytes | None = None
    headers: dict[str, str] = field(default_factory=dict)


@dataclass(frozen=True)
class HttpResponse:
    """
    Immutable HTTP response returned by a Transport.

    Attributes:
        status_code: HTTP status code (200, 404, etc.)
        content: Raw response content as bytes
        content_type: Content-Type header value
        headers: All response headers
        url: Final URL after any redirects
    """

    status_code: int
    content: bytes
    content_type: str
    headers: dict[str, str]
    url: str

    @property
    def text(self) -> str:
        """Response body decoded as UTF-8."""
        return self.content.decode("utf-8", errors="replace")


class Transport(Protocol):
    """
    Protocol for blocking transports.

    This abstraction allows for:
    - Mock implementations in tests
    - Different backends (requests, urllib3, etc.)
    """

    def send(self, request: PreparedRequest) -> HttpResponse:
        """
        Send the request and read the full response.

        Raises:
            Exception on network errors, passed through unmodified
        """
        ...

    def close(self) -> None: ...


class AsyncTransport(Protocol):
    """Protocol for non-blocking transports."""

    async def send(self, request: PreparedRequest) -> HttpResponse:
        """Send the request and read the full response."""
        ...

    async def close(self) -> None: ...


class Clock(Protocol):
    """Monotonic time source returning seconds as a float."""

    def __call__(self) -> float: ...


class Sleeper(Protocol):
    """Blocking wait for a number of seconds."""

    def __call__(self, seconds: float) -> None: ...


class AsyncSleeper(Protocol):
    """Cooperative wait for a number of seconds."""

    async def __call__(self, seconds: float) -> None: ...
