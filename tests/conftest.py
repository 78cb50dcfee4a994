"""Shared fixtures: a controllable clock and in-memory transports."""

from collections.abc import Callable
from typing import Union

import pytest
from pastebin import PastebinConfig
from pastebin.http.protocols import HttpResponse, PreparedRequest

Reply = Union[str, Callable[[PreparedRequest], str]]

PASTE_XML = """<paste>
<paste_key>0b42rwhf</paste_key>
<paste_date>1297953260</paste_date>
<paste_title>javascript test</paste_title>
<paste_size>15</paste_size>
<paste_expire_date>1297956860</paste_expire_date>
<paste_private>{private}</paste_private>
<paste_format_long>JavaScript</paste_format_long>
<paste_format_short>javascript</paste_format_short>
<paste_url>https://pastebin.com/0b42rwhf</paste_url>
<paste_hits>15</paste_hits>
</paste>"""

USER_XML = """<user>
<user_name>wiz_kitty</user_name>
<user_format_short>text</user_format_short>
<user_expiration>N</user_expiration>
<user_avatar_url>https://pastebin.com/cache/a/1.jpg</user_avatar_url>
<user_private>1</user_private>
<user_website>https://example.com</user_website>
<user_email>oh@example.com</user_email>
<user_location>Location</user_location>
<user_account_type>1</user_account_type>
</user>"""


class FakeClock:
    """Monotonic clock that only moves when told to."""

    def __init__(self, start: float = 1000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class FakeTransport:
    """Blocking transport that records requests and replays canned bodies."""

    def __init__(self, *replies: Reply, default: str = "OK"):
        self.replies = list(replies)
        self.default = default
        self.requests: list[PreparedRequest] = []
        self.closed = False

    def _reply(self, request: PreparedRequest) -> HttpResponse:
        self.requests.append(request)
        reply = self.replies.pop(0) if self.replies else self.default
        body = reply(request) if callable(reply) else reply
        return HttpResponse(
            status_code=200,
            content=body.encode("utf-8"),
            content_type="text/plain; charset=utf-8",
            headers={},
            url=request.url,
        )

    def send(self, request: PreparedRequest) -> HttpResponse:
        return self._reply(request)

    def close(self) -> None:
        self.closed = True


class FakeAsyncTransport(FakeTransport):
    """Async flavor of FakeTransport."""

    async def send(self, request: PreparedRequest) -> HttpResponse:
        return self._reply(request)

    async def close(self) -> None:
        self.closed = True


@pytest.fixture
def clock():
    """Fake clock starting at t=1000s."""
    return FakeClock()


@pytest.fixture
def config():
    """Minimal client configuration."""
    return PastebinConfig(api_key="devkey")
