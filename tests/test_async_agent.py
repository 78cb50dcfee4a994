"""Tests for the async request pipeline."""

import asyncio
from unittest.mock import AsyncMock, MagicMock

import aiohttp
import pytest
from pastebin import ApiErrorKind, PastebinConfig, RateLimitMode
from pastebin.http import AiohttpTransport, AsyncHttpAgent, HttpAgent, PreparedRequest, RateGovernor

from .conftest import FakeAsyncTransport, FakeClock, FakeTransport


def _agent(mode, clock, transport=None, sleeper=None):
    config = PastebinConfig(api_key="devkey", rate_limit_mode=mode)
    return AsyncHttpAgent(
        config,
        transport=transport or FakeAsyncTransport(),
        governor=RateGovernor(mode, clock=clock),
        sleeper=sleeper,
    )


class TestAsyncAgent:
    """Tests for AsyncHttpAgent."""

    @pytest.mark.asyncio
    async def test_post_and_classify(self, clock):
        transport = FakeAsyncTransport("Bad API request, invalid api_dev_key")
        agent = _agent(RateLimitMode.NONE, clock, transport)

        result = await agent.post("trends")

        assert result.error.kind is ApiErrorKind.INVALID_API_KEY
        assert transport.requests[0].method == "POST"

    @pytest.mark.asyncio
    async def test_login_stores_session(self, clock):
        transport = FakeAsyncTransport("user-key")
        agent = _agent(RateLimitMode.NONE, clock, transport)

        await agent.authenticate("alice", "secret")
        await agent.get("https://example.com/raw/abc")

        assert agent.session.user_key == "user-key"
        assert "api_user_key=user-key" in transport.requests[1].url

    @pytest.mark.asyncio
    async def test_none_mode_rejects_without_sending(self, clock):
        transport = FakeAsyncTransport()
        agent = _agent(RateLimitMode.NONE, clock, transport)

        for _ in range(30):
            assert (await agent.post("trends")).ok
        result = await agent.post("trends")

        assert result.error.kind is ApiErrorKind.RATE_LIMIT_EXCEEDED
        assert result.error.wait_time == pytest.approx(60.0)
        assert len(transport.requests) == 30

    @pytest.mark.asyncio
    async def test_pace_mode_uses_async_sleeper(self, clock):
        sleeper = AsyncMock()
        agent = _agent(RateLimitMode.PACE, clock, sleeper=sleeper)

        await agent.post("trends")
        clock.advance(0.5)
        await agent.post("trends")

        sleeper.assert_awaited_once()
        assert sleeper.await_args.args[0] == pytest.approx(1.5)

    @pytest.mark.asyncio
    async def test_same_decisions_as_blocking_agent(self, clock):
        """Test that identical call timing yields identical waits in both styles."""
        blocking_clock = FakeClock()
        blocking_waits = []
        blocking = HttpAgent(
            PastebinConfig(api_key="devkey", rate_limit_mode=RateLimitMode.PACE),
            transport=FakeTransport(),
            governor=RateGovernor(RateLimitMode.PACE, clock=blocking_clock),
            sleeper=blocking_waits.append,
        )
        async_waits = []

        async def record(seconds):
            async_waits.append(seconds)

        agent = _agent(RateLimitMode.PACE, clock, sleeper=record)

        for gap in (0.0, 0.5, 1.0, 3.0, 0.2):
            clock.advance(gap)
            blocking_clock.advance(gap)
            await agent.post("trends")
            blocking.post("trends")

        assert async_waits == blocking_waits

    @pytest.mark.asyncio
    async def test_cancel_during_wait_sends_nothing(self, clock):
        """Test that cancelling the task while it waits abandons the request."""
        transport = FakeAsyncTransport()
        config = PastebinConfig(api_key="devkey", rate_limit_mode=RateLimitMode.PACE)
        agent = AsyncHttpAgent(config, transport=transport, governor=RateGovernor(RateLimitMode.PACE, clock=clock))
        await agent.post("trends")

        task = asyncio.create_task(agent.post("trends"))
        await asyncio.sleep(0.05)
        task.cancel()
        with pytest.raises(asyncio.CancelledError):
            await task

        assert len(transport.requests) == 1

    @pytest.mark.asyncio
    async def test_context_manager_closes_transport(self, clock):
        transport = FakeAsyncTransport()
        async with _agent(RateLimitMode.NONE, clock, transport):
            pass
        assert transport.closed


class TestAiohttpTransport:
    """Tests for the aiohttp-backed transport."""

    @pytest.mark.asyncio
    async def test_send_reads_full_body(self):
        response = MagicMock()
        response.status = 200
        response.headers = {"Content-Type": "text/plain"}
        response.url = "https://pastebin.com/api/api_post.php"
        response.read = AsyncMock(return_value="https://pastebin.com/abc".encode("utf-8"))

        session = MagicMock(spec=aiohttp.ClientSession)
        session.closed = False
        session.request.return_value.__aenter__ = AsyncMock(return_value=response)
        session.request.return_value.__aexit__ = AsyncMock(return_value=None)

        transport = AiohttpTransport("ua/1.0", session=session)
        request = PreparedRequest(
            method="POST",
            url="https://pastebin.com/api/api_post.php",
            body=b"api_option=paste",
            headers={"Content-Type": "application/x-www-form-urlencoded"},
        )
        result = await transport.send(request)

        assert result.text == "https://pastebin.com/abc"
        assert result.status_code == 200
        args, kwargs = session.request.call_args
        assert args == ("POST", "https://pastebin.com/api/api_post.php")
        assert kwargs["data"] == b"api_option=paste"
        assert kwargs["headers"]["User-Agent"] == "ua/1.0"

    @pytest.mark.asyncio
    async def test_borrowed_session_not_closed(self):
        session = MagicMock(spec=aiohttp.ClientSession)
        session.close = AsyncMock()
        transport = AiohttpTransport("ua/1.0", session=session)

        await transport.close()
        session.close.assert_not_awaited()
