"""Request pipeline: encoding, credential injection, pacing and error decoding."""

from __future__ import annotations

import asyncio
import logging
import threading
import time
from collections.abc import Mapping
from dataclasses import dataclass
from types import TracebackType
from typing import Any, Optional
from urllib.parse import urlencode

from ..errors import ApiError, ApiResult, RequestCancelledError
from ..models.config import PastebinConfig
from .protocols import AsyncSleeper, AsyncTransport, PreparedRequest, Sleeper, Transport
from .rate_limiter import Decision, ProceedAfter, RateGovernor, Reject
from .transport import AiohttpTransport, RequestsTransport

logger = logging.getLogger(__name__)

BAD_REQUEST_PREFIX = "Bad API request,"
FORM_CONTENT_TYPE = "application/x-www-form-urlencoded"


@dataclass(frozen=True)
class AuthSession:
    """Credential obtained from a successful login."""

    user_key: str


def encode_params(params: Mapping[str, Any]) -> str:
    """
    URL-encode a parameter mapping as ``key=value`` pairs joined by ``&``.

    Keys and values are converted with ``str()`` and percent-encoded with
    spaces as ``+``. Pair order follows the mapping's iteration order.
    """
    return urlencode([(str(key), str(value)) for key, value in params.items()])


def classify_response(text: str) -> ApiResult:
    """
    Turn a response body into an ApiResult.

    Bodies starting with ``Bad API request,`` are errors; anything else is the
    payload, returned verbatim.
    """
    if not text.startswith(BAD_REQUEST_PREFIX):
        return ApiResult(body=text)

    message = text[len(BAD_REQUEST_PREFIX) :].removeprefix(" ")
    if message == "invalid api_user_key":
        return ApiResult(error=ApiError.not_authenticated())
    if message == "invalid api_dev_key":
        return ApiResult(error=ApiError.invalid_api_key())
    return ApiResult(error=ApiError.other(message))


class _AgentBase:
    """State and request building shared by the blocking and async agents."""

    def __init__(self, config: PastebinConfig, governor: Optional[RateGovernor] = None) -> None:
        self.config = config
        self.governor = governor or RateGovernor(config.rate_limit_mode)
        self.session: Optional[AuthSession] = None

    @property
    def api_key(self) -> str:
        return self.config.api_key

    @property
    def authenticated(self) -> bool:
        return self.session is not None

    def prepare(self, endpoint: str, method: str, params: Optional[Mapping[str, Any]] = None) -> PreparedRequest:
        """
        Build a transport request with credentials injected.

        Args:
            endpoint: Target URL
            method: "GET" or "POST"
            params: API parameters; the mapping itself is not modified

        Returns:
            PreparedRequest ready to send
        """
        method = method.upper()
        if method not in ("GET", "POST"):
            raise ValueError(f"Unsupported HTTP method: {method}")

        merged: dict[str, Any] = dict(params or {})
        merged["api_dev_key"] = self.api_key
        session = self.session
        if session is not None:
            merged["api_user_key"] = session.user_key

        query = encode_params(merged)
        if method == "GET":
            return PreparedRequest(method=method, url=f"{endpoint}?{query}")

        return PreparedRequest(
            method=method,
            url=endpoint,
            body=query.encode("utf-8"),
            headers={"Content-Type": FORM_CONTENT_TYPE},
        )

    def _handle_rejection(self, decision: Decision, endpoint: str) -> Optional[ApiResult]:
        if isinstance(decision, Reject):
            logger.warning(f"Rate limit reached, not sending request to {endpoint} ({decision.wait:.1f}s left)")
            return ApiResult(error=ApiError.rate_limit_exceeded(decision.wait))
        return None

    def _finish(self, request: PreparedRequest, text: str) -> ApiResult:
        result = classify_response(text)
        if result.error is not None:
            logger.warning(f"API error for {request.method} {request.url.split('?')[0]}: {result.error.message}")
        return result

    def _store_session(self, result: ApiResult) -> None:
        if result.ok:
            self.session = AuthSession(user_key=result.body or "")
            logger.info("Logged in to Pastebin")


class HttpAgent(_AgentBase):
    """
    Blocking request pipeline.

    Rate-limit waits are realized with ``time.sleep`` (or an injected
    sleeper). A wait can be cancelled from another thread by passing a
    ``threading.Event`` to ``execute`` and setting it.

    Example:
        agent = HttpAgent(PastebinConfig(api_key="...", rate_limit_mode="pace"))

        result = agent.execute(agent.config.api_url, "POST", {"api_option": "trends"})
        print(result.unwrap())
    """

    def __init__(
        self,
        config: PastebinConfig,
        transport: Optional[Transport] = None,
        governor: Optional[RateGovernor] = None,
        sleeper: Optional[Sleeper] = None,
    ) -> None:
        """
        Initialize the agent.

        Args:
            config: Client configuration
            transport: Blocking transport (defaults to RequestsTransport)
            governor: Rate governor (defaults to one built from config)
            sleeper: Blocking wait used for ProceedAfter (defaults to time.sleep)
        """
        super().__init__(config, governor)
        self._transport: Transport = transport or RequestsTransport(config.user_agent, config.timeout)
        self._sleep: Sleeper = sleeper or time.sleep

    def __enter__(self) -> HttpAgent:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        self.close()

    def close(self) -> None:
        self._transport.close()

    def _wait(self, seconds: float, cancel_event: Optional[threading.Event]) -> None:
        if cancel_event is None:
            self._sleep(seconds)
            return
        if cancel_event.wait(seconds):
            raise RequestCancelledError("Request cancelled while waiting for the rate limit")

    def execute(
        self,
        endpoint: str,
        method: str,
        params: Optional[Mapping[str, Any]] = None,
        *,
        cancel_event: Optional[threading.Event] = None,
    ) -> ApiResult:
        """
        Send one API call, honoring the rate governor.

        Args:
            endpoint: Target URL
            method: "GET" or "POST"
            params: API parameters
            cancel_event: Set it to abandon a pending rate-limit wait

        Returns:
            ApiResult with the body or an ApiError

        Raises:
            RequestCancelledError: If cancel_event is set during the wait
            requests.RequestException: On transport failures, unmodified
        """
        request = self.prepare(endpoint, method, params)
        # A cancelled call must not take a window slot
        if cancel_event is not None and cancel_event.is_set():
            raise RequestCancelledError("Request cancelled before sending")

        decision = self.governor.admit()
        rejected = self._handle_rejection(decision, endpoint)
        if rejected is not None:
            return rejected
        if isinstance(decision, ProceedAfter) and decision.delay > 0:
            self._wait(decision.delay, cancel_event)
        if cancel_event is not None and cancel_event.is_set():
            raise RequestCancelledError("Request cancelled before sending")

        logger.debug(f"{request.method} {endpoint}")
        response = self._transport.send(request)
        return self._finish(request, response.text)

    def get(self, url: str, params: Optional[Mapping[str, Any]] = None) -> ApiResult:
        return self.execute(url, "GET", params)

    def post(self, option: str, params: Optional[Mapping[str, Any]] = None) -> ApiResult:
        """POST an ``api_option`` call to the main API endpoint."""
        merged = dict(params or {})
        merged["api_option"] = option
        return self.execute(self.config.api_url, "POST", merged)

    def authenticate(self, username: str, password: str) -> ApiResult:
        """
        Log in and store the returned user key as the session.

        A failed login leaves any previous session untouched.
        """
        result = self.execute(
            self.config.login_url,
            "POST",
            {"api_user_name": username, "api_user_password": password},
        )
        self._store_session(result)
        return result


class AsyncHttpAgent(_AgentBase):
    """
    Non-blocking request pipeline.

    Rate-limit waits are realized with ``asyncio.sleep``. Cancelling the
    calling task during the wait raises ``asyncio.CancelledError`` and the
    request is never sent.

    Example:
        async with AsyncHttpAgent(PastebinConfig(api_key="...")) as agent:
            result = await agent.post("trends")
    """

    def __init__(
        self,
        config: PastebinConfig,
        transport: Optional[AsyncTransport] = None,
        governor: Optional[RateGovernor] = None,
        sleeper: Optional[AsyncSleeper] = None,
    ) -> None:
        super().__init__(config, governor)
        self._transport: AsyncTransport = transport or AiohttpTransport(config.user_agent, config.timeout)
        self._sleep: AsyncSleeper = sleeper or asyncio.sleep

    async def __aenter__(self) -> AsyncHttpAgent:
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        await self.close()

    async def close(self) -> None:
        await self._transport.close()

    async def execute(
        self,
        endpoint: str,
        method: str,
        params: Optional[Mapping[str, Any]] = None,
    ) -> ApiResult:
        """
        Send one API call, honoring the rate governor.

        Raises:
            asyncio.CancelledError: If cancelled, including during the wait
            aiohttp.ClientError: On transport failures, unmodified
        """
        request = self.prepare(endpoint, method, params)

        decision = self.governor.admit()
        rejected = self._handle_rejection(decision, endpoint)
        if rejected is not None:
            return rejected
        if isinstance(decision, ProceedAfter) and decision.delay > 0:
            await self._sleep(decision.delay)

        logger.debug(f"{request.method} {endpoint}")
        response = await self._transport.send(request)
        return self._finish(request, response.text)

    async def get(self, url: str, params: Optional[Mapping[str, Any]] = None) -> ApiResult:
        return await self.execute(url, "GET", params)

    async def post(self, option: str, params: Optional[Mapping[str, Any]] = None) -> ApiResult:
        """POST an ``api_option`` call to the main API endpoint."""
        merged = dict(params or {})
        merged["api_option"] = option
        return await self.execute(self.config.api_url, "POST", merged)

    async def authenticate(self, username: str, password: str) -> ApiResult:
        """Log in and store the returned user key as the session."""
        result = await self.execute(
            self.config.login_url,
            "POST",
            {"api_user_name": username, "api_user_password": password},
        )
        self._store_session(result)
        return result
