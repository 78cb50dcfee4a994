"""High-level Pastebin client (blocking and async)."""

from __future__ import annotations

import logging
from types import TracebackType
from typing import Any, Optional, Union

from .errors import NotAuthenticatedError
from .http.agent import AsyncHttpAgent, HttpAgent
from .http.protocols import AsyncTransport, Transport
from .http.rate_limiter import RateGovernor
from .models.config import PastebinConfig
from .models.entities import Paste, User
from .models.enums import PasteExpiration, PasteExposure, RateLimitMode
from .parsing import parse_pastes, parse_user

logger = logging.getLogger(__name__)

USER_OPTION = "userdetails"
TRENDING_OPTION = "trends"
PASTE_OPTION = "paste"
LIST_OPTION = "list"
DELETE_OPTION = "delete"
RAW_OPTION = "show_paste"

MIN_LIST_LIMIT = 1
MAX_LIST_LIMIT = 1000

PasteRef = Union[Paste, str]


def _make_config(config: Union[PastebinConfig, str], rate_limit_mode: Optional[RateLimitMode]) -> PastebinConfig:
    if isinstance(config, PastebinConfig):
        if rate_limit_mode is not None and rate_limit_mode != config.rate_limit_mode:
            return config.model_copy(update={"rate_limit_mode": RateLimitMode(rate_limit_mode)})
        return config
    return PastebinConfig(api_key=config, rate_limit_mode=rate_limit_mode or RateLimitMode.NONE)


def _paste_params(
    code: str,
    title: Optional[str],
    language: Optional[str],
    exposure: PasteExposure,
    expiration: PasteExpiration,
) -> dict[str, Any]:
    if code is None:
        raise ValueError("code must not be None")
    return {
        "api_paste_code": code,
        "api_paste_name": title if title is not None else "Untitled",
        "api_paste_format": language if language is not None else "text",
        "api_paste_private": int(PasteExposure(exposure)),
        "api_paste_expire_date": PasteExpiration(expiration).value,
    }


def _check_limit(limit: int) -> None:
    if not MIN_LIST_LIMIT <= limit <= MAX_LIST_LIMIT:
        raise ValueError(f"limit must be between {MIN_LIST_LIMIT} and {MAX_LIST_LIMIT} (inclusive), got {limit}")


def _paste_key(paste: PasteRef) -> str:
    return paste.key if isinstance(paste, Paste) else paste


def _resolve_exposure(exposure: Optional[PasteExposure], user: Optional[User]) -> PasteExposure:
    if exposure is not None:
        return PasteExposure(exposure)
    return user.default_exposure if user is not None else PasteExposure.PUBLIC


def _paste_exposure(paste: PasteRef, exposure: Optional[PasteExposure]) -> PasteExposure:
    if exposure is not None:
        return PasteExposure(exposure)
    return paste.exposure if isinstance(paste, Paste) else PasteExposure.PUBLIC


class PastebinClient:
    """
    Blocking client for the Pastebin API.

    Example:
        with PastebinClient("my-api-key", rate_limit_mode=RateLimitMode.BURST) as client:
            url = client.create_paste("print('hi')", title="hello", language="python")

            user = client.login("name", "password")
            for paste in client.list_pastes(limit=10):
                print(paste.title, paste.url)
    """

    def __init__(
        self,
        config: Union[PastebinConfig, str],
        rate_limit_mode: Optional[RateLimitMode] = None,
        *,
        transport: Optional[Transport] = None,
        governor: Optional[RateGovernor] = None,
    ) -> None:
        """
        Initialize the client.

        Args:
            config: PastebinConfig, or the API key as a plain string
            rate_limit_mode: Overrides the configured rate limit mode
            transport: Blocking transport (defaults to RequestsTransport)
            governor: Rate governor (defaults to one built from config)
        """
        self.config = _make_config(config, rate_limit_mode)
        self._agent = HttpAgent(self.config, transport=transport, governor=governor)
        self._user: Optional[User] = None

    @property
    def api_key(self) -> str:
        return self.config.api_key

    @property
    def agent(self) -> HttpAgent:
        return self._agent

    @property
    def authenticated(self) -> bool:
        return self._agent.authenticated

    def __enter__(self) -> PastebinClient:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        self.close()

    def close(self) -> None:
        self._agent.close()

    def _require_login(self) -> None:
        if not self._agent.authenticated:
            raise NotAuthenticatedError()

    def login(self, username: str, password: str) -> User:
        """
        Log in and return the account details.

        Raises:
            PastebinError: If the credentials are rejected
        """
        if username is None or password is None:
            raise ValueError("username and password must not be None")
        self._user = None
        self._agent.authenticate(username, password).unwrap()
        return self.get_user()

    def get_user(self) -> User:
        """
        Account details of the logged in user (fetched once, then cached).

        Raises:
            NotAuthenticatedError: If nobody is logged in; no request is sent
        """
        self._require_login()
        if self._user is None:
            self._user = parse_user(self._agent.post(USER_OPTION).unwrap())
        return self._user

    @property
    def user(self) -> User:
        return self.get_user()

    def create_paste(
        self,
        code: str,
        title: Optional[str] = None,
        language: Optional[str] = None,
        exposure: Optional[PasteExposure] = None,
        expiration: PasteExpiration = PasteExpiration.NEVER,
    ) -> str:
        """
        Create a paste and return its URL.

        Args:
            code: Paste text
            title: Paste title ("Untitled" if None)
            language: Syntax highlighting id ("text" if None)
            exposure: Visibility (the logged in user's default if None,
                otherwise public)
            expiration: Lifetime
        """
        params = _paste_params(code, title, language, _resolve_exposure(exposure, self._user), expiration)
        return self._agent.post(PASTE_OPTION, params).unwrap()

    def trending_pastes(self) -> list[Paste]:
        """Currently trending pastes."""
        return parse_pastes(self._agent.post(TRENDING_OPTION).unwrap())

    def list_pastes(self, limit: int = 50) -> list[Paste]:
        """
        Pastes of the logged in user.

        Raises:
            ValueError: If limit is outside 1..1000
            NotAuthenticatedError: If nobody is logged in; no request is sent
        """
        _check_limit(limit)
        self._require_login()
        result = self._agent.post(LIST_OPTION, {"api_results_limit": limit})
        return parse_pastes(result.unwrap())

    def get_paste_text(self, paste: PasteRef, exposure: Optional[PasteExposure] = None) -> str:
        """
        Raw text of a paste.

        Private pastes of the logged in user go through the raw API; every
        other paste is read from its public raw URL.
        """
        key = _paste_key(paste)
        if self._agent.authenticated and _paste_exposure(paste, exposure) is PasteExposure.PRIVATE:
            result = self._agent.execute(
                self.config.raw_url,
                "POST",
                {"api_paste_key": key, "api_option": RAW_OPTION},
            )
        else:
            result = self._agent.get(
                self.config.public_raw_url.format(key=key),
                {"api_paste_key": key, "api_option": RAW_OPTION},
            )
        return result.unwrap()

    def delete_paste(self, paste: PasteRef) -> str:
        """
        Delete one of the logged in user's pastes.

        Raises:
            NotAuthenticatedError: If nobody is logged in; no request is sent
        """
        self._require_login()
        key = _paste_key(paste)
        logger.info(f"Deleting paste {key}")
        return self._agent.post(DELETE_OPTION, {"api_paste_key": key}).unwrap()


class AsyncPastebinClient:
    """
    Async client for the Pastebin API.

    Example:
        async with AsyncPastebinClient("my-api-key", RateLimitMode.PACE) as client:
            pastes = await client.trending_pastes()
            text = await client.get_paste_text(pastes[0])
    """

    def __init__(
        self,
        config: Union[PastebinConfig, str],
        rate_limit_mode: Optional[RateLimitMode] = None,
        *,
        transport: Optional[AsyncTransport] = None,
        governor: Optional[RateGovernor] = None,
    ) -> None:
        self.config = _make_config(config, rate_limit_mode)
        self._agent = AsyncHttpAgent(self.config, transport=transport, governor=governor)
        self._user: Optional[User] = None

    @property
    def api_key(self) -> str:
        return self.config.api_key

    @property
    def agent(self) -> AsyncHttpAgent:
        return self._agent

    @property
    def authenticated(self) -> bool:
        return self._agent.authenticated

    async def __aenter__(self) -> AsyncPastebinClient:
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        await self.close()

    async def close(self) -> None:
        await self._agent.close()

    def _require_login(self) -> None:
        if not self._agent.authenticated:
            raise NotAuthenticatedError()

    async def login(self, username: str, password: str) -> User:
        if username is None or password is None:
            raise ValueError("username and password must not be None")
        self._user = None
        (await self._agent.authenticate(username, password)).unwrap()
        return await self.get_user()

    async def get_user(self) -> User:
        self._require_login()
        if self._user is None:
            result = await self._agent.post(USER_OPTION)
            self._user = parse_user(result.unwrap())
        return self._user

    async def create_paste(
        self,
        code: str,
        title: Optional[str] = None,
        language: Optional[str] = None,
        exposure: Optional[PasteExposure] = None,
        expiration: PasteExpiration = PasteExpiration.NEVER,
    ) -> str:
        params = _paste_params(code, title, language, _resolve_exposure(exposure, self._user), expiration)
        return (await self._agent.post(PASTE_OPTION, params)).unwrap()

    async def trending_pastes(self) -> list[Paste]:
        return parse_pastes((await self._agent.post(TRENDING_OPTION)).unwrap())

    async def list_pastes(self, limit: int = 50) -> list[Paste]:
        _check_limit(limit)
        self._require_login()
        result = await self._agent.post(LIST_OPTION, {"api_results_limit": limit})
        return parse_pastes(result.unwrap())

    async def get_paste_text(self, paste: PasteRef, exposure: Optional[PasteExposure] = None) -> str:
        key = _paste_key(paste)
        if self._agent.authenticated and _paste_exposure(paste, exposure) is PasteExposure.PRIVATE:
            result = await self._agent.execute(
                self.config.raw_url,
                "POST",
                {"api_paste_key": key, "api_option": RAW_OPTION},
            )
        else:
            result = await self._agent.get(
                self.config.public_raw_url.format(key=key),
                {"api_paste_key": key, "api_option": RAW_OPTION},
            )
        return result.unwrap()

    async def delete_paste(self, paste: PasteRef) -> str:
        self._require_login()
        key = _paste_key(paste)
        logger.info(f"Deleting paste {key}")
        return (await self._agent.post(DELETE_OPTION, {"api_paste_key": key})).unwrap()
