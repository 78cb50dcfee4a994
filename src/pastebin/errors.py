"""Error values and exceptions for the Pastebin client.

The request pipeline reports API-level failures as ``ApiError`` values inside an
``ApiResult``. Callers that prefer exceptions call ``ApiResult.unwrap()``, which
raises the matching ``PastebinError`` subclass:

    ApiErrorKind.INVALID_API_KEY      -> InvalidApiKeyError
    ApiErrorKind.NOT_AUTHENTICATED    -> NotAuthenticatedError
    ApiErrorKind.RATE_LIMIT_EXCEEDED  -> RateLimitExceededError
    ApiErrorKind.OTHER                -> ApiRequestError

Transport failures (``requests.RequestException``, ``aiohttp.ClientError``,
timeouts) are never wrapped.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional


class ApiErrorKind(str, Enum):
    """Classification of an API-level failure."""

    INVALID_API_KEY = "invalid_api_key"
    NOT_AUTHENTICATED = "not_authenticated"
    RATE_LIMIT_EXCEEDED = "rate_limit_exceeded"
    OTHER = "other"


@dataclass(frozen=True)
class ApiError:
    """
    An API-level failure.

    Attributes:
        kind: Which failure occurred
        message: Human readable description (the API's text for OTHER)
        wait_time: Seconds until the rate limit window reopens (RATE_LIMIT_EXCEEDED only)
    """

    kind: ApiErrorKind
    message: str
    wait_time: Optional[float] = None

    @classmethod
    def invalid_api_key(cls) -> ApiError:
        return cls(ApiErrorKind.INVALID_API_KEY, "Invalid API key")

    @classmethod
    def not_authenticated(cls) -> ApiError:
        return cls(ApiErrorKind.NOT_AUTHENTICATED, "User not logged in")

    @classmethod
    def rate_limit_exceeded(cls, wait_time: float) -> ApiError:
        return cls(
            ApiErrorKind.RATE_LIMIT_EXCEEDED,
            f"Maximum number of requests has been exceeded this period. "
            f"Please wait {int(wait_time)} seconds",
            wait_time,
        )

    @classmethod
    def other(cls, message: str) -> ApiError:
        return cls(ApiErrorKind.OTHER, message)

    def to_exception(self) -> PastebinError:
        """Build the exception matching this error."""
        if self.kind is ApiErrorKind.INVALID_API_KEY:
            return InvalidApiKeyError(self)
        if self.kind is ApiErrorKind.NOT_AUTHENTICATED:
            return NotAuthenticatedError(self)
        if self.kind is ApiErrorKind.RATE_LIMIT_EXCEEDED:
            return RateLimitExceededError(self)
        return ApiRequestError(self)


@dataclass(frozen=True)
class ApiResult:
    """
    Outcome of one pipeline call: a body on success, an ApiError otherwise.

    Example:
        result = agent.execute(url, "POST", {"api_option": "trends"})
        if result.ok:
            handle(result.body)
        else:
            print(result.error.kind)
    """

    body: Optional[str] = None
    error: Optional[ApiError] = None

    @property
    def ok(self) -> bool:
        return self.error is None

    def unwrap(self) -> str:
        """
        Return the body, or raise the exception matching the error.

        Raises:
            PastebinError: The subclass matching ``error.kind``
        """
        if self.error is not None:
            raise self.error.to_exception()
        return self.body or ""


class PastebinError(Exception):
    """Base exception for the Pastebin client."""

    def __init__(self, error: ApiError | str):
        if isinstance(error, ApiError):
            self.error: Optional[ApiError] = error
            message = error.message
        else:
            self.error = None
            message = error
        super().__init__(message)


class InvalidApiKeyError(PastebinError):
    """Raised when the API rejects the developer key."""

    def __init__(self, error: ApiError | None = None):
        super().__init__(error or ApiError.invalid_api_key())


class NotAuthenticatedError(PastebinError):
    """Raised when an operation needs a logged in user and there is none."""

    def __init__(self, error: ApiError | None = None):
        super().__init__(error or ApiError.not_authenticated())


class RateLimitExceededError(PastebinError):
    """
    Raised when the request limit for the current window is reached.

    Attributes:
        wait_time: Seconds left before more requests may be made
    """

    def __init__(self, error: ApiError | float):
        if not isinstance(error, ApiError):
            error = ApiError.rate_limit_exceeded(error)
        self.wait_time: float = error.wait_time or 0.0
        super().__init__(error)


class ApiRequestError(PastebinError):
    """Raised for any other ``Bad API request`` response."""


class RequestCancelledError(PastebinError):
    """Raised when a pending rate-limit wait is cancelled before sending."""
