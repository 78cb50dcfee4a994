"""
pastebin - Client library for the Pastebin API with built-in rate limiting.

Usage:
    from pastebin import PastebinClient, RateLimitMode

    with PastebinClient("my-api-key", RateLimitMode.BURST) as client:
        url = client.create_paste("print('hello')", title="hello", language="python")
"""

__version__ = "1.0.0"

from .client import AsyncPastebinClient, PastebinClient
from .errors import (
    ApiError,
    ApiErrorKind,
    ApiRequestError,
    ApiResult,
    InvalidApiKeyError,
    NotAuthenticatedError,
    PastebinError,
    RateLimitExceededError,
    RequestCancelledError,
)
from .http import AsyncHttpAgent, HttpAgent, RateGovernor
from .logging_config import setup_logging
from .models import (
    AccountType,
    Paste,
    PastebinConfig,
    PasteExpiration,
    PasteExposure,
    RateLimitMode,
    User,
)

__all__ = [
    "__version__",
    # Clients
    "PastebinClient",
    "AsyncPastebinClient",
    "HttpAgent",
    "AsyncHttpAgent",
    "RateGovernor",
    # Config
    "PastebinConfig",
    "RateLimitMode",
    "setup_logging",
    # Models
    "AccountType",
    "Paste",
    "PasteExpiration",
    "PasteExposure",
    "User",
    # Errors
    "ApiError",
    "ApiErrorKind",
    "ApiResult",
    "PastebinError",
    "ApiRequestError",
    "InvalidApiKeyError",
    "NotAuthenticatedError",
    "RateLimitExceededError",
    "RequestCancelledError",
]
