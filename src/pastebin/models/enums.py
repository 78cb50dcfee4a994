"""Enumerations shared by the agent and the domain models."""

from enum import Enum


class RateLimitMode(str, Enum):
    """How the client handles the API's request rate limit."""

    # Count requests per window and raise once the limit is hit
    NONE = "none"
    # Space requests at least two seconds apart
    PACE = "pace"
    # Send freely, but wait for the next window once the limit is hit
    BURST = "burst"


class PasteExposure(int, Enum):
    """Visibility of a paste."""

    PUBLIC = 0
    UNLISTED = 1
    PRIVATE = 2


class PasteExpiration(str, Enum):
    """Paste lifetimes, valued by their API codes."""

    NEVER = "N"
    TEN_MINUTES = "10M"
    ONE_HOUR = "1H"
    ONE_DAY = "1D"
    ONE_WEEK = "1W"
    TWO_WEEKS = "2W"
    ONE_MONTH = "1M"


class AccountType(int, Enum):
    """Pastebin account tiers."""

    NORMAL = 0
    PRO = 1
