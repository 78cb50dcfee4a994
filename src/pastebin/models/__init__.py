"""Configuration and domain models."""

from .config import PastebinConfig
from .entities import Paste, User
from .enums import AccountType, PasteExpiration, PasteExposure, RateLimitMode

__all__ = [
    "AccountType",
    "Paste",
    "PasteExpiration",
    "PasteExposure",
    "PastebinConfig",
    "RateLimitMode",
    "User",
]
