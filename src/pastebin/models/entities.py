"""Typed Pastebin domain objects built from API XML."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Optional
from xml.etree.ElementTree import Element

from pydantic import BaseModel

from .enums import AccountType, PasteExposure


def _text(element: Element, name: str, default: str = "") -> str:
    value = element.findtext(name)
    return value.strip() if value is not None else default


def _optional_text(element: Element, name: str) -> Optional[str]:
    value = element.findtext(name)
    return value.strip() if value is not None else None


def _int(element: Element, name: str) -> int:
    value = _text(element, name)
    return int(value) if value else 0


class Paste(BaseModel):
    """
    A paste as listed by the ``trends`` and ``list`` API options.

    Attributes:
        key: Paste key (the last path segment of its URL)
        timestamp: Submission time as a Unix timestamp
        title: Paste title
        size: Size in bytes
        expire_timestamp: Expiry as a Unix timestamp, 0 for never
        exposure: Visibility
        format_long: Human readable syntax name, if reported
        format_short: Syntax identifier, if reported
        url: Paste URL
        hits: View count
    """

    key: str
    timestamp: int
    title: str = ""
    size: int = 0
    expire_timestamp: int = 0
    exposure: PasteExposure = PasteExposure.PUBLIC
    format_long: Optional[str] = None
    format_short: Optional[str] = None
    url: str = ""
    hits: int = 0

    model_config = {"frozen": True}

    @property
    def submitted(self) -> datetime:
        """Submission time in UTC."""
        return datetime.fromtimestamp(self.timestamp, tz=timezone.utc)

    @property
    def expires(self) -> Optional[datetime]:
        """Expiry time in UTC, None when the paste never expires."""
        if self.expire_timestamp == 0:
            return None
        return datetime.fromtimestamp(self.expire_timestamp, tz=timezone.utc)

    @classmethod
    def from_element(cls, element: Element) -> Paste:
        """Build a Paste from a ``<paste>`` element."""
        return cls(
            key=_text(element, "paste_key"),
            timestamp=_int(element, "paste_date"),
            title=_text(element, "paste_title"),
            size=_int(element, "paste_size"),
            expire_timestamp=_int(element, "paste_expire_date"),
            exposure=PasteExposure(_int(element, "paste_private")),
            format_long=_optional_text(element, "paste_format_long"),
            format_short=_optional_text(element, "paste_format_short"),
            url=_text(element, "paste_url"),
            hits=_int(element, "paste_hits"),
        )


class User(BaseModel):
    """Account details returned by the ``userdetails`` API option."""

    name: str
    format_short: str = ""
    expiration: str = ""
    avatar_url: str = ""
    website: str = ""
    email: str = ""
    location: str = ""
    default_exposure: PasteExposure = PasteExposure.PUBLIC
    account_type: AccountType = AccountType.NORMAL

    model_config = {"frozen": True}

    @classmethod
    def from_element(cls, element: Element) -> User:
        """Build a User from a ``<user>`` element."""
        return cls(
            name=_text(element, "user_name"),
            format_short=_text(element, "user_format_short"),
            expiration=_text(element, "user_expiration"),
            avatar_url=_text(element, "user_avatar_url"),
            website=_text(element, "user_website"),
            email=_text(element, "user_email"),
            location=_text(element, "user_location"),
            default_exposure=PasteExposure(_int(element, "user_private")),
            account_type=AccountType(_int(element, "user_account_type")),
        )
