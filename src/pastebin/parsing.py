"""XML decoding for multi-value API payloads."""

import logging
from xml.etree.ElementTree import Element

from defusedxml import ElementTree

from .errors import PastebinError
from .models.entities import Paste, User

logger = logging.getLogger(__name__)


def parse_payload(payload: str) -> Element:
    """
    Parse a payload of sibling elements.

    The API returns ``<paste>...</paste><paste>...</paste>`` with no root, so
    the payload is wrapped in a synthetic ``<result>`` element first.

    Raises:
        PastebinError: If the payload is not well-formed XML
    """
    try:
        return ElementTree.fromstring(f"<result>{payload}</result>")
    except ElementTree.ParseError as e:
        logger.debug(f"Unparseable payload: {payload[:200]!r}")
        raise PastebinError(f"Malformed XML in API response: {e}") from e


def parse_pastes(payload: str) -> list[Paste]:
    """Parse every ``<paste>`` element in a payload (e.g. "No pastes found." yields [])."""
    root = parse_payload(payload)
    return [Paste.from_element(element) for element in root.findall("paste")]


def parse_user(payload: str) -> User:
    """Parse the ``<user>`` element of a ``userdetails`` payload."""
    element = parse_payload(payload).find("user")
    if element is None:
        raise PastebinError("API response did not contain user details")
    return User.from_element(element)
