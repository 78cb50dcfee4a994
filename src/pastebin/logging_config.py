"""
Logging setup for applications using the Pastebin client.

Library modules only log through ``logging.getLogger(__name__)`` under the
``pastebin`` namespace. ``setup_logging`` attaches handlers to that namespace
and masks credential parameters in every record it emits.
"""

import logging
import re
import sys
from typing import Optional, TextIO, Union

LOGGER_NAME = "pastebin"

# Loggers of the HTTP stacks; urllib3 logs full request lines, query included
HTTP_LOGGERS = ("urllib3", "aiohttp.client")

CREDENTIAL_PARAMS = ("api_dev_key", "api_user_key", "api_user_password")
_CREDENTIAL_RE = re.compile(rf"\b({'|'.join(CREDENTIAL_PARAMS)})=[^&\s\"']*")


class CredentialFilter(logging.Filter):
    """Replace the values of credential parameters with ``***``."""

    def filter(self, record: logging.LogRecord) -> bool:
        message = record.getMessage()
        redacted = _CREDENTIAL_RE.sub(r"\1=***", message)
        if redacted != message:
            record.msg = redacted
            record.args = None
        return True


def setup_logging(
    level: Union[str, int] = "INFO",
    log_file: Optional[str] = None,
    format_string: Optional[str] = None,
    force: bool = False,
    stream: Optional[TextIO] = None,
    http_debug: bool = False,
) -> logging.Logger:
    """
    Set up logging for the pastebin client.

    Args:
        level: Logging level name or number
        log_file: Optional file path for logging output
        format_string: Optional custom format string for log messages
        force: If True, reconfigure even if handlers exist
        stream: Console stream (stderr by default)
        http_debug: Also route the requests/aiohttp loggers through the same
            handlers, with credentials masked

    Returns:
        Configured "pastebin" logger
    """
    if format_string is None:
        format_string = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

    if isinstance(level, str):
        numeric_level = getattr(logging, level.upper(), logging.INFO)
    else:
        numeric_level = level
    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(numeric_level)

    if force or not logger.handlers:
        logger.handlers.clear()

        formatter = logging.Formatter(format_string)
        credential_filter = CredentialFilter()
        handlers: list[logging.Handler] = [logging.StreamHandler(stream or sys.stderr)]
        if log_file:
            handlers.append(logging.FileHandler(log_file))

        for handler in handlers:
            handler.setLevel(numeric_level)
            handler.setFormatter(formatter)
            handler.addFilter(credential_filter)
            logger.addHandler(handler)

    if http_debug:
        for name in HTTP_LOGGERS:
            http_logger = logging.getLogger(name)
            http_logger.setLevel(numeric_level)
            http_logger.handlers = list(logger.handlers)
            http_logger.propagate = False

    # Avoid duplicate records through the root logger
    logger.propagate = False

    return logger
