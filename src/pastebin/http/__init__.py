"""HTTP agent, transports and rate limiting for the Pastebin API."""

from .agent import AsyncHttpAgent, AuthSession, HttpAgent, classify_response, encode_params
from .protocols import AsyncTransport, Clock, HttpResponse, PreparedRequest, Transport
from .rate_limiter import (
    MAX_BURST_REQUESTS,
    PACE_INTERVAL,
    Decision,
    Proceed,
    ProceedAfter,
    RateGovernor,
    Reject,
)
from .transport import AiohttpTransport, RequestsTransport

__all__ = [
    "MAX_BURST_REQUESTS",
    "PACE_INTERVAL",
    "AiohttpTransport",
    "AsyncHttpAgent",
    "AsyncTransport",
    "AuthSession",
    "Clock",
    "Decision",
    "HttpAgent",
    "HttpResponse",
    "PreparedRequest",
    "Proceed",
    "ProceedAfter",
    "RateGovernor",
    "Reject",
    "RequestsTransport",
    "Transport",
    "classify_response",
    "encode_params",
]
