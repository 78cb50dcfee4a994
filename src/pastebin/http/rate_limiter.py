"""Request-rate governor for the Pastebin API."""

from __future__ import annotations

import logging
import threading
import time
from dataclasses import dataclass
from typing import Optional, Union

from ..models.enums import RateLimitMode
from .protocols import Clock

logger = logging.getLogger(__name__)

BURST_WINDOW = 60.0  # seconds
MAX_BURST_REQUESTS = 30
PACE_INTERVAL = 2.0  # seconds


@dataclass(frozen=True)
class Proceed:
    """Send the request now."""


@dataclass(frozen=True)
class ProceedAfter:
    """Wait ``delay`` seconds, then send the request."""

    delay: float


@dataclass(frozen=True)
class Reject:
    """Do not send; the window reopens in ``wait`` seconds."""

    wait: float


Decision = Union[Proceed, ProceedAfter, Reject]

PROCEED = Proceed()


@dataclass
class BurstWindow:
    """Start of the current accounting window and requests counted in it."""

    start: float
    count: int = 1


@dataclass
class PaceState:
    """Timestamp of the last admitted request."""

    last_request: float


class RateGovernor:
    """
    Decides, for each outgoing request, whether to proceed, wait or reject.

    The governor never sleeps itself. ``admit()`` returns a Decision and the
    caller realizes the wait, either blocking (``time.sleep``) or cooperatively
    (``asyncio.sleep``). Both call styles therefore see identical decisions.

    Policies:
    - NONE: up to 30 requests per 60s window, then Reject with the time left.
    - BURST: same accounting, but ProceedAfter the time left instead.
    - PACE: at least 2s between consecutive admissions.

    The very first admission after construction (or ``reset()``) always
    proceeds, whatever the mode.

    Thread-safe: check-and-update runs under a ``threading.Lock`` that is never
    held across a wait, so it is also safe to share between coroutines.

    Example:
        governor = RateGovernor(RateLimitMode.PACE)

        decision = governor.admit()
        if isinstance(decision, ProceedAfter):
            time.sleep(decision.delay)
    """

    def __init__(
        self,
        mode: RateLimitMode = RateLimitMode.NONE,
        clock: Optional[Clock] = None,
        window: float = BURST_WINDOW,
        max_requests: int = MAX_BURST_REQUESTS,
        pace_interval: float = PACE_INTERVAL,
    ):
        """
        Initialize the governor.

        Args:
            mode: Rate limit policy, fixed for the governor's lifetime
            clock: Monotonic time source in seconds (defaults to time.monotonic)
            window: Burst accounting window in seconds
            max_requests: Requests allowed per window under NONE/BURST
            pace_interval: Minimum seconds between requests under PACE
        """
        self._mode = RateLimitMode(mode)
        self._clock: Clock = clock or time.monotonic
        self._window_length = window
        self._max_requests = max_requests
        self._pace_interval = pace_interval

        # Exactly one of these is used, chosen by mode; None until first admission
        self._window: Optional[BurstWindow] = None
        self._pace: Optional[PaceState] = None
        self._lock = threading.Lock()

    @property
    def mode(self) -> RateLimitMode:
        return self._mode

    def admit(self) -> Decision:
        """
        Record an admission attempt and decide what the caller must do.

        Returns:
            Proceed, ProceedAfter(delay) or Reject(wait)
        """
        with self._lock:
            now = self._clock()
            if self._mode is RateLimitMode.PACE:
                return self._admit_pace(now)
            return self._admit_burst(now)

    def _admit_burst(self, now: float) -> Decision:
        window = self._window
        if window is None or now - window.start >= self._window_length:
            self._window = BurstWindow(start=now)
            return PROCEED

        if window.count < self._max_requests:
            window.count += 1
            return PROCEED

        remaining = max(0.0, self._window_length - (now - window.start))
        if self._mode is RateLimitMode.BURST:
            logger.debug(f"Burst limit of {self._max_requests} reached, waiting {remaining:.2f}s")
            return ProceedAfter(remaining)

        logger.debug(f"Burst limit of {self._max_requests} reached, rejecting ({remaining:.2f}s left)")
        return Reject(remaining)

    def _admit_pace(self, now: float) -> Decision:
        pace = self._pace
        if pace is None:
            self._pace = PaceState(last_request=now)
            return PROCEED

        diff = now - pace.last_request
        pace.last_request = now
        if diff < self._pace_interval:
            delay = max(0.0, self._pace_interval - diff)
            logger.debug(f"Pacing request, waiting {delay:.2f}s")
            return ProceedAfter(delay)
        return PROCEED

    def reset(self) -> None:
        """
        Forget all window and pace state.

        The next admission is treated as the first one again.
        """
        with self._lock:
            self._window = None
            self._pace = None

    def get_stats(self) -> dict:
        """Get governor statistics."""
        with self._lock:
            return {
                "mode": self._mode.value,
                "window_start": self._window.start if self._window else None,
                "requests_this_window": self._window.count if self._window else 0,
                "last_request": self._pace.last_request if self._pace else None,
            }
