"""Tests for the rate governor."""

import threading

import pytest
from pastebin import RateLimitMode
from pastebin.http.rate_limiter import (
    MAX_BURST_REQUESTS,
    Proceed,
    ProceedAfter,
    RateGovernor,
    Reject,
)


class TestWarmStart:
    """The first admission never waits."""

    @pytest.mark.parametrize("mode", list(RateLimitMode))
    def test_first_call_proceeds(self, mode, clock):
        """Test that every mode admits the first request immediately."""
        governor = RateGovernor(mode, clock=clock)
        assert governor.admit() == Proceed()

    def test_mode_accepts_string(self, clock):
        """Test that the mode can be given by value."""
        governor = RateGovernor("burst", clock=clock)
        assert governor.mode is RateLimitMode.BURST


class TestBurstAccounting:
    """Tests for NONE and BURST window accounting."""

    def _fill_window(self, governor, clock, spacing=0.1):
        for _ in range(MAX_BURST_REQUESTS):
            assert governor.admit() == Proceed()
            clock.advance(spacing)

    def test_none_rejects_31st_request(self, clock):
        """Test that NONE rejects once 30 requests are counted."""
        governor = RateGovernor(RateLimitMode.NONE, clock=clock)
        self._fill_window(governor, clock)

        decision = governor.admit()
        assert isinstance(decision, Reject)
        assert decision.wait == pytest.approx(60.0 - 3.0)

    def test_burst_waits_instead_of_rejecting(self, clock):
        """Test that BURST returns the same duration as a wait."""
        governor = RateGovernor(RateLimitMode.BURST, clock=clock)
        self._fill_window(governor, clock)

        decision = governor.admit()
        assert isinstance(decision, ProceedAfter)
        assert decision.delay == pytest.approx(57.0)

    def test_rejection_does_not_consume_window(self, clock):
        """Test that repeated rejections keep reporting the shrinking remainder."""
        governor = RateGovernor(RateLimitMode.NONE, clock=clock)
        self._fill_window(governor, clock, spacing=0.0)

        clock.advance(20)
        assert governor.admit() == Reject(pytest.approx(40.0))
        clock.advance(30)
        assert governor.admit() == Reject(pytest.approx(10.0))
        assert governor.get_stats()["requests_this_window"] == MAX_BURST_REQUESTS

    def test_window_reset_after_60_seconds(self, clock):
        """Test that a full window reopens with exactly one request counted."""
        governor = RateGovernor(RateLimitMode.NONE, clock=clock)
        self._fill_window(governor, clock, spacing=0.0)
        start = governor.get_stats()["window_start"]

        clock.advance(60)
        assert governor.admit() == Proceed()

        stats = governor.get_stats()
        assert stats["requests_this_window"] == 1
        assert stats["window_start"] == start + 60

    def test_window_not_reset_just_before_boundary(self, clock):
        """Test that 59.9s after the window start the limit still applies."""
        governor = RateGovernor(RateLimitMode.BURST, clock=clock)
        self._fill_window(governor, clock, spacing=0.0)

        clock.advance(59.9)
        decision = governor.admit()
        assert isinstance(decision, ProceedAfter)
        assert decision.delay == pytest.approx(0.1)

    def test_custom_limits(self, clock):
        """Test that window length and request cap are configurable."""
        governor = RateGovernor(RateLimitMode.NONE, clock=clock, window=10.0, max_requests=2)
        assert governor.admit() == Proceed()
        assert governor.admit() == Proceed()
        assert governor.admit() == Reject(10.0)

    def test_modes_share_accounting(self, clock):
        """Test that NONE and BURST count the same requests."""
        none = RateGovernor(RateLimitMode.NONE, clock=clock)
        burst = RateGovernor(RateLimitMode.BURST, clock=clock)
        for _ in range(MAX_BURST_REQUESTS):
            none.admit()
            burst.admit()
            clock.advance(1.0)

        assert none.admit().wait == burst.admit().delay


class TestPace:
    """Tests for PACE mode."""

    def test_close_calls_wait_for_remainder(self, clock):
        """Test that a call 0.5s after the last waits 1.5s."""
        governor = RateGovernor(RateLimitMode.PACE, clock=clock)
        governor.admit()

        clock.advance(0.5)
        decision = governor.admit()
        assert isinstance(decision, ProceedAfter)
        assert decision.delay == pytest.approx(1.5)

    def test_spaced_calls_proceed(self, clock):
        """Test that calls 2s apart or more proceed immediately."""
        governor = RateGovernor(RateLimitMode.PACE, clock=clock)
        governor.admit()

        clock.advance(2.0)
        assert governor.admit() == Proceed()
        clock.advance(5.0)
        assert governor.admit() == Proceed()

    def test_wait_records_decision_time(self, clock):
        """Test that a paced decision stamps the last request at decision time."""
        governor = RateGovernor(RateLimitMode.PACE, clock=clock)
        governor.admit()

        clock.advance(0.5)
        governor.admit()
        assert governor.get_stats()["last_request"] == clock.now

        clock.advance(0.5)
        assert governor.admit() == ProceedAfter(pytest.approx(1.5))

    def test_pace_ignores_burst_cap(self, clock):
        """Test that PACE never rejects, however many requests are made."""
        governor = RateGovernor(RateLimitMode.PACE, clock=clock)
        for _ in range(100):
            assert not isinstance(governor.admit(), Reject)
            clock.advance(2.0)


class TestReset:
    """Tests for governor reset."""

    def test_reset_restores_warm_start(self, clock):
        """Test that reset makes the next call behave like the first."""
        governor = RateGovernor(RateLimitMode.PACE, clock=clock)
        governor.admit()
        governor.reset()

        assert governor.admit() == Proceed()
        assert governor.get_stats()["last_request"] == clock.now


class TestConcurrency:
    """Check-and-update is atomic."""

    def test_threads_never_exceed_window_cap(self, clock):
        """Test that concurrent callers get exactly 30 admissions per window."""
        governor = RateGovernor(RateLimitMode.NONE, clock=clock)
        decisions = []
        lock = threading.Lock()

        def worker():
            for _ in range(10):
                decision = governor.admit()
                with lock:
                    decisions.append(decision)

        threads = [threading.Thread(target=worker) for _ in range(8)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        assert sum(isinstance(d, Proceed) for d in decisions) == MAX_BURST_REQUESTS
        assert sum(isinstance(d, Reject) for d in decisions) == 80 - MAX_BURST_REQUESTS
