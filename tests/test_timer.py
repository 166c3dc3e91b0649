"""Tests for tankan.core.timer – stopwatch and time budget."""

from __future__ import annotations

import pytest

from tankan.core.timer import SessionTimer


class TestStopwatch:
    def test_initial(self, make_timer):
        timer = make_timer()
        assert not timer.is_running
        assert timer.elapsed == 0.0
        assert timer.remaining is None

    def test_elapsed_while_running(self, make_timer, clock):
        timer = make_timer()
        timer.start()
        clock.advance(2.5)
        assert timer.is_running
        assert timer.elapsed == pytest.approx(2.5)

    def test_start_idempotent(self, make_timer, clock):
        timer = make_timer()
        timer.start()
        clock.advance(1.0)
        timer.start()
        clock.advance(1.0)
        assert timer.elapsed == pytest.approx(2.0)

    def test_pause_keeps_elapsed(self, make_timer, clock):
        timer = make_timer()
        timer.start()
        clock.advance(3.0)
        timer.pause()
        clock.advance(10.0)
        assert not timer.is_running
        assert timer.elapsed == pytest.approx(3.0)

    def test_resume_accumulates(self, make_timer, clock):
        timer = make_timer()
        timer.start()
        clock.advance(1.0)
        timer.pause()
        clock.advance(5.0)
        timer.start()
        clock.advance(2.0)
        assert timer.elapsed == pytest.approx(3.0)

    def test_reset(self, make_timer, clock):
        timer = make_timer()
        timer.start()
        clock.advance(4.0)
        timer.reset()
        assert not timer.is_running
        assert timer.elapsed == 0.0

    def test_invalid_duration(self):
        with pytest.raises(ValueError):
            SessionTimer(0)


class TestTimeBudget:
    def test_remaining(self, make_timer, clock):
        timer = make_timer(60)
        timer.start()
        clock.advance(15.0)
        assert timer.remaining == pytest.approx(45.0)

    def test_expiry_fires_once(self, make_timer, clock):
        timer = make_timer(10)
        fired = []
        timer.expired.connect(lambda: fired.append(True))
        timer.start()
        clock.advance(10.0)
        timer._on_timeout()
        timer._on_timeout()
        assert fired == [True]
        assert timer.has_expired
        assert not timer.is_running
        assert timer.elapsed == pytest.approx(10.0)

    def test_start_after_expiry_ignored(self, make_timer, clock):
        timer = make_timer(10)
        timer.start()
        clock.advance(10.0)
        timer._on_timeout()
        timer.start()
        assert not timer.is_running

    def test_pause_cancels_expiry(self, make_timer, clock):
        timer = make_timer(10)
        fired = []
        timer.expired.connect(lambda: fired.append(True))
        timer.start()
        clock.advance(5.0)
        timer.pause()
        timer._on_timeout()
        assert fired == []
        assert not timer.has_expired

    def test_reset_rearms(self, make_timer, clock):
        timer = make_timer(10)
        fired = []
        timer.expired.connect(lambda: fired.append(True))
        timer.start()
        clock.advance(10.0)
        timer._on_timeout()
        timer.reset()
        assert not timer.has_expired
        timer.start()
        clock.advance(10.0)
        timer._on_timeout()
        assert fired == [True, True]
