"""Tests for the recompute debouncer."""

from __future__ import annotations

import pytest

from domain.stats.debounce import RecomputeDebouncer


class _FakeClock:
    def __init__(self) -> None:
        self.now = 0.0

    def __call__(self) -> float:
        return self.now


def test_value_is_released_after_settle_time() -> None:
    clock = _FakeClock()
    debouncer: RecomputeDebouncer[str] = RecomputeDebouncer(0.3, clock=clock)

    debouncer.submit("2025-09-01")
    assert debouncer.poll() is None

    clock.now = 0.3
    assert debouncer.poll() == "2025-09-01"
    assert debouncer.poll() is None
    assert not debouncer.has_pending


def test_newer_submission_supersedes_and_restarts_wait() -> None:
    clock = _FakeClock()
    debouncer: RecomputeDebouncer[int] = RecomputeDebouncer(1.0, clock=clock)

    debouncer.submit(1)
    clock.now = 0.9
    debouncer.submit(2)
    clock.now = 1.5
    assert debouncer.poll() is None

    clock.now = 2.0
    assert debouncer.poll() == 2


def test_negative_settle_time_raises() -> None:
    with pytest.raises(ValueError, match=r"settle_seconds must be >= 0"):
        RecomputeDebouncer(-1.0)
