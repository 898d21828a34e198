"""Coalesce rapid filter changes so expensive recomputation runs once they settle."""

from __future__ import annotations

import time
from collections.abc import Callable
from typing import Generic, TypeVar

T = TypeVar("T")


class RecomputeDebouncer(Generic[T]):
    """Hold the latest requested value until it has been stable for ``settle_seconds``.

    A newer ``submit`` replaces the pending value and restarts the wait. No
    threads are involved; callers ``poll`` from their own loop.
    """

    def __init__(
        self,
        settle_seconds: float = 0.3,
        *,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        if settle_seconds < 0.0:
            raise ValueError("settle_seconds must be >= 0")
        self.settle_seconds = settle_seconds
        self._clock = clock
        self._pending: T | None = None
        self._submitted_at: float | None = None

    @property
    def has_pending(self) -> bool:
        return self._submitted_at is not None

    def submit(self, value: T) -> None:
        self._pending = value
        self._submitted_at = self._clock()

    def poll(self) -> T | None:
        """Return and clear the pending value once settled, else ``None``."""
        if self._submitted_at is None:
            return None
        if self._clock() - self._submitted_at < self.settle_seconds:
            return None

        value = self._pending
        self._pending = None
        self._submitted_at = None
        return value


__all__ = ["RecomputeDebouncer"]
