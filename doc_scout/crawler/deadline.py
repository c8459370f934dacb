"""
Request-wide time budget, checked at every fetch boundary.
"""
from __future__ import annotations

import time
from typing import Callable, Optional

from doc_scout.errors import DeadlineExceeded

__all__ = ("Deadline",)


class Deadline:
    """Monotonic-clock deadline shared by every branch of one request."""

    def __init__(self, seconds: float, clock: Callable[[], float] = time.monotonic) -> None:
        self.seconds = seconds
        self._clock = clock
        self._expires_at = clock() + seconds

    def remaining(self) -> float:
        return max(0.0, self._expires_at - self._clock())

    @property
    def expired(self) -> bool:
        return self.remaining() <= 0

    def check(self, url: Optional[str] = None) -> None:
        """Raise :class:`DeadlineExceeded` once the budget is spent."""
        if self.expired:
            raise DeadlineExceeded(f"Deadline of {self.seconds:.1f}s exceeded", url)
