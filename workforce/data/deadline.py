"""Deadline and cancellation signal passed to store-facing operations."""

import threading
import time
from typing import Optional

from workforce.utils.errors import StoreTimeoutError


class Deadline:
    """
    Time budget for one logical request.

    A deadline with no timeout never expires on its own but can still be
    cancelled. ``cancel()`` may be called from any thread.
    """

    def __init__(self, timeout: Optional[float] = None):
        self._expires_at = (
            time.monotonic() + timeout if timeout is not None else None
        )
        self._cancelled = threading.Event()

    @classmethod
    def after(cls, seconds: Optional[float]) -> "Deadline":
        """Create a deadline expiring ``seconds`` from now."""
        return cls(timeout=seconds)

    def cancel(self) -> None:
        """Signal cancellation to every operation holding this deadline."""
        self._cancelled.set()

    @property
    def cancelled(self) -> bool:
        return self._cancelled.is_set()

    def remaining(self) -> Optional[float]:
        """Seconds left, ``None`` when unbounded, never negative."""
        if self._expires_at is None:
            return None
        return max(0.0, self._expires_at - time.monotonic())

    @property
    def expired(self) -> bool:
        if self.cancelled:
            return True
        remaining = self.remaining()
        return remaining is not None and remaining <= 0

    def check(self, operation: str) -> None:
        """Raise StoreTimeoutError if the deadline has passed or was cancelled."""
        if self.cancelled:
            raise StoreTimeoutError(
                message=f"{operation} cancelled",
                details={"operation": operation, "reason": "cancelled"},
            )
        if self.expired:
            raise StoreTimeoutError(
                message=f"{operation} exceeded its deadline",
                details={"operation": operation, "reason": "deadline_exceeded"},
            )


def check_deadline(deadline: Optional[Deadline], operation: str) -> None:
    """Check an optional deadline."""
    if deadline is not None:
        deadline.check(operation)
