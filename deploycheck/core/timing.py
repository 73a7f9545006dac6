"""Sleep abstractions used between polling attempts.

Pollers never call ``time.sleep`` directly; they receive a ``Sleeper`` so
tests can run without real delays and callers can bound a whole run with a
``Deadline``.
"""

from __future__ import annotations

import threading
import time
from collections.abc import Callable
from typing import Protocol, runtime_checkable

from deploycheck.core.errors import DeadlineExceeded


@runtime_checkable
class Sleeper(Protocol):
    """Anything that can suspend the current run for a number of seconds."""

    def sleep(self, seconds: float) -> None:
        ...


class BlockingSleeper:
    """Plain ``time.sleep``; blocks only the calling thread."""

    def sleep(self, seconds: float) -> None:
        if seconds > 0:
            time.sleep(seconds)


class Deadline:
    """Interruptible sleeper bounded by an overall wall-clock budget.

    Each run gets its own ``Deadline``; the underlying ``threading.Event``
    is never shared, so concurrent runs do not wake each other.

    Parameters
    ----------
    timeout_seconds:
        Total budget for the run, measured from construction.
    clock:
        Monotonic clock, injectable for tests.
    """

    def __init__(
        self,
        timeout_seconds: float,
        *,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        if timeout_seconds < 0:
            raise ValueError("timeout_seconds must be >= 0")
        self._clock = clock
        self._timeout = timeout_seconds
        self._expires_at = clock() + timeout_seconds
        self._cancelled = threading.Event()

    @property
    def timeout_seconds(self) -> float:
        return self._timeout

    def remaining(self) -> float:
        return max(0.0, self._expires_at - self._clock())

    @property
    def expired(self) -> bool:
        return self._cancelled.is_set() or self.remaining() <= 0.0

    def cancel(self) -> None:
        """Wake any pending sleep and fail all further ones."""
        self._cancelled.set()

    def check(self) -> None:
        """Raise ``DeadlineExceeded`` if the budget is spent."""
        if self._cancelled.is_set():
            raise DeadlineExceeded("verification run was cancelled")
        if self.remaining() <= 0.0:
            raise DeadlineExceeded(
                f"overall timeout of {self._timeout:g}s exceeded"
            )

    def sleep(self, seconds: float) -> None:
        """Sleep up to *seconds*, raising if the deadline falls first."""
        self.check()
        remaining = self.remaining()
        if seconds >= remaining:
            self._cancelled.wait(remaining)
            raise DeadlineExceeded(
                f"overall timeout of {self._timeout:g}s exceeded"
            )
        if seconds > 0 and self._cancelled.wait(seconds):
            raise DeadlineExceeded("verification run was cancelled")
