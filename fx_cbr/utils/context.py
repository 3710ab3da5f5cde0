"""Cooperative cancellation for fetch operations."""

from __future__ import annotations

import threading
import time

from fx_cbr.errors import CancelledError, DeadlineExceededError


class FetchContext:
    """Cancellation token with an optional deadline.

    A context is shared between the caller and the transport. Any thread may
    call :meth:`cancel`; the transport polls :meth:`raise_if_cancelled` between
    blocking steps. ``timeout`` is measured from construction on the monotonic
    clock. Leaving a ``with`` block cancels the context.
    """

    __slots__ = ("_event", "_deadline")

    def __init__(self, *, timeout: float | None = None) -> None:
        if timeout is not None and timeout < 0:
            raise ValueError("timeout must not be negative")
        self._event = threading.Event()
        self._deadline = time.monotonic() + timeout if timeout is not None else None

    @property
    def deadline(self) -> float | None:
        """Monotonic timestamp after which the context expires."""

        return self._deadline

    @property
    def cancelled(self) -> bool:
        return self._event.is_set()

    @property
    def expired(self) -> bool:
        return self._deadline is not None and time.monotonic() >= self._deadline

    def cancel(self) -> None:
        self._event.set()

    def remaining(self) -> float | None:
        """Seconds left before the deadline, or ``None`` when unbounded."""

        if self._deadline is None:
            return None
        return max(self._deadline - time.monotonic(), 0.0)

    def raise_if_cancelled(self) -> None:
        if self._event.is_set():
            raise CancelledError("fetch context cancelled")
        if self.expired:
            raise DeadlineExceededError("fetch context deadline exceeded")

    def __enter__(self) -> "FetchContext":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.cancel()


__all__ = ["FetchContext"]
