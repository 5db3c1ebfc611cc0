"""Cooperative cancellation token."""

from __future__ import annotations

import threading
from typing import Optional


class CancellationToken:
    """
    One-shot cancellation signal shared between a trigger and the runner.

    `cancel()` is safe to call from a signal handler or any thread.
    """

    def __init__(self) -> None:
        self._event = threading.Event()

    def cancel(self) -> None:
        self._event.set()

    @property
    def is_cancelled(self) -> bool:
        return self._event.is_set()

    def wait(self, timeout: Optional[float] = None) -> bool:
        """Block until cancelled or `timeout` elapses. Returns the cancelled state."""
        return self._event.wait(timeout)
