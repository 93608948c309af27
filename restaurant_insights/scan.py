"""
Bounded, cancellable scans over large snapshots.

Long-running scans (peer aggregation, nearby ranking) accept an optional
``ScanGuard`` and call ``check()`` at iteration boundaries.  A guard trips
either when its deadline passes or when another thread calls ``cancel()``.
"""
from __future__ import annotations

import threading
import time


class ScanCancelled(RuntimeError):
    """Raised by ``ScanGuard.check`` once a scan has been abandoned."""


class ScanGuard:
    def __init__(
        self,
        timeout: float | None = None,
        cancel_event: threading.Event | None = None,
    ) -> None:
        self.deadline = time.monotonic() + timeout if timeout is not None else None
        self.cancel_event = cancel_event or threading.Event()

    def cancel(self) -> None:
        self.cancel_event.set()

    @property
    def cancelled(self) -> bool:
        return self.cancel_event.is_set()

    def check(self) -> None:
        """Raise ``ScanCancelled`` if the scan should stop."""
        if self.cancel_event.is_set():
            raise ScanCancelled("Scan cancelled by caller")
        if self.deadline is not None and time.monotonic() >= self.deadline:
            raise ScanCancelled("Scan deadline exceeded")


def check_guard(guard: ScanGuard | None) -> None:
    if guard is not None:
        guard.check()
