"""Cooperative cancellation for long-running imports and maintenance passes."""

from __future__ import annotations

import threading


class CancellationToken:
    """Checked at the top of each row/record iteration; never interrupts one."""

    def __init__(self) -> None:
        self._event = threading.Event()

    def cancel(self) -> None:
        self._event.set()

    @property
    def cancelled(self) -> bool:
        return self._event.is_set()
