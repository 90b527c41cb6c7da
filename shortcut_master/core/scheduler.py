"""Timer scheduling used by the session controller.

The engine never sleeps; it asks a scheduler to call back later and keeps the
returned handle so the pending call can be cancelled when superseded.
"""

from __future__ import annotations

import heapq
import itertools
import time
from typing import Callable, List, Protocol, Tuple


class TimerHandle(Protocol):
    def cancel(self) -> None: ...


class Scheduler(Protocol):
    def call_later(self, delay_ms: int, callback: Callable[[], None]) -> TimerHandle: ...


def monotonic_ms() -> int:
    return int(time.monotonic() * 1000)


class _ManualHandle:
    def __init__(self) -> None:
        self.cancelled = False

    def cancel(self) -> None:
        self.cancelled = True


class ManualScheduler:
    """Deterministic scheduler that doubles as the clock.

    Time only moves when :meth:`advance` is called; due callbacks then run in
    due-time order (ties in scheduling order).
    """

    def __init__(self, start_ms: int = 0) -> None:
        self._now = start_ms
        self._seq = itertools.count()
        self._queue: List[Tuple[int, int, _ManualHandle, Callable[[], None]]] = []

    def now(self) -> int:
        return self._now

    def call_later(self, delay_ms: int, callback: Callable[[], None]) -> _ManualHandle:
        handle = _ManualHandle()
        due = self._now + max(0, int(delay_ms))
        heapq.heappush(self._queue, (due, next(self._seq), handle, callback))
        return handle

    def pending(self) -> int:
        """Number of callbacks still waiting to fire."""
        return sum(1 for _, _, handle, _ in self._queue if not handle.cancelled)

    def advance(self, ms: int) -> None:
        target = self._now + ms
        while self._queue and self._queue[0][0] <= target:
            due, _, handle, callback = heapq.heappop(self._queue)
            self._now = due
            if handle.cancelled:
                continue
            callback()
        self._now = target

