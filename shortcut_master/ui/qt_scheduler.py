from __future__ import annotations

from typing import Callable, Optional

from PySide6.QtCore import QObject, QTimer


class QtTimerHandle:
    def __init__(self, timer: QTimer) -> None:
        self._timer: Optional[QTimer] = timer

    def _fired(self) -> None:
        if self._timer is not None:
            self._timer.deleteLater()
            self._timer = None

    def cancel(self) -> None:
        """Stop the timer; a no-op once it has fired or been cancelled."""
        if self._timer is not None:
            self._timer.stop()
            self._timer.deleteLater()
            self._timer = None


class QtScheduler:
    """Scheduler backed by single-shot ``QTimer`` objects on the GUI thread."""

    def __init__(self, parent: Optional[QObject] = None) -> None:
        self._parent = parent

    def call_later(self, delay_ms: int, callback: Callable[[], None]) -> QtTimerHandle:
        timer = QTimer(self._parent)
        timer.setSingleShot(True)
        handle = QtTimerHandle(timer)
        timer.timeout.connect(handle._fired)
        timer.timeout.connect(callback)
        timer.start(max(0, int(delay_ms)))
        return handle
