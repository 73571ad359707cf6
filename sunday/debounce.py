"""Coalesce bursts of UI-triggered calls into one."""
from __future__ import annotations

from typing import Any, Callable, Optional, Tuple

from PyQt6.QtCore import QObject, QTimer

SEARCH_DELAY_MS = 300
REFRESH_DELAY_MS = 500


class Debouncer(QObject):
    """Runs ``callback`` once ``delay_ms`` after the last ``trigger`` call."""

    def __init__(
        self,
        delay_ms: int,
        callback: Callable[..., Any],
        parent: Optional[QObject] = None,
    ) -> None:
        super().__init__(parent)
        self.callback = callback
        self._args: Tuple = ()
        self._timer = QTimer(self)
        self._timer.setSingleShot(True)
        self._timer.setInterval(delay_ms)
        self._timer.timeout.connect(self._fire)

    @property
    def pending(self) -> bool:
        return self._timer.isActive()

    def trigger(self, *args: Any) -> None:
        self._args = args
        self._timer.start()

    def cancel(self) -> None:
        self._timer.stop()
        self._args = ()

    def flush(self) -> None:
        if self._timer.isActive():
            self._timer.stop()
            self._fire()

    def _fire(self) -> None:
        args, self._args = self._args, ()
        self.callback(*args)
