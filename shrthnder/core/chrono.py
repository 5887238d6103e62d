# core/chrono.py
from typing import Callable, Optional

from PySide6.QtCore import QObject, QTimer, Signal

from shrthnder.app import config


class SessionTicker(QObject):
    """
    Display-only clock for a running typing session. Emits the session's
    whole elapsed seconds once per tick; scoring never reads it.
    The owner stops it whenever the session leaves Running or goes away.
    """
    elapsedChanged = Signal(int)
    started = Signal()
    stopped = Signal()

    def __init__(self, tick_ms: int = config.TICK_MS, parent=None):
        super().__init__(parent)
        self._source: Optional[Callable[[], int]] = None
        self._tick = QTimer(self)
        self._tick.setInterval(tick_ms)
        self._tick.timeout.connect(self._on_tick)

    def start(self, source: Callable[[], int]):
        """Start ticking for a new source, dropping any previous one."""
        self._source = source
        self._tick.start()
        self.started.emit()

    def stop(self):
        if self._tick.isActive():
            self._tick.stop()
            self.stopped.emit()
        self._source = None

    def is_active(self) -> bool:
        return self._tick.isActive()

    def _on_tick(self):
        if self._source is not None:
            self.elapsedChanged.emit(self._source())
