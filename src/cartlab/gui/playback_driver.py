"""QTimer glue that drives a :class:`PlaybackClock` once per frame."""

from __future__ import annotations

import time
from typing import Optional

from PySide6.QtCore import QObject, QTimer, Signal, Slot

from ..core.playback import PlaybackClock


class PlaybackDriver(QObject):
    """Run ``clock.frame`` on a timer until the clock stops asking for frames."""

    timeChanged = Signal(float)
    playingChanged = Signal(bool)

    def __init__(self, interval_ms: int = 16, parent: Optional[QObject] = None) -> None:
        super().__init__(parent)
        self.clock = PlaybackClock(on_time_update=self.timeChanged.emit)
        self._timer = QTimer(self)
        self._timer.setInterval(int(interval_ms))
        self._timer.timeout.connect(self._on_tick)

    def reset(self, duration_s: float) -> None:
        self._timer.stop()
        self.clock.reset(duration_s)
        self.playingChanged.emit(False)

    def play(self, restart: bool = False) -> None:
        self.clock.start(restart=restart)
        self._timer.start()
        self.playingChanged.emit(True)

    def pause(self) -> None:
        self.clock.pause()
        self._timer.stop()
        self.playingChanged.emit(False)

    def toggle(self) -> None:
        if self.clock.playing:
            self.pause()
        else:
            self.play(restart=self.clock.current_time_s >= self.clock.duration_s)

    def seek(self, time_s: float) -> None:
        self._timer.stop()
        self.clock.seek(time_s)
        self.playingChanged.emit(False)

    @Slot()
    def _on_tick(self) -> None:
        if not self.clock.frame(time.perf_counter()):
            self._timer.stop()
            self.playingChanged.emit(False)
