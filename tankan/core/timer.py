"""Session stopwatch with an optional time budget."""

from __future__ import annotations

import logging
import time
from typing import Callable, Optional

from PySide6.QtCore import QObject, QTimer, Signal

logger = logging.getLogger(__name__)


class SessionTimer(QObject):
    """Measures active practice time and fires ``expired`` once when the budget runs out.

    ``start`` is idempotent while running, ``pause`` keeps the elapsed
    time, ``reset`` clears everything and re-arms the budget. Pausing or
    resetting before the deadline cancels the pending expiry; once it has
    fired, later timeouts are ignored until ``reset``.
    """

    expired = Signal()

    def __init__(
        self,
        duration: Optional[float] = None,
        clock: Callable[[], float] = time.monotonic,
        parent: Optional[QObject] = None,
    ) -> None:
        super().__init__(parent)
        if duration is not None and duration <= 0:
            raise ValueError("duration must be positive")
        self._duration = duration
        self._clock = clock
        self._accumulated = 0.0
        self._started_at: Optional[float] = None
        self._fired = False
        self._deadline = QTimer(self)
        self._deadline.setSingleShot(True)
        self._deadline.timeout.connect(self._on_timeout)

    @property
    def duration(self) -> Optional[float]:
        return self._duration

    @property
    def is_running(self) -> bool:
        return self._started_at is not None

    @property
    def has_expired(self) -> bool:
        return self._fired

    @property
    def elapsed(self) -> float:
        """Seconds spent running, excluding paused stretches."""
        if self._started_at is None:
            return self._accumulated
        return self._accumulated + (self._clock() - self._started_at)

    @property
    def remaining(self) -> Optional[float]:
        if self._duration is None:
            return None
        return max(0.0, self._duration - self.elapsed)

    def start(self) -> None:
        if self._started_at is not None or self._fired:
            return
        self._started_at = self._clock()
        remaining = self.remaining
        if remaining is not None:
            self._deadline.start(max(0, int(remaining * 1000)))

    def pause(self) -> None:
        if self._started_at is None:
            return
        self._accumulated += self._clock() - self._started_at
        self._started_at = None
        self._deadline.stop()

    def reset(self) -> None:
        self._deadline.stop()
        self._started_at = None
        self._accumulated = 0.0
        self._fired = False

    def _on_timeout(self) -> None:
        if self._fired or self._started_at is None:
            return
        self._fired = True
        self.pause()
        logger.debug("Time budget of %.1fs used up", self._duration or 0.0)
        self.expired.emit()
