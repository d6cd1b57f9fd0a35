"""Clock port: wall-clock time and a repeating one-second tick.

`SystemClock` is the production implementation. `ManualClock` is driven by
hand and is what tests (and replays) use.
"""

import logging
import threading
from datetime import date, datetime, timedelta
from typing import Callable, Dict, Optional, Protocol

from araise.models.constants import TICK_INTERVAL_SECONDS

logger = logging.getLogger(__name__)

Cancel = Callable[[], None]


class Clock(Protocol):
    def now(self) -> datetime:
        ...

    def today(self) -> date:
        ...

    def every_second(self, callback: Callable[[], None]) -> Cancel:
        ...


class SystemClock:
    """Local wall clock with one daemon thread per repeating timer.

    The next tick is waited for only after the callback returns, so a slow
    callback drops ticks instead of queueing them.
    """

    def __init__(self, interval: float = TICK_INTERVAL_SECONDS):
        self.interval = interval

    def now(self) -> datetime:
        return datetime.now()

    def today(self) -> date:
        return self.now().date()

    def every_second(self, callback: Callable[[], None]) -> Cancel:
        stop = threading.Event()

        def _run():
            while not stop.wait(self.interval):
                try:
                    callback()
                except Exception as e:
                    logger.error(f"Timer callback failed, stopping timer: {type(e).__name__}: {str(e)}")
                    stop.set()

        thread = threading.Thread(target=_run, name="araise-ticker", daemon=True)
        thread.start()
        return stop.set


class ManualClock:
    """Clock advanced explicitly; ticks fire once per whole second advanced."""

    def __init__(self, start: Optional[datetime] = None):
        self._now = start or datetime(2024, 1, 1, 9, 0, 0)
        self._next_id = 0
        self._callbacks: Dict[int, Callable[[], None]] = {}

    def now(self) -> datetime:
        return self._now

    def today(self) -> date:
        return self._now.date()

    def set(self, when: datetime) -> None:
        """Jump to an instant without firing ticks."""
        self._now = when

    def every_second(self, callback: Callable[[], None]) -> Cancel:
        handle = self._next_id
        self._next_id += 1
        self._callbacks[handle] = callback

        def cancel():
            self._callbacks.pop(handle, None)

        return cancel

    @property
    def active_timers(self) -> int:
        return len(self._callbacks)

    def advance(self, seconds: int = 1) -> None:
        """Move time forward, firing every active timer once per second."""
        for _ in range(seconds):
            self._now = self._now + timedelta(seconds=1)
            for handle, callback in list(self._callbacks.items()):
                # A previous callback in this tick may have cancelled this one.
                if handle in self._callbacks:
                    callback()
