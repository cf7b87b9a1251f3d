"""
Capture Booth – Scheduler
Wall-clock timers that run beside the frame loop: the countdown ticker,
its zero-crossing check, and the post-capture hold.  Every call returns
a handle whose ``cancel()`` guarantees the callback will not run again.
"""

from __future__ import annotations

import logging
import threading
from typing import Callable, Protocol

logger = logging.getLogger(__name__)


class TimerHandle(Protocol):
    def cancel(self) -> None: ...


class Scheduler(Protocol):
    def call_every(self, interval: float, fn: Callable[[], None]) -> TimerHandle: ...

    def call_later(self, delay: float, fn: Callable[[], None]) -> TimerHandle: ...


class _Periodic:
    """Background thread calling *fn* every *interval* seconds until cancelled."""

    def __init__(self, interval: float, fn: Callable[[], None]) -> None:
        self._interval = interval
        self._fn = fn
        self._stopped = threading.Event()
        self._thread = threading.Thread(target=self._loop, daemon=True)

    def start(self) -> None:
        self._thread.start()

    def cancel(self) -> None:
        self._stopped.set()

    def _loop(self) -> None:
        while not self._stopped.wait(self._interval):
            try:
                self._fn()
            except Exception:
                logger.exception("periodic timer callback failed")
                self._stopped.set()


class ThreadScheduler:
    """Default scheduler backed by daemon threads."""

    def call_every(self, interval: float, fn: Callable[[], None]) -> TimerHandle:
        timer = _Periodic(interval, fn)
        timer.start()
        return timer

    def call_later(self, delay: float, fn: Callable[[], None]) -> TimerHandle:
        timer = threading.Timer(delay, fn)
        timer.daemon = True
        timer.start()
        return timer
