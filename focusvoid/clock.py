"""Timer primitives: one-shot callbacks, repeating tickers and owned slots.

Everything here is single-threaded. A scheduler only ever runs callbacks
from its own dispatch (``advance``/``poll`` or the Tk event loop), so a
handle that was cancelled before dispatch reaches it is simply skipped.

Usage::

    clock = ManualClock()
    slot = TimerSlot(clock)
    slot.schedule(5000, on_idle)
    slot.schedule(5000, on_idle)   # first one is cancelled
    clock.advance(5000)            # on_idle runs once
"""

from __future__ import annotations

import abc
import heapq
import itertools
import logging
import time
from typing import Any, Callable, Optional

log = logging.getLogger(__name__)

Callback = Callable[[], None]


class TimerHandle:
    """A pending callback. Runs at most once and never after ``cancel()``."""

    def __init__(self, callback: Callback, on_cancel: Optional[Callback] = None) -> None:
        self._callback = callback
        self._on_cancel = on_cancel
        self.cancelled: bool = False
        self.fired: bool = False

    @property
    def pending(self) -> bool:
        return not (self.cancelled or self.fired)

    def cancel(self) -> None:
        if not self.pending:
            return
        self.cancelled = True
        if self._on_cancel is not None:
            self._on_cancel()

    def run(self) -> None:
        """Invoke the callback unless the handle was cancelled or already ran."""
        if not self.pending:
            return
        self.fired = True
        self._callback()


class Ticker:
    """Repeating callback built on ``Scheduler.call_later``."""

    def __init__(self, scheduler: "Scheduler", interval_ms: int, callback: Callback) -> None:
        if interval_ms <= 0:
            raise ValueError("interval_ms must be positive")
        self._scheduler = scheduler
        self._interval_ms = interval_ms
        self._callback = callback
        self._handle: Optional[TimerHandle] = None
        self.running: bool = False

    def start(self) -> "Ticker":
        if not self.running:
            self.running = True
            self._arm()
        return self

    def stop(self) -> None:
        self.running = False
        if self._handle is not None:
            self._handle.cancel()
            self._handle = None

    def _arm(self) -> None:
        self._handle = self._scheduler.call_later(self._interval_ms, self._fire)

    def _fire(self) -> None:
        if not self.running:
            return
        # Re-arm first so a callback that stops the ticker cancels the next beat.
        self._arm()
        self._callback()


class Scheduler(abc.ABC):
    """Source of delayed callbacks, in milliseconds."""

    @abc.abstractmethod
    def call_later(self, delay_ms: int, callback: Callback) -> TimerHandle:
        """Schedule ``callback`` to run once after ``delay_ms``."""

    def call_every(self, interval_ms: int, callback: Callback) -> Ticker:
        """Start a ticker that runs ``callback`` every ``interval_ms``."""
        return Ticker(self, interval_ms, callback).start()


class ManualClock(Scheduler):
    """Virtual-time scheduler. Time only moves when ``advance`` is called."""

    def __init__(self) -> None:
        self.now_ms: int = 0
        self._queue: list[tuple[int, int, TimerHandle]] = []
        self._seq = itertools.count()
        self._dispatching: bool = False

    def call_later(self, delay_ms: int, callback: Callback) -> TimerHandle:
        handle = TimerHandle(callback)
        due = self.now_ms + max(0, int(delay_ms))
        heapq.heappush(self._queue, (due, next(self._seq), handle))
        return handle

    @property
    def pending_count(self) -> int:
        return sum(1 for _, _, h in self._queue if h.pending)

    def advance(self, ms: int) -> int:
        """Move time forward by ``ms``, firing everything that falls due.

        Callbacks may schedule new timers; those fire too if they fall
        inside the window. Returns the number of callbacks that ran.
        """
        return self._run_until(self.now_ms + max(0, int(ms)))

    def _run_until(self, target_ms: int) -> int:
        ran = 0
        self._dispatching = True
        try:
            while self._queue and self._queue[0][0] <= target_ms:
                due, _, handle = heapq.heappop(self._queue)
                self.now_ms = due
                if handle.pending:
                    handle.run()
                    ran += 1
        finally:
            self._dispatching = False
        self.now_ms = target_ms
        return ran


class MonotonicClock(ManualClock):
    """Wall-clock scheduler for loops that poll between blocking reads."""

    def __init__(self, time_source: Callable[[], float] = time.monotonic) -> None:
        super().__init__()
        self._time_source = time_source
        self._origin = time_source()

    def _elapsed_ms(self) -> int:
        return int((self._time_source() - self._origin) * 1000)

    def call_later(self, delay_ms: int, callback: Callback) -> TimerHandle:
        # Inside a dispatch, delays count from the callback's due time.
        if not self._dispatching:
            self.now_ms = max(self.now_ms, self._elapsed_ms())
        return super().call_later(delay_ms, callback)

    def poll(self) -> int:
        """Fire every callback that became due since the last poll."""
        return self._run_until(max(self.now_ms, self._elapsed_ms()))


class TkScheduler(Scheduler):
    """Scheduler backed by a Tk widget's ``after``/``after_cancel``."""

    def __init__(self, widget: Any) -> None:
        self._widget = widget

    def call_later(self, delay_ms: int, callback: Callback) -> TimerHandle:
        after_id: list[str] = []

        def _cancel() -> None:
            if after_id:
                try:
                    self._widget.after_cancel(after_id[0])
                except Exception:  # widget already destroyed
                    log.debug("after_cancel failed for %s", after_id[0])

        handle = TimerHandle(callback, on_cancel=_cancel)
        after_id.append(self._widget.after(max(0, int(delay_ms)), handle.run))
        return handle


class TimerSlot:
    """Owned optional timer: at most one pending handle at any time."""

    def __init__(self, scheduler: Scheduler) -> None:
        self._scheduler = scheduler
        self._handle: Optional[TimerHandle] = None

    @property
    def pending(self) -> bool:
        return self._handle is not None and self._handle.pending

    def schedule(self, delay_ms: int, callback: Callback) -> TimerHandle:
        """Cancel whatever is pending, then schedule ``callback``."""
        self.cancel()
        self._handle = self._scheduler.call_later(delay_ms, callback)
        return self._handle

    def cancel(self) -> None:
        if self._handle is not None:
            self._handle.cancel()
            self._handle = None
