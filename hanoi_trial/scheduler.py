from __future__ import annotations

import heapq
import itertools
import time
from dataclasses import dataclass, field
from typing import Callable


@dataclass(order=True, slots=True)
class TimerHandle:
    due: float
    seq: int
    callback: Callable[[], None] = field(compare=False)
    cancelled: bool = field(default=False, compare=False)


class Scheduler:
    """Single-threaded timer queue, one per game session.

    Callbacks fire in due-time order; ties fire in scheduling order.
    """

    def __init__(self) -> None:
        self._queue: list[TimerHandle] = []
        self._seq = itertools.count()

    def now(self) -> float:
        raise NotImplementedError

    def call_later(self, delay_s: float, callback: Callable[[], None]) -> TimerHandle:
        if delay_s < 0:
            raise ValueError(f"delay_s must be >= 0, got {delay_s}")
        handle = TimerHandle(self.now() + delay_s, next(self._seq), callback)
        heapq.heappush(self._queue, handle)
        return handle

    def cancel(self, handle: TimerHandle | None) -> None:
        if handle is not None:
            handle.cancelled = True

    def pending(self) -> int:
        return sum(1 for handle in self._queue if not handle.cancelled)

    def _pop_live(self) -> TimerHandle | None:
        while self._queue:
            handle = heapq.heappop(self._queue)
            if not handle.cancelled:
                return handle
        return None

    def _peek_live(self) -> TimerHandle | None:
        while self._queue and self._queue[0].cancelled:
            heapq.heappop(self._queue)
        return self._queue[0] if self._queue else None

    def run_until_idle(self, *, max_callbacks: int = 1_000_000) -> int:
        raise NotImplementedError


class ManualScheduler(Scheduler):
    """Virtual clock: time only moves when `advance` or `run_until_idle` is called."""

    def __init__(self) -> None:
        super().__init__()
        self._now = 0.0

    def now(self) -> float:
        return self._now

    def advance(self, seconds: float) -> int:
        if seconds < 0:
            raise ValueError(f"seconds must be >= 0, got {seconds}")
        target = self._now + seconds
        fired = 0
        while True:
            handle = self._peek_live()
            if handle is None or handle.due > target:
                break
            heapq.heappop(self._queue)
            self._now = handle.due
            handle.callback()
            fired += 1
        self._now = target
        return fired

    def run_until_idle(self, *, max_callbacks: int = 1_000_000) -> int:
        fired = 0
        while fired < max_callbacks:
            handle = self._pop_live()
            if handle is None:
                break
            self._now = max(self._now, handle.due)
            handle.callback()
            fired += 1
        return fired


class RealtimeScheduler(Scheduler):
    """Wall-clock timers driven by a blocking loop on the caller's thread."""

    def __init__(self, *, sleep: Callable[[float], None] = time.sleep) -> None:
        super().__init__()
        self._sleep = sleep

    def now(self) -> float:
        return time.monotonic()

    def run_until_idle(self, *, max_callbacks: int = 1_000_000) -> int:
        fired = 0
        while fired < max_callbacks:
            handle = self._peek_live()
            if handle is None:
                break
            wait_s = handle.due - self.now()
            if wait_s > 0:
                self._sleep(wait_s)
            heapq.heappop(self._queue)
            handle.callback()
            fired += 1
        return fired
