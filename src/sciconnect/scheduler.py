"""Deterministic timer queue for headless runs and tests.

Anything with ``call_later(delay, callback, *args)`` returning a handle that
has ``cancel()`` can drive the conversation responder; a running asyncio
loop qualifies. ``ManualScheduler`` provides the same surface on a virtual
clock that only moves when ``advance`` is called.
"""

from __future__ import annotations

import heapq
import itertools
from typing import Any, Callable, List, Protocol, Tuple


class TimerHandle(Protocol):
    def cancel(self) -> None: ...


class Scheduler(Protocol):
    def call_later(
        self, delay: float, callback: Callable[..., Any], *args: Any
    ) -> TimerHandle: ...


class ManualTimer:
    def __init__(self, when: float, callback: Callable[..., Any], args: Tuple[Any, ...]) -> None:
        self.when = when
        self.callback = callback
        self.args = args
        self.cancelled = False

    def cancel(self) -> None:
        self.cancelled = True


class ManualScheduler:
    def __init__(self) -> None:
        self.now = 0.0
        self._queue: List[Tuple[float, int, ManualTimer]] = []
        self._counter = itertools.count()

    def call_later(
        self, delay: float, callback: Callable[..., Any], *args: Any
    ) -> ManualTimer:
        timer = ManualTimer(self.now + max(0.0, delay), callback, args)
        heapq.heappush(self._queue, (timer.when, next(self._counter), timer))
        return timer

    def pending(self) -> int:
        return sum(1 for _, _, timer in self._queue if not timer.cancelled)

    def advance(self, seconds: float) -> int:
        """Move the clock forward, firing due timers in order. Returns fired count."""
        target = self.now + seconds
        fired = 0
        while self._queue and self._queue[0][0] <= target:
            when, _, timer = heapq.heappop(self._queue)
            self.now = when
            if timer.cancelled:
                continue
            timer.callback(*timer.args)
            fired += 1
        self.now = target
        return fired
