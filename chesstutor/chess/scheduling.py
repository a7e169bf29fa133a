"""
Deferred execution.

The puzzle lets the opponent answer a moment after the player's move. Instead of depending on a UI event loop,
sessions receive a `Scheduler`. Calls always run in the order they fall due (ties: in the order they were scheduled)
and never inside one another.
"""

import asyncio
import heapq
import itertools
from dataclasses import dataclass, field
from typing import Any, Callable, Optional, Protocol

Callback = Callable[[], None]


@dataclass
class ScheduledCall:
    due_ms: float
    callback: Callback
    cancelled: bool = False
    _handle: Optional[asyncio.TimerHandle] = field(default=None, repr=False)

    def cancel(self) -> None:
        self.cancelled = True
        if self._handle is not None:
            self._handle.cancel()

    def run(self) -> None:
        if not self.cancelled:
            self.callback()


class Scheduler(Protocol):
    def schedule(self, delay_ms: float, callback: Callback) -> ScheduledCall: ...


class ManualScheduler:
    """
    Virtual clock.
    ---

    Nothing happens until the clock is advanced. Used by the tests, and by any caller that wants to step through
    a puzzle at its own pace.
    """

    def __init__(self) -> None:
        self.now_ms: float = 0
        self._queue: list[tuple[float, int, ScheduledCall]] = []
        self._counter = itertools.count()

    def schedule(self, delay_ms: float, callback: Callback) -> ScheduledCall:
        call = ScheduledCall(due_ms=self.now_ms + delay_ms, callback=callback)
        heapq.heappush(self._queue, (call.due_ms, next(self._counter), call))
        return call

    def pending(self) -> int:
        return sum(1 for _, _, call in self._queue if not call.cancelled)

    def advance(self, ms: float) -> int:
        """Move the clock forward, running every call that falls due on the way. Returns the number of calls run."""
        target = self.now_ms + ms
        ran = 0
        while self._queue and self._queue[0][0] <= target:
            due_ms, _, call = heapq.heappop(self._queue)
            self.now_ms = due_ms
            if not call.cancelled:
                call.run()
                ran += 1
        self.now_ms = target
        return ran

    def run_all(self) -> int:
        """Keep advancing until nothing is left (including calls scheduled by the calls being run)."""
        ran = 0
        while self._queue:
            ran += self.advance(self._queue[0][0] - self.now_ms)
        return ran


class AsyncioScheduler:
    """Schedules onto an asyncio event loop. The loop runs one callback at a time, which keeps calls from interleaving."""

    def __init__(self, loop: Optional[asyncio.AbstractEventLoop] = None) -> None:
        self._loop = loop

    @property
    def loop(self) -> asyncio.AbstractEventLoop:
        return self._loop or asyncio.get_running_loop()

    def schedule(self, delay_ms: float, callback: Callback) -> ScheduledCall:
        loop = self.loop
        call = ScheduledCall(due_ms=loop.time() * 1000 + delay_ms, callback=callback)
        call._handle = loop.call_later(delay_ms / 1000, call.run)
        return call


def run_callback(callback: Callable[..., Any], *args: Any) -> Callback:
    """Bind arguments now, so the scheduled call does not depend on state at the time it runs."""
    return lambda: callback(*args)
