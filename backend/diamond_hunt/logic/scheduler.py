"""Single-timeline timer scheduling for the round engine.

All engine timers run as callbacks on one logical timeline. Timers are
grouped per phase; leaving a phase cancels its whole group, which is what
keeps a stale tick from firing into the next phase.
"""
import asyncio
import heapq
import itertools
from abc import ABC, abstractmethod
from typing import Callable, Protocol


class TimerHandle(Protocol):
    """Anything with a cancel() method; asyncio.TimerHandle satisfies it."""

    def cancel(self) -> None:
        ...


class Scheduler(ABC):
    """Schedules one-shot callbacks on the engine's timeline."""

    @abstractmethod
    def call_later(self, delay: float, callback: Callable[[], None]) -> TimerHandle:
        """Run callback once after delay seconds."""
        pass

    @abstractmethod
    def time(self) -> float:
        """Current time on this scheduler's clock, in seconds."""
        pass


class AsyncioScheduler(Scheduler):
    """
    Production scheduler backed by an asyncio event loop.

    Without an explicit loop, the running loop is looked up on each call,
    so the engine must be driven from the loop's own thread.
    """

    def __init__(self, loop: asyncio.AbstractEventLoop | None = None):
        self._loop = loop

    def _get_loop(self) -> asyncio.AbstractEventLoop:
        return self._loop or asyncio.get_running_loop()

    def call_later(self, delay: float, callback: Callable[[], None]) -> TimerHandle:
        return self._get_loop().call_later(delay, callback)

    def time(self) -> float:
        return self._get_loop().time()


class _ManualTimer:
    __slots__ = ("due_ms", "seq", "callback", "cancelled")

    def __init__(self, due_ms: int, seq: int, callback: Callable[[], None]):
        self.due_ms = due_ms
        self.seq = seq
        self.callback = callback
        self.cancelled = False

    def cancel(self) -> None:
        self.cancelled = True


class ManualScheduler(Scheduler):
    """
    Virtual-clock scheduler for tests and headless simulation.

    Time is kept in whole milliseconds so repeated 100ms steps land exactly
    on the same instants as one-shot delays. Timers due at the same instant
    run in the order they were scheduled.
    """

    def __init__(self) -> None:
        self._now_ms = 0
        self._seq = itertools.count()
        self._queue: list[tuple[int, int, _ManualTimer]] = []

    def call_later(self, delay: float, callback: Callable[[], None]) -> TimerHandle:
        if delay < 0:
            raise ValueError(f"delay must be >= 0, got {delay}")
        timer = _ManualTimer(self._now_ms + round(delay * 1000), next(self._seq), callback)
        heapq.heappush(self._queue, (timer.due_ms, timer.seq, timer))
        return timer

    def time(self) -> float:
        return self._now_ms / 1000

    def advance(self, seconds: float) -> None:
        """Move the clock forward, running every live timer that comes due."""
        target_ms = self._now_ms + round(seconds * 1000)
        while self._queue and self._queue[0][0] <= target_ms:
            due_ms, _, timer = heapq.heappop(self._queue)
            if timer.cancelled:
                continue
            self._now_ms = due_ms
            timer.cancelled = True
            timer.callback()
        self._now_ms = target_ms

    def pending(self) -> int:
        """Number of timers still able to fire."""
        return sum(1 for _, _, timer in self._queue if not timer.cancelled)


class TimerGroup:
    """
    Timers owned by one phase.

    cancel_all() cancels every outstanding timer in the group and closes it;
    a closed group refuses new timers.
    """

    def __init__(self, scheduler: Scheduler):
        self._scheduler = scheduler
        self._keys = itertools.count()
        self._handles: dict[int, TimerHandle] = {}
        self.closed = False

    def after(self, delay: float, callback: Callable[[], None]) -> int:
        self._check_open()
        key = next(self._keys)

        def fire() -> None:
            self._handles.pop(key, None)
            callback()

        self._handles[key] = self._scheduler.call_later(delay, fire)
        return key

    def every(self, interval: float, callback: Callable[[], None]) -> int:
        """Run callback every interval seconds until cancelled; returns the timer key."""
        self._check_open()
        if interval <= 0:
            raise ValueError(f"interval must be > 0, got {interval}")
        key = next(self._keys)

        def fire() -> None:
            # Re-arm before running so a callback that cancels the group
            # also cancels its own next occurrence.
            self._handles[key] = self._scheduler.call_later(interval, fire)
            callback()

        self._handles[key] = self._scheduler.call_later(interval, fire)
        return key

    def cancel(self, key: int) -> None:
        """Cancel one timer of the group; unknown or already-fired keys are ignored."""
        handle = self._handles.pop(key, None)
        if handle is not None:
            handle.cancel()

    def cancel_all(self) -> None:
        self.closed = True
        for handle in self._handles.values():
            handle.cancel()
        self._handles.clear()

    def __len__(self) -> int:
        return len(self._handles)

    def _check_open(self) -> None:
        if self.closed:
            raise RuntimeError("timer group already cancelled")
