"""Cancellable timers for the game loop.

The session never sleeps or spawns threads. It asks a :class:`Scheduler` for
periodic and one-shot tasks and keeps the returned handles so it can cancel
them on teardown. Frontends that own their own loop (terminal, Pygame) use
:class:`MonotonicScheduler` and call :meth:`~MonotonicScheduler.pump` every
iteration; tests drive :class:`ManualScheduler` with :meth:`advance`.
"""

from __future__ import annotations

import time
from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Protocol


class TaskHandle(Protocol):
    def cancel(self) -> None: ...

    @property
    def active(self) -> bool: ...


class Scheduler(Protocol):
    def call_later(self, delay: float, callback: Callable[[], None]) -> TaskHandle: ...

    def call_every(self, interval: float, callback: Callable[[], None]) -> TaskHandle: ...


@dataclass(eq=False)
class ScheduledTask:
    due: float
    callback: Callable[[], None]
    interval: float | None = None
    _done: bool = field(default=False, repr=False)

    def cancel(self) -> None:
        self._done = True

    @property
    def active(self) -> bool:
        return not self._done


class ManualScheduler:
    """Scheduler on a virtual clock that only moves when told to."""

    def __init__(self) -> None:
        self.now: float = 0.0
        self._tasks: list[ScheduledTask] = []

    def call_later(self, delay: float, callback: Callable[[], None]) -> ScheduledTask:
        task = ScheduledTask(due=self.now + delay, callback=callback)
        self._tasks.append(task)
        return task

    def call_every(self, interval: float, callback: Callable[[], None]) -> ScheduledTask:
        if interval <= 0:
            raise ValueError(f"Interval must be positive, got {interval}.")
        task = ScheduledTask(due=self.now + interval, callback=callback, interval=interval)
        self._tasks.append(task)
        return task

    def advance(self, seconds: float) -> int:
        """Move the clock forward, running every task that falls due.

        Tasks run one at a time in due order (ties in scheduling order), so a
        callback may cancel or schedule tasks before the next one runs.
        Returns the number of callbacks run.
        """
        target = self.now + seconds
        fired = 0
        while True:
            due = [t for t in self._tasks if t.active and t.due <= target]
            if not due:
                break
            task = min(due, key=lambda t: t.due)
            self.now = max(self.now, task.due)
            if task.interval is None:
                task.cancel()
            else:
                task.due += task.interval
            task.callback()
            fired += 1
        self.now = target
        self._tasks = [t for t in self._tasks if t.active]
        return fired

    @property
    def pending(self) -> int:
        return sum(1 for t in self._tasks if t.active)


class MonotonicScheduler(ManualScheduler):
    """Manual scheduler whose clock follows ``time.monotonic``."""

    def __init__(self, clock: Callable[[], float] = time.monotonic) -> None:
        super().__init__()
        self._clock = clock
        self._last = clock()

    def pump(self) -> int:
        """Run everything that fell due since the previous pump."""
        current = self._clock()
        elapsed = max(0.0, current - self._last)
        self._last = current
        return self.advance(elapsed)
