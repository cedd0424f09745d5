"""
Task layer that runs the match controller's delayed steps.

The controller never sleeps or starts timers itself: it hands continuations
to a Scheduler via ``call_later(delay, fn)``. ``ManualScheduler`` keeps them
on a virtual clock so tests and headless simulations run instantly and
deterministically; ``RealtimeScheduler`` waits for real so a human watching
the terminal can follow the table.
"""
from __future__ import annotations

import heapq
import itertools
import logging
import time
from dataclasses import dataclass, field
from typing import Callable, List, Protocol

log = logging.getLogger(__name__)

Task = Callable[[], None]


class Scheduler(Protocol):
    def call_later(self, delay: float, fn: Task) -> "ScheduledTask":
        """Run ``fn`` after ``delay`` seconds."""

    def cancel_all(self) -> None:
        """Drop every pending task."""


@dataclass(order=True)
class ScheduledTask:
    due: float
    seq: int
    fn: Task = field(compare=False)
    cancelled: bool = field(default=False, compare=False)

    def cancel(self) -> None:
        self.cancelled = True


class ManualScheduler:
    """
    Single-threaded scheduler on a virtual clock.

    Tasks run in order of due time, then submission order. A task may
    schedule further tasks; they are picked up by the same ``run_*`` call.
    """

    def __init__(self, start: float = 0.0) -> None:
        self.now: float = start
        self._queue: List[ScheduledTask] = []
        self._seq = itertools.count()

    def call_later(self, delay: float, fn: Task) -> ScheduledTask:
        if delay < 0:
            raise ValueError(f"delay must not be negative, got {delay}")
        task = ScheduledTask(due=self.now + delay, seq=next(self._seq), fn=fn)
        heapq.heappush(self._queue, task)
        return task

    def cancel_all(self) -> None:
        for task in self._queue:
            task.cancel()
        self._queue.clear()

    def pending(self) -> int:
        return sum(1 for t in self._queue if not t.cancelled)

    def _pop_live(self) -> ScheduledTask | None:
        while self._queue:
            task = heapq.heappop(self._queue)
            if not task.cancelled:
                return task
        return None

    def _wait_until(self, due: float) -> None:
        self.now = max(self.now, due)

    def run_next(self) -> bool:
        """Run the earliest pending task. Returns False when nothing is pending."""
        task = self._pop_live()
        if task is None:
            return False
        self._wait_until(task.due)
        task.fn()
        return True

    def advance(self, seconds: float) -> int:
        """Move the clock forward, running every task that falls due. Returns tasks run."""
        target = self.now + seconds
        ran = 0
        while self._queue:
            head = self._queue[0]
            if head.cancelled:
                heapq.heappop(self._queue)
                continue
            if head.due > target:
                break
            self.run_next()
            ran += 1
        self.now = max(self.now, target)
        return ran

    def run_until_idle(self, max_tasks: int = 100_000) -> int:
        """Run tasks until the queue is empty. Returns the number of tasks run."""
        ran = 0
        while self.run_next():
            ran += 1
            if ran >= max_tasks:
                raise RuntimeError(f"Scheduler still busy after {max_tasks} tasks")
        return ran


class RealtimeScheduler(ManualScheduler):
    """ManualScheduler whose clock is wall time: running a task sleeps until it is due."""

    def __init__(
        self,
        clock: Callable[[], float] = time.monotonic,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        super().__init__(start=clock())
        self._clock = clock
        self._sleep = sleep

    def call_later(self, delay: float, fn: Task) -> ScheduledTask:
        self.now = self._clock()
        return super().call_later(delay, fn)

    def _wait_until(self, due: float) -> None:
        remaining = due - self._clock()
        if remaining > 0:
            log.debug("sleeping %.2fs", remaining)
            self._sleep(remaining)
        self.now = max(self._clock(), due)


__all__ = ["Scheduler", "ScheduledTask", "ManualScheduler", "RealtimeScheduler", "Task"]
