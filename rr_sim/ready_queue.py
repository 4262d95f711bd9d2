"""
Ready queue for the decaying-quantum round robin.

Processes are kept in a deque in the order they were (re)enqueued. Selection
is shortest-remaining-time among the processes that have already arrived,
with ties going to the process nearest the head. The winner is removed by
rotating it to the head and popping it, so everything else keeps its
relative (cyclic) order:

    [A, B, C, D]  select C  ->  rotate to [C, D, A, B]  ->  pop C  ->  [D, A, B]

A paused process is appended at the tail.
"""

from __future__ import annotations

from collections import deque
from typing import Deque, Iterable, Iterator, Optional

from .models import ProcessRecord


class ReadyQueue:

    def __init__(self, processes: Iterable[ProcessRecord] = ()):
        self._queue: Deque[ProcessRecord] = deque(processes)

    def enqueue(self, process: ProcessRecord) -> None:
        self._queue.append(process)

    def select_next(self, now: float) -> ProcessRecord:
        """
        Remove and return the eligible process with the least remaining time.

        Raises LookupError if the queue is empty or nothing has arrived by
        ``now``; callers are expected to advance time to ``next_arrival()``
        first.
        """
        index = self._eligible_index(now)
        if index is None:
            raise LookupError(f"no process has arrived by t={now}")

        self._queue.rotate(-index)
        return self._queue.popleft()

    def _eligible_index(self, now: float) -> Optional[int]:
        best: Optional[int] = None
        for i, process in enumerate(self._queue):
            if process.arrival > now:
                continue
            # strict < keeps the earlier-queued process on a tie
            if best is None or process.remaining < self._queue[best].remaining:
                best = i
        return best

    def has_eligible(self, now: float) -> bool:
        return any(p.arrival <= now for p in self._queue)

    def next_arrival(self) -> Optional[float]:
        return min((p.arrival for p in self._queue), default=None)

    def __len__(self) -> int:
        return len(self._queue)

    def __bool__(self) -> bool:
        return bool(self._queue)

    def __iter__(self) -> Iterator[ProcessRecord]:
        return iter(self._queue)
