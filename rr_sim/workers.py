"""
Thread-per-process launcher.

One worker task is submitted per process (tids 1..N in launch order) to a
ThreadPoolExecutor sized so every task gets its own thread. All of them loop
on a single binary semaphore that guards the whole scheduler step, so exactly
one quantum is applied at a time and the event order is the same as
``SchedulerCore.run()``; only the worker id stamped on events depends on which
thread won the permit.
"""

from __future__ import annotations

import logging
import threading
from concurrent.futures import Future, ThreadPoolExecutor

from .algorithms import SchedulerCore
from .errors import SchedulerError
from .models import SimulationResult

logger = logging.getLogger(__name__)


class WorkerPool:

    def __init__(self, core: SchedulerCore, size: int = 0):
        self._core = core
        self._size = size or len(core.snapshots)
        self._permit = threading.Semaphore(1)
        self._failed = threading.Event()

    def run(self) -> SimulationResult:
        """
        Run the workers to completion and return the result.

        A worker that raises stops the others; its exception is re-raised
        here once every worker has exited.
        """
        with ThreadPoolExecutor(max_workers=self._size, thread_name_prefix="rr-worker") as executor:
            futures = [executor.submit(self._work, tid) for tid in range(1, self._size + 1)]
            for future in futures:
                future.add_done_callback(self._on_worker_done)
            logger.debug("Started %d workers", len(futures))

        for future in futures:
            future.result()

        if not self._core.finished:
            raise SchedulerError("Workers exited before the simulation terminated")
        return self._core.result()

    def _work(self, tid: int) -> None:
        while True:
            with self._permit:
                if self._failed.is_set() or self._core.finished:
                    return
                try:
                    self._core.step(worker=tid)
                except Exception:
                    self._failed.set()
                    raise

    def _on_worker_done(self, future: Future) -> None:
        exc = future.exception()
        if exc:
            logger.error("Worker failed: %s", exc)


def run_threaded(core: SchedulerCore) -> SimulationResult:
    return WorkerPool(core).run()
