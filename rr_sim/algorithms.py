from __future__ import annotations

import logging
from typing import Dict, List, Optional, Sequence, Tuple

from .config import SimulationConfig
from .errors import SchedulerError
from .metrics import compute_system_metrics, compute_wait_times
from .models import (
    EventKind,
    ProcessRecord,
    SchedulerEvent,
    SchedulerState,
    SimulationResult,
)
from .ready_queue import ReadyQueue
from .sinks import EventSink, MemorySink, ReportSink

logger = logging.getLogger(__name__)


def apply_quantum(
    process: ProcessRecord,
    quantum_fraction: float = 0.1,
    floor: float = 0.1,
) -> Tuple[ProcessRecord, float]:
    """
    Run ``process`` for one slice and return it with the elapsed time.

    The slice is a fixed fraction of the remaining time, so quanta shrink
    geometrically; at or below ``floor`` the process finishes outright.
    """
    time_slice = quantum_fraction * process.remaining

    if process.remaining <= floor:
        delta = process.remaining
        process.remaining = 0.0
    else:
        process.remaining -= time_slice
        delta = time_slice

    return process, delta


class SchedulerCore:
    """
    Decaying-quantum round robin with shortest-remaining-time selection.

    Owns simulated time, the ready queue and the completion table. Drive it
    with ``step()`` (one quantum per call) or ``run()`` (to completion). Once
    the queue empties the core computes waiting times, hands them to the
    report sink and becomes TERMINATED.
    """

    def __init__(
        self,
        processes: Sequence[ProcessRecord],
        sink: Optional[EventSink] = None,
        report_sink: Optional[ReportSink] = None,
        config: Optional[SimulationConfig] = None,
    ):
        if not processes:
            raise SchedulerError("Cannot schedule an empty workload")

        self.config = config or SimulationConfig()
        self.sink = sink if sink is not None else MemorySink()
        self.report_sink = report_sink if report_sink is not None else self.sink

        self.snapshots = [p.snapshot() for p in processes]
        self.queue = ReadyQueue(processes)
        self.now = self.config.start_time
        self.state = SchedulerState.RUNNING
        self.steps = 0

        self.completion_times: Dict[int, float] = {}
        self.wait_times: Dict[int, float] = {}
        self.events: List[SchedulerEvent] = []

    @property
    def finished(self) -> bool:
        return self.state is SchedulerState.TERMINATED

    def step(self, worker: Optional[int] = None) -> SchedulerState:
        """
        Select one process, run one quantum, then pause or finish it.

        ``worker`` is the id stamped on the emitted events; by default each
        process is reported on its own worker (worker id == pid).
        """
        if self.state is not SchedulerState.RUNNING:
            raise SchedulerError(f"Cannot step a scheduler in state {self.state.value}")

        if not self.queue.has_eligible(self.now):
            next_arrival = self.queue.next_arrival()
            logger.debug("CPU idle at t=%.6f, jumping to next arrival t=%.6f", self.now, next_arrival)
            self.now = next_arrival

        process = self.queue.select_next(self.now)
        tid = process.pid if worker is None else worker
        logger.debug("t=%.6f selected process %d (remaining %.6f)", self.now, process.pid, process.remaining)

        if not process.started:
            process.started = True
            self._emit(process, EventKind.STARTED, tid)
        self._emit(process, EventKind.RESUMED, tid)

        process, delta = apply_quantum(process, self.config.quantum_fraction, self.config.floor)
        self.now += delta
        self.steps += 1

        if process.remaining == 0:
            self.completion_times[process.pid] = self.now
            self._emit(process, EventKind.FINISHED, tid)
            logger.info("Process %d finished at t=%.6f", process.pid, self.now)
        else:
            self._emit(process, EventKind.PAUSED, tid)
            self.queue.enqueue(process)

        if not self.queue:
            self._drain()

        return self.state

    def run(self) -> SimulationResult:
        while self.state is SchedulerState.RUNNING:
            self.step()
        return self.result()

    def result(self) -> SimulationResult:
        if not self.finished:
            raise SchedulerError("Simulation has not terminated yet")

        result = SimulationResult(
            snapshots=list(self.snapshots),
            events=list(self.events),
            completion_times=dict(self.completion_times),
            wait_times=dict(self.wait_times),
        )
        compute_system_metrics(result)
        return result

    def _drain(self) -> None:
        self.state = SchedulerState.DRAINING
        self.wait_times = compute_wait_times(self.snapshots, self.completion_times)
        self.report_sink.report(self.wait_times)
        self.state = SchedulerState.TERMINATED
        logger.info("All %d processes finished after %d quanta at t=%.6f", len(self.snapshots), self.steps, self.now)

    def _emit(self, process: ProcessRecord, kind: EventKind, worker: int) -> None:
        event = SchedulerEvent(time=self.now, pid=process.pid, kind=kind, worker=worker)
        self.events.append(event)
        self.sink.emit(event)


def run_simulation(
    processes: Sequence[ProcessRecord],
    sink: Optional[EventSink] = None,
    report_sink: Optional[ReportSink] = None,
    config: Optional[SimulationConfig] = None,
) -> SimulationResult:
    """
    Sequentially simulate ``processes`` to completion.
    """
    return SchedulerCore(processes, sink=sink, report_sink=report_sink, config=config).run()
