from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List, Optional


@dataclass
class ProcessRecord:
    pid: int
    arrival: float
    burst: float
    remaining: float = field(init=False)
    started: bool = field(default=False, init=False)

    def __post_init__(self) -> None:
        self.remaining = self.burst

    def snapshot(self) -> ProcessSnapshot:
        return ProcessSnapshot(pid=self.pid, arrival=self.arrival, burst=self.burst)


@dataclass(frozen=True)
class ProcessSnapshot:
    """
    Load-time (arrival, burst, pid) triple, kept untouched for wait-time math.
    """

    pid: int
    arrival: float
    burst: float


class EventKind(Enum):
    STARTED = "Started"
    RESUMED = "Resumed"
    PAUSED = "Paused"
    FINISHED = "Finished"


class SchedulerState(Enum):
    RUNNING = "running"
    DRAINING = "draining"
    TERMINATED = "terminated"


@dataclass
class SchedulerEvent:
    """
    One lifecycle transition of a process at a simulated instant.
    """

    time: float
    pid: int
    kind: EventKind
    worker: int


@dataclass
class ScheduledSlice:
    """
    One contiguous stretch of CPU time for a process in the Gantt chart.
    """

    pid: int
    start_time: float
    end_time: float


@dataclass
class SystemMetrics:
    cpu_busy_time: float
    makespan: float
    throughput: float
    cpu_utilization: float
    avg_waiting: float
    avg_turnaround: float


@dataclass
class SimulationResult:
    snapshots: List[ProcessSnapshot] = field(default_factory=list)
    events: List[SchedulerEvent] = field(default_factory=list)
    completion_times: Dict[int, float] = field(default_factory=dict)
    wait_times: Dict[int, float] = field(default_factory=dict)
    system: Optional[SystemMetrics] = None
