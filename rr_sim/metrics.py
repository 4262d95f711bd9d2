from __future__ import annotations

from typing import Dict, Iterable

from .models import ProcessSnapshot, SimulationResult, SystemMetrics


def compute_wait_times(
    snapshots: Iterable[ProcessSnapshot], completion_times: Dict[int, float]
) -> Dict[int, float]:
    """
    Waiting time = completion - arrival - burst, floored at zero.
    """
    waits: Dict[int, float] = {}
    for snap in snapshots:
        raw = completion_times[snap.pid] - snap.arrival - snap.burst
        waits[snap.pid] = raw if raw > 0 else 0.0
    return waits


def compute_system_metrics(result: SimulationResult) -> SystemMetrics:
    """
    Compute averages, throughput and CPU utilization from a finished run.
    """
    if not result.snapshots:
        system = SystemMetrics(
            cpu_busy_time=0.0,
            makespan=0.0,
            throughput=0.0,
            cpu_utilization=0.0,
            avg_waiting=0.0,
            avg_turnaround=0.0,
        )
        result.system = system
        return system

    n = len(result.snapshots)
    makespan = max(result.completion_times.values())
    cpu_busy_time = sum(s.burst for s in result.snapshots)
    turnaround = [result.completion_times[s.pid] - s.arrival for s in result.snapshots]

    system = SystemMetrics(
        cpu_busy_time=cpu_busy_time,
        makespan=makespan,
        throughput=n / makespan if makespan > 0 else 0.0,
        cpu_utilization=cpu_busy_time / makespan if makespan > 0 else 0.0,
        avg_waiting=sum(result.wait_times.values()) / n,
        avg_turnaround=sum(turnaround) / n,
    )
    result.system = system
    return system
