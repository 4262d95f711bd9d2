import pytest

from rr_sim.algorithms import SchedulerCore, apply_quantum, run_simulation
from rr_sim.config import SimulationConfig
from rr_sim.errors import SchedulerError
from rr_sim.metrics import compute_wait_times
from rr_sim.models import EventKind, ProcessRecord, ProcessSnapshot, SchedulerState
from rr_sim.sinks import MemorySink


def _procs(*pairs):
    return [ProcessRecord(pid=i, arrival=float(a), burst=float(b)) for i, (a, b) in enumerate(pairs, start=1)]


def _slices(events):
    """(pid, delta) for every applied quantum, in order."""
    out = []
    started_at = {}
    for e in events:
        if e.kind is EventKind.RESUMED:
            started_at[e.pid] = e.time
        elif e.kind in (EventKind.PAUSED, EventKind.FINISHED):
            out.append((e.pid, e.time - started_at.pop(e.pid)))
    return out


def test_quantum_is_tenth_of_remaining():
    p, delta = apply_quantum(ProcessRecord(pid=1, arrival=0.0, burst=4.0))
    assert p.remaining == pytest.approx(3.6)
    assert delta == pytest.approx(0.4)


def test_quantum_at_floor_finishes_process():
    p = ProcessRecord(pid=1, arrival=0.0, burst=1.0)
    p.remaining = 0.1
    p, delta = apply_quantum(p)
    assert p.remaining == 0
    assert delta == 0.1

    p.remaining = 0.05
    p, delta = apply_quantum(p)
    assert p.remaining == 0
    assert delta == 0.05


def test_single_process():
    res = run_simulation(_procs((0, 4)))
    kinds = [e.kind for e in res.events]
    assert kinds[:2] == [EventKind.STARTED, EventKind.RESUMED]
    assert kinds[-1] is EventKind.FINISHED
    assert kinds.count(EventKind.STARTED) == 1
    assert res.events[0].time == 0.0
    assert res.completion_times[1] == pytest.approx(4.0)
    assert res.wait_times[1] == pytest.approx(0.0, abs=1e-9)
    # 4 * 0.9**36 < 0.1, so 36 decaying quanta and one final slice
    assert len(_slices(res.events)) == 37


def test_equal_processes_prefer_lower_id():
    res = run_simulation(_procs((0, 4), (0, 4)))
    assert res.events[0].pid == 1
    first_p2 = next(i for i, e in enumerate(res.events) if e.pid == 2)
    p1_finish = next(i for i, e in enumerate(res.events) if e.pid == 1 and e.kind is EventKind.FINISHED)
    assert p1_finish < first_p2
    assert res.wait_times[1] == pytest.approx(0.0, abs=1e-9)
    assert res.wait_times[2] == pytest.approx(4.0)


def test_idle_cpu_jumps_to_next_arrival():
    res = run_simulation(_procs((0, 2), (5, 2)))
    p2_events = [e for e in res.events if e.pid == 2]
    assert p2_events[0].kind is EventKind.STARTED
    assert p2_events[0].time == 5.0
    assert all(e.time >= 5.0 for e in p2_events)
    assert res.completion_times[1] == pytest.approx(2.0)
    assert res.completion_times[2] == pytest.approx(7.0)
    assert res.wait_times == pytest.approx({1: 0.0, 2: 0.0}, abs=1e-9)


def test_first_arrival_later_than_zero():
    res = run_simulation(_procs((3, 1)))
    assert res.events[0].time == 3.0
    assert res.completion_times[1] == pytest.approx(4.0)


def test_shorter_arrival_preempts_running_process():
    res = run_simulation(_procs((0, 4), (1, 1)))
    # P1 slices: 0.4, 0.36, 0.324 -> t=1.084 with 2.916 left, then P2 (1.0) wins
    p2_start = next(i for i, e in enumerate(res.events) if e.pid == 2)
    assert res.events[p2_start].time == pytest.approx(1.084)
    p2_finish = next(i for i, e in enumerate(res.events) if e.pid == 2 and e.kind is EventKind.FINISHED)
    assert all(e.pid == 2 for e in res.events[p2_start:p2_finish + 1])
    assert res.completion_times[2] == pytest.approx(2.084)
    assert res.wait_times[2] == pytest.approx(0.084)
    assert res.wait_times[1] == pytest.approx(1.0)


def test_conservation_and_monotonic_time():
    procs = _procs((0, 3), (1, 5), (1, 2), (4, 1), (10, 2))
    bursts = {p.pid: p.burst for p in procs}
    res = run_simulation(procs)

    times = [e.time for e in res.events]
    assert times == sorted(times)

    used = {pid: 0.0 for pid in bursts}
    for pid, delta in _slices(res.events):
        assert delta > 0
        used[pid] += delta
    for pid, burst in bursts.items():
        assert used[pid] == pytest.approx(burst)

    finished = [e.pid for e in res.events if e.kind is EventKind.FINISHED]
    assert sorted(finished) == list(bursts)
    assert all(w >= 0 for w in res.wait_times.values())


def test_every_slice_logs_resumed():
    res = run_simulation(_procs((0, 1), (0, 2)))
    kinds = [e.kind for e in res.events]
    assert kinds.count(EventKind.STARTED) == 2
    assert kinds.count(EventKind.RESUMED) == kinds.count(EventKind.PAUSED) + kinds.count(EventKind.FINISHED)


def test_sequential_worker_id_is_pid():
    res = run_simulation(_procs((0, 1), (0, 2)))
    assert all(e.worker == e.pid for e in res.events)


def test_state_machine_and_report():
    sink = MemorySink()
    core = SchedulerCore(_procs((0, 1)), sink=sink)
    assert core.state is SchedulerState.RUNNING
    with pytest.raises(SchedulerError):
        core.result()

    core.run()
    assert core.state is SchedulerState.TERMINATED
    assert sink.reported == 1
    assert sink.wait_times == pytest.approx({1: 0.0}, abs=1e-9)
    with pytest.raises(SchedulerError):
        core.step()


def test_empty_workload_rejected():
    with pytest.raises(SchedulerError):
        SchedulerCore([])


def test_custom_quantum_fraction():
    res = run_simulation(_procs((0, 4)), config=SimulationConfig(quantum_fraction=0.5, floor=0.5))
    deltas = [d for _, d in _slices(res.events)]
    assert deltas[:3] == pytest.approx([2.0, 1.0, 0.5])
    assert len(deltas) == 4


def test_config_validation():
    with pytest.raises(ValueError):
        SimulationConfig(quantum_fraction=0)
    with pytest.raises(ValueError):
        SimulationConfig(floor=-1)


def test_wait_time_is_floored_at_zero():
    snaps = [ProcessSnapshot(pid=1, arrival=0.0, burst=4.0)]
    assert compute_wait_times(snaps, {1: 3.9999999}) == {1: 0.0}
