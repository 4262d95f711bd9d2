from __future__ import annotations

import argparse
import contextlib
import logging
import sys
from pathlib import Path
from typing import List

from rich import box
from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table

from .algorithms import SchedulerCore
from .config import DEFAULT_FLOOR, DEFAULT_QUANTUM_FRACTION, SimulationConfig
from .errors import SimulatorError, SinkError
from .gantt import build_rich_gantt, build_slices
from .models import ProcessRecord, SimulationResult
from .sinks import TraceWriter
from .workers import run_threaded
from .workload_io import load_workload

logger = logging.getLogger("rr_sim")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="rr-sim",
        description="Round-robin CPU scheduling simulator with a decaying time quantum.",
    )
    parser.add_argument(
        "--log-level",
        default="WARNING",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Diagnostic log level on stderr (default: WARNING).",
    )

    subparsers = parser.add_subparsers(dest="command", required=True)

    run_parser = subparsers.add_parser("run", help="Simulate a workload and print the event trace.")
    run_parser.add_argument(
        "--workload",
        "-w",
        default="input.txt",
        help="Workload file: 'arrival burst' per line, or .json/.csv (default: input.txt).",
    )
    run_parser.add_argument(
        "--output",
        "-o",
        default="output.txt",
        help="File that receives a copy of the trace and report (default: output.txt).",
    )
    run_parser.add_argument(
        "--no-output-file",
        action="store_true",
        help="Only write the trace to stdout.",
    )
    run_parser.add_argument(
        "--quantum-fraction",
        "-q",
        type=float,
        default=DEFAULT_QUANTUM_FRACTION,
        help=f"Share of the remaining time granted per quantum (default: {DEFAULT_QUANTUM_FRACTION}).",
    )
    run_parser.add_argument(
        "--floor",
        type=float,
        default=DEFAULT_FLOOR,
        help=f"Remaining time at or below which a process runs to completion (default: {DEFAULT_FLOOR}).",
    )
    run_parser.add_argument(
        "--threads",
        action="store_true",
        help="Launch one worker thread per process, serialized by a single semaphore.",
    )
    run_parser.add_argument(
        "--summary",
        action="store_true",
        help="Print a Gantt chart and per-process / system metrics after the report.",
    )

    check_parser = subparsers.add_parser("check", help="Load a workload and print it without simulating.")
    check_parser.add_argument(
        "--workload",
        "-w",
        default="input.txt",
        help="Workload file to validate (default: input.txt).",
    )

    return parser


def configure_logging(level: str) -> None:
    logging.basicConfig(
        level=getattr(logging, level),
        format="%(message)s",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
    )


def _print_workload(processes: List[ProcessRecord], console: Console) -> None:
    table = Table(title="Workload", box=box.SIMPLE_HEAVY)
    table.add_column("PID", justify="center")
    table.add_column("Arrive", justify="right")
    table.add_column("Burst", justify="right")

    for p in processes:
        table.add_row(str(p.pid), f"{p.arrival:g}", f"{p.burst:g}")

    console.print(table)


def _print_result(result: SimulationResult, console: Console) -> None:
    console.print()

    panel, time_marks = build_rich_gantt(build_slices(result.events))
    console.print(panel)
    if time_marks:
        console.print(time_marks)

    console.print()

    proc_table = Table(title="Per-process metrics", box=box.SIMPLE_HEAVY)
    for h in ["PID", "Arrive", "Burst", "Complete", "Wait", "Turnaround"]:
        proc_table.add_column(h, justify="center" if h == "PID" else "right")

    for snap in result.snapshots:
        completion = result.completion_times[snap.pid]
        proc_table.add_row(
            str(snap.pid),
            f"{snap.arrival:g}",
            f"{snap.burst:g}",
            f"{completion:.6f}",
            f"{result.wait_times[snap.pid]:.6f}",
            f"{completion - snap.arrival:.6f}",
        )

    console.print(proc_table)
    console.print()

    if result.system:
        sys_ = result.system
        sys_table = Table(title="System metrics", box=box.SIMPLE_HEAVY)
        sys_table.add_column("Metric")
        sys_table.add_column("Value", justify="right")

        sys_table.add_row("Avg waiting", f"{sys_.avg_waiting:.6f}")
        sys_table.add_row("Avg turnaround", f"{sys_.avg_turnaround:.6f}")
        sys_table.add_row("Makespan", f"{sys_.makespan:.6f}")
        sys_table.add_row("Throughput (proc/time)", f"{sys_.throughput:.3f}")
        sys_table.add_row("CPU utilization", f"{sys_.cpu_utilization*100:.1f}%")

        console.print(sys_table)


def _simulate(args: argparse.Namespace, config: SimulationConfig) -> SimulationResult:
    processes = load_workload(Path(args.workload))

    with contextlib.ExitStack() as stack:
        streams = [sys.stdout]
        if not args.no_output_file:
            try:
                streams.append(stack.enter_context(open(args.output, "w", encoding="utf-8")))
            except OSError as exc:
                raise SinkError(f"Cannot open output file {args.output}: {exc}") from exc

        writer = TraceWriter(*streams)
        core = SchedulerCore(processes, sink=writer, config=config)
        result = run_threaded(core) if args.threads else core.run()

    return result


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    configure_logging(args.log_level)

    console = Console()

    try:
        if args.command == "run":
            try:
                config = SimulationConfig(quantum_fraction=args.quantum_fraction, floor=args.floor)
            except ValueError as exc:
                parser.error(str(exc))
            result = _simulate(args, config)
            if args.summary:
                _print_result(result, console)
            return 0

        if args.command == "check":
            _print_workload(load_workload(Path(args.workload)), console)
            return 0
    except SimulatorError as exc:
        logger.error("%s", exc)
        return 1

    parser.error(f"Unknown command: {args.command}")
    return 1


if __name__ == "__main__":
    raise SystemExit(main())
