"""
Destinations for the event trace and the final waiting-time report.

The scheduler only knows the two small protocols below. TraceWriter renders
the classic text log to any number of text streams (stdout, output file);
MemorySink just records what it was given and is handy in tests.
"""

from __future__ import annotations

from typing import Dict, List, Protocol, TextIO

from .errors import SinkError
from .models import SchedulerEvent

REPORT_RULE = "-" * 69


class EventSink(Protocol):
    def emit(self, event: SchedulerEvent) -> None: ...


class ReportSink(Protocol):
    def report(self, wait_times: Dict[int, float]) -> None: ...


def format_event(event: SchedulerEvent) -> str:
    return (
        f"[Thread {event.worker}] Time: {event.time:.6f}, "
        f"Process {event.pid}, {event.kind.value}."
    )


def format_report(wait_times: Dict[int, float]) -> List[str]:
    lines = [REPORT_RULE, "Waiting Times:"]
    for pid in sorted(wait_times):
        lines.append(f"Process {pid}: {wait_times[pid]:.6f}")
    return lines


class TraceWriter:
    """
    Writes every event and the report, one line each, to all ``streams``.

    Any OSError from a stream aborts the run as a SinkError.
    """

    def __init__(self, *streams: TextIO):
        self._streams = streams

    def emit(self, event: SchedulerEvent) -> None:
        self._write_line(format_event(event))

    def report(self, wait_times: Dict[int, float]) -> None:
        for line in format_report(wait_times):
            self._write_line(line)
        self.flush()

    def flush(self) -> None:
        for stream in self._streams:
            try:
                stream.flush()
            except (OSError, ValueError) as exc:
                raise SinkError(f"Cannot flush {_name(stream)}: {exc}") from exc

    def _write_line(self, line: str) -> None:
        for stream in self._streams:
            try:
                stream.write(line + "\n")
            except (OSError, ValueError) as exc:
                # ValueError: write to a closed file
                raise SinkError(f"Cannot write to {_name(stream)}: {exc}") from exc


class MemorySink:

    def __init__(self) -> None:
        self.events: List[SchedulerEvent] = []
        self.wait_times: Dict[int, float] = {}
        self.reported = 0

    def emit(self, event: SchedulerEvent) -> None:
        self.events.append(event)

    def report(self, wait_times: Dict[int, float]) -> None:
        self.wait_times = dict(wait_times)
        self.reported += 1


def _name(stream: TextIO) -> str:
    return getattr(stream, "name", repr(stream))
