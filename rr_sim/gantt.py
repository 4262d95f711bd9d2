from __future__ import annotations

from typing import Dict, List

from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from .models import EventKind, ScheduledSlice, SchedulerEvent


def build_slices(events: List[SchedulerEvent]) -> List[ScheduledSlice]:
    """
    Collapse the event trace into contiguous execution slices.

    Back-to-back quanta of the same process are merged, so a process that
    keeps the CPU across many shrinking quanta shows up as one slice.
    """
    slices: List[ScheduledSlice] = []
    running: Dict[int, float] = {}

    for event in events:
        if event.kind is EventKind.RESUMED:
            running[event.pid] = event.time
        elif event.kind in (EventKind.PAUSED, EventKind.FINISHED):
            start = running.pop(event.pid)
            last = slices[-1] if slices else None
            if last is not None and last.pid == event.pid and last.end_time == start:
                last.end_time = event.time
            else:
                slices.append(ScheduledSlice(pid=event.pid, start_time=start, end_time=event.time))

    return slices


def build_rich_gantt(slices: List[ScheduledSlice], width: int = 60) -> tuple[Panel, str]:
    """
    Build a Rich Panel containing a colored Gantt chart scaled to ``width``
    columns, and a string with the start/end time marks.
    """
    if not slices:
        panel = Panel("No execution", title="Gantt Chart")
        return panel, ""

    colors = ["red", "green", "yellow", "blue", "magenta", "cyan"]
    pid_to_color: Dict[int, str] = {}

    def pid_color(pid: int) -> str:
        if pid not in pid_to_color:
            idx = len(pid_to_color) % len(colors)
            pid_to_color[pid] = colors[idx]
        return pid_to_color[pid]

    end = slices[-1].end_time
    scale = width / end if end > 0 else 1.0

    timeline = Text()
    labels = Text()
    column = 0

    for sl in slices:
        start_col = round(sl.start_time * scale)
        if start_col > column:
            timeline.append(" " * (start_col - column))
            labels.append(" " * (start_col - column))
            column = start_col

        cells = max(1, round(sl.end_time * scale) - column)
        label = f"P{sl.pid}"
        timeline.append(" " * cells, style=f"on {pid_color(sl.pid)}")
        labels.append(label[:cells].ljust(cells), style="bold")
        column += cells

    table = Table.grid(padding=(0, 0))
    table.add_row(timeline)
    table.add_row(labels)

    panel = Panel.fit(table, title="Gantt Chart")
    time_marks = f"{slices[0].start_time:g}".ljust(max(column - 1, 1)) + f"{end:.2f}"
    return panel, time_marks
