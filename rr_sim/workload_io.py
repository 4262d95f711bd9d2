from __future__ import annotations

import csv
import json
import logging
import re
from pathlib import Path
from typing import Iterable, List

from .errors import LoadError
from .models import ProcessRecord

logger = logging.getLogger(__name__)

_INTEGER = re.compile(r"-?[0-9]+")


def load_workload(path: str | Path) -> List[ProcessRecord]:
    """
    Load a workload into ProcessRecords.

    Plain text (``arrival burst`` per line) is the native format and each
    process takes its 1-based line number as id. ``.json`` and ``.csv`` files
    with ``arrival_time``/``burst_time`` fields are also accepted, with ids in
    document order.
    """
    path = Path(path)
    suffix = path.suffix.lower()

    try:
        if suffix == ".json":
            processes = _load_json(path)
        elif suffix == ".csv":
            processes = _load_csv(path)
        else:
            processes = _load_text(path)
    except (OSError, UnicodeDecodeError) as exc:
        raise LoadError(f"Cannot read workload {path}: {exc}") from exc

    if not processes:
        raise LoadError(f"Workload {path} contains no processes")

    logger.info("Loaded %d processes from %s", len(processes), path)
    return processes


def parse_lines(lines: Iterable[str], source: str = "<input>") -> List[ProcessRecord]:
    processes: List[ProcessRecord] = []
    for lineno, line in enumerate(lines, start=1):
        fields = line.split()
        if not fields:
            # blank lines hold no process but still count towards the id
            continue
        where = f"{source}:{lineno}"
        if len(fields) != 2:
            raise LoadError(f"{where}: expected 'arrival burst', got {line.strip()!r}")
        arrival = _parse_int(fields[0], where)
        burst = _parse_int(fields[1], where)
        processes.append(_make_record(lineno, arrival, burst, where))
    return processes


def _parse_int(token, where: str) -> int:
    if isinstance(token, bool):
        raise LoadError(f"{where}: expected an integer, got {token!r}")
    if isinstance(token, int):
        return token
    if isinstance(token, str) and _INTEGER.fullmatch(token.strip()):
        try:
            return int(token)
        except ValueError as exc:
            # more digits than int() will convert
            raise LoadError(f"{where}: value too large") from exc
    raise LoadError(f"{where}: expected an integer, got {token!r}")


def _load_text(path: Path) -> List[ProcessRecord]:
    with path.open("r", encoding="utf-8") as f:
        return parse_lines(f, source=str(path))


def _load_json(path: Path) -> List[ProcessRecord]:
    with path.open("r", encoding="utf-8") as f:
        try:
            raw = json.load(f)
        except ValueError as exc:
            raise LoadError(f"{path}: invalid JSON: {exc}") from exc

    if not isinstance(raw, list):
        raise LoadError("JSON workload must be a list of process objects")

    processes: List[ProcessRecord] = []
    for entry in raw:
        processes.append(_process_from_mapping(len(processes) + 1, entry, str(path)))

    return processes


def _load_csv(path: Path) -> List[ProcessRecord]:
    processes: List[ProcessRecord] = []
    with path.open("r", encoding="utf-8", newline="") as f:
        reader = csv.DictReader(f)
        for row in reader:
            processes.append(_process_from_mapping(len(processes) + 1, row, f"{path}:{reader.line_num}"))
    return processes


def _process_from_mapping(pid: int, mapping, where: str) -> ProcessRecord:
    try:
        arrival = mapping["arrival_time"]
        burst = mapping["burst_time"]
    except (KeyError, TypeError) as exc:
        raise LoadError(f"{where}: invalid process entry: {mapping!r}") from exc

    return _make_record(pid, _parse_int(arrival, where), _parse_int(burst, where), where)


def _make_record(pid: int, arrival: int, burst: int, where: str) -> ProcessRecord:
    if arrival < 0:
        raise LoadError(f"{where}: arrival time must be non-negative, got {arrival}")
    if burst <= 0:
        raise LoadError(f"{where}: burst time must be positive, got {burst}")
    try:
        return ProcessRecord(pid=pid, arrival=float(arrival), burst=float(burst))
    except OverflowError as exc:
        raise LoadError(f"{where}: value too large") from exc
