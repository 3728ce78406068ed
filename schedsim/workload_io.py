from __future__ import annotations

import csv
import json
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Mapping, Optional, TextIO

from .models import ProcessDef

logger = logging.getLogger(__name__)


class WorkloadError(ValueError):
    """Base class for anything wrong with a workload file."""


class WorkloadNotFoundError(WorkloadError):
    pass


class EmptyWorkloadError(WorkloadError):
    pass


class MalformedWorkloadError(WorkloadError):
    pass


@dataclass
class Workload:
    quantum: Optional[int]
    processes: List[ProcessDef] = field(default_factory=list)


def load_workload(path: str | Path) -> Workload:
    """
    Load a workload from a text, JSON or CSV file.

    Text files hold whitespace-separated integers: the Round Robin quantum
    followed by ``pid arrival burst`` triples. JSON and CSV files hold the
    process list in the same shape as the ``ProcessDef`` fields.
    """
    path = Path(path)
    suffix = path.suffix.lower()

    try:
        with path.open("r", encoding="utf-8", newline="") as f:
            if suffix == ".json":
                workload = _load_json(f.read())
            elif suffix == ".csv":
                workload = _load_csv(f)
            else:
                workload = _load_text(f.read())
    except UnicodeDecodeError as exc:
        raise MalformedWorkloadError(f"Workload file {path} is not UTF-8 text") from exc
    except OSError as exc:
        raise WorkloadNotFoundError(f"Unable to open workload file {path}: {exc.strerror or exc}") from exc

    if not workload.processes:
        raise EmptyWorkloadError(f"No processes found in workload file {path}")

    validate(workload)
    logger.info(
        "Loaded %d processes from %s (quantum=%s)", len(workload.processes), path, workload.quantum
    )
    return workload


def _load_text(text: str) -> Workload:
    tokens = text.split()
    if not tokens:
        return Workload(quantum=None)

    values: List[int] = []
    for pos, token in enumerate(tokens, start=1):
        try:
            values.append(int(token))
        except ValueError as exc:
            raise MalformedWorkloadError(f"Token {pos} is not an integer: {token!r}") from exc

    quantum, fields = values[0], values[1:]
    if len(fields) % 3:
        raise MalformedWorkloadError(
            f"Incomplete process entry: {len(fields) % 3} trailing value(s) after the last triple"
        )

    processes = [
        ProcessDef(pid=fields[i], arrival_time=fields[i + 1], burst_time=fields[i + 2])
        for i in range(0, len(fields), 3)
    ]
    return Workload(quantum=quantum, processes=processes)


def _load_json(text: str) -> Workload:
    try:
        raw = json.loads(text)
    except json.JSONDecodeError as exc:
        raise MalformedWorkloadError(f"Invalid JSON: {exc}") from exc

    quantum = None
    if isinstance(raw, dict):
        quantum = _optional_int(raw.get("quantum"), "quantum")
        raw = raw.get("processes", [])

    if not isinstance(raw, list):
        raise MalformedWorkloadError("JSON workload must be a list of process objects")

    return Workload(quantum=quantum, processes=[_process_from_mapping(entry) for entry in raw])


def _load_csv(f: TextIO) -> Workload:
    reader = csv.DictReader(f)
    return Workload(quantum=None, processes=[_process_from_mapping(row) for row in reader])


def _strict_int(value: object) -> int:
    # json gives floats and bools for 3.9 / true; int() would truncate them
    if isinstance(value, bool) or not isinstance(value, (int, str)):
        raise TypeError(f"expected an integer, got {value!r}")
    return int(value)


def _process_from_mapping(mapping: Mapping[str, object]) -> ProcessDef:
    try:
        pid = _strict_int(mapping["pid"])
        arrival_time = _strict_int(mapping["arrival_time"])
        burst_time = _strict_int(mapping["burst_time"])
    except (KeyError, TypeError, ValueError) as exc:
        raise MalformedWorkloadError(f"Invalid process entry: {mapping!r}") from exc

    return ProcessDef(pid=pid, arrival_time=arrival_time, burst_time=burst_time)


def _optional_int(value: object, name: str) -> Optional[int]:
    if value is None or value == "":
        return None
    try:
        return _strict_int(value)
    except (TypeError, ValueError) as exc:
        raise MalformedWorkloadError(f"Invalid {name}: {value!r}") from exc


def validate(workload: Workload) -> None:
    """
    Reject values the schedulers cannot handle.
    """
    if workload.quantum is not None and workload.quantum <= 0:
        raise MalformedWorkloadError(f"Quantum must be positive, got {workload.quantum}")

    seen = set()
    for p in workload.processes:
        if p.pid in seen:
            raise MalformedWorkloadError(f"Duplicate process id {p.pid}")
        seen.add(p.pid)
        if p.arrival_time < 0:
            raise MalformedWorkloadError(f"Process {p.pid} has negative arrival time {p.arrival_time}")
        if p.burst_time <= 0:
            raise MalformedWorkloadError(f"Process {p.pid} has non-positive burst time {p.burst_time}")
