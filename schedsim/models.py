from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterator, List, Optional, Tuple, Union


@dataclass(frozen=True)
class ProcessDef:
    pid: int
    arrival_time: int
    burst_time: int


@dataclass
class RunState:
    """
    Mutable scheduling fields of one process for the duration of one run.
    """

    remaining_time: int
    finish_time: Optional[int] = None

    @classmethod
    def fresh(cls, process: ProcessDef) -> "RunState":
        return cls(remaining_time=process.burst_time)

    @property
    def finished(self) -> bool:
        return self.finish_time is not None


@dataclass(frozen=True)
class Occupied:
    pid: int
    start_time: int


@dataclass(frozen=True)
class Idle:
    start_time: int


Segment = Union[Occupied, Idle]


@dataclass
class GanttChart:
    """
    Chronological record of CPU occupancy.

    Only start times are stored; a segment lasts until the next one starts,
    and the last one until ``end_time``. Recording the occupant that is
    already running extends the current segment.
    """

    segments: List[Segment] = field(default_factory=list)
    end_time: int = 0

    def record(self, segment: Segment) -> None:
        if self.segments:
            last = self.segments[-1]
            if segment.start_time < last.start_time:
                raise ValueError(
                    f"Segment at {segment.start_time} recorded after segment at {last.start_time}"
                )
            if _same_occupant(last, segment):
                return
        elif segment.start_time > 0:
            self.segments.append(Idle(start_time=0))
            if isinstance(segment, Idle):
                return
        self.segments.append(segment)

    def record_process(self, pid: int, start_time: int) -> None:
        self.record(Occupied(pid=pid, start_time=start_time))

    def record_idle(self, start_time: int) -> None:
        self.record(Idle(start_time=start_time))

    def close(self, end_time: int) -> None:
        if self.segments and end_time < self.segments[-1].start_time:
            raise ValueError(f"Chart end {end_time} precedes its last segment")
        self.end_time = end_time

    def slices(self) -> Iterator[Tuple[Segment, int, int]]:
        """
        Yield ``(segment, start, end)`` for every segment, in order.
        """
        for idx, seg in enumerate(self.segments):
            if idx + 1 < len(self.segments):
                end = self.segments[idx + 1].start_time
            else:
                end = self.end_time
            yield seg, seg.start_time, end

    @property
    def busy_time(self) -> int:
        return sum(end - start for seg, start, end in self.slices() if isinstance(seg, Occupied))

    @property
    def idle_time(self) -> int:
        return sum(end - start for seg, start, end in self.slices() if isinstance(seg, Idle))

    @property
    def has_idle(self) -> bool:
        return any(isinstance(seg, Idle) and end > start for seg, start, end in self.slices())


def _same_occupant(a: Segment, b: Segment) -> bool:
    if isinstance(a, Idle) and isinstance(b, Idle):
        return True
    return isinstance(a, Occupied) and isinstance(b, Occupied) and a.pid == b.pid


@dataclass
class ProcessMetrics:
    pid: int
    arrival_time: int
    burst_time: int
    finish_time: int
    waiting_time: int
    turnaround_time: int


@dataclass
class SystemMetrics:
    total_time: int
    busy_time: int
    idle_time: int
    avg_waiting: float
    avg_turnaround: float
    cpu_utilization: float  # percent
    throughput: float


@dataclass
class ScheduleResult:
    algorithm: str
    quantum: Optional[int]
    processes: List[ProcessMetrics] = field(default_factory=list)
    states: List[RunState] = field(default_factory=list)
    chart: GanttChart = field(default_factory=GanttChart)
    system: Optional[SystemMetrics] = None
