from __future__ import annotations

import heapq
import logging
from collections import deque
from typing import Deque, List, Optional, Sequence, Tuple

from .metrics import finalize
from .models import GanttChart, ProcessDef, RunState, ScheduleResult

logger = logging.getLogger(__name__)


def schedule_fcfs(processes: Sequence[ProcessDef], quantum: Optional[int] = None) -> ScheduleResult:
    """
    First-Come First-Serve (non-preemptive) scheduling.

    Processes run to completion in order of arrival; equal arrivals keep
    their input order. Gaps before a late arrival are recorded as idle.
    """
    states = [RunState.fresh(p) for p in processes]
    chart = GanttChart()

    # sorted() is stable, so ties stay in input order
    order = sorted(range(len(processes)), key=lambda i: processes[i].arrival_time)

    time = 0
    for idx in order:
        p = processes[idx]
        if time < p.arrival_time:
            chart.record_idle(time)
            time = p.arrival_time

        logger.debug("FCFS t=%d: dispatch P%s for %d", time, p.pid, p.burst_time)
        chart.record_process(p.pid, time)

        time += p.burst_time
        states[idx].remaining_time = 0
        states[idx].finish_time = time

    chart.close(time)
    result = ScheduleResult(algorithm="FCFS", quantum=None, states=states, chart=chart)
    return finalize(result, processes)


def schedule_srt(processes: Sequence[ProcessDef], quantum: Optional[int] = None) -> ScheduleResult:
    """
    Shortest Remaining Time (preemptive).

    At every instant the arrived, unfinished process with the least
    remaining time runs; ties go to the process listed first in the input.
    Decisions are only taken at arrival and completion events: between two
    events the running process only gets shorter, so it stays the minimum.
    """
    states = [RunState.fresh(p) for p in processes]
    chart = GanttChart()

    pending = sorted(range(len(processes)), key=lambda i: (processes[i].arrival_time, i))
    ready: List[Tuple[int, int]] = []  # (remaining_time, input index)
    next_pending = 0
    completed = 0
    time = 0

    while completed < len(processes):
        while next_pending < len(pending) and processes[pending[next_pending]].arrival_time <= time:
            idx = pending[next_pending]
            heapq.heappush(ready, (states[idx].remaining_time, idx))
            next_pending += 1

        next_arrival = processes[pending[next_pending]].arrival_time if next_pending < len(pending) else None

        if not ready:
            # Nothing eligible means something is still to arrive.
            chart.record_idle(time)
            time = next_arrival
            continue

        remaining, idx = heapq.heappop(ready)
        p = processes[idx]
        run_time = remaining if next_arrival is None else min(remaining, next_arrival - time)

        logger.debug("SRT t=%d: run P%s for %d (remaining %d)", time, p.pid, run_time, remaining)
        chart.record_process(p.pid, time)

        time += run_time
        states[idx].remaining_time -= run_time

        if states[idx].remaining_time == 0:
            states[idx].finish_time = time
            completed += 1
        else:
            heapq.heappush(ready, (states[idx].remaining_time, idx))

    chart.close(time)
    result = ScheduleResult(algorithm="SRT", quantum=None, states=states, chart=chart)
    return finalize(result, processes)


def schedule_rr(processes: Sequence[ProcessDef], quantum: Optional[int] = None) -> ScheduleResult:
    """
    Round Robin scheduling with a fixed time quantum.
    """
    if quantum is None or quantum <= 0:
        raise ValueError("Round Robin requires a positive quantum (use --quantum)")

    states = [RunState.fresh(p) for p in processes]
    chart = GanttChart()

    ready: Deque[int] = deque()
    queued = [False] * len(processes)

    def enqueue_new_arrivals(current_time: int) -> None:
        for i, p in enumerate(processes):
            if p.arrival_time <= current_time and not queued[i] and not states[i].finished:
                ready.append(i)
                queued[i] = True

    time = 0
    completed = 0

    while completed < len(processes):
        enqueue_new_arrivals(time)

        if not ready:
            chart.record_idle(time)
            time += 1
            continue

        # Stays flagged as queued while running so the arrival scan skips it.
        idx = ready.popleft()
        p = processes[idx]

        run_time = min(quantum, states[idx].remaining_time)
        logger.debug("RR t=%d: run P%s for %d", time, p.pid, run_time)
        chart.record_process(p.pid, time)

        time += run_time
        states[idx].remaining_time -= run_time

        # Arrivals during the slice go ahead of the preempted process.
        enqueue_new_arrivals(time)

        if states[idx].remaining_time > 0:
            ready.append(idx)
        else:
            states[idx].finish_time = time
            queued[idx] = False
            completed += 1

    chart.close(time)
    result = ScheduleResult(algorithm="Round Robin", quantum=quantum, states=states, chart=chart)
    return finalize(result, processes)


ALGORITHMS = {
    "fcfs": schedule_fcfs,
    "srt": schedule_srt,
    "rr": schedule_rr,
}


def run_algorithm(name: str, processes: Sequence[ProcessDef], quantum: Optional[int] = None) -> ScheduleResult:
    """
    Dispatch to the requested algorithm. Quantum is only used by round-robin.
    """
    name = name.lower()
    if name not in ALGORITHMS:
        raise ValueError(f"Unknown algorithm '{name}' (choose from {', '.join(ALGORITHMS)})")

    if not processes:
        raise ValueError("Cannot schedule an empty process list")

    func = ALGORITHMS[name]
    return func(processes, quantum=quantum)
