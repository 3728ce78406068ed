from __future__ import annotations

from typing import List, Sequence

from .models import ProcessDef, ProcessMetrics, RunState, ScheduleResult, SystemMetrics


def compute_process_metrics(processes: Sequence[ProcessDef], states: Sequence[RunState]) -> List[ProcessMetrics]:
    """
    Derive waiting and turnaround time for every finished process.

    Only arrival, burst and finish time are read, so the result does not
    depend on which scheduler produced the finish times.
    """
    if len(processes) != len(states):
        raise ValueError("Every process needs exactly one run state")

    metrics: List[ProcessMetrics] = []
    for p, state in zip(processes, states):
        if state.finish_time is None:
            raise ValueError(f"Process {p.pid} has not finished")
        turnaround_time = state.finish_time - p.arrival_time
        metrics.append(
            ProcessMetrics(
                pid=p.pid,
                arrival_time=p.arrival_time,
                burst_time=p.burst_time,
                finish_time=state.finish_time,
                waiting_time=turnaround_time - p.burst_time,
                turnaround_time=turnaround_time,
            )
        )
    return metrics


def compute_system_metrics(result: ScheduleResult) -> SystemMetrics:
    """
    Compute averages and CPU utilization given populated per-process metrics
    and a closed Gantt chart.
    """
    if not result.processes:
        raise ValueError("Cannot compute metrics for an empty schedule")

    total_time = result.chart.end_time
    if total_time <= 0:
        raise ValueError("Total elapsed time must be positive")

    n = len(result.processes)
    busy_time = sum(p.burst_time for p in result.processes)

    system = SystemMetrics(
        total_time=total_time,
        busy_time=busy_time,
        idle_time=total_time - busy_time,
        avg_waiting=sum(p.waiting_time for p in result.processes) / n,
        avg_turnaround=sum(p.turnaround_time for p in result.processes) / n,
        cpu_utilization=busy_time / total_time * 100,
        throughput=n / total_time,
    )
    result.system = system
    return system


def finalize(result: ScheduleResult, processes: Sequence[ProcessDef]) -> ScheduleResult:
    """
    Fill in per-process and system metrics once a scheduler has finished.
    """
    result.processes = compute_process_metrics(processes, result.states)
    compute_system_metrics(result)
    return result
