from __future__ import annotations

import argparse
import logging
from typing import List, Optional

from rich import box
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.table import Table

from .algorithms import ALGORITHMS, run_algorithm
from .gantt import build_rich_gantt, render_gantt
from .models import ScheduleResult
from .workload_io import WorkloadError, load_workload

logger = logging.getLogger(__name__)

HEADINGS = {
    "FCFS": "FCFS Scheduling",
    "SRT": "SRT Scheduling",
    "Round Robin": "Round Robin Scheduling",
}


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="schedsim",
        description="CPU scheduling simulator (FCFS, SRT, Round Robin).",
    )
    parser.add_argument(
        "--verbose",
        "-v",
        action="count",
        default=0,
        help="Log loading (-v) and every dispatch decision (-vv) to stderr.",
    )

    subparsers = parser.add_subparsers(dest="command", required=True)

    run_parser = subparsers.add_parser("run", help="Run the scheduling algorithms on a workload file.")
    run_parser.add_argument("workload", help="Path to a text, JSON or CSV workload file.")
    run_parser.add_argument(
        "--algorithms",
        "-a",
        nargs="+",
        choices=list(ALGORITHMS),
        default=list(ALGORITHMS),
        help="Algorithms to run (default: fcfs srt rr). Output order is always fcfs, srt, rr.",
    )
    run_parser.add_argument(
        "--quantum",
        "-q",
        type=int,
        default=None,
        help="Time quantum for round-robin (overrides the quantum in the workload file).",
    )
    run_parser.add_argument(
        "--plain",
        action="store_true",
        help="Print plain text instead of rich tables.",
    )

    compare_parser = subparsers.add_parser(
        "compare",
        help="Run all algorithms on the same workload and compare average metrics.",
    )
    compare_parser.add_argument("workload", help="Path to a text, JSON or CSV workload file.")
    compare_parser.add_argument(
        "--quantum",
        "-q",
        type=int,
        default=None,
        help="Time quantum for round-robin (overrides the quantum in the workload file).",
    )

    return parser


def configure_logging(verbosity: int) -> None:
    level = logging.WARNING
    if verbosity == 1:
        level = logging.INFO
    elif verbosity > 1:
        level = logging.DEBUG

    root = logging.getLogger()
    root.setLevel(level)

    # Replace only our own handler so repeated calls don't stack output.
    for handler in [h for h in root.handlers if isinstance(h, RichHandler)]:
        root.removeHandler(handler)

    handler = RichHandler(console=Console(stderr=True), show_path=False, log_time_format="[%X]")
    handler.setFormatter(logging.Formatter("%(message)s"))
    root.addHandler(handler)


def _print_result(result: ScheduleResult, console: Console) -> None:
    console.rule(f"[bold]{HEADINGS.get(result.algorithm, result.algorithm)}[/bold]")
    if result.quantum is not None:
        console.print(f"[bold]Quantum:[/bold] {result.quantum}")

    panel, time_marks = build_rich_gantt(result.chart)
    console.print(panel)
    if time_marks:
        console.print(time_marks)

    console.print()

    proc_table = Table(title="Process metrics", box=box.SIMPLE_HEAVY)
    proc_table.add_column("ID", justify="center")
    proc_table.add_column("Waiting Time", justify="right")
    proc_table.add_column("Turnaround Time", justify="right")

    for p in result.processes:
        proc_table.add_row(str(p.pid), str(p.waiting_time), str(p.turnaround_time))

    console.print(proc_table)

    if result.system:
        sys = result.system
        sys_table = Table(title="System metrics", box=box.SIMPLE_HEAVY)
        sys_table.add_column("Metric")
        sys_table.add_column("Value", justify="right")

        sys_table.add_row("Average Waiting Time", f"{sys.avg_waiting:.2f}")
        sys_table.add_row("Average Turnaround Time", f"{sys.avg_turnaround:.2f}")
        sys_table.add_row("CPU Utilization", f"{sys.cpu_utilization:.2f}%")

        console.print(sys_table)


def format_plain(result: ScheduleResult) -> str:
    """
    Plain-text report for one algorithm run.
    """
    lines = [
        f"{HEADINGS.get(result.algorithm, result.algorithm)}:",
        "",
        "Gantt Chart:",
        render_gantt(result.chart),
        "",
        "Process Metrics:",
        "ID\tWaiting Time\tTurnaround Time",
    ]
    for p in result.processes:
        lines.append(f"{p.pid}\t{p.waiting_time}\t\t{p.turnaround_time}")

    if result.system:
        sys = result.system
        lines += [
            "",
            f"Average Waiting Time: {sys.avg_waiting:.2f}",
            f"Average Turnaround Time: {sys.avg_turnaround:.2f}",
            f"CPU Utilization: {sys.cpu_utilization:.2f}%",
        ]
    return "\n".join(lines)


def _print_compare(results: List[ScheduleResult], console: Console) -> None:
    summary_table = Table(title="Algorithm comparison", box=box.SIMPLE_HEAVY)
    summary_table.add_column("Algorithm")
    summary_table.add_column("Quantum", justify="right")
    summary_table.add_column("Avg waiting", justify="right")
    summary_table.add_column("Avg turnaround", justify="right")
    summary_table.add_column("CPU utilization", justify="right")
    summary_table.add_column("Throughput (proc/time)", justify="right")

    for result in results:
        sys = result.system
        summary_table.add_row(
            result.algorithm,
            "" if result.quantum is None else str(result.quantum),
            f"{sys.avg_waiting:.2f}",
            f"{sys.avg_turnaround:.2f}",
            f"{sys.cpu_utilization:.2f}%",
            f"{sys.throughput:.3f}",
        )

    console.print(summary_table)


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    configure_logging(args.verbose)

    console = Console()
    err_console = Console(stderr=True)

    try:
        workload = load_workload(args.workload)
    except WorkloadError as exc:
        logger.debug("Workload rejected", exc_info=True)
        err_console.print(f"[red]Error:[/red] {escape(str(exc))}", highlight=False)
        return 1

    quantum = args.quantum if args.quantum is not None else workload.quantum

    selected = args.algorithms if args.command == "run" else list(ALGORITHMS)
    names = [name for name in ALGORITHMS if name in selected]
    if "rr" in names:
        if quantum is None:
            parser.error("round-robin needs a quantum: add one to the workload file or pass --quantum")
        if quantum <= 0:
            parser.error(f"quantum must be positive, got {quantum}")

    results = []
    for name in names:
        results.append(run_algorithm(name, workload.processes, quantum=quantum if name == "rr" else None))

    if args.command == "compare":
        _print_compare(results, console)
        return 0

    for result in results:
        if args.plain:
            # Bypass rich so tabs and long chart lines survive untouched.
            print(format_plain(result), end="\n\n")
        else:
            _print_result(result, console)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
