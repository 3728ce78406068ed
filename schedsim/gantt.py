from __future__ import annotations

from typing import Dict

from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from .models import GanttChart, Idle, Segment


def segment_label(segment: Segment) -> str:
    if isinstance(segment, Idle):
        return "Idle"
    return f"P{segment.pid}"


def render_gantt(chart: GanttChart) -> str:
    """
    Plain-text Gantt chart: one ``| label start`` cell per segment, closed
    by the end time.
    """
    if not chart.segments:
        return "(no execution)"

    cells = [f"| {segment_label(seg)} {start:>3} " for seg, start, _ in chart.slices()]
    return "".join(cells) + f"| {chart.end_time}"


def build_rich_gantt(chart: GanttChart) -> tuple[Panel, str]:
    """
    Build a Rich Panel containing a colored Gantt chart and a string with time marks.
    """
    if not chart.segments:
        panel = Panel("No execution", title="Gantt Chart")
        return panel, ""

    colors = ["red", "green", "yellow", "blue", "magenta", "cyan"]
    pid_to_color: Dict[int, str] = {}

    def pid_color(pid: int) -> str:
        if pid not in pid_to_color:
            idx = len(pid_to_color) % len(colors)
            pid_to_color[pid] = colors[idx]
        return pid_to_color[pid]

    timeline = Text()
    labels = Text()
    time_marks = "0"

    for seg, start, end in chart.slices():
        width = max(1, end - start)
        label = segment_label(seg)

        if isinstance(seg, Idle):
            timeline.append("." * width, style="dim")
            labels.append("idle"[:width].ljust(width), style="dim")
        else:
            timeline.append(" " * width, style=f"on {pid_color(seg.pid)}")
            labels.append(label[:width].ljust(width), style="bold")

        time_marks += f"{end:>3}"

    table = Table.grid(padding=(0, 0))
    table.add_row(timeline)
    table.add_row(labels)

    panel = Panel.fit(table, title="Gantt Chart")
    return panel, time_marks
