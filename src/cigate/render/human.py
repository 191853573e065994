from __future__ import annotations

from io import StringIO
from typing import TYPE_CHECKING

from rich import box
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from cigate.core.types import BuildStatus, RunStatus

if TYPE_CHECKING:
    from cigate.core.mapper import ServiceSelection
    from cigate.core.pipeline import PipelineResult, ServiceOutcome

_STATUS_STYLE: dict[RunStatus, str] = {
    RunStatus.SUCCESS: "green",
    RunStatus.UNSTABLE: "yellow",
    RunStatus.FAILURE: "red",
}


def _to_text(*renderables: object, color: bool) -> str:
    buf = StringIO()
    console = Console(
        file=buf,
        force_terminal=color,
        no_color=not color,
        color_system="standard" if color else None,
        width=100,
    )
    for renderable in renderables:
        console.print(renderable)
    return buf.getvalue().rstrip()


def _style_status(status: RunStatus) -> str:
    style = _STATUS_STYLE[status]
    return f"[{style}]{status.value}[/{style}]"


def _style_percent(pct: float | None, threshold: int) -> str:
    if pct is None:
        return "n/a"
    style = "green" if pct >= threshold else "red"
    return f"[{style}]{pct:.2f}%[/{style}]"


def _build_cell(outcome: ServiceOutcome) -> str:
    if outcome.build is None:
        return "-"
    if outcome.build.status is BuildStatus.PASSED:
        return "[green]passed[/green]"
    if outcome.build.status is BuildStatus.UNSTABLE:
        return f"[yellow]unstable ({outcome.build.returncode})[/yellow]"
    return f"[red]failed ({outcome.build.returncode})[/red]"


def render_selection_human(selection: ServiceSelection, *, color: bool = True) -> str:
    if selection.build_all:
        headline = f"[bold]all services[/bold] ({selection.reason.value})"
        if selection.trigger:
            headline += f": {escape(selection.trigger)}"
        return _to_text(headline, color=color)
    lines = "\n".join(f"  {name}" for name in sorted(selection.services))
    return _to_text(f"[bold]{len(selection.services)} service(s)[/bold] changed:", lines, color=color)


def render_result_human(result: PipelineResult, *, color: bool = True) -> str:
    """Render a Rich table of per-service outcomes followed by the run status."""
    table = Table(title="Pipeline Report", box=box.SIMPLE_HEAVY, header_style="bold", expand=True)
    table.add_column("Service", overflow="fold")
    table.add_column("Build")
    table.add_column("Coverage", justify="right")
    table.add_column("Branch", justify="right")
    table.add_column("Threshold", justify="right")
    table.add_column("Status")

    for outcome in result.outcomes:
        verdict = outcome.verdict
        if outcome.report_missing:
            coverage = "[red]missing report[/red]"
            branch = threshold = "-"
        elif verdict is not None:
            coverage = _style_percent(verdict.percent, verdict.threshold)
            branch = "n/a" if verdict.branch_percent is None else f"{verdict.branch_percent:.2f}%"
            threshold = f"{verdict.threshold}%"
        else:
            coverage = branch = threshold = "-"
        table.add_row(outcome.service, _build_cell(outcome), coverage, branch, threshold, _style_status(outcome.status))

    for service in result.skipped:
        table.add_row(service, "[dim]skipped[/dim]", "-", "-", "-", "[dim]skipped[/dim]")

    return _to_text(table, f"Run status: [bold]{_style_status(result.status)}[/bold]", color=color)


__all__ = ["render_result_human", "render_selection_human"]
