"""Line-oriented output meant for shell scripts and CI steps."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from cigate.core.mapper import ServiceSelection
    from cigate.core.pipeline import PipelineResult


def render_selection_plain(selection: ServiceSelection) -> str:
    return "\n".join(sorted(selection.names()))


def render_result_plain(result: PipelineResult) -> str:
    lines: list[str] = []
    for outcome in result.outcomes:
        if outcome.report_missing:
            detail = "missing-report"
        elif outcome.verdict is not None:
            detail = f"{outcome.verdict.percent:.2f}"
        else:
            detail = "-"
        lines.append(f"{outcome.service}\t{outcome.status.value}\t{detail}")
    lines.extend(f"{service}\tskipped\t-" for service in result.skipped)
    lines.append(f"status\t{result.status.value}")
    return "\n".join(lines)


__all__ = ["render_result_plain", "render_selection_plain"]
