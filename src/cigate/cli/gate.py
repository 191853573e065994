from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING, Annotated

import typer

from cigate.cli._shared import exit_code_for, exit_on_error, load_cli_settings, resolve_output
from cigate.cli.select import ConfigOption, OutputOption
from cigate.core.pipeline import gate_services
from cigate.core.types import OutputFormat
from cigate.inputs.reports import ReportLocator
from cigate.io import write_output
from cigate.render import format_json, render_result_human, render_result_plain

if TYPE_CHECKING:
    from cigate.core.mapper import ServiceSelection
    from cigate.core.pipeline import PipelineResult

ThresholdOption = Annotated[
    int | None,
    typer.Option(
        "--threshold",
        help="Minimum coverage percentage (default 70, or CIGATE_COVERAGE_THRESHOLD).",
        min=0,
        max=100,
    ),
]
ReportOption = Annotated[
    list[str] | None,
    typer.Option("--report", help="Explicit report path as SERVICE=PATH (repeatable)."),
]
RootOption = Annotated[
    Path | None,
    typer.Option("--root", help="Repository root that report paths are relative to."),
]
TemplateOption = Annotated[
    str | None,
    typer.Option(
        "--report-template",
        help="Report path template using {service} and {directory}.",
    ),
]
FormatOption = Annotated[
    OutputFormat,
    typer.Option("--format", help="Output format.", case_sensitive=False),
]
ColorOption = Annotated[bool, typer.Option("--color", help="Force color output")]
NoColorOption = Annotated[bool, typer.Option("--no-color", help="Disable color output")]


def parse_report_overrides(values: list[str] | None) -> dict[str, Path]:
    overrides: dict[str, Path] = {}
    for value in values or []:
        service, sep, path = value.partition("=")
        if not sep or not service.strip() or not path.strip():
            msg = f"expected SERVICE=PATH, got {value!r}"
            raise typer.BadParameter(msg, param_hint="--report")
        overrides[service.strip()] = Path(path.strip())
    return overrides


def emit_result(
    result: PipelineResult,
    *,
    selection: ServiceSelection | None,
    fmt: OutputFormat,
    output: Path | None,
    color: bool,
    no_color: bool,
) -> None:
    fmt, use_color = resolve_output(fmt, output, color=color, no_color=no_color)
    if fmt is OutputFormat.JSON:
        text = format_json(selection=selection, result=result)
    elif fmt is OutputFormat.HUMAN:
        text = render_result_human(result, color=use_color)
    else:
        text = render_result_plain(result)
    write_output(text, output)


def gate_cmd(
    services: Annotated[
        list[str] | None,
        typer.Argument(help="Services to gate. Defaults to every known service."),
    ] = None,
    report: ReportOption = None,
    threshold: ThresholdOption = None,
    root: RootOption = None,
    report_template: TemplateOption = None,
    config: ConfigOption = None,
    format_: FormatOption = OutputFormat.AUTO,
    output: OutputOption = None,
    color: ColorOption = False,
    no_color: NoColorOption = False,
) -> None:
    """Check each service's coverage report against the threshold."""
    overrides = parse_report_overrides(report)

    with exit_on_error():
        settings = load_cli_settings(config, threshold=threshold)
        if services:
            targets = list(services)
        elif overrides:
            targets = [name for name in settings.services.names() if name in overrides]
            targets += [name for name in overrides if name not in settings.services]
        else:
            targets = list(settings.services.names())
        locate = ReportLocator(
            table=settings.services,
            root=root or Path.cwd(),
            template=report_template or settings.report_template,
            overrides=overrides,
        )
        result = gate_services(targets, locate, settings.threshold)

    emit_result(result, selection=None, fmt=format_, output=output, color=color, no_color=no_color)
    raise typer.Exit(code=exit_code_for(result))


def register(app: typer.Typer) -> None:
    app.command("gate")(gate_cmd)


__all__ = [
    "ColorOption",
    "FormatOption",
    "NoColorOption",
    "ReportOption",
    "RootOption",
    "TemplateOption",
    "ThresholdOption",
    "emit_result",
    "parse_report_overrides",
    "register",
]
