from __future__ import annotations

from pathlib import Path
from typing import Annotated

import typer

from cigate.cli._shared import collect_changes, exit_code_for, exit_on_error, load_cli_settings
from cigate.cli.gate import (
    ColorOption,
    FormatOption,
    NoColorOption,
    ReportOption,
    RootOption,
    TemplateOption,
    ThresholdOption,
    emit_result,
    parse_report_overrides,
)
from cigate.cli.select import BaseOption, ChangesFileOption, ConfigOption, HeadOption, OutputOption
from cigate.core.mapper import select_services
from cigate.core.pipeline import run_pipeline
from cigate.core.types import OutputFormat
from cigate.inputs.invoker import CommandInvoker
from cigate.inputs.reports import ReportLocator


def run_cmd(
    paths: Annotated[
        list[str] | None,
        typer.Argument(help="Changed paths, relative to the repository root."),
    ] = None,
    changes_file: ChangesFileOption = None,
    base: BaseOption = None,
    head: HeadOption = "HEAD",
    build_command: Annotated[
        str | None,
        typer.Option(
            "--build-command",
            help="Build/test command per service using {service} and {directory}.",
        ),
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
    """Select affected services, build and test them in order, then gate their coverage."""
    overrides = parse_report_overrides(report)

    with exit_on_error():
        settings = load_cli_settings(config, threshold=threshold)
        changes = collect_changes(paths, changes_file=changes_file, base=base, head=head)
        selection = select_services(
            changes,
            settings.services,
            build_manifests=settings.build_manifests,
            pipeline_definitions=settings.pipeline_definitions,
        )
        workdir = root or Path.cwd()
        invoker = CommandInvoker(
            template=build_command or settings.build_command,
            cwd=workdir,
            unstable_returncodes=settings.unstable_returncodes,
        )
        locate = ReportLocator(
            table=settings.services,
            root=workdir,
            template=report_template or settings.report_template,
            overrides=overrides,
        )
        result = run_pipeline(
            selection,
            settings.services,
            invoker=invoker,
            locate=locate,
            threshold=settings.threshold,
        )

    emit_result(result, selection=selection, fmt=format_, output=output, color=color, no_color=no_color)
    raise typer.Exit(code=exit_code_for(result))


def register(app: typer.Typer) -> None:
    app.command("run")(run_cmd)


__all__ = ["register"]
