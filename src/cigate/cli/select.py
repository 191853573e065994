from __future__ import annotations

from pathlib import Path
from typing import Annotated

import typer

from cigate.cli._shared import collect_changes, exit_on_error, load_cli_settings, resolve_output
from cigate.cli.exit_codes import EXIT_OK
from cigate.core.mapper import select_services
from cigate.core.types import OutputFormat
from cigate.io import write_output
from cigate.render import format_json, render_selection_human, render_selection_plain

ChangesFileOption = Annotated[
    Path | None,
    typer.Option(
        "--changes-file",
        help="Change set as JSON or one path per line ('-' reads stdin).",
        allow_dash=True,
    ),
]
BaseOption = Annotated[
    str | None,
    typer.Option("--base", help="Diff against this commit to list changed files."),
]
HeadOption = Annotated[
    str,
    typer.Option("--head", help="Commit compared with --base."),
]
ConfigOption = Annotated[
    Path | None,
    typer.Option("--config", help="Configuration file (cigate.toml or pyproject.toml)."),
]
OutputOption = Annotated[
    Path | None,
    typer.Option("--output", help="Write output to PATH (use '-' for stdout)."),
]


def select_cmd(
    paths: Annotated[
        list[str] | None,
        typer.Argument(help="Changed paths, relative to the repository root."),
    ] = None,
    changes_file: ChangesFileOption = None,
    base: BaseOption = None,
    head: HeadOption = "HEAD",
    config: ConfigOption = None,
    format_: Annotated[
        OutputFormat,
        typer.Option("--format", help="Output format.", case_sensitive=False),
    ] = OutputFormat.PLAIN,
    output: OutputOption = None,
) -> None:
    """Print the services affected by a change set ('all' when everything must be built)."""
    with exit_on_error():
        settings = load_cli_settings(config)
        changes = collect_changes(paths, changes_file=changes_file, base=base, head=head)

    selection = select_services(
        changes,
        settings.services,
        build_manifests=settings.build_manifests,
        pipeline_definitions=settings.pipeline_definitions,
    )

    fmt, use_color = resolve_output(format_, output, color=False, no_color=False)
    if fmt is OutputFormat.JSON:
        text = format_json(selection=selection)
    elif fmt is OutputFormat.HUMAN:
        text = render_selection_human(selection, color=use_color)
    else:
        text = render_selection_plain(selection)
    write_output(text, output)
    raise typer.Exit(code=EXIT_OK)


def register(app: typer.Typer) -> None:
    app.command("select")(select_cmd)


__all__ = ["BaseOption", "ChangesFileOption", "ConfigOption", "HeadOption", "OutputOption", "register"]
