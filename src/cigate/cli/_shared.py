from __future__ import annotations

import logging
import sys
from contextlib import contextmanager
from dataclasses import replace
from pathlib import Path
from typing import TYPE_CHECKING

import click.utils as click_utils
import typer

from cigate._meta import logger
from cigate.cli.exit_codes import (
    EXIT_CONFIG,
    EXIT_DATAERR,
    EXIT_GENERIC,
    EXIT_NOINPUT,
    EXIT_OK,
    EXIT_SOFTWARE,
    EXIT_UNSTABLE,
)
from cigate.core.config import LOG_FORMAT, load_settings
from cigate.core.types import OutputFormat, RunStatus
from cigate.errors import (
    ChangeListingError,
    ConfigError,
    InfrastructureError,
    InvalidCoverageReportError,
)
from cigate.inputs.changes import list_changed_files, parse_change_set

if TYPE_CHECKING:
    from collections.abc import Iterator, Sequence

    from cigate.core.config import Settings
    from cigate.core.pipeline import PipelineResult
    from cigate.core.types import ChangedPath


def configure_runtime(*, quiet: bool, verbose: bool) -> None:
    """Configure logging based on *quiet*/*verbose*."""
    level = logging.ERROR if quiet else (logging.DEBUG if verbose else logging.INFO)
    logging.basicConfig(level=level, format=LOG_FORMAT)
    logger.setLevel(level)
    if verbose:
        logger.debug("verbose logging enabled")


def resolve_use_color(*, color: bool, no_color: bool, color_allowed: bool) -> bool:
    # CLI flags take precedence over the IO policy default.
    if no_color:
        return False
    if color:
        return True
    return color_allowed


def _is_tty_stdout() -> bool:
    try:
        return bool(getattr(sys.stdout, "isatty", lambda: False)())
    except OSError:
        return False


def resolve_output(
    fmt: OutputFormat,
    output: Path | None,
    *,
    color: bool,
    no_color: bool,
) -> tuple[OutputFormat, bool]:
    """Return the concrete output format and whether to emit ANSI colour."""
    is_tty_like = _is_tty_stdout() and (output is None or output == Path("-"))
    if fmt is OutputFormat.AUTO:
        fmt = OutputFormat.HUMAN if is_tty_like else OutputFormat.PLAIN
    color_allowed = bool(is_tty_like and not click_utils.should_strip_ansi(sys.stdout))
    use_color = fmt is OutputFormat.HUMAN and resolve_use_color(
        color=color,
        no_color=no_color,
        color_allowed=color_allowed,
    )
    return fmt, use_color


@contextmanager
def exit_on_error() -> Iterator[None]:
    """Translate cigate errors into messages on stderr and sysexits-style codes."""
    try:
        yield
    except ConfigError as exc:
        typer.echo(f"ERROR: {exc}", err=True)
        raise typer.Exit(code=EXIT_CONFIG) from exc
    except InvalidCoverageReportError as exc:
        typer.echo(f"ERROR: {exc}", err=True)
        raise typer.Exit(code=EXIT_DATAERR) from exc
    except InfrastructureError as exc:
        typer.echo(f"ERROR: {exc}", err=True)
        raise typer.Exit(code=EXIT_SOFTWARE) from exc


def load_cli_settings(config: Path | None, *, threshold: int | None = None) -> Settings:
    settings = load_settings(config)
    if threshold is not None:
        settings = replace(settings, threshold=threshold)
    return settings


def collect_changes(
    paths: Sequence[str] | None,
    *,
    changes_file: Path | None,
    base: str | None,
    head: str,
) -> list[ChangedPath]:
    """Gather the change set from arguments, a change-set file, or git.

    Sources are tried in that order; with none given the change set is empty.
    """
    if paths:
        return [p for p in paths if p.strip()]
    if changes_file is not None:
        try:
            text = sys.stdin.read() if changes_file == Path("-") else changes_file.read_text(encoding="utf-8")
        except OSError as exc:
            msg = f"failed to read change set {changes_file}: {exc}"
            raise ChangeListingError(msg) from exc
        return parse_change_set(text)
    if base:
        return list_changed_files(base, head)
    logger.info("no change source given; treating change set as empty")
    return []


def exit_code_for(result: PipelineResult) -> int:
    if result.build_failed:
        return EXIT_GENERIC
    if result.missing_reports:
        return EXIT_NOINPUT
    if result.status is RunStatus.UNSTABLE:
        return EXIT_UNSTABLE
    return EXIT_OK
