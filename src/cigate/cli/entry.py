from __future__ import annotations

from typing import Annotated

import typer
from typer.main import get_command

from cigate import __version__
from cigate.cli import gate, run, select
from cigate.cli._shared import configure_runtime


def _version_callback(value: bool) -> None:
    if value:
        typer.echo(f"cigate {__version__}")
        raise typer.Exit


def create_app() -> typer.Typer:
    app = typer.Typer(help="Select affected services and gate their test coverage in CI.")

    @app.callback()
    def _root(
        *,
        version: Annotated[  # noqa: ARG001
            bool,
            typer.Option(
                "--version",
                help="Show version and exit",
                callback=_version_callback,
                is_eager=True,
            ),
        ] = False,
        quiet: Annotated[
            bool,
            typer.Option("-q", "--quiet", help="Suppress INFO logs, emit only errors"),
        ] = False,
        verbose: Annotated[
            bool,
            typer.Option("-v", "--verbose", help="Emit diagnostic logging"),
        ] = False,
    ) -> None:
        configure_runtime(quiet=quiet, verbose=verbose)

    select.register(app)
    gate.register(app)
    run.register(app)

    return app


def main() -> None:
    app = create_app()
    get_command(app)()


# Click-compatible object for tooling that imports it
cli = get_command(create_app())

__all__ = ["cli", "create_app", "main"]
