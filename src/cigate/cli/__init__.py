from cigate.cli.entry import cli, create_app, main
from cigate.cli.exit_codes import (
    EXIT_CONFIG,
    EXIT_DATAERR,
    EXIT_GENERIC,
    EXIT_NOINPUT,
    EXIT_OK,
    EXIT_SOFTWARE,
    EXIT_UNSTABLE,
)

__all__ = [
    "EXIT_CONFIG",
    "EXIT_DATAERR",
    "EXIT_GENERIC",
    "EXIT_NOINPUT",
    "EXIT_OK",
    "EXIT_SOFTWARE",
    "EXIT_UNSTABLE",
    "cli",
    "create_app",
    "main",
]
