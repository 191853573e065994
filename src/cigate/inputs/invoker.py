"""Run the external build/test command of a service."""

from __future__ import annotations

import shlex
import subprocess
from dataclasses import dataclass, field
from pathlib import Path
from typing import TYPE_CHECKING

from cigate._meta import logger
from cigate.core.config import DEFAULT_BUILD_COMMAND
from cigate.core.types import BuildStatus
from cigate.errors import BuildInvocationError, ConfigError

if TYPE_CHECKING:
    from cigate.core.types import ServiceName


@dataclass(frozen=True, slots=True)
class BuildResult:
    """Exit signal of one service's build/test step."""

    service: ServiceName
    status: BuildStatus
    returncode: int


@dataclass(frozen=True, slots=True)
class CommandInvoker:
    """Run ``template`` for a service and map its exit code to a :class:`BuildStatus`.

    The command is split with :func:`shlex.split` and run without a shell.
    """

    template: str = DEFAULT_BUILD_COMMAND
    cwd: Path = field(default_factory=Path.cwd)
    unstable_returncodes: frozenset[int] = field(default_factory=frozenset)

    def command_for(self, service: ServiceName, directory: str) -> list[str]:
        try:
            rendered = self.template.format(service=service, directory=directory)
        except (KeyError, IndexError) as exc:
            msg = f"invalid build command {self.template!r}: unknown placeholder {exc}"
            raise ConfigError(msg) from exc
        except (ValueError, AttributeError) as exc:
            msg = f"invalid build command {self.template!r}: {exc}"
            raise ConfigError(msg) from exc
        try:
            argv = shlex.split(rendered)
        except ValueError as exc:
            msg = f"invalid build command {rendered!r}: {exc}"
            raise ConfigError(msg) from exc
        if not argv:
            msg = "build command is empty"
            raise ConfigError(msg)
        return argv

    def __call__(self, service: ServiceName, directory: str) -> BuildResult:
        argv = self.command_for(service, directory)
        logger.info("building %s: %s", service, shlex.join(argv))
        try:
            proc = subprocess.run(argv, cwd=self.cwd, check=False)  # noqa: S603
        except OSError as exc:
            msg = f"failed to launch build for {service}: {exc}"
            raise BuildInvocationError(msg) from exc

        if proc.returncode == 0:
            status = BuildStatus.PASSED
        elif proc.returncode in self.unstable_returncodes:
            status = BuildStatus.UNSTABLE
        else:
            status = BuildStatus.FAILED
        return BuildResult(service=service, status=status, returncode=proc.returncode)


__all__ = ["BuildResult", "CommandInvoker"]
