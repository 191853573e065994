"""Locate, read, and parse per-service coverage reports."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import TYPE_CHECKING

from cigate._meta import logger
from cigate.core.config import DEFAULT_REPORT_TEMPLATE
from cigate.core.types import ReportFormat
from cigate.errors import (
    ConfigError,
    CoverageReportNotFoundError,
    ReportReadError,
    UnsupportedReportFormatError,
)
from cigate.inputs.cobertura import parse_cobertura_xml
from cigate.inputs.jacoco import parse_jacoco_csv

if TYPE_CHECKING:
    from cigate.core.coverage import ParsedCoverageReport
    from cigate.core.services import ServiceDirectoryTable
    from cigate.core.types import ServiceName

_SUFFIXES: dict[str, ReportFormat] = {
    ".csv": ReportFormat.JACOCO_CSV,
    ".xml": ReportFormat.COBERTURA_XML,
}


def detect_format(path: Path) -> ReportFormat:
    try:
        return _SUFFIXES[path.suffix.lower()]
    except KeyError as exc:
        msg = f"cannot determine coverage report format of {path}"
        raise UnsupportedReportFormatError(msg) from exc


def parse_report(text: str, fmt: ReportFormat, *, source: str) -> ParsedCoverageReport:
    if fmt is ReportFormat.JACOCO_CSV:
        return parse_jacoco_csv(text, source=source)
    return parse_cobertura_xml(text, source=source)


def read_report(path: Path, fmt: ReportFormat | None = None) -> ParsedCoverageReport:
    """Read and parse the coverage report at *path*.

    Raises
    ------
    CoverageReportNotFoundError
        No file exists at *path*.
    ReportReadError
        The file exists but could not be read.
    InvalidCoverageReportError
        The file content is not a valid report of the expected format.
    """
    if not path.is_file():
        raise CoverageReportNotFoundError(path)
    resolved_fmt = fmt or detect_format(path)
    try:
        text = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        msg = f"failed to read coverage report {path}: {exc}"
        raise ReportReadError(msg) from exc
    logger.debug("parsing %s as %s", path, resolved_fmt.value)
    return parse_report(text, resolved_fmt, source=str(path))


@dataclass(frozen=True, slots=True)
class ReportLocator:
    """Resolve the expected coverage report path of a service.

    ``template`` is relative to ``root`` and may use the ``{service}`` and
    ``{directory}`` placeholders.
    """

    table: ServiceDirectoryTable
    root: Path = field(default_factory=Path.cwd)
    template: str = DEFAULT_REPORT_TEMPLATE
    overrides: dict[str, Path] = field(default_factory=dict)

    def __call__(self, service: ServiceName) -> Path:
        if service in self.overrides:
            return self.overrides[service]
        directory = self.table.directory_for(service) if service in self.table else service
        try:
            relative = self.template.format(service=service, directory=directory)
        except (KeyError, IndexError) as exc:
            msg = f"invalid report template {self.template!r}: unknown placeholder {exc}"
            raise ConfigError(msg) from exc
        except (ValueError, AttributeError) as exc:
            msg = f"invalid report template {self.template!r}: {exc}"
            raise ConfigError(msg) from exc
        return self.root / relative


__all__ = ["ReportLocator", "detect_format", "parse_report", "read_report"]
