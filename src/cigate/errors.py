"""Centralised exception hierarchy for cigate."""

from __future__ import annotations


class CigateError(Exception):
    """Base class for all custom cigate exceptions."""


class ConfigError(CigateError):
    """Configuration file or environment override is invalid."""


class CoverageReportError(CigateError):
    """Base class for errors related to coverage report handling."""


class CoverageReportNotFoundError(CoverageReportError):
    """Coverage report for a service could not be located on disk."""

    def __init__(self, path: object) -> None:
        super().__init__(f"coverage report not found: {path}")
        self.path = path


class InvalidCoverageReportError(CoverageReportError):
    """Coverage report was found but does not contain a valid summary."""


class UnsupportedReportFormatError(InvalidCoverageReportError):
    """Coverage report format could not be determined."""


class InfrastructureError(CigateError):
    """An external collaborator (git, build tool, filesystem) failed."""


class ChangeListingError(InfrastructureError):
    """The changed-file list could not be produced."""


class BuildInvocationError(InfrastructureError):
    """The build/test command for a service could not be launched."""


class ReportReadError(InfrastructureError):
    """A coverage report exists but could not be read."""


__all__ = [
    "BuildInvocationError",
    "ChangeListingError",
    "CigateError",
    "ConfigError",
    "CoverageReportError",
    "CoverageReportNotFoundError",
    "InfrastructureError",
    "InvalidCoverageReportError",
    "ReportReadError",
    "UnsupportedReportFormatError",
]
