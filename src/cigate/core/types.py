"""Shared type aliases and enumerations used across cigate."""

from __future__ import annotations

from enum import StrEnum
from typing import TypeAlias

# ---------------------------------------------------------------------------
# Common type aliases
# ---------------------------------------------------------------------------

ServiceName: TypeAlias = str
"""Short name identifying one deployable service, e.g. ``"vets-service"``."""

ChangedPath: TypeAlias = str
"""Repository-relative path as reported by the version-control diff."""


# ---------------------------------------------------------------------------
# Enumerations
# ---------------------------------------------------------------------------


class SelectionReason(StrEnum):
    """Why a :class:`~cigate.core.mapper.ServiceSelection` has its contents."""

    MATCHED = "matched"
    BUILD_WIDE_CHANGE = "build-wide-change"
    NO_CHANGES = "no-changes"
    NO_MATCH = "no-match"


class VerdictStatus(StrEnum):
    """Result of comparing a coverage percentage with the threshold."""

    PASS = "pass"
    BELOW_THRESHOLD = "below-threshold"


class BuildStatus(StrEnum):
    """Exit signal of an external build/test invocation."""

    PASSED = "passed"
    UNSTABLE = "unstable"
    FAILED = "failed"


class RunStatus(StrEnum):
    """Overall pipeline status, ordered from best to worst."""

    SUCCESS = "success"
    UNSTABLE = "unstable"
    FAILURE = "failure"

    @property
    def severity(self) -> int:
        return list(RunStatus).index(self)

    def worsen(self, other: RunStatus) -> RunStatus:
        """Return whichever of ``self`` and *other* is worse."""
        return other if other.severity > self.severity else self


class ReportFormat(StrEnum):
    """Supported coverage report artifact formats."""

    JACOCO_CSV = "jacoco-csv"
    COBERTURA_XML = "cobertura-xml"


class OutputFormat(StrEnum):
    """Supported output formats."""

    AUTO = "auto"
    PLAIN = "plain"
    HUMAN = "human"
    JSON = "json"


__all__ = [
    "BuildStatus",
    "ChangedPath",
    "OutputFormat",
    "ReportFormat",
    "RunStatus",
    "SelectionReason",
    "ServiceName",
    "VerdictStatus",
]
