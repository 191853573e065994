"""Coverage summaries and threshold evaluation."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TypeAlias

from cigate.core.types import VerdictStatus

_FULL_PERCENT = 100
_PRECISION = 2


@dataclass(frozen=True, slots=True)
class RowBasedReport:
    """Instruction counts summed over the rows of a tabular report."""

    missed: int
    covered: int
    branch_missed: int | None = None
    branch_covered: int | None = None

    @property
    def total(self) -> int:
        return self.missed + self.covered


@dataclass(frozen=True, slots=True)
class RateBasedReport:
    """Precomputed line/branch rates (``0.0`` to ``1.0``) of a metrics report."""

    line_rate: float
    branch_rate: float | None = None


ParsedCoverageReport: TypeAlias = RowBasedReport | RateBasedReport


@dataclass(frozen=True, slots=True)
class CoverageVerdict:
    """Outcome of comparing one service's coverage with the threshold."""

    percent: float
    threshold: int
    status: VerdictStatus
    branch_percent: float | None = None

    @property
    def passed(self) -> bool:
        return self.status is VerdictStatus.PASS


def percentage(covered: int, total: int) -> float:
    """Return ``covered / total`` as a percentage, ``0.0`` when nothing was counted."""
    if total == 0:
        return 0.0
    return round(covered * _FULL_PERCENT / total, _PRECISION)


def rate_percentage(rate: float) -> float:
    return round(rate * _FULL_PERCENT, _PRECISION)


def validate_threshold(threshold_percent: int) -> int:
    if isinstance(threshold_percent, bool) or not isinstance(threshold_percent, int):
        msg = f"threshold must be an integer percentage: {threshold_percent!r}"
        raise ValueError(msg)
    if threshold_percent < 0 or threshold_percent > _FULL_PERCENT:
        msg = f"threshold out of range: {threshold_percent}"
        raise ValueError(msg)
    return threshold_percent


def evaluate_coverage(report: ParsedCoverageReport, threshold_percent: int) -> CoverageVerdict:
    """Evaluate *report* against *threshold_percent*.

    Only the line/instruction percentage is gated; the branch percentage is
    reported alongside when the report carries it.
    """
    validate_threshold(threshold_percent)

    branch_pct: float | None = None
    if isinstance(report, RowBasedReport):
        pct = percentage(report.covered, report.total)
        if report.branch_missed is not None and report.branch_covered is not None:
            branch_pct = percentage(report.branch_covered, report.branch_missed + report.branch_covered)
    elif isinstance(report, RateBasedReport):
        pct = rate_percentage(report.line_rate)
        if report.branch_rate is not None:
            branch_pct = rate_percentage(report.branch_rate)
    else:
        msg = f"unsupported coverage report: {type(report).__name__}"
        raise TypeError(msg)

    status = VerdictStatus.BELOW_THRESHOLD if pct < threshold_percent else VerdictStatus.PASS
    return CoverageVerdict(percent=pct, threshold=threshold_percent, status=status, branch_percent=branch_pct)


__all__ = [
    "CoverageVerdict",
    "ParsedCoverageReport",
    "RateBasedReport",
    "RowBasedReport",
    "evaluate_coverage",
    "percentage",
    "rate_percentage",
    "validate_threshold",
]
