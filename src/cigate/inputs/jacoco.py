"""Row-based (JaCoCo CSV) coverage summaries."""

from __future__ import annotations

import csv
import io

from cigate.core.coverage import RowBasedReport
from cigate.errors import InvalidCoverageReportError

MISSED_COLUMN = 3
COVERED_COLUMN = 4

_BRANCH_MISSED = "BRANCH_MISSED"
_BRANCH_COVERED = "BRANCH_COVERED"


def _count(row: list[str], index: int, *, line: int, source: str) -> int:
    try:
        value = int(row[index].strip())
    except (IndexError, ValueError) as exc:
        msg = f"{source}:{line}: expected an integer in column {index}, got {row!r}"
        raise InvalidCoverageReportError(msg) from exc
    if value < 0:
        msg = f"{source}:{line}: negative count in column {index}"
        raise InvalidCoverageReportError(msg)
    return value


def parse_jacoco_csv(text: str, *, source: str = "<csv>") -> RowBasedReport:
    """Sum missed/covered instruction counts over every data row of *text*.

    The first row is the header. Branch counts are summed as well when the
    header names the ``BRANCH_MISSED``/``BRANCH_COVERED`` columns.
    """
    rows = [row for row in csv.reader(io.StringIO(text)) if any(cell.strip() for cell in row)]
    if not rows:
        msg = f"{source}: empty coverage report"
        raise InvalidCoverageReportError(msg)

    header = [cell.strip().upper() for cell in rows[0]]
    branch_cols: tuple[int, int] | None = None
    if _BRANCH_MISSED in header and _BRANCH_COVERED in header:
        branch_cols = (header.index(_BRANCH_MISSED), header.index(_BRANCH_COVERED))

    missed = covered = 0
    branch_missed = branch_covered = 0
    for line, row in enumerate(rows[1:], start=2):
        missed += _count(row, MISSED_COLUMN, line=line, source=source)
        covered += _count(row, COVERED_COLUMN, line=line, source=source)
        if branch_cols is not None:
            branch_missed += _count(row, branch_cols[0], line=line, source=source)
            branch_covered += _count(row, branch_cols[1], line=line, source=source)

    if branch_cols is None:
        return RowBasedReport(missed=missed, covered=covered)
    return RowBasedReport(
        missed=missed,
        covered=covered,
        branch_missed=branch_missed,
        branch_covered=branch_covered,
    )


__all__ = ["COVERED_COLUMN", "MISSED_COLUMN", "parse_jacoco_csv"]
