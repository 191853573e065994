from __future__ import annotations

from collections.abc import Callable, Iterable
from pathlib import Path

import pytest
from click.testing import CliRunner

JACOCO_HEADER = (
    "GROUP,PACKAGE,CLASS,INSTRUCTION_MISSED,INSTRUCTION_COVERED,"
    "BRANCH_MISSED,BRANCH_COVERED,LINE_MISSED,LINE_COVERED"
)

Row = tuple[int, int] | tuple[int, int, int, int]


@pytest.fixture
def cli_runner() -> CliRunner:
    """Return a Click CLI runner for invoking the command-line interface."""
    return CliRunner()


@pytest.fixture
def jacoco_csv_content() -> Callable[..., str]:
    def build(rows: Iterable[Row], *, header: str = JACOCO_HEADER) -> str:
        lines = [header]
        for idx, row in enumerate(rows):
            missed, covered, *branches = row
            br_missed, br_covered = branches or (0, 0)
            lines.append(f"svc,org.example,Class{idx},{missed},{covered},{br_missed},{br_covered},0,0")
        return "\n".join(lines) + "\n"

    return build


@pytest.fixture
def jacoco_csv_file(tmp_path: Path, jacoco_csv_content: Callable[..., str]) -> Callable[..., Path]:
    def write(rows: Iterable[Row], *, relative: str = "jacoco.csv") -> Path:
        path = tmp_path / relative
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(jacoco_csv_content(rows), encoding="utf-8")
        return path

    return write


@pytest.fixture
def cobertura_xml_file(tmp_path: Path) -> Callable[..., Path]:
    def write(line_rate: float, branch_rate: float | None = None, *, relative: str = "coverage.xml") -> Path:
        attrs = f'line-rate="{line_rate}"'
        if branch_rate is not None:
            attrs += f' branch-rate="{branch_rate}"'
        path = tmp_path / relative
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(f"<coverage><metrics {attrs}/></coverage>\n", encoding="utf-8")
        return path

    return write
