from __future__ import annotations

import json
import sys
from collections.abc import Callable
from pathlib import Path

import pytest
from _pytest.monkeypatch import MonkeyPatch
from click.testing import CliRunner

from cigate import __version__
from cigate.cli import (
    EXIT_CONFIG,
    EXIT_DATAERR,
    EXIT_GENERIC,
    EXIT_NOINPUT,
    EXIT_OK,
    EXIT_SOFTWARE,
    EXIT_UNSTABLE,
    cli,
)
from cigate.cli import _shared
from cigate.core.config import THRESHOLD_ENV_VAR
from cigate.errors import ChangeListingError

# --------------------------------------------------------------------------- #
# helpers                                                                     #
# --------------------------------------------------------------------------- #


@pytest.fixture(autouse=True)
def _isolated(tmp_path: Path, monkeypatch: MonkeyPatch) -> None:
    monkeypatch.chdir(tmp_path)
    monkeypatch.delenv(THRESHOLD_ENV_VAR, raising=False)


def _run(runner: CliRunner, args: list[str], **kwargs: object) -> tuple[int, str]:
    """Invoke the CLI and return *(exit_code, output)* for convenience."""
    result = runner.invoke(cli, args, **kwargs)
    return result.exit_code, result.output


def _write_service_report(tmp_path: Path, directory: str, missed: int, covered: int) -> Path:
    path = tmp_path / directory / "target" / "site" / "jacoco" / "jacoco.csv"
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(
        f"GROUP,PACKAGE,CLASS,INSTRUCTION_MISSED,INSTRUCTION_COVERED\ng,p,C,{missed},{covered}\n",
        encoding="utf-8",
    )
    return path


# --------------------------------------------------------------------------- #
# root                                                                        #
# --------------------------------------------------------------------------- #


def test_cli_version_flag(cli_runner: CliRunner) -> None:
    code, out = _run(cli_runner, ["--version"])
    assert code == EXIT_OK
    assert out.strip() == f"cigate {__version__}"


def test_cli_help_lists_commands(cli_runner: CliRunner) -> None:
    code, out = _run(cli_runner, ["--help"])
    assert code == EXIT_OK
    for command in ("select", "gate", "run"):
        assert command in out


# --------------------------------------------------------------------------- #
# select                                                                      #
# --------------------------------------------------------------------------- #


@pytest.mark.parametrize(
    ("paths", "expected"),
    [
        (["spring-petclinic-vets-service/src/Foo.java"], "vets-service"),
        (["pom.xml", "spring-petclinic-vets-service/src/Foo.java"], "all"),
        ([], "all"),
        (
            ["spring-petclinic-visits-service/a.java", "spring-petclinic-api-gateway/b.java"],
            "api-gateway\nvisits-service",
        ),
    ],
)
def test_select_plain(cli_runner: CliRunner, paths: list[str], expected: str) -> None:
    code, out = _run(cli_runner, ["-q", "select", *paths])
    assert code == EXIT_OK
    assert out.strip() == expected


def test_select_reads_change_set_file_as_json(cli_runner: CliRunner, tmp_path: Path) -> None:
    changes = tmp_path / "changes.json"
    changes.write_text(json.dumps([{"filename": "spring-petclinic-vets-service/pom.xml"}]), encoding="utf-8")
    code, out = _run(cli_runner, ["select", "--changes-file", str(changes), "--format", "json"])
    assert code == EXIT_OK
    payload = json.loads(out)
    assert payload["selection"]["all"] is True
    assert payload["selection"]["reason"] == "build-wide-change"
    assert payload["selection"]["trigger"] == "spring-petclinic-vets-service/pom.xml"


def test_select_reads_change_set_from_stdin(cli_runner: CliRunner) -> None:
    code, out = _run(
        cli_runner,
        ["select", "--changes-file", "-"],
        input="spring-petclinic-customers-service/src/Owner.java\n",
    )
    assert code == EXIT_OK
    assert out.strip() == "customers-service"


def test_select_uses_git_diff(cli_runner: CliRunner, monkeypatch: MonkeyPatch) -> None:
    seen: list[tuple[str, str]] = []

    def fake_diff(base: str, head: str) -> list[str]:
        seen.append((base, head))
        return ["spring-petclinic-config-server/src/main/resources/bootstrap.yml"]

    monkeypatch.setattr(_shared, "list_changed_files", fake_diff)
    code, out = _run(cli_runner, ["select", "--base", "origin/main", "--head", "abc123"])
    assert code == EXIT_OK
    assert out.strip() == "config-server"
    assert seen == [("origin/main", "abc123")]


def test_select_git_failure_is_infrastructure_error(cli_runner: CliRunner, monkeypatch: MonkeyPatch) -> None:
    def broken(base: str, head: str) -> list[str]:
        msg = "git diff failed: fatal: bad revision"
        raise ChangeListingError(msg)

    monkeypatch.setattr(_shared, "list_changed_files", broken)
    code, out = _run(cli_runner, ["select", "--base", "nope"])
    assert code == EXIT_SOFTWARE
    assert "bad revision" in out


def test_select_respects_config_file(cli_runner: CliRunner, tmp_path: Path) -> None:
    (tmp_path / "cigate.toml").write_text('[services]\n"services/billing/" = "billing"\n', encoding="utf-8")
    code, out = _run(cli_runner, ["select", "services/billing/app.py"])
    assert code == EXIT_OK
    assert out.strip() == "billing"


def test_select_writes_output_file(cli_runner: CliRunner, tmp_path: Path) -> None:
    target = tmp_path / "out" / "services.txt"
    code, _ = _run(cli_runner, ["select", "--output", str(target), "spring-petclinic-vets-service/x"])
    assert code == EXIT_OK
    assert target.read_text(encoding="utf-8").strip() == "vets-service"


# --------------------------------------------------------------------------- #
# gate                                                                        #
# --------------------------------------------------------------------------- #


def test_gate_passes_above_threshold(cli_runner: CliRunner, tmp_path: Path) -> None:
    report = _write_service_report(tmp_path, "spring-petclinic-vets-service", 10, 140)
    code, out = _run(cli_runner, ["gate", "--report", f"vets-service={report}", "--format", "plain"])
    assert code == EXIT_OK
    assert out.splitlines() == ["vets-service\tsuccess\t93.33", "status\tsuccess"]


def test_gate_below_threshold_is_unstable(cli_runner: CliRunner, tmp_path: Path) -> None:
    _write_service_report(tmp_path, "spring-petclinic-vets-service", 35, 65)
    code, out = _run(cli_runner, ["gate", "vets-service", "--format", "json"])
    assert code == EXIT_UNSTABLE
    payload = json.loads(out)
    (outcome,) = payload["result"]["services"]
    assert outcome["verdict"]["percent"] == 65.0
    assert outcome["verdict"]["status"] == "below-threshold"
    assert payload["result"]["status"] == "unstable"


def test_gate_threshold_option_and_environment(
    cli_runner: CliRunner,
    tmp_path: Path,
    monkeypatch: MonkeyPatch,
) -> None:
    _write_service_report(tmp_path, "spring-petclinic-vets-service", 35, 65)
    code, _ = _run(cli_runner, ["gate", "vets-service", "--threshold", "60", "--format", "plain"])
    assert code == EXIT_OK

    monkeypatch.setenv(THRESHOLD_ENV_VAR, "60")
    code, _ = _run(cli_runner, ["gate", "vets-service", "--format", "plain"])
    assert code == EXIT_OK


def test_gate_missing_report_is_reported(cli_runner: CliRunner, tmp_path: Path) -> None:
    _write_service_report(tmp_path, "spring-petclinic-vets-service", 0, 10)
    code, out = _run(cli_runner, ["gate", "vets-service", "visits-service", "--format", "plain"])
    assert code == EXIT_NOINPUT
    assert "vets-service\tsuccess\t100.00" in out
    assert "visits-service\tfailure\tmissing-report" in out


def test_gate_malformed_report_is_data_error(cli_runner: CliRunner, tmp_path: Path) -> None:
    bad = tmp_path / "coverage.xml"
    bad.write_text("<coverage", encoding="utf-8")
    code, out = _run(cli_runner, ["gate", "--report", f"api-gateway={bad}"])
    assert code == EXIT_DATAERR
    assert "failed to parse" in out


def test_gate_human_output(cli_runner: CliRunner, cobertura_xml_file: Callable[..., Path]) -> None:
    report = cobertura_xml_file(0.8, 0.5)
    code, out = _run(cli_runner, ["gate", "--report", f"api-gateway={report}", "--format", "human", "--no-color"])
    assert code == EXIT_OK
    assert "api-gateway" in out
    assert "80.00%" in out
    assert "\x1b[" not in out


def test_gate_rejects_bad_report_option(cli_runner: CliRunner) -> None:
    code, out = _run(cli_runner, ["gate", "--report", "no-separator"])
    assert code == 2
    assert "SERVICE=PATH" in out


def test_gate_invalid_config_exit_code(cli_runner: CliRunner, tmp_path: Path) -> None:
    cfg = tmp_path / "broken.toml"
    cfg.write_text("threshold = 'lots'\n", encoding="utf-8")
    code, out = _run(cli_runner, ["gate", "--config", str(cfg)])
    assert code == EXIT_CONFIG
    assert "invalid threshold" in out


def test_gate_malformed_report_template_is_config_error(cli_runner: CliRunner) -> None:
    code, out = _run(cli_runner, ["gate", "vets-service", "--report-template", "x}{directory}.csv"])
    assert code == EXIT_CONFIG
    assert "invalid report template" in out


# --------------------------------------------------------------------------- #
# run                                                                         #
# --------------------------------------------------------------------------- #


def _build_command(code: int) -> str:
    return f'"{sys.executable}" -c "raise SystemExit({code})" {{service}}'


def test_run_builds_and_gates_selected_services(cli_runner: CliRunner, tmp_path: Path) -> None:
    _write_service_report(tmp_path, "spring-petclinic-vets-service", 5, 95)
    code, out = _run(
        cli_runner,
        [
            "run",
            "spring-petclinic-vets-service/src/Vet.java",
            "--build-command",
            _build_command(0),
            "--root",
            str(tmp_path),
            "--format",
            "json",
        ],
    )
    assert code == EXIT_OK
    payload = json.loads(out)
    assert payload["selection"]["services"] == ["vets-service"]
    (outcome,) = payload["result"]["services"]
    assert outcome["build"] == {"status": "passed", "returncode": 0}
    assert outcome["verdict"]["percent"] == 95.0


def test_run_failed_build_stops_pipeline(cli_runner: CliRunner, tmp_path: Path) -> None:
    code, out = _run(
        cli_runner,
        ["run", "pom.xml", "--build-command", _build_command(1), "--root", str(tmp_path), "--format", "plain"],
    )
    assert code == EXIT_GENERIC
    lines = out.splitlines()
    assert lines[0] == "api-gateway\tfailure\t-"
    assert "visits-service\tskipped\t-" in lines
    assert lines[-1] == "status\tfailure"


def test_run_malformed_build_command_is_config_error(cli_runner: CliRunner, tmp_path: Path) -> None:
    code, out = _run(
        cli_runner,
        ["run", "pom.xml", "--build-command", "sh -c 'echo }'", "--root", str(tmp_path), "--format", "plain"],
    )
    assert code == EXIT_CONFIG
    assert "invalid build command" in out
