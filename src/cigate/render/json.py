from __future__ import annotations

import json
from functools import cache
from importlib import resources
from typing import TYPE_CHECKING

from jsonschema import validate

from cigate._meta import __version__

if TYPE_CHECKING:
    from cigate.core.mapper import ServiceSelection
    from cigate.core.pipeline import PipelineResult, ServiceOutcome

# -----------------------------------------------------------------------------
# JSON schema loading
# -----------------------------------------------------------------------------

_SCHEMA_FILES: dict[str, str] = {
    "v1": "schema.json",
}


@cache
def get_schema(version: str = "v1") -> dict[str, object]:
    """Load and cache the JSON schema for structured output."""
    try:
        filename = _SCHEMA_FILES[version]
    except KeyError as exc:
        choices = ", ".join(sorted(_SCHEMA_FILES))
        msg = f"Unsupported schema version: {version!r}. Available versions: {choices}"
        raise ValueError(msg) from exc

    text = resources.files("cigate.data").joinpath(filename).read_text(encoding="utf-8")
    return json.loads(text)


# -----------------------------------------------------------------------------
# Payload projection
# -----------------------------------------------------------------------------


def selection_payload(selection: ServiceSelection) -> dict[str, object]:
    out: dict[str, object] = {
        "all": selection.build_all,
        "reason": selection.reason.value,
        "services": sorted(selection.names()),
    }
    if selection.trigger is not None:
        out["trigger"] = selection.trigger
    return out


def _outcome_payload(outcome: ServiceOutcome) -> dict[str, object]:
    out: dict[str, object] = {
        "service": outcome.service,
        "status": outcome.status.value,
        "report_missing": outcome.report_missing,
    }
    if outcome.build is not None:
        out["build"] = {"status": outcome.build.status.value, "returncode": outcome.build.returncode}
    if outcome.verdict is not None:
        verdict: dict[str, object] = {
            "percent": outcome.verdict.percent,
            "threshold": outcome.verdict.threshold,
            "status": outcome.verdict.status.value,
        }
        if outcome.verdict.branch_percent is not None:
            verdict["branch_percent"] = outcome.verdict.branch_percent
        out["verdict"] = verdict
    if outcome.report_path is not None:
        out["report"] = outcome.report_path.as_posix()
    return out


def result_payload(result: PipelineResult) -> dict[str, object]:
    return {
        "status": result.status.value,
        "services": [_outcome_payload(o) for o in result.outcomes],
        "skipped": list(result.skipped),
    }


def format_json(
    *,
    selection: ServiceSelection | None = None,
    result: PipelineResult | None = None,
    schema_version: str = "v1",
) -> str:
    """Render a selection and/or pipeline result as validated JSON."""
    schema = get_schema(schema_version)
    payload: dict[str, object] = {
        "schema": str(schema["$id"]),
        "schema_version": 1,
        "tool": {"name": "cigate", "version": __version__},
    }
    if selection is not None:
        payload["selection"] = selection_payload(selection)
    if result is not None:
        payload["result"] = result_payload(result)

    validate(payload, schema)
    return json.dumps(payload, indent=2, sort_keys=True)


__all__ = ["format_json", "get_schema", "result_payload", "selection_payload"]
