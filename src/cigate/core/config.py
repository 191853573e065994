"""Central configuration and constants for ``cigate``."""

from __future__ import annotations

import os
import tomllib
from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import TYPE_CHECKING, Any

from cigate._meta import logger
from cigate.core.coverage import validate_threshold
from cigate.core.mapper import DEFAULT_BUILD_MANIFESTS, DEFAULT_PIPELINE_DEFINITIONS
from cigate.core.services import DEFAULT_SERVICE_TABLE, ServiceDirectoryTable
from cigate.errors import ConfigError

if TYPE_CHECKING:
    from collections.abc import Mapping

# Default logging format used by the CLI entry point.
LOG_FORMAT = "%(levelname)s: %(message)s"

DEFAULT_THRESHOLD = 70
THRESHOLD_ENV_VAR = "CIGATE_COVERAGE_THRESHOLD"

DEFAULT_REPORT_TEMPLATE = "{directory}/target/site/jacoco/jacoco.csv"
DEFAULT_BUILD_COMMAND = "./mvnw -B -pl {directory} -am verify"

CONFIG_FILENAME = "cigate.toml"


@dataclass(frozen=True, slots=True)
class Settings:
    """Process-wide settings, read once at start-up."""

    services: ServiceDirectoryTable = DEFAULT_SERVICE_TABLE
    threshold: int = DEFAULT_THRESHOLD
    build_manifests: tuple[str, ...] = DEFAULT_BUILD_MANIFESTS
    pipeline_definitions: tuple[str, ...] = DEFAULT_PIPELINE_DEFINITIONS
    report_template: str = DEFAULT_REPORT_TEMPLATE
    build_command: str = DEFAULT_BUILD_COMMAND
    unstable_returncodes: frozenset[int] = field(default_factory=frozenset)


def _read_toml(path: Path) -> dict[str, Any]:
    with path.open("rb") as f:
        return tomllib.load(f)


def _section(data: Mapping[str, Any], path: Path) -> Mapping[str, Any]:
    if path.name == "pyproject.toml":
        return data.get("tool", {}).get("cigate", {})
    return data


def _str_tuple(value: object, key: str) -> tuple[str, ...]:
    if not isinstance(value, list) or not all(isinstance(v, str) and v for v in value):
        msg = f"{key} must be a list of non-empty strings"
        raise ConfigError(msg)
    return tuple(value)


def _settings_from_section(section: Mapping[str, Any], base: Settings) -> Settings:
    unknown = set(section) - {
        "services",
        "threshold",
        "build-manifests",
        "pipeline-definitions",
        "report-template",
        "build-command",
        "unstable-returncodes",
    }
    if unknown:
        msg = f"unknown configuration keys: {', '.join(sorted(unknown))}"
        raise ConfigError(msg)

    settings = base
    if "services" in section:
        services = section["services"]
        if not isinstance(services, dict) or not all(isinstance(v, str) for v in services.values()):
            msg = "services must be a table of prefix = service-name"
            raise ConfigError(msg)
        try:
            settings = replace(settings, services=ServiceDirectoryTable.from_mapping(services))
        except ValueError as exc:
            raise ConfigError(str(exc)) from exc
    if "threshold" in section:
        settings = replace(settings, threshold=_threshold(section["threshold"], "threshold"))
    if "build-manifests" in section:
        settings = replace(settings, build_manifests=_str_tuple(section["build-manifests"], "build-manifests"))
    if "pipeline-definitions" in section:
        definitions = _str_tuple(section["pipeline-definitions"], "pipeline-definitions")
        settings = replace(settings, pipeline_definitions=definitions)
    for key, attr in (("report-template", "report_template"), ("build-command", "build_command")):
        if key in section:
            value = section[key]
            if not isinstance(value, str) or not value.strip():
                msg = f"{key} must be a non-empty string"
                raise ConfigError(msg)
            settings = replace(settings, **{attr: value})
    if "unstable-returncodes" in section:
        codes = section["unstable-returncodes"]
        if not isinstance(codes, list) or not all(isinstance(c, int) and not isinstance(c, bool) for c in codes):
            msg = "unstable-returncodes must be a list of integers"
            raise ConfigError(msg)
        settings = replace(settings, unstable_returncodes=frozenset(codes))
    return settings


def _threshold(value: object, source: str) -> int:
    if isinstance(value, str):
        try:
            value = int(value.strip().rstrip("%"))
        except ValueError as exc:
            msg = f"invalid threshold in {source}: {value!r}"
            raise ConfigError(msg) from exc
    try:
        return validate_threshold(value)  # type: ignore[arg-type]
    except ValueError as exc:
        msg = f"invalid threshold in {source}: {exc}"
        raise ConfigError(msg) from exc


def discover_config_file(cwd: Path | None = None) -> Path | None:
    """Return the first configuration file found in *cwd*."""
    root = cwd or Path.cwd()
    local = root / CONFIG_FILENAME
    if local.is_file():
        return local
    pyproject = root / "pyproject.toml"
    if pyproject.is_file():
        try:
            data = _read_toml(pyproject)
        except (OSError, tomllib.TOMLDecodeError) as e:
            logger.warning("Failed to parse %s: %s", pyproject, e)
            return None
        if "cigate" in data.get("tool", {}):
            return pyproject
    return None


def load_settings(
    path: Path | None = None,
    *,
    environ: Mapping[str, str] | None = None,
    cwd: Path | None = None,
) -> Settings:
    """Load settings from *path* (or a discovered file) and the environment."""
    env = os.environ if environ is None else environ
    settings = Settings()

    if path is not None:
        if not path.is_file():
            msg = f"configuration file not found: {path}"
            raise ConfigError(msg)
        try:
            data = _read_toml(path)
        except (OSError, tomllib.TOMLDecodeError) as exc:
            msg = f"failed to parse {path}: {exc}"
            raise ConfigError(msg) from exc
        settings = _settings_from_section(_section(data, path), settings)
    else:
        found = discover_config_file(cwd)
        if found is not None:
            try:
                data = _read_toml(found)
            except (OSError, tomllib.TOMLDecodeError) as e:
                logger.warning("Failed to parse %s: %s", found, e)
            else:
                logger.info("Using configuration from %s", found)
                settings = _settings_from_section(_section(data, found), settings)

    raw = env.get(THRESHOLD_ENV_VAR)
    if raw is not None and raw.strip():
        settings = replace(settings, threshold=_threshold(raw, THRESHOLD_ENV_VAR))
    return settings


__all__ = [
    "CONFIG_FILENAME",
    "DEFAULT_BUILD_COMMAND",
    "DEFAULT_REPORT_TEMPLATE",
    "DEFAULT_THRESHOLD",
    "LOG_FORMAT",
    "THRESHOLD_ENV_VAR",
    "Settings",
    "discover_config_file",
    "load_settings",
]
