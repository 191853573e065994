"""Map changed file paths to the services that must be rebuilt.

The mapper is a pure function over strings: no path normalisation, no I/O. A
change to shared build configuration (the build manifest or the pipeline
definition) forces every service to be rebuilt and takes priority over any
directory match, wherever it appears in the change set.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from cigate._meta import logger
from cigate.core.types import SelectionReason

if TYPE_CHECKING:
    from collections.abc import Iterable, Sequence

    from cigate.core.services import ServiceDirectoryTable
    from cigate.core.types import ChangedPath, ServiceName

ALL_SERVICES = "all"

DEFAULT_BUILD_MANIFESTS: tuple[str, ...] = ("pom.xml",)
DEFAULT_PIPELINE_DEFINITIONS: tuple[str, ...] = ("Jenkinsfile",)


@dataclass(frozen=True, slots=True)
class ServiceSelection:
    """Services affected by a change set, or the ``all`` sentinel."""

    services: frozenset[ServiceName]
    build_all: bool
    reason: SelectionReason
    trigger: ChangedPath | None = None

    @classmethod
    def everything(cls, reason: SelectionReason, *, trigger: ChangedPath | None = None) -> ServiceSelection:
        return cls(services=frozenset(), build_all=True, reason=reason, trigger=trigger)

    def __contains__(self, service: object) -> bool:
        return self.build_all or service in self.services

    def names(self) -> frozenset[str]:
        """Return the selected names, ``{"all"}`` for the sentinel."""
        return frozenset({ALL_SERVICES}) if self.build_all else self.services

    def resolve(self, table: ServiceDirectoryTable) -> tuple[ServiceName, ...]:
        """Return the concrete services to build, in table order."""
        return tuple(name for name in table.names() if name in self)


def is_build_wide_change(
    path: ChangedPath,
    *,
    build_manifests: Iterable[str] = DEFAULT_BUILD_MANIFESTS,
    pipeline_definitions: Iterable[str] = DEFAULT_PIPELINE_DEFINITIONS,
) -> bool:
    """Return ``True`` if *path* touches configuration shared by every service."""
    if any(path == name or path.endswith(name) for name in pipeline_definitions):
        return True
    return any(name in path for name in build_manifests)


def select_services(
    changed_paths: Sequence[ChangedPath],
    table: ServiceDirectoryTable,
    *,
    build_manifests: Iterable[str] = DEFAULT_BUILD_MANIFESTS,
    pipeline_definitions: Iterable[str] = DEFAULT_PIPELINE_DEFINITIONS,
) -> ServiceSelection:
    """Return the services whose directory prefix matches a changed path.

    Falls back to the ``all`` sentinel when the change set is empty, when a
    build-wide file changed, or when no path belongs to any known service.
    """
    paths = list(changed_paths)
    if not paths:
        logger.info("no changes detected; selecting all services")
        return ServiceSelection.everything(SelectionReason.NO_CHANGES)

    manifests = tuple(build_manifests)
    definitions = tuple(pipeline_definitions)
    for path in paths:
        if is_build_wide_change(path, build_manifests=manifests, pipeline_definitions=definitions):
            logger.info("build-wide change in %s; selecting all services", path)
            return ServiceSelection.everything(SelectionReason.BUILD_WIDE_CHANGE, trigger=path)

    matched = {entry.name for path in paths for entry in table if path.startswith(entry.prefix)}
    if not matched:
        logger.info("no changed path belongs to a known service; selecting all services")
        return ServiceSelection.everything(SelectionReason.NO_MATCH)

    logger.debug("changed services: %s", ", ".join(sorted(matched)))
    return ServiceSelection(services=frozenset(matched), build_all=False, reason=SelectionReason.MATCHED)


__all__ = [
    "ALL_SERVICES",
    "DEFAULT_BUILD_MANIFESTS",
    "DEFAULT_PIPELINE_DEFINITIONS",
    "ServiceSelection",
    "is_build_wide_change",
    "select_services",
]
