"""Static directory-to-service table."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Iterator, Mapping

    from cigate.core.types import ServiceName


@dataclass(frozen=True, slots=True)
class ServiceEntry:
    """One ``prefix -> service`` row of the table."""

    prefix: str
    name: ServiceName

    @property
    def directory(self) -> str:
        """Working directory of the service, relative to the repository root."""
        return self.prefix.rstrip("/")


@dataclass(frozen=True, slots=True)
class ServiceDirectoryTable:
    """Ordered, read-only mapping of directory prefixes to service names.

    Table order is the order in which services are built and reported.
    """

    entries: tuple[ServiceEntry, ...]

    def __post_init__(self) -> None:
        if not self.entries:
            msg = "service table must contain at least one entry"
            raise ValueError(msg)
        seen: set[str] = set()
        for entry in self.entries:
            if not entry.prefix or not entry.name:
                msg = f"service table entries must be non-empty: {entry!r}"
                raise ValueError(msg)
            if entry.name in seen:
                msg = f"duplicate service name in table: {entry.name!r}"
                raise ValueError(msg)
            seen.add(entry.name)

    @classmethod
    def from_mapping(cls, mapping: Mapping[str, str]) -> ServiceDirectoryTable:
        """Build a table from a ``{prefix: service}`` mapping, keeping its order."""
        return cls(tuple(ServiceEntry(prefix=p, name=n) for p, n in mapping.items()))

    def __iter__(self) -> Iterator[ServiceEntry]:
        return iter(self.entries)

    def __len__(self) -> int:
        return len(self.entries)

    def __contains__(self, name: object) -> bool:
        return any(entry.name == name for entry in self.entries)

    def names(self) -> tuple[ServiceName, ...]:
        return tuple(entry.name for entry in self.entries)

    def entry_for(self, name: ServiceName) -> ServiceEntry:
        for entry in self.entries:
            if entry.name == name:
                return entry
        msg = f"unknown service: {name!r}"
        raise KeyError(msg)

    def directory_for(self, name: ServiceName) -> str:
        return self.entry_for(name).directory


DEFAULT_SERVICE_TABLE = ServiceDirectoryTable.from_mapping({
    "spring-petclinic-api-gateway/": "api-gateway",
    "spring-petclinic-config-server/": "config-server",
    "spring-petclinic-customers-service/": "customers-service",
    "spring-petclinic-discovery-server/": "discovery-server",
    "spring-petclinic-vets-service/": "vets-service",
    "spring-petclinic-visits-service/": "visits-service",
})


__all__ = ["DEFAULT_SERVICE_TABLE", "ServiceDirectoryTable", "ServiceEntry"]
