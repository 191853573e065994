"""Sequential build/test/coverage pipeline over a service selection.

Services run one at a time, in table order. A coverage shortfall marks the
run unstable and evaluation continues; a missing report fails that service's
coverage check and evaluation continues; a failed build stops the run.
Infrastructure errors propagate to the caller.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Protocol

from cigate._meta import logger
from cigate.core.coverage import evaluate_coverage
from cigate.core.types import BuildStatus, RunStatus
from cigate.errors import CoverageReportNotFoundError
from cigate.inputs.reports import read_report

if TYPE_CHECKING:
    from collections.abc import Callable, Iterable
    from pathlib import Path

    from cigate.core.coverage import CoverageVerdict
    from cigate.core.mapper import ServiceSelection
    from cigate.core.services import ServiceDirectoryTable
    from cigate.core.types import ServiceName
    from cigate.inputs.invoker import BuildResult

    ReportLocatorFn = Callable[[ServiceName], Path]


class BuildInvoker(Protocol):
    def __call__(self, service: ServiceName, directory: str) -> BuildResult: ...


@dataclass(frozen=True, slots=True)
class ServiceOutcome:
    """Everything known about one service after the pipeline visited it."""

    service: ServiceName
    status: RunStatus
    build: BuildResult | None = None
    verdict: CoverageVerdict | None = None
    report_path: Path | None = None
    report_missing: bool = False


@dataclass(frozen=True, slots=True)
class PipelineResult:
    """Aggregated outcome of a pipeline run."""

    outcomes: tuple[ServiceOutcome, ...]
    skipped: tuple[ServiceName, ...] = ()
    selection: ServiceSelection | None = None

    @property
    def status(self) -> RunStatus:
        status = RunStatus.SUCCESS
        for outcome in self.outcomes:
            status = status.worsen(outcome.status)
        return status

    @property
    def build_failed(self) -> bool:
        return any(o.build is not None and o.build.status is BuildStatus.FAILED for o in self.outcomes)

    @property
    def missing_reports(self) -> tuple[ServiceName, ...]:
        return tuple(o.service for o in self.outcomes if o.report_missing)

    @property
    def below_threshold(self) -> tuple[ServiceName, ...]:
        return tuple(o.service for o in self.outcomes if o.verdict is not None and not o.verdict.passed)


def gate_service(
    service: ServiceName,
    report_path: Path,
    threshold: int,
    *,
    build: BuildResult | None = None,
) -> ServiceOutcome:
    """Evaluate one service's coverage report against *threshold*."""
    base = RunStatus.UNSTABLE if build is not None and build.status is BuildStatus.UNSTABLE else RunStatus.SUCCESS
    try:
        report = read_report(report_path)
    except CoverageReportNotFoundError:
        logger.error("%s: coverage report not found at %s", service, report_path)
        return ServiceOutcome(
            service=service,
            status=RunStatus.FAILURE,
            build=build,
            report_path=report_path,
            report_missing=True,
        )

    verdict = evaluate_coverage(report, threshold)
    if verdict.passed:
        logger.info("%s: coverage %.2f%% (threshold %d%%)", service, verdict.percent, threshold)
        status = base
    else:
        logger.warning(
            "%s: coverage %.2f%% is below threshold %d%%; marking run unstable",
            service,
            verdict.percent,
            threshold,
        )
        status = base.worsen(RunStatus.UNSTABLE)
    return ServiceOutcome(service=service, status=status, build=build, verdict=verdict, report_path=report_path)


def gate_services(
    services: Iterable[ServiceName],
    locate: ReportLocatorFn,
    threshold: int,
) -> PipelineResult:
    """Gate every service in order without running any build."""
    outcomes = tuple(gate_service(service, locate(service), threshold) for service in services)
    return PipelineResult(outcomes=outcomes)


def run_pipeline(
    selection: ServiceSelection,
    table: ServiceDirectoryTable,
    *,
    invoker: BuildInvoker,
    locate: ReportLocatorFn,
    threshold: int,
) -> PipelineResult:
    """Build, test and gate the selected services sequentially in table order."""
    services = selection.resolve(table)
    logger.info("selected services (%s): %s", selection.reason.value, ", ".join(services) or "<none>")

    outcomes: list[ServiceOutcome] = []
    for index, service in enumerate(services):
        build = invoker(service, table.directory_for(service))
        if build.status is BuildStatus.FAILED:
            logger.error("%s: build failed with exit status %d", service, build.returncode)
            outcomes.append(ServiceOutcome(service=service, status=RunStatus.FAILURE, build=build))
            skipped = services[index + 1 :]
            if skipped:
                logger.warning("skipping remaining services: %s", ", ".join(skipped))
            return PipelineResult(outcomes=tuple(outcomes), skipped=skipped, selection=selection)
        if build.status is BuildStatus.UNSTABLE:
            logger.warning("%s: build unstable (exit status %d)", service, build.returncode)
        outcomes.append(gate_service(service, locate(service), threshold, build=build))

    return PipelineResult(outcomes=tuple(outcomes), selection=selection)


__all__ = [
    "BuildInvoker",
    "PipelineResult",
    "ServiceOutcome",
    "gate_service",
    "gate_services",
    "run_pipeline",
]
