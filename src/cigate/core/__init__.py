from cigate.core.config import (
    DEFAULT_THRESHOLD,
    LOG_FORMAT,
    Settings,
    load_settings,
)
from cigate.core.coverage import (
    CoverageVerdict,
    ParsedCoverageReport,
    RateBasedReport,
    RowBasedReport,
    evaluate_coverage,
    percentage,
)
from cigate.core.mapper import (
    ALL_SERVICES,
    ServiceSelection,
    is_build_wide_change,
    select_services,
)
from cigate.core.pipeline import (
    PipelineResult,
    ServiceOutcome,
    gate_service,
    gate_services,
    run_pipeline,
)
from cigate.core.services import (
    DEFAULT_SERVICE_TABLE,
    ServiceDirectoryTable,
    ServiceEntry,
)
from cigate.core.types import (
    BuildStatus,
    OutputFormat,
    ReportFormat,
    RunStatus,
    SelectionReason,
    VerdictStatus,
)

__all__ = [
    "ALL_SERVICES",
    "DEFAULT_SERVICE_TABLE",
    "DEFAULT_THRESHOLD",
    "LOG_FORMAT",
    "BuildStatus",
    "CoverageVerdict",
    "OutputFormat",
    "ParsedCoverageReport",
    "PipelineResult",
    "RateBasedReport",
    "ReportFormat",
    "RowBasedReport",
    "RunStatus",
    "SelectionReason",
    "ServiceDirectoryTable",
    "ServiceEntry",
    "ServiceOutcome",
    "ServiceSelection",
    "Settings",
    "VerdictStatus",
    "evaluate_coverage",
    "gate_service",
    "gate_services",
    "is_build_wide_change",
    "load_settings",
    "percentage",
    "run_pipeline",
    "select_services",
]
