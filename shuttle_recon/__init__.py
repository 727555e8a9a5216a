"""Campus shuttle ticket, service and validation reconciliation."""

from .errors import FileReadError, PipelineError, ReconciliationFailure, SchemaMismatch
from .models import (
    BackupSnapshot,
    CombinedRecord,
    FilteredView,
    FilterSpec,
    KpiSummary,
    PipelineOutput,
    UserType,
    ValidationOutcome,
)
from .processor import ShuttleDataProcessor, reconcile, run_pipeline
from .readers import FileSet, ReaderRegistry, CSVReader, ExcelReader
from .analysis import AnalysisEngine
from .runner import LatestOnlyRunner, SupersededRun

__all__ = [
    "ShuttleDataProcessor",
    "reconcile",
    "run_pipeline",
    "FileSet",
    "ReaderRegistry",
    "CSVReader",
    "ExcelReader",
    "AnalysisEngine",
    "LatestOnlyRunner",
    "SupersededRun",
    "BackupSnapshot",
    "CombinedRecord",
    "FilteredView",
    "FilterSpec",
    "KpiSummary",
    "PipelineOutput",
    "UserType",
    "ValidationOutcome",
    "PipelineError",
    "SchemaMismatch",
    "ReconciliationFailure",
    "FileReadError",
]
