"""Main reconciliation pipeline."""

import logging
from typing import Any, Dict, List, Mapping, Optional, Sequence

from .analysis import (
    available_months,
    available_years,
    apply_filters,
    compute_kpis,
    create_default_analysis_engine,
)
from .cleaning.column_resolver import resolve_value
from .config import CATEGORIES, TICKETS, SERVICES, VALIDATIONS, normalize_category
from .diagnostics import capture_backup, log_dataset_sizes, log_date_drops, log_join_coverage
from .errors import ReconciliationFailure, SchemaMismatch
from .models import CombinedRecord, FilteredView, FilterSpec, PipelineOutput
from .readers import FileSet
from .reconcile import reconcile_records
from .transforms import TRANSFORM_MAP
from .transforms.utils import parse_int_prefix

logger = logging.getLogger(__name__)

Rows = Sequence[Mapping[str, Any]]


def _normalize_datasets(datasets: Mapping[str, Rows]) -> Dict[str, List[Mapping[str, Any]]]:
    normalized: Dict[str, List[Mapping[str, Any]]] = {c: [] for c in CATEGORIES}
    for name, rows in datasets.items():
        normalized[normalize_category(name)].extend(rows or [])
    return normalized


def _tickets_sold(tickets: Rows) -> int:
    return sum(parse_int_prefix(resolve_value(t, "Tickets")) or 0 for t in tickets)


def reconcile(datasets: Mapping[str, Rows], config: Optional[Dict[str, Any]] = None) -> PipelineOutput:
    """
    Run the full batch transform over one complete input set.

    Args:
        datasets: Raw rows keyed by category ('tickets', 'services',
            'validations'; the Spanish names are accepted too)
        config: Optional transform configuration (e.g. custom 'aliases')

    Returns:
        PipelineOutput with combined records, KPIs and the filter options.
        `combined_records` is None when no category has any row.

    Raises:
        SchemaMismatch: a category misses required columns
        ReconciliationFailure: the joins produced nothing usable
    """
    data = _normalize_datasets(datasets)
    if not any(data.values()):
        return PipelineOutput()

    log_dataset_sizes(data)

    # Every category is prepared and validated before any index is built
    prepared = {}
    for category in CATEGORIES:
        transform = TRANSFORM_MAP[category](config)
        prepared[category] = transform.transform(data[category])

    log_date_drops(prepared[VALIDATIONS])
    records = reconcile_records(prepared[TICKETS], prepared[SERVICES], prepared[VALIDATIONS])
    log_join_coverage(records, prepared[TICKETS], prepared[SERVICES])

    return PipelineOutput(
        combined_records=records,
        kpis=compute_kpis(records),
        available_years=available_years(records),
        available_months=available_months(records),
        tickets_sold=_tickets_sold(prepared[TICKETS]),
    )


def run_pipeline(datasets: Mapping[str, Rows], config: Optional[Dict[str, Any]] = None) -> PipelineOutput:
    """Like `reconcile`, but pipeline errors become an operator-facing output.

    A schema mismatch carries the backup snapshot of every category with
    data; a reconciliation failure only carries its message.
    """
    try:
        return reconcile(datasets, config)
    except SchemaMismatch as e:
        logger.warning(f"Schema mismatch in {e.category}: missing {e.missing_columns}")
        return PipelineOutput(error_message=str(e), backup=capture_backup(_normalize_datasets(datasets)))
    except ReconciliationFailure as e:
        logger.warning(f"Reconciliation failed: {e.reason}")
        return PipelineOutput(error_message=e.reason)


class ShuttleDataProcessor:
    """File-level entry point: loads input files, runs the pipeline, serves views."""

    def __init__(self, config: Optional[Dict[str, Any]] = None):
        self.config = config or {}
        self.analysis_engine = create_default_analysis_engine(
            top_n=int(self.config.get("top_users", 10))
        )

    def load_files(self, file_paths: Mapping[str, Sequence[str]]) -> FileSet:
        """Read every file per category; unreadable files are recorded, not raised."""
        files = FileSet(check_names=bool(self.config.get("check_file_names", True)))
        for category, paths in file_paths.items():
            if isinstance(paths, str):
                paths = [paths]
            for path in paths:
                files.add_file(str(path), category)
        return files

    def process_datasets(self, datasets: Mapping[str, Rows]) -> PipelineOutput:
        return run_pipeline(datasets, self.config)

    def process_files(self, file_paths: Mapping[str, Sequence[str]]) -> PipelineOutput:
        """
        Load the files of each category and reconcile them.

        Args:
            file_paths: Dict mapping category names to lists of file paths

        Returns:
            PipelineOutput; `file_errors` lists the files that could not be read
        """
        files = self.load_files(file_paths)
        output = self.process_datasets(files.datasets())
        output.file_errors = [str(e) for e in files.errors]
        if output.combined_records is not None:
            logger.info(
                f"Processing complete: records={len(output.combined_records)}, "
                f"years={output.available_years}, file_errors={len(output.file_errors)}"
            )
        return output

    def view(self, records: Sequence[CombinedRecord], filters: Optional[FilterSpec] = None) -> FilteredView:
        return apply_filters(records, filters or FilterSpec())

    def analyze(self, records: Sequence[CombinedRecord]) -> Dict[str, Any]:
        return self.analysis_engine.run(records)
