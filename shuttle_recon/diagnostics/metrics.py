"""Diagnostics helpers (opt-in via PROCESSOR_DIAG).

Keep diagnostics separate from core logic. Never mutate inputs.
Failures are logged as errors and do not raise. Counts only, never values.
"""

from __future__ import annotations

import logging
import os
from typing import Any, Mapping, Sequence

from ..cleaning.column_resolver import resolve_value
from ..cleaning.dates import INVALID_DATE, normalize_date
from ..cleaning.keys import normalize_run_id, normalize_user_id
from ..models import CombinedRecord

logger = logging.getLogger(__name__)


def _diag_enabled() -> bool:
    val = os.getenv("PROCESSOR_DIAG", "1").strip().lower()
    return val in {"1", "true", "yes", "on"}


def log_dataset_sizes(datasets: Mapping[str, Sequence[Mapping[str, Any]]]) -> None:
    """Log row counts and the header set of the first row per category."""
    if not _diag_enabled():
        return
    try:
        for category, rows in datasets.items():
            headers = list(rows[0].keys()) if rows else []
            logger.info(f"Dataset {category}: rows={len(rows)}, headers={headers}")
    except Exception:
        logger.error("Dataset size diagnostics failed", exc_info=True)


def log_date_drops(validations: Sequence[Mapping[str, Any]]) -> None:
    """Log how many validation rows carry a date that cannot be normalized."""
    if not _diag_enabled():
        return
    try:
        dropped = sum(
            1 for row in validations if normalize_date(resolve_value(row, "Fecha")) == INVALID_DATE
        )
        if dropped:
            logger.info(f"Validation rows with unusable dates (dropped): {dropped}/{len(validations)}")
    except Exception:
        logger.error("Date drop diagnostics failed", exc_info=True)


def log_join_coverage(
    records: Sequence[CombinedRecord],
    tickets: Sequence[Mapping[str, Any]],
    services: Sequence[Mapping[str, Any]],
) -> None:
    """Log how many records found their service run and their rider's ticket."""
    if not _diag_enabled():
        return
    try:
        run_ids = {normalize_run_id(resolve_value(s, "ID salida")) for s in services}
        users = {normalize_user_id(resolve_value(t, "Usuario")) for t in tickets}
        with_service = sum(1 for r in records if r.id_salida in run_ids)
        with_ticket = sum(1 for r in records if r.usuario in users)
        logger.info(
            f"Join coverage: records={len(records)}, with_service={with_service}, with_ticket={with_ticket}"
        )
    except Exception:
        logger.error("Join coverage diagnostics failed", exc_info=True)
