"""Diagnostics package: backup capture plus opt-in logging via env switches."""

from .backup import capture_backup
from .metrics import log_dataset_sizes, log_date_drops, log_join_coverage

__all__ = [
    "capture_backup",
    "log_dataset_sizes",
    "log_date_drops",
    "log_join_coverage",
]
