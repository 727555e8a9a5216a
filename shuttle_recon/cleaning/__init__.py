"""Per-value cleaning: header resolution, dates, user types, join keys."""

from .column_resolver import resolve_column, resolve_value
from .dates import INVALID_DATE, normalize_date
from .keys import normalize_run_id, normalize_user_id
from .user_type import normalize_user_type

__all__ = [
    "resolve_column",
    "resolve_value",
    "INVALID_DATE",
    "normalize_date",
    "normalize_run_id",
    "normalize_user_id",
    "normalize_user_type",
]
