"""Filter re-aggregation over an already reconciled record collection."""

import logging
from typing import List, Sequence

import polars as pl

from .frame import to_frame, with_date_parts
from .kpis import compute_kpis
from ..config import USER_TYPE_FILTER_ALL
from ..models import CombinedRecord, FilteredView, FilterSpec

logger = logging.getLogger(__name__)

ALL = "all"


def _as_int(value: str, field: str) -> int:
    try:
        return int(str(value).strip())
    except ValueError:
        raise ValueError(f"Invalid {field} filter: {value!r}") from None


def filter_records(records: Sequence[CombinedRecord], filters: FilterSpec) -> List[CombinedRecord]:
    result = list(records)
    if filters.year != ALL:
        year = _as_int(filters.year, "year")
        result = [r for r in result if r.year == year]
    if filters.month != ALL:
        month = _as_int(filters.month, "month")
        result = [r for r in result if r.month == month]
    if filters.user_type != USER_TYPE_FILTER_ALL:
        result = [r for r in result if r.tipo_usuario.value == filters.user_type]
    return result


def apply_filters(records: Sequence[CombinedRecord], filters: FilterSpec) -> FilteredView:
    """Filtered subset plus KPIs recomputed from scratch over that subset."""
    subset = filter_records(records, filters)
    logger.debug(f"Filter {filters}: {len(subset)}/{len(records)} records")
    return FilteredView(records=subset, kpis=compute_kpis(subset))


def available_years(records: Sequence[CombinedRecord]) -> List[str]:
    """Distinct years, newest first."""
    df = with_date_parts(to_frame(records))
    years = df.select(pl.col("year").drop_nulls().unique().sort(descending=True)).to_series()
    return [str(y) for y in years.to_list()]


def available_months(records: Sequence[CombinedRecord]) -> List[str]:
    """Distinct month numbers ('1'..'12'), ascending."""
    df = with_date_parts(to_frame(records))
    months = df.select(pl.col("month").drop_nulls().unique().sort()).to_series()
    return [str(m) for m in months.to_list()]
