"""KPI summary over a collection of combined records.

The same function serves the full dataset and every filtered subset, so
the two views can never disagree on a formula.
"""

from typing import Sequence

import polars as pl

from .frame import to_frame
from ..config import PASS_TYPE_KPIS
from ..models import CombinedRecord, KpiSummary, UserType


def kpi_expressions() -> list[pl.Expr]:
    pase = pl.col("tipo_de_pase").fill_null("").str.to_lowercase()
    exprs = [
        pl.len().alias("total_tickets"),
        (pl.col("tipo_usuario") == UserType.STUDENT.value).sum().alias("total_estudiantes"),
        (pl.col("tipo_usuario") == UserType.STAFF.value).sum().alias("total_colaboradores"),
    ]
    for name, keyword in PASS_TYPE_KPIS.items():
        exprs.append(pase.str.contains(keyword, literal=True).sum().alias(name))
    return exprs


def kpis_from_frame(df: pl.DataFrame) -> KpiSummary:
    values = df.select(kpi_expressions()).row(0, named=True)
    return KpiSummary(**{k: int(v or 0) for k, v in values.items()})


def compute_kpis(records: Sequence[CombinedRecord]) -> KpiSummary:
    """Counters over `records`; order does not matter."""
    return kpis_from_frame(to_frame(records))
