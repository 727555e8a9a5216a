"""Combined records <-> polars frame with the internal column names."""

from typing import Sequence

import polars as pl

from ..models import CombinedRecord

RECORD_SCHEMA = {
    "fecha": pl.Utf8,
    "usuario": pl.Utf8,
    "tipo_usuario": pl.Utf8,
    "id_salida": pl.Utf8,
    "descripcion_ruta": pl.Utf8,
    "validado": pl.Utf8,
    "tipo_de_pase": pl.Utf8,
    "tickets": pl.Int64,
    "ocupacion": pl.Float64,
    "tickets_utilizados": pl.Int64,
}


def to_frame(records: Sequence[CombinedRecord]) -> pl.DataFrame:
    """Build a frame with a fixed schema; an empty input gives an empty typed frame."""
    if not records:
        return pl.DataFrame(schema=RECORD_SCHEMA)
    return pl.DataFrame([r.to_dict() for r in records], schema=RECORD_SCHEMA)


def with_date_parts(df: pl.DataFrame) -> pl.DataFrame:
    """Add year/month/day columns parsed from the ISO 'fecha' column."""
    parsed = pl.col("fecha").str.strptime(pl.Date, "%Y-%m-%d", strict=False)
    return df.with_columns(
        parsed.dt.year().alias("year"),
        parsed.dt.month().alias("month"),
        parsed.dt.day().alias("day"),
    )
