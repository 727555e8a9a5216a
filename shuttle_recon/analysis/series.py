"""Data series behind the dashboard charts.

Only the numbers are produced here; rendering is left to the consumer.
Missing occupancy / used-ticket values (no matching service) count as 0.
"""

import calendar
from typing import Any, Dict, List

import polars as pl

from .frame import with_date_parts
from ..models import ValidationOutcome

ALL_ROUTES = "all"


def route_performance(df: pl.DataFrame) -> List[Dict[str, Any]]:
    """Per route: validations, used tickets and mean occupancy (percent, 2 decimals)."""
    if df.is_empty():
        return []
    out = (
        df.group_by("descripcion_ruta", maintain_order=True)
        .agg(
            pl.len().alias("viajes"),
            pl.col("tickets_utilizados").fill_null(0).sum().alias("tickets_utilizados"),
            (pl.col("ocupacion").fill_null(0.0).mean() * 100).round(2).alias("ocupacion_promedio_pct"),
        )
    )
    return out.to_dicts()


def top_users(df: pl.DataFrame, limit: int = 10) -> List[Dict[str, Any]]:
    """Users ranked by confirmed validations; ties keep first-seen order."""
    df = df.filter(pl.col("usuario").is_not_null() & (pl.col("usuario") != ""))
    if df.is_empty():
        return []
    out = (
        df.group_by("usuario", maintain_order=True)
        .agg((pl.col("validado") == ValidationOutcome.CONFIRMED.value).sum().alias("viajes"))
        .sort("viajes", descending=True, maintain_order=True)
        .head(limit)
    )
    return out.to_dicts()


def _month_days(df: pl.DataFrame) -> List[int]:
    """Day numbers of the month of the first record."""
    first = df.row(0, named=True)
    return list(range(1, calendar.monthrange(first["year"], first["month"])[1] + 1))


def daily_route_performance(df: pl.DataFrame, route: str = ALL_ROUTES) -> List[Dict[str, Any]]:
    """Per day of the month: used tickets and mean occupancy for one route (or all)."""
    if df.is_empty():
        return []
    df = with_date_parts(df)
    days = _month_days(df)
    if route != ALL_ROUTES:
        df = df.filter(pl.col("descripcion_ruta") == route)
    by_day = {
        row["day"]: row
        for row in df.group_by("day")
        .agg(
            pl.col("tickets_utilizados").fill_null(0).sum().alias("tickets_utilizados"),
            (pl.col("ocupacion").fill_null(0.0).mean() * 100).round(2).alias("ocupacion_promedio_pct"),
        )
        .to_dicts()
    }
    series = []
    for day in days:
        row = by_day.get(day)
        series.append(
            {
                "dia": day,
                "tickets_utilizados": int(row["tickets_utilizados"]) if row else 0,
                "ocupacion_promedio_pct": float(row["ocupacion_promedio_pct"]) if row else 0.0,
            }
        )
    return series


def usage_by_day(df: pl.DataFrame) -> Dict[int, int]:
    """Confirmed validations per day of the month of the first record."""
    if df.is_empty():
        return {}
    df = with_date_parts(df)
    counts = {day: 0 for day in _month_days(df)}
    confirmed = (
        df.filter(pl.col("validado") == ValidationOutcome.CONFIRMED.value)
        .group_by("day")
        .agg(pl.len().alias("n"))
    )
    for row in confirmed.iter_rows(named=True):
        if row["day"] in counts:
            counts[row["day"]] = int(row["n"])
    return counts
