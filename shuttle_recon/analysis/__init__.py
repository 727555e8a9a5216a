"""Aggregation over combined records: KPIs, filters and chart series."""

from .engine import AnalysisEngine
from .computations import (
    BaseComputation,
    ComputationRegistry,
    KpiComputation,
    RoutePerformanceComputation,
    TopUsersComputation,
    UsageByDayComputation,
    DailyRoutePerformanceComputation,
)
from .filters import apply_filters, available_months, available_years, filter_records
from .frame import to_frame
from .kpis import compute_kpis

__all__ = [
    "AnalysisEngine",
    "BaseComputation",
    "ComputationRegistry",
    "KpiComputation",
    "RoutePerformanceComputation",
    "TopUsersComputation",
    "UsageByDayComputation",
    "DailyRoutePerformanceComputation",
    "apply_filters",
    "available_months",
    "available_years",
    "filter_records",
    "to_frame",
    "compute_kpis",
    "create_default_analysis_engine",
]


def create_default_analysis_engine(route: str = "all", top_n: int = 10) -> AnalysisEngine:
    """Create analysis engine with all dashboard computations pre-registered."""
    engine = AnalysisEngine()

    engine.add_computation(KpiComputation())
    engine.add_computation(RoutePerformanceComputation())
    engine.add_computation(TopUsersComputation(top_n))
    engine.add_computation(UsageByDayComputation())
    engine.add_computation(DailyRoutePerformanceComputation(route))

    return engine
