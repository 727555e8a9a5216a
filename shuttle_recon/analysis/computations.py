"""Computation registry and base classes."""

from abc import ABC, abstractmethod
from typing import Any, List

import polars as pl

from .kpis import kpis_from_frame
from .series import daily_route_performance, route_performance, top_users, usage_by_day


class BaseComputation(ABC):
    """Base class for all computations over the combined-record frame."""

    def __init__(self, name: str):
        self.name = name

    @abstractmethod
    def compute(self, df: pl.DataFrame) -> Any:
        """Compute and return result value."""
        pass


class ComputationRegistry:
    """Registry for analysis computations."""

    def __init__(self):
        self._computations: List[BaseComputation] = []

    def register(self, computation: BaseComputation):
        """Register a computation."""
        self._computations.append(computation)

    def get_computations(self) -> List[BaseComputation]:
        """Get all registered computations."""
        return self._computations.copy()


class KpiComputation(BaseComputation):
    def __init__(self):
        super().__init__("kpis")

    def compute(self, df: pl.DataFrame):
        return kpis_from_frame(df).to_dict()


class RoutePerformanceComputation(BaseComputation):
    """Used tickets and mean occupancy per route."""

    def __init__(self):
        super().__init__("route_performance")

    def compute(self, df: pl.DataFrame):
        return route_performance(df)


class TopUsersComputation(BaseComputation):
    """Top riders by confirmed validations."""

    def __init__(self, limit: int = 10):
        super().__init__("top_users")
        self.limit = limit

    def compute(self, df: pl.DataFrame):
        return top_users(df, self.limit)


class UsageByDayComputation(BaseComputation):
    def __init__(self):
        super().__init__("usage_by_day")

    def compute(self, df: pl.DataFrame):
        return usage_by_day(df)


class DailyRoutePerformanceComputation(BaseComputation):
    """Per-day used tickets and occupancy, optionally for a single route."""

    def __init__(self, route: str = "all"):
        super().__init__("daily_route_performance")
        self.route = route

    def compute(self, df: pl.DataFrame):
        return daily_route_performance(df, self.route)
