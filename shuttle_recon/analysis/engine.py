"""Analysis computation engine."""

import logging
from typing import Any, Dict, Sequence

import polars as pl

from .computations import BaseComputation, ComputationRegistry
from .frame import to_frame
from ..models import CombinedRecord

logger = logging.getLogger(__name__)


class AnalysisEngine:
    """Engine for running registered computations over combined records."""

    def __init__(self):
        self.registry = ComputationRegistry()

    def add_computation(self, computation: BaseComputation):
        """Add a computation to the engine."""
        self.registry.register(computation)

    def get_computation_results(self, df: pl.DataFrame) -> Dict[str, Any]:
        """Get results from all computations.

        A failing computation is reported under its name and does not stop
        the others.
        """
        results = {}

        for computation in self.registry.get_computations():
            try:
                results[computation.name] = computation.compute(df)
            except Exception as e:
                logger.warning(f"Computation {computation.name} failed: {e}")
                results[computation.name] = {"error": str(e)}

        return results

    def run(self, records: Sequence[CombinedRecord]) -> Dict[str, Any]:
        return self.get_computation_results(to_frame(records))
