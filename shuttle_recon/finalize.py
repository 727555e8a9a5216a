from typing import Sequence

import polars as pl

from .analysis.frame import to_frame
from .models import CombinedRecord
from .outputs.naming import OUTPUT_NAME_MAP, OUTPUT_ORDER


def finalize_output(df: pl.DataFrame) -> pl.DataFrame:
    """Prepares the combined-record frame for export: display names in column order."""
    return df.select([pl.col(c).alias(OUTPUT_NAME_MAP[c]) for c in OUTPUT_ORDER])


def finalize_records(records: Sequence[CombinedRecord]) -> pl.DataFrame:
    return finalize_output(to_frame(records))
