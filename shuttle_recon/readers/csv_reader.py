"""CSV file reader."""

import polars as pl
from .base import BaseReader


class CSVReader(BaseReader):
    """Reader for CSV files."""

    def read(self, path: str, **kwargs) -> pl.DataFrame:
        """Read CSV file using polars, keeping every column as text."""
        read_config = {
            "infer_schema_length": 0,
            "truncate_ragged_lines": True,
            "encoding": "utf8-lossy",
            **kwargs,
        }

        return pl.read_csv(path, **read_config)
