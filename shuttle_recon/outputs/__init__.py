"""Output naming for combined records."""

from .naming import (
    OUTPUT_NAME_MAP,
    OUTPUT_ORDER,
    record_to_output,
    records_to_output,
)

__all__ = [
    "OUTPUT_NAME_MAP",
    "OUTPUT_ORDER",
    "record_to_output",
    "records_to_output",
]
