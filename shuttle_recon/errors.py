"""Pipeline exception hierarchy.

Schema problems and reconciliation problems are separate types so callers
can tell an operator which kind of fix is needed.
"""

from __future__ import annotations

from typing import List, Sequence

from .config import CATEGORY_LABELS


class PipelineError(Exception):
    """Base exception for all reconciliation pipeline failures."""


class SchemaMismatch(PipelineError):
    """Raised when a dataset does not provide every required logical column."""

    def __init__(self, category: str, missing_columns: Sequence[str]):
        self.category = category
        self.missing_columns: List[str] = list(missing_columns)
        super().__init__(
            f"Error en archivo de {CATEGORY_LABELS.get(category, category)}: Faltan columnas: {', '.join(self.missing_columns)}."
        )


class ReconciliationFailure(PipelineError):
    """Raised when the joins produce nothing although every column was present."""

    def __init__(self, reason: str):
        self.reason = reason
        super().__init__(reason)


class FileReadError(PipelineError):
    """Raised when a single input file cannot be decoded into rows."""

    def __init__(self, path: str, reason: str):
        self.path = path
        self.reason = reason
        super().__init__(f"Error al procesar el archivo: \"{path}\": {reason}")
