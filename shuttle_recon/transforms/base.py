"""Base transformation class that enforces the data contract."""

import logging
from abc import ABC
from typing import Any, Dict, List, Mapping, Optional, Sequence

from ..cleaning.column_resolver import resolve_column
from ..config import ALIASES, VALIDATION_CONTRACT
from ..errors import SchemaMismatch

logger = logging.getLogger(__name__)


def validate_row(
    row: Mapping[str, Any],
    category: str,
    required: Optional[Sequence[str]] = None,
    aliases: Optional[Mapping[str, Sequence[str]]] = None,
) -> None:
    """Raise SchemaMismatch listing every required logical column `row` cannot resolve."""
    required = VALIDATION_CONTRACT[category] if required is None else required
    missing = [col for col in required if resolve_column(row, col, aliases) is None]
    if missing:
        raise SchemaMismatch(category, missing)


class BaseTransform(ABC):
    """
    Base class for per-category row preparation.

    `transform` runs the category's header fixes over every row and then
    checks the first row against the category contract. Headers are assumed
    uniform across a dataset, so only the first row is sampled; later rows
    with divergent headers are resolved field by field at join time.

    Subclasses set `category` and may override `_apply_transform`.
    """

    category: str = ""

    def __init__(self, config: Optional[Dict[str, Any]] = None):
        self.config = config or {}
        self.aliases = self.config.get("aliases", ALIASES)

    @property
    def required_columns(self) -> List[str]:
        return list(VALIDATION_CONTRACT[self.category])

    def _apply_transform(self, row: Dict[str, Any]) -> Dict[str, Any]:
        return row

    def prepare(self, rows: Sequence[Mapping[str, Any]]) -> List[Dict[str, Any]]:
        """Copy rows and apply the category-specific header fixes."""
        return [self._apply_transform(dict(row)) for row in rows]

    def validate_sample(self, rows: Sequence[Mapping[str, Any]]) -> None:
        if not rows:
            return
        validate_row(rows[0], self.category, self.required_columns, self.aliases)

    def transform(self, rows: Sequence[Mapping[str, Any]]) -> List[Dict[str, Any]]:
        prepared = self.prepare(rows)
        self.validate_sample(prepared)
        logger.info(f"[{self.__class__.__name__}] rows={len(prepared)}, contract ok")
        return prepared
