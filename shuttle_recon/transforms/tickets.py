"""Ticket sales transformation."""

from typing import Any, Dict

from .base import BaseTransform
from ..config import TICKETS, TICKETS_DROP_COLUMNS, TICKETS_RENAME_MAP


class TicketsTransform(BaseTransform):
    """Fix the placeholder headers of the ticket export before validation."""

    category = TICKETS

    def _apply_transform(self, row: Dict[str, Any]) -> Dict[str, Any]:
        for key in list(row.keys()):
            norm = str(key).strip().lower()
            if norm in TICKETS_RENAME_MAP:
                row[TICKETS_RENAME_MAP[norm]] = row.pop(key)
            elif norm in TICKETS_DROP_COLUMNS:
                del row[key]
        return row
