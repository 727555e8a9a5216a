"""Resolve logical column names against whatever headers an export carries.

Matching is deliberately dumb and predictable: lower-case + trim on both
sides, exact comparison, then the same against the configured aliases.
The first physical header that matches wins, so duplicated headers resolve
by column order.
"""

from typing import Any, Mapping, Optional, Sequence

from ..config import ALIASES


def _norm_header(name: Any) -> str:
    return str(name if name is not None else "").strip().lower()


def _scan(keys: Sequence[Any], wanted: str) -> Optional[str]:
    for key in keys:
        if _norm_header(key) == wanted:
            return key
    return None


def resolve_column(
    row: Optional[Mapping[str, Any]],
    logical_name: str,
    aliases: Optional[Mapping[str, Sequence[str]]] = None,
) -> Optional[str]:
    """Return the physical header in `row` for `logical_name`, or None when absent."""
    if not row:
        return None
    aliases = ALIASES if aliases is None else aliases
    keys = list(row.keys())

    found = _scan(keys, _norm_header(logical_name))
    if found is not None:
        return found

    for alias in aliases.get(logical_name, []):
        found = _scan(keys, _norm_header(alias))
        if found is not None:
            return found
    return None


def resolve_value(
    row: Optional[Mapping[str, Any]],
    logical_name: str,
    aliases: Optional[Mapping[str, Sequence[str]]] = None,
) -> Optional[Any]:
    """Value stored under the resolved header, or None when the column is absent."""
    key = resolve_column(row, logical_name, aliases)
    if key is None:
        return None
    return row[key]
