"""Common value parsers for the row transforms and the join engine."""

import math
import re
from typing import Any, Optional

_INT_PREFIX = re.compile(r"^\s*[+-]?\d+")
_FLOAT_PREFIX = re.compile(r"^\s*[+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?")


def is_blank(value: Any) -> bool:
    if value is None:
        return True
    if isinstance(value, float) and math.isnan(value):
        return True
    return isinstance(value, str) and not value.strip()


def text_or_none(value: Any) -> Optional[str]:
    """Cell as text, None for blank cells."""
    if is_blank(value):
        return None
    return str(value)


def parse_int_prefix(value: Any) -> Optional[int]:
    """Leading integer of a cell ('12', 12.9, '12 tickets' -> 12); None if there is none."""
    if is_blank(value) or isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        if isinstance(value, float) and math.isinf(value):
            return None
        return int(value)
    m = _INT_PREFIX.match(str(value))
    return int(m.group(0)) if m else None


def parse_float_prefix(value: Any) -> Optional[float]:
    """Leading decimal number of a cell; None if there is none."""
    if is_blank(value) or isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        return float(value)
    m = _FLOAT_PREFIX.match(str(value))
    return float(m.group(0)) if m else None


def parse_occupancy(value: Any) -> float:
    """'80%' or '80' -> 0.8. Missing or unparseable values count as 0.0."""
    if is_blank(value):
        return 0.0
    text = str(value).strip()
    if text.endswith("%"):
        text = text[:-1]
    number = parse_float_prefix(text)
    if number is None or math.isnan(number) or math.isinf(number):
        return 0.0
    return number / 100
