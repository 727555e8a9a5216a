"""Join key normalization for user identifiers and run identifiers."""

import math
from typing import Any, Optional


def _key_text(value: Any) -> Optional[str]:
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, float):
        if math.isnan(value):
            return None
        # spreadsheet readers hand integral ids back as floats
        if value.is_integer():
            return str(int(value))
    return str(value)


def normalize_user_id(value: Any) -> Optional[str]:
    """Case-folded, trimmed user identifier; None when blank."""
    text = _key_text(value)
    if text is None:
        return None
    text = text.strip().casefold()
    return text or None


def normalize_run_id(value: Any) -> Optional[str]:
    """Trimmed run identifier; None when blank."""
    text = _key_text(value)
    if text is None:
        return None
    text = text.strip()
    return text or None
