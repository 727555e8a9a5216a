"""Free-text rider role -> closed user-type enumeration."""

from typing import Any

from ..config import USER_TYPE_KEYWORDS
from ..models import UserType


def normalize_user_type(label: Any) -> UserType:
    """Classify by substring containment; students are checked before staff."""
    text = "" if label is None else str(label)
    text = text.strip().casefold()
    for value, keywords in USER_TYPE_KEYWORDS:
        if any(k in text for k in keywords):
            return UserType(value)
    return UserType.UNKNOWN
