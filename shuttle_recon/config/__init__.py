"""Configuration for the reconciliation pipeline."""

from .contracts import (
    TICKETS,
    SERVICES,
    VALIDATIONS,
    CATEGORIES,
    CATEGORY_ALIASES,
    CATEGORY_LABELS,
    CATEGORY_FILE_PREFIXES,
    VALIDATION_CONTRACT,
    ALIASES,
    TICKETS_RENAME_MAP,
    TICKETS_DROP_COLUMNS,
)
from .enum_maps import (
    USER_TYPE_KEYWORDS,
    AFFIRMATIVE_TOKEN,
    UNKNOWN_ROUTE,
    PASS_TYPE_KPIS,
    USER_TYPE_FILTER_ALL,
)


def normalize_category(name: str) -> str:
    """Map an English or Spanish category name to its canonical key."""
    key = (name or "").strip().lower()
    if key not in CATEGORY_ALIASES:
        raise ValueError(f"Unknown dataset category: {name!r}. Expected one of {list(CATEGORIES)}")
    return CATEGORY_ALIASES[key]


__all__ = [
    "TICKETS",
    "SERVICES",
    "VALIDATIONS",
    "CATEGORIES",
    "CATEGORY_ALIASES",
    "CATEGORY_LABELS",
    "CATEGORY_FILE_PREFIXES",
    "VALIDATION_CONTRACT",
    "ALIASES",
    "TICKETS_RENAME_MAP",
    "TICKETS_DROP_COLUMNS",
    "USER_TYPE_KEYWORDS",
    "AFFIRMATIVE_TOKEN",
    "UNKNOWN_ROUTE",
    "PASS_TYPE_KPIS",
    "USER_TYPE_FILTER_ALL",
    "normalize_category",
]
