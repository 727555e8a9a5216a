"""Date normalization for heterogeneous spreadsheet date cells.

Every value ends up as an ISO 'YYYY-MM-DD' string or the INVALID_DATE
sentinel; nothing here raises. Normalizing an ISO string returns it as-is.
"""

import math
import numbers
import re
from datetime import date, datetime, timedelta
from typing import Any

from dateutil import parser as dateparser

INVALID_DATE = "Invalid Date"

# Spreadsheet serial 25569 is 1970-01-01 (serial 0 is 1899-12-30)
EXCEL_EPOCH_OFFSET_DAYS = 25569
_UNIX_EPOCH = datetime(1970, 1, 1)
_MS_PER_DAY = 86400 * 1000

# Fixed default so partial strings never pick up today's date
_PARSE_DEFAULT = datetime(2000, 1, 1)

_TIME_SPLIT = re.compile(r"[\sT]")
_DATE_SEPARATORS = re.compile(r"[/-]")
# Serials that reached us as text (CSV cells); five digits covers 1927 to 2173
_SERIAL_TEXT = re.compile(r"^\d{5}(\.\d+)?$")


def _iso(value: Any) -> str:
    try:
        return date(value.year, value.month, value.day).isoformat()
    except (AttributeError, TypeError, ValueError):
        return INVALID_DATE


def _from_serial(value: float) -> str:
    if math.isnan(value) or math.isinf(value):
        return INVALID_DATE
    # round half up, matching how the exports serialize milliseconds
    ms = math.floor((value - EXCEL_EPOCH_OFFSET_DAYS) * _MS_PER_DAY + 0.5)
    try:
        return (_UNIX_EPOCH + timedelta(milliseconds=ms)).date().isoformat()
    except OverflowError:
        return INVALID_DATE


def _from_delimited(text: str) -> str | None:
    """Parse D-M-Y or Y-M-D tokens; None when the shape is not recognized."""
    date_part = _TIME_SPLIT.split(text, maxsplit=1)[0]
    tokens = _DATE_SEPARATORS.split(date_part)
    if len(tokens) != 3 or not all(t.isdigit() for t in tokens):
        return None
    if len(tokens[0]) == 4:
        year, month, day = tokens
    elif len(tokens[2]) == 4:
        day, month, year = tokens
    else:
        return None
    try:
        return date(int(year), int(month), int(day)).isoformat()
    except ValueError:
        return INVALID_DATE


def _from_free_text(text: str) -> str:
    try:
        parsed = dateparser.parse(text, dayfirst=True, default=_PARSE_DEFAULT)
    except (ValueError, OverflowError):
        return INVALID_DATE
    return _iso(parsed)


def normalize_date(value: Any) -> str:
    """Convert a date-like cell into an ISO calendar date string or INVALID_DATE."""
    if value is None or isinstance(value, bool):
        return INVALID_DATE
    if isinstance(value, datetime):
        return _iso(value)
    if isinstance(value, date):
        return _iso(value)
    if isinstance(value, numbers.Real):
        try:
            return _from_serial(float(value))
        except OverflowError:
            return INVALID_DATE

    text = str(value).strip()
    if not text or text == INVALID_DATE:
        return INVALID_DATE

    if _SERIAL_TEXT.match(text):
        return _from_serial(float(text))
    if "/" in text or "-" in text:
        result = _from_delimited(text)
        if result is not None:
            return result
    return _from_free_text(text)
