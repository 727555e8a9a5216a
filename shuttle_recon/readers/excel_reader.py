"""Excel file reader: keep it simple, always use openpyxl via pandas."""

import math
from datetime import date, datetime
from typing import Any, Optional, Set, Tuple

import polars as pl
from openpyxl import load_workbook

from .base import BaseReader

# read_excel options that move cells away from their sheet position
_LAYOUT_KWARGS = ("header", "skiprows", "usecols", "index_col", "nrows")


def _to_text(v: Any) -> Optional[str]:
    """Cell -> text as a spreadsheet would display it; blanks -> None."""
    # NaN and NaT are the only values not equal to themselves
    if v is None or (not isinstance(v, str) and v != v):
        return None
    if isinstance(v, float):
        if math.isinf(v):
            return str(v)
        if v.is_integer():
            return str(int(v))
        return str(v)
    if isinstance(v, datetime):
        if (v.hour, v.minute, v.second) == (0, 0, 0):
            return v.date().isoformat()
        return v.isoformat(sep=" ")
    if isinstance(v, date):
        return v.isoformat()
    if isinstance(v, (bytes, bytearray)):
        return v.decode("utf-8", "ignore")
    text = str(v)
    return text if text.strip() else None


def _percent_text(v: Any) -> Optional[str]:
    """A percent-formatted number as displayed, e.g. 0.8 -> '80%'."""
    if isinstance(v, bool) or not isinstance(v, (int, float)) or v != v:
        return _to_text(v)
    return f"{v * 100:g}%"


def percent_cells(path: str, sheet_name=0) -> Set[Tuple[int, int]]:
    """Positions (data row, column), both 0-based below the header, of numeric
    cells whose number format is a percentage.

    pandas hands over the stored value only, so a cell showing '80%' arrives as 0.8.
    """
    wb = load_workbook(path, read_only=True, data_only=True)
    try:
        ws = wb.worksheets[sheet_name] if isinstance(sheet_name, int) else wb[sheet_name]
        ws.reset_dimensions()
        found = set()
        for r, row in enumerate(ws.iter_rows(min_row=2)):
            for c, cell in enumerate(row):
                value = getattr(cell, "value", None)
                if isinstance(value, bool) or not isinstance(value, (int, float)):
                    continue
                if "%" in (getattr(cell, "number_format", None) or ""):
                    found.add((r, c))
        return found
    finally:
        wb.close()


class ExcelReader(BaseReader):
    """Reader for Excel files (openpyxl only)."""

    def read(self, path: str, sheet_name=None, **kwargs) -> pl.DataFrame:
        """Read the first sheet (or `sheet_name`) via pandas/openpyxl, then convert to polars."""
        import pandas as pd

        if sheet_name is None:
            sheet_name = kwargs.pop("sheet", 0)

        df_pd = pd.read_excel(
            path,
            sheet_name=sheet_name,
            engine="openpyxl",
            dtype=object,
            **kwargs,
        )
        # Ensure string unique headers
        cols = [str(c) for c in df_pd.columns]
        seen: dict[str, int] = {}
        uniq = []
        for c in cols:
            if c in seen:
                seen[c] += 1
                uniq.append(f"{c}_{seen[c]}")
            else:
                seen[c] = 0
                uniq.append(c)

        percents = set()
        if not any(k in kwargs for k in _LAYOUT_KWARGS):
            percents = percent_cells(path, sheet_name)

        data = {
            name: [
                _percent_text(v) if (r, i) in percents else _to_text(v)
                for r, v in enumerate(df_pd.iloc[:, i].tolist())
            ]
            for i, name in enumerate(uniq)
        }
        return pl.DataFrame(data, schema={name: pl.Utf8 for name in uniq})
