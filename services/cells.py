"""
Coercion rules for spreadsheet cells.

A cell is one of: None (empty), a number (int/float), a bool, or text (str).
Dates are turned into ISO text when the workbook is read, so they land in the
text case here.
"""
from typing import Any, Iterable, List

import pandas as pd


def is_empty(value: Any) -> bool:
    return value is None or (isinstance(value, str) and value == "")


def to_numeric(values: Iterable[Any]) -> pd.Series:
    """
    Numeric reading of a run of cells. Cells that are not numbers or numeric
    text come back as NaN. Booleans count as 1/0.
    """
    cells = [int(v) if isinstance(v, bool) else v for v in values]
    return pd.to_numeric(pd.Series(cells, dtype=object), errors="coerce")


def coerce_numbers(values: Iterable[Any]) -> List[float]:
    """Chart-series coercion: anything non-numeric plots as 0."""
    return to_numeric(values).fillna(0).astype(float).tolist()


def to_label(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)
