from typing import Any, List

import pandas as pd

from models.sheet_models import ColumnSummary, InsufficientData, SheetData, SheetSummary, SummaryResult
from services.cells import is_empty, to_numeric
from services.excel_reader_service import load_sheet


def summarize_column(column: str, values: List[Any]) -> ColumnSummary:
    series = pd.Series(values, dtype=object)
    present = series[[not is_empty(v) for v in values]]
    numeric = to_numeric(present).dropna()

    # nunique keeps 10 and "10" apart but counts 10 and 10.0 once
    summary = ColumnSummary(
        column=column,
        total_values=int(present.count()),
        numeric_values=int(numeric.count()),
        unique_values=int(present.nunique()),
    )
    if not numeric.empty:
        summary.min = float(numeric.min())
        summary.max = float(numeric.max())
        summary.sum = float(numeric.sum())
        summary.avg = float(numeric.mean())
    return summary


def summarize_sheet(sheet: SheetData) -> SummaryResult:
    """
    Descriptive statistics for every named column of the sheet.
    A sheet without data rows gives InsufficientData instead of raising.
    """
    if not sheet.header_row or not sheet.rows:
        return InsufficientData()

    frame = pd.DataFrame(
        [row + [None] * (len(sheet.header_row) - len(row)) for row in sheet.rows],
        dtype=object,
    )
    column_stats = [
        summarize_column(header, frame[index].tolist())
        for index, header in enumerate(sheet.header_row)
        if header is not None
    ]

    return SheetSummary(
        sheet_name=sheet.name,
        total_rows=len(sheet.rows),
        total_columns=len(sheet.header_row),
        column_stats=column_stats,
    )


def summarize(file_path: str, sheet_name: str) -> SummaryResult:
    return summarize_sheet(load_sheet(file_path, sheet_name))
