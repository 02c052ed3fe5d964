import logging
import os
from datetime import date, datetime, time
from typing import Any, List

import numpy as np
import pandas as pd

from models.common_models import SheetInfo
from models.sheet_models import Cell, SheetData, WorkbookData
from services.cells import is_empty, to_label
from services.errors import ParseError, SheetNotFoundError
from services.log_context import LogContext

logger = logging.getLogger(__name__)


def _normalize_cell(value: Any) -> Cell:
    """
    Convert what pandas hands back into a plain cell value:
    NaN/NaT -> None, numpy scalars -> Python scalars, dates -> ISO text.
    """
    if value is None:
        return None
    if pd.api.types.is_scalar(value) and pd.isna(value):
        return None
    if isinstance(value, (pd.Timestamp, datetime, date, time)):
        return value.isoformat()
    if isinstance(value, np.generic):
        return value.item()
    return value


def _read_sheet_rows(xls: pd.ExcelFile, sheet_name: str) -> List[List[Cell]]:
    df = xls.parse(sheet_name, header=None, dtype=object)
    return [
        [_normalize_cell(v) for v in row]
        for row in df.itertuples(index=False, name=None)
    ]


def build_sheet(sheet_name: str, rows: List[List[Cell]]) -> SheetData:
    """
    Turn raw rows into a SheetData. The first row is always the header row.
    Blank header cells stay in header_row as None so data cells keep their
    positions; only non-blank names are listed in headers.
    """
    if not rows:
        return SheetData(name=sheet_name)

    header_row = [None if is_empty(h) else to_label(h) for h in rows[0]]
    data_rows = rows[1:]

    return SheetData(
        name=sheet_name,
        header_row=header_row,
        headers=[h for h in header_row if h is not None],
        rows=[list(row) for row in data_rows if any(not is_empty(c) for c in row)],
        row_count=len(data_rows),
    )


def parse_workbook(file_path: str) -> WorkbookData:
    """
    Read every sheet of a spreadsheet file.
    Sheets without any rows are listed in sheet_names but left out of sheets.
    """
    if not file_path or not os.path.exists(file_path):
        raise ParseError(f"Excel file not found: {os.path.basename(file_path or '')}")

    sheets = {}
    total_row_count = 0

    with LogContext("workbook parse", file=os.path.basename(file_path)):
        try:
            with pd.ExcelFile(file_path) as xls:
                sheet_names = [str(name) for name in xls.sheet_names]
                for sheet_name in sheet_names:
                    rows = _read_sheet_rows(xls, sheet_name)
                    if not rows:
                        continue
                    sheet = build_sheet(sheet_name, rows)
                    sheets[sheet_name] = sheet
                    total_row_count += sheet.row_count
        except Exception as e:
            logger.exception(f"Error processing Excel file {file_path}")
            raise ParseError(f"Failed to process Excel file: {e}") from e

    return WorkbookData(
        sheets=sheets,
        sheet_names=sheet_names,
        total_row_count=total_row_count,
        columns={name: sheet.headers for name, sheet in sheets.items()},
    )


def get_sheet(workbook: WorkbookData, sheet_name: str) -> SheetData:
    if sheet_name not in workbook.sheet_names:
        raise SheetNotFoundError(sheet_name)
    # listed but empty
    return workbook.sheets.get(sheet_name) or SheetData(name=sheet_name)


def load_sheet(file_path: str, sheet_name: str) -> SheetData:
    return get_sheet(parse_workbook(file_path), sheet_name)


def describe_sheets(workbook: WorkbookData) -> List[SheetInfo]:
    return [
        SheetInfo(
            sheet_name=name,
            headers=workbook.columns.get(name, []),
            n_rows=workbook.sheets[name].row_count if name in workbook.sheets else 0,
            n_cols=len(workbook.columns.get(name, [])),
        )
        for name in workbook.sheet_names
    ]
