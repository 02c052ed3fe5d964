from typing import Any, Dict
from models.sheet_models import SheetData
from .excel_reader_service import load_sheet


def sheet_preview(sheet: SheetData, n_rows: int = 20) -> Dict[str, Any]:
    return {
        "columns": sheet.header_row,
        "rows": sheet.rows[:n_rows],
        "row_count": sheet.row_count,
    }


def get_preview_rows(file_path: str, sheet_name: str, n_rows: int = 20) -> Dict[str, Any]:
    return sheet_preview(load_sheet(file_path, sheet_name), n_rows)
