import logging
from typing import Any, Dict, List, Optional

from config import DEFAULT_ROW_LIMIT
from models.chart_models import ChartData2D, ChartDataset, Point3D
from models.sheet_models import SheetData
from services.cells import coerce_numbers, to_label
from services.color_service import generate_colors
from services.errors import ColumnNotFoundError, InputValidationError
from services.excel_reader_service import load_sheet
from services.log_context import LogContext

logger = logging.getLogger(__name__)


def _column_index(sheet: SheetData, column: str) -> int:
    """Position of `column` in the unfiltered header row."""
    try:
        return sheet.header_row.index(column)
    except ValueError:
        raise ColumnNotFoundError(column) from None


def _cell(row: List[Any], index: int) -> Any:
    return row[index] if index < len(row) else None


def _require_data_rows(sheet: SheetData) -> None:
    if not sheet.header_row or not sheet.rows:
        raise InputValidationError("Sheet must have at least a header row and one data row")


def _resolve_limit(limit: Optional[int]) -> int:
    return DEFAULT_ROW_LIMIT if limit is None else max(limit, 0)


def extract_series(
    sheet: SheetData,
    x_axis: str,
    y_axis: str,
    limit: Optional[int] = None,
) -> ChartData2D:
    """
    Build a Chart.js dataset of `y_axis` against `x_axis`.

    Only the first `limit` data rows are read. A row is dropped when its X or
    Y cell is blank, or its Y cell is an empty string. Non-numeric Y values
    plot as 0.
    """
    _require_data_rows(sheet)
    x_index = _column_index(sheet, x_axis)
    y_index = _column_index(sheet, y_axis)

    rows = sheet.rows[:_resolve_limit(limit)]
    colors = generate_colors(len(rows))

    labels: List[str] = []
    y_cells: List[Any] = []
    for row in rows:
        x_value = _cell(row, x_index)
        y_value = _cell(row, y_index)
        if x_value is None or y_value is None or y_value == "":
            continue
        labels.append(to_label(x_value))
        y_cells.append(y_value)
    values = coerce_numbers(y_cells)

    # colors follow the retained position, not the source row
    palette = [colors[i % len(colors)] for i in range(len(values))]

    return ChartData2D(
        labels=labels,
        datasets=[
            ChartDataset(
                label=f"{y_axis} vs {x_axis}",
                data=values,
                background_color=[c.background for c in palette],
                border_color=[c.border for c in palette],
            )
        ],
    )


def extract_3d_series(
    sheet: SheetData,
    x_axis: str,
    y_axis: str,
    z_axis: Optional[str] = None,
    limit: Optional[int] = None,
) -> List[Point3D]:
    """
    Build 3D points from `x_axis`, `y_axis` and optionally `z_axis`.

    Without a Z column the row's position in the limited slice is used as z.
    Rows are dropped only when X or Y is blank; an empty-string Y is kept
    and plots as 0.
    """
    _require_data_rows(sheet)
    x_index = _column_index(sheet, x_axis)
    y_index = _column_index(sheet, y_axis)
    z_index = _column_index(sheet, z_axis) if z_axis else None

    retained = []
    for index, row in enumerate(sheet.rows[:_resolve_limit(limit)]):
        x_value = _cell(row, x_index)
        y_value = _cell(row, y_index)
        if x_value is None or y_value is None:
            continue
        z_value = _cell(row, z_index) if z_index is not None else index
        retained.append((x_value, y_value, z_value))

    if not retained:
        return []
    x_cells, y_cells, z_cells = zip(*retained)
    return [
        Point3D(x=x, y=y, z=z, label=to_label(label))
        for x, y, z, label in zip(
            coerce_numbers(x_cells), coerce_numbers(y_cells), coerce_numbers(z_cells), x_cells
        )
    ]


def extract_chart_data(
    file_path: str,
    sheet_name: str,
    x_axis: str,
    y_axis: str,
    limit: Optional[int] = None,
) -> ChartData2D:
    with LogContext("2D chart extraction", sheet=sheet_name, x=x_axis, y=y_axis):
        sheet = load_sheet(file_path, sheet_name)
        return extract_series(sheet, x_axis, y_axis, limit)


def extract_3d_chart_data(
    file_path: str,
    sheet_name: str,
    x_axis: str,
    y_axis: str,
    z_axis: Optional[str] = None,
    limit: Optional[int] = None,
) -> List[Point3D]:
    with LogContext("3D chart extraction", sheet=sheet_name, x=x_axis, y=y_axis, z=z_axis):
        sheet = load_sheet(file_path, sheet_name)
        return extract_3d_series(sheet, x_axis, y_axis, z_axis, limit)


def default_chart_options(title: str) -> Dict[str, Any]:
    return {
        "responsive": True,
        "plugins": {
            "title": {"display": True, "text": title},
            "legend": {"display": True},
        },
    }
