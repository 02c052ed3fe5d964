from typing import Optional

from models.sheet_models import SheetData
from services.errors import InputValidationError


def validate_axes(sheet: Optional[SheetData], x_axis: str, y_axis: str) -> bool:
    """
    Check a chart request against a sheet before any extraction runs.
    Raises InputValidationError naming the first problem found.
    """
    if sheet is None or not sheet.headers:
        raise InputValidationError("Invalid sheet data")

    for axis in (x_axis, y_axis):
        if axis not in sheet.headers:
            raise InputValidationError(f'Column "{axis}" not found in sheet', column=axis)

    if not sheet.rows:
        raise InputValidationError("No data rows found in sheet")

    return True
