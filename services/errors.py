"""
Errors raised by the workbook parsing and chart extraction services.

Routers do not catch these; main.py maps each one to an HTTP response.
"""
from typing import Optional


class ChartDataError(Exception):
    """Base class for every failure of the extraction core."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ParseError(ChartDataError):
    """The file could not be opened or is not a recognised spreadsheet."""


class SheetNotFoundError(ChartDataError):
    def __init__(self, sheet_name: str):
        super().__init__(f'Sheet "{sheet_name}" not found')
        self.sheet_name = sheet_name


class ColumnNotFoundError(ChartDataError):
    def __init__(self, column: str):
        super().__init__(f'Column "{column}" not found in sheet')
        self.column = column


class InputValidationError(ChartDataError):
    """A precondition on the chart request failed before extraction ran."""

    def __init__(self, message: str, column: Optional[str] = None):
        super().__init__(message)
        self.column = column
