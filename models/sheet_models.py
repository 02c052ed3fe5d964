from typing import Any, Dict, List, Optional, Union
from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

Cell = Any


class SheetData(BaseModel):
    name: str
    header_row: List[Optional[str]] = []  # first row as text, None where blank
    headers: List[str] = []         # non-empty header names in column order
    rows: List[List[Cell]] = []     # data rows, fully-empty rows removed
    row_count: int = 0              # data rows before empty-row filtering


class WorkbookData(BaseModel):
    sheets: Dict[str, SheetData]
    sheet_names: List[str]
    total_row_count: int
    columns: Dict[str, List[str]]


class ColumnSummary(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    column: str
    total_values: int
    numeric_values: int
    unique_values: int
    min: Optional[float] = None
    max: Optional[float] = None
    sum: Optional[float] = None
    avg: Optional[float] = None


class SheetSummary(BaseModel):
    """Per-sheet statistics; serialized with camelCase keys (sheetName, columnStats, ...)."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    sheet_name: str
    total_rows: int
    total_columns: int
    column_stats: List[ColumnSummary]


class InsufficientData(BaseModel):
    error: str = "Insufficient data for analysis"


SummaryResult = Union[SheetSummary, InsufficientData]
