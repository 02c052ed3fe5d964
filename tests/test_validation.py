import pytest

from services.errors import InputValidationError
from services.excel_reader_service import build_sheet
from services.validation_service import validate_axes


@pytest.fixture
def sheet():
    return build_sheet("Sales", [["Month", "Revenue"], ["Jan", 100]])


def test_valid_axes(sheet):
    assert validate_axes(sheet, "Month", "Revenue") is True


@pytest.mark.parametrize("x_axis, y_axis, missing", [("Region", "Revenue", "Region"), ("Month", "Cost", "Cost")])
def test_unknown_axis_is_named(sheet, x_axis, y_axis, missing):
    with pytest.raises(InputValidationError) as exc_info:
        validate_axes(sheet, x_axis, y_axis)

    assert exc_info.value.column == missing
    assert missing in str(exc_info.value)


def test_missing_sheet():
    with pytest.raises(InputValidationError, match="Invalid sheet data"):
        validate_axes(None, "Month", "Revenue")


def test_sheet_without_data_rows():
    with pytest.raises(InputValidationError, match="No data rows"):
        validate_axes(build_sheet("S", [["Month", "Revenue"]]), "Month", "Revenue")
