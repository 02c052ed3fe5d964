import pytest

from services.chart_data_service import (
    default_chart_options,
    extract_3d_chart_data,
    extract_3d_series,
    extract_chart_data,
    extract_series,
)
from services.color_service import generate_colors
from services.errors import ColumnNotFoundError, InputValidationError, SheetNotFoundError
from services.excel_reader_service import build_sheet


@pytest.fixture
def revenue_sheet():
    return build_sheet(
        "Sales",
        [["Month", "Revenue"], ["Jan", 100], ["Feb", 200], ["", ""]],
    )


@pytest.fixture
def gappy_sheet():
    return build_sheet(
        "Gaps",
        [
            ["Month", "Revenue", "Depth"],
            ["Jan", 100, 5],
            ["Feb", "", 6],
            ["Mar", None, 7],
            [None, 400, 8],
            ["May", "n/a", None],
        ],
    )


class TestExtractSeries:
    def test_month_revenue_example(self, revenue_sheet):
        chart = extract_series(revenue_sheet, "Month", "Revenue")

        assert chart.labels == ["Jan", "Feb"]
        assert chart.datasets[0].data == [100, 200]
        assert chart.datasets[0].label == "Revenue vs Month"

    def test_all_series_have_equal_length(self, gappy_sheet):
        dataset = extract_series(gappy_sheet, "Month", "Revenue").datasets[0]
        labels = extract_series(gappy_sheet, "Month", "Revenue").labels

        assert len(labels) == len(dataset.data) == len(dataset.background_color) == len(dataset.border_color)

    def test_skips_blank_x_blank_y_and_empty_string_y(self, gappy_sheet):
        chart = extract_series(gappy_sheet, "Month", "Revenue")

        assert chart.labels == ["Jan", "May"]
        # non-numeric text plots as zero
        assert chart.datasets[0].data == [100, 0]

    def test_numeric_text_and_booleans_plot_as_numbers(self):
        sheet = build_sheet("S", [["Item", "Qty"], ["a", "12.5"], ["b", True], ["c", "1,000"]])

        assert extract_series(sheet, "Item", "Qty").datasets[0].data == [12.5, 1, 0]

    def test_colors_follow_retained_position(self, gappy_sheet):
        dataset = extract_series(gappy_sheet, "Month", "Revenue").datasets[0]
        palette = generate_colors(2)

        assert dataset.background_color == [c.background for c in palette]
        assert dataset.border_color == [c.border for c in palette]

    def test_missing_column_is_named(self, revenue_sheet):
        with pytest.raises(ColumnNotFoundError) as exc_info:
            extract_series(revenue_sheet, "Region", "Revenue")
        assert exc_info.value.column == "Region"

    def test_missing_y_column(self, revenue_sheet):
        with pytest.raises(ColumnNotFoundError) as exc_info:
            extract_series(revenue_sheet, "Month", "Profit")
        assert exc_info.value.column == "Profit"

    def test_limit_applies_before_filtering(self, gappy_sheet):
        chart = extract_series(gappy_sheet, "Month", "Revenue", limit=3)
        # rows Jan, Feb(""), Mar(None) are read; only Jan survives
        assert chart.labels == ["Jan"]

    def test_blank_header_columns_stay_addressable(self):
        sheet = build_sheet("S", [["Label", None, "Value"], ["a", "ignored", 3], ["b", "ignored", 4]])
        chart = extract_series(sheet, "Label", "Value")
        assert chart.datasets[0].data == [3, 4]

    def test_header_only_sheet_is_rejected(self):
        sheet = build_sheet("S", [["Month", "Revenue"]])
        with pytest.raises(InputValidationError):
            extract_series(sheet, "Month", "Revenue")

    def test_serializes_with_chartjs_keys(self, revenue_sheet):
        payload = extract_series(revenue_sheet, "Month", "Revenue").model_dump(by_alias=True)
        assert set(payload["datasets"][0]) == {"label", "data", "backgroundColor", "borderColor"}


class TestExtract3DSeries:
    def test_z_defaults_to_row_position(self, revenue_sheet):
        points = extract_3d_series(revenue_sheet, "Month", "Revenue")
        assert [p.z for p in points] == [i for i in range(len(points))]

    def test_keeps_empty_string_y_but_drops_blank_cells(self, gappy_sheet):
        points = extract_3d_series(gappy_sheet, "Month", "Revenue")

        assert [p.label for p in points] == ["Jan", "Feb", "May"]
        assert [p.y for p in points] == [100, 0, 0]
        # z is the slice position, so dropped rows leave gaps
        assert [p.z for p in points] == [0, 1, 4]

    def test_uses_z_column_when_given(self, gappy_sheet):
        points = extract_3d_series(gappy_sheet, "Month", "Revenue", "Depth")
        assert [p.z for p in points] == [5, 6, 0]

    def test_numeric_x_values(self):
        sheet = build_sheet("S", [["X", "Y"], [1.5, 2], ["3", "4"]])
        points = extract_3d_series(sheet, "X", "Y")

        assert [(p.x, p.y) for p in points] == [(1.5, 2), (3, 4)]
        assert [p.label for p in points] == ["1.5", "3"]

    def test_missing_z_column(self, revenue_sheet):
        with pytest.raises(ColumnNotFoundError) as exc_info:
            extract_3d_series(revenue_sheet, "Month", "Revenue", "Depth")
        assert exc_info.value.column == "Depth"

    def test_limit(self, gappy_sheet):
        assert len(extract_3d_series(gappy_sheet, "Month", "Revenue", limit=2)) == 2


class TestFileLevelExtraction:
    def test_extract_chart_data_from_file(self, workbook_path):
        chart = extract_chart_data(workbook_path, "Sales", "Month", "Units")

        assert chart.labels == ["Jan", "Feb", "Mar"]
        assert chart.datasets[0].data == [10, 20, 30]

    def test_extract_3d_chart_data_from_file(self, workbook_path):
        points = extract_3d_chart_data(workbook_path, "Sales", "Revenue", "Units", "Revenue")
        assert [(p.x, p.y, p.z) for p in points] == [(100, 10, 100), (200, 20, 200), (300, 30, 300)]

    def test_unknown_sheet(self, workbook_path):
        with pytest.raises(SheetNotFoundError):
            extract_chart_data(workbook_path, "Budget", "Month", "Revenue")


def test_default_chart_options_carry_title():
    options = default_chart_options("Revenue by month")
    assert options["plugins"]["title"] == {"display": True, "text": "Revenue by month"}
    assert options["responsive"] is True
