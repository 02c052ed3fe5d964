import pytest

from models.sheet_models import InsufficientData, SheetSummary
from services.errors import SheetNotFoundError
from services.excel_reader_service import build_sheet
from services.stats_service import summarize, summarize_column, summarize_sheet


class TestSummarizeColumn:
    def test_mixed_values_example(self):
        stats = summarize_column("Value", [10, "abc", 20, ""])

        assert stats.total_values == 3
        assert stats.numeric_values == 2
        assert stats.unique_values == 3
        assert stats.min == 10
        assert stats.max == 20
        assert stats.sum == 30
        assert stats.avg == 15

    def test_text_only_column_has_no_numeric_stats(self):
        stats = summarize_column("Name", ["a", "b", "a", None])

        assert stats.total_values == 3
        assert stats.unique_values == 2
        assert stats.numeric_values == 0
        assert stats.min is None and stats.avg is None

    def test_number_and_its_text_are_distinct_values(self):
        stats = summarize_column("Code", [10, "10", 10.0])

        assert stats.unique_values == 2
        assert stats.numeric_values == 3
        assert stats.sum == 30


class TestSummarizeSheet:
    def test_summary_per_named_column(self):
        sheet = build_sheet(
            "Sales",
            [["Month", None, "Revenue"], ["Jan", "x", 100], ["Feb", "y", "250.5"]],
        )
        summary = summarize_sheet(sheet)

        assert isinstance(summary, SheetSummary)
        assert summary.total_rows == 2
        assert summary.total_columns == 3
        assert [c.column for c in summary.column_stats] == ["Month", "Revenue"]
        revenue = summary.column_stats[1]
        assert revenue.max == 250.5
        assert revenue.avg == pytest.approx(175.25)

    def test_header_only_sheet_is_insufficient(self):
        result = summarize_sheet(build_sheet("S", [["Month", "Revenue"]]))

        assert isinstance(result, InsufficientData)
        assert result.error == "Insufficient data for analysis"

    def test_empty_sheet_is_insufficient(self):
        assert isinstance(summarize_sheet(build_sheet("S", [])), InsufficientData)


class TestSummarizeFile:
    def test_summarize_from_file(self, workbook_path):
        summary = summarize(workbook_path, "Sales")

        units = next(c for c in summary.column_stats if c.column == "Units")
        assert units.sum == 60
        assert units.avg == 20

    def test_missing_sheet_raises(self, workbook_path):
        with pytest.raises(SheetNotFoundError):
            summarize(workbook_path, "Budget")


def test_short_rows_count_missing_cells_as_empty():
    summary = summarize_sheet(build_sheet("S", [["A", "B"], [1], [2, "3"]]))

    b = summary.column_stats[1]
    assert b.total_values == 1
    assert b.numeric_values == 1
    assert b.sum == 3


def test_summary_serializes_with_camel_case_keys():
    sheet = build_sheet("Sales", [["Month", "Revenue"], ["Jan", 100], ["Feb", "abc"]])
    body = summarize_sheet(sheet).model_dump(by_alias=True)

    assert set(body) == {"sheetName", "totalRows", "totalColumns", "columnStats"}
    assert body["columnStats"][1] == {
        "column": "Revenue",
        "totalValues": 2,
        "numericValues": 1,
        "uniqueValues": 2,
        "min": 100.0,
        "max": 100.0,
        "sum": 100.0,
        "avg": 100.0,
    }
