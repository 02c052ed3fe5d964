"""Workbook parsing, chart extraction, statistics, storage and auth services."""
