"""sheetviz — spreadsheet ingestion and chart recommendations.

Typical use::

    from sheetviz import parse, suggest_charts

    table = parse(data, "budget.xlsx")
    suggestions = suggest_charts(table.columns)
"""

from .excel.reader import (
    EmptySheetError,
    FileTooLargeError,
    InputError,
    NoSheetsError,
    UnreadableFileError,
    UnsupportedFileTypeError,
)
from .models import ChartSuggestion, ChartSuggestions, ChartType, Column, ColumnType, ParsedTable
from .services.chart_suggester import ChartRecommender, suggest_charts
from .services.table_builder import TableBuilder, apply_type_overrides, parse

__version__ = "0.1.0"

__all__ = [
    "parse",
    "suggest_charts",
    "apply_type_overrides",
    "TableBuilder",
    "ChartRecommender",
    "ParsedTable",
    "Column",
    "ColumnType",
    "ChartType",
    "ChartSuggestion",
    "ChartSuggestions",
    "InputError",
    "NoSheetsError",
    "EmptySheetError",
    "UnreadableFileError",
    "UnsupportedFileTypeError",
    "FileTooLargeError",
]
