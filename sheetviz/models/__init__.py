"""Domain models for sheetviz.

Tables, columns and chart suggestions produced by the parser and the
recommendation engine, plus configuration and batch result models.
"""

from .chart_suggestion import ChartSuggestion, ChartSuggestions, ChartType
from .column import NUMERIC_TYPES, Column, ColumnType
from .config_models import AppConfig, ParseSettings
from .parsed_table import ParsedTable, Row
from .raw_grid import Cell, RawGrid, is_blank

__all__ = [
    # Table models
    "Cell",
    "RawGrid",
    "is_blank",
    "Column",
    "ColumnType",
    "NUMERIC_TYPES",
    "ParsedTable",
    "Row",
    # Chart models
    "ChartType",
    "ChartSuggestion",
    "ChartSuggestions",
    # Configuration models
    "AppConfig",
    "ParseSettings",
]
