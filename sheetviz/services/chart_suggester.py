from __future__ import annotations

import re
from collections.abc import Iterable, Mapping, Sequence
from typing import Any

from ..models.chart_suggestion import ChartSuggestion, ChartSuggestions, ChartType
from ..models.column import NUMERIC_TYPES, Column, ColumnType

"""Chart recommendation engine.

Suggestions depend only on column names and types, never on cell values:
- Date x numeric   -> line, area
- Category x numeric -> bar, pie
- numeric          -> stats card

Output order is fixed: all line/area pairs, then all bar/pie pairs, then the
stats cards. Types outside ColumnType are ignored.
"""

__all__ = [
    "ChartRecommender",
    "suggest_charts",
    "make_suggestion_id",
]

_WHITESPACE = re.compile(r"\s+")

# chart type -> (title, description); {x} = dimension column, {y} = measure column
TEMPLATES: dict[ChartType, tuple[str, str]] = {
    ChartType.LINE: ("{y} Over Time", "Trend of {y} by {x}"),
    ChartType.AREA: ("{y} Area Trend", "Area chart of {y} over {x}"),
    ChartType.BAR: ("{y} by {x}", "Compare {y} across {x} categories"),
    ChartType.PIE: ("{y} Distribution by {x}", "Proportion of {y} per {x}"),
    ChartType.STATS: ("{y} Summary", "Total, Average, Min, Max for {y}"),
}


def make_suggestion_id(chart_type: ChartType, *column_names: str) -> str:
    """``<type>_<col>[_<col>]`` with whitespace runs collapsed to ``_``."""
    return _WHITESPACE.sub("_", "_".join([chart_type.value, *column_names]))


def _name_and_type(column: Any) -> tuple[str, Any]:
    if isinstance(column, Column):
        return column.name, column.type
    if isinstance(column, Mapping):
        return str(column.get("name", "")), column.get("type")
    name, col_type = column
    return str(name), col_type


class ChartRecommender:
    """Stateless service mapping ``{name, type}`` columns to chart suggestions."""

    def suggest(self, columns: Iterable[Column | Mapping[str, Any] | Sequence[Any]]) -> ChartSuggestions:
        """Enumerate chart suggestions and stats cards.

        Accepts Column objects, ``{"name", "type"}`` mappings or
        ``(name, type)`` pairs. Never raises for a well-formed list; an empty
        list gives empty results.
        """
        date_cols: list[str] = []
        numeric_cols: list[str] = []
        category_cols: list[str] = []
        for column in columns:
            name, raw_type = _name_and_type(column)
            col_type = ColumnType.coerce(raw_type)
            if col_type is ColumnType.DATE:
                date_cols.append(name)
            elif col_type in NUMERIC_TYPES:
                numeric_cols.append(name)
            elif col_type is ColumnType.CATEGORY:
                category_cols.append(name)

        charts: list[ChartSuggestion] = []
        for x in date_cols:
            for y in numeric_cols:
                charts.append(self._pair(ChartType.LINE, x, y))
                charts.append(self._pair(ChartType.AREA, x, y))
        for x in category_cols:
            for y in numeric_cols:
                charts.append(self._pair(ChartType.BAR, x, y))
                charts.append(self._pair(ChartType.PIE, x, y))

        stat_cards = [self._stats(y) for y in numeric_cols]
        return ChartSuggestions(charts=charts, stat_cards=stat_cards)

    @staticmethod
    def _pair(chart_type: ChartType, x: str, y: str) -> ChartSuggestion:
        title, description = TEMPLATES[chart_type]
        return ChartSuggestion(
            id=make_suggestion_id(chart_type, x, y),
            chart_type=chart_type,
            title=title.format(x=x, y=y),
            x_column=x,
            y_column=y,
            description=description.format(x=x, y=y),
        )

    @staticmethod
    def _stats(y: str) -> ChartSuggestion:
        title, description = TEMPLATES[ChartType.STATS]
        return ChartSuggestion(
            id=make_suggestion_id(ChartType.STATS, y),
            chart_type=ChartType.STATS,
            title=title.format(y=y),
            y_column=y,
            description=description.format(y=y),
        )


_default_recommender = ChartRecommender()


def suggest_charts(columns: Iterable[Column | Mapping[str, Any] | Sequence[Any]]) -> ChartSuggestions:
    """Module-level shortcut for ChartRecommender().suggest."""
    return _default_recommender.suggest(columns)
