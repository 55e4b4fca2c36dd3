from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any

"""Chart suggestion models returned by the recommendation engine."""

__all__ = [
    "ChartType",
    "ChartSuggestion",
    "ChartSuggestions",
]


class ChartType(str, Enum):
    LINE = "line"
    AREA = "area"
    BAR = "bar"
    PIE = "pie"
    STATS = "stats"


@dataclass(frozen=True)
class ChartSuggestion:
    """One recommended chart (or summary-stat card).

    ``x_column`` is None for stats cards, which only summarize ``y_column``.
    """
    id: str  # e.g. line_Order_Date_Total_Amount
    chart_type: ChartType
    title: str
    y_column: str
    description: str
    x_column: str | None = None

    def to_dict(self) -> dict[str, Any]:
        out: dict[str, Any] = {
            "id": self.id,
            "chartType": self.chart_type.value,
            "title": self.title,
        }
        if self.x_column is not None:
            out["xColumn"] = self.x_column
        out["yColumn"] = self.y_column
        out["description"] = self.description
        return out


@dataclass(frozen=True)
class ChartSuggestions:
    """Charts (line/area/bar/pie) and stats cards, each in generation order."""
    charts: list[ChartSuggestion]
    stat_cards: list[ChartSuggestion]

    def __len__(self) -> int:
        return len(self.charts) + len(self.stat_cards)

    def to_dict(self) -> dict[str, Any]:
        return {
            "charts": [c.to_dict() for c in self.charts],
            "statCards": [c.to_dict() for c in self.stat_cards],
        }
