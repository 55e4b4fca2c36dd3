from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Any

from .column import Column
from .raw_grid import Cell

"""ParsedTable: immutable output of one parse call."""

__all__ = [
    "ParsedTable",
    "Row",
    "to_json_value",
]

Row = dict[str, Cell]


def to_json_value(value: Any) -> Any:
    """Render a cell for JSON output (date instants become ISO-8601 strings)."""
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    return value


@dataclass(frozen=True)
class ParsedTable:
    """Typed table materialized from a single sheet.

    ``rows`` holds every retained row; ``preview`` is its first slice. Each row
    maps exactly the active column names to a value or None.
    """
    sheet_names: list[str]
    selected_sheet: str
    columns: list[Column]
    rows: list[Row]
    preview: list[Row]
    file_name: str = ""
    header_row_index: int = 0
    row_count: int = field(init=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "row_count", len(self.rows))

    @property
    def column_names(self) -> list[str]:
        return [c.name for c in self.columns]

    def to_dict(self, include_rows: bool = True) -> dict[str, Any]:
        """Wire representation (camelCase keys).

        Args:
            include_rows: When False, ``rows`` is omitted and only metadata and
                the preview are returned.
        """
        out: dict[str, Any] = {
            "fileName": self.file_name,
            "sheetNames": list(self.sheet_names),
            "selectedSheet": self.selected_sheet,
            "rowCount": self.row_count,
            "columns": [
                {
                    "name": c.name,
                    "type": c.type_name,
                    "sample": [to_json_value(v) for v in c.sample],
                }
                for c in self.columns
            ],
            "preview": [_row_to_json(r) for r in self.preview],
        }
        if include_rows:
            out["rows"] = [_row_to_json(r) for r in self.rows]
        return out


def _row_to_json(row: Row) -> dict[str, Any]:
    return {k: to_json_value(v) for k, v in row.items()}
