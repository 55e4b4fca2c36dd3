from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Union

"""RawGrid model: the un-normalized cell matrix of one sheet.

A RawGrid is produced per request by the extractor (sheetviz.excel.reader) and
discarded once the table has been materialized.
"""

__all__ = [
    "Cell",
    "RawGrid",
    "is_blank",
]

# str | int | float | datetime | None (datetime = date instant)
Cell = Union[str, int, float, datetime, None]


def is_blank(cell: Cell) -> bool:
    """True when the cell is None or its trimmed text is empty."""
    return cell is None or str(cell).strip() == ""


@dataclass(frozen=True)
class RawGrid:
    """Cell matrix for the selected sheet plus the workbook's sheet list."""
    sheet_names: list[str]  # 全シート名 (ブック内の順序)
    selected_sheet: str  # 実際に読み込んだシート
    grid: list[list[Cell]]  # 行ごとのセル値 (ヘッダ未適用)

    @property
    def row_count(self) -> int:
        return len(self.grid)
