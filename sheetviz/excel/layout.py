from __future__ import annotations

import logging
import re
from collections.abc import Sequence
from dataclasses import dataclass
from datetime import datetime

from ..models.raw_grid import Cell, is_blank

"""Layout heuristics for human-authored sheets.

Three passes over the raw grid:
1. locate_header: タイトル行を飛ばして本当のヘッダ行を探す
2. filter_rows: 空行とセクション見出し行 ("▸ INCOME", "TOTAL" ...) を除外
3. select_active_columns: ヘッダもデータも空の列を除外
"""

__all__ = [
    "HeaderInfo",
    "count_filled",
    "locate_header",
    "looks_like_data",
    "filter_rows",
    "select_active_columns",
    "column_placeholder",
]

logger = logging.getLogger(__name__)

DEFAULT_SCAN_ROWS = 10

# Prefix match: sign, digits, currency glyphs and separators at the start.
_DATA_PREFIX = re.compile(r"^-?[\d$£€,.]+")


@dataclass(frozen=True)
class HeaderInfo:
    """Chosen header row and its cleaned names."""
    row_index: int  # grid 内のヘッダ行位置 (0-based)
    names: list[str]  # trimmed names, blanks replaced by Column_N
    raw: list[Cell]  # header cells as read


def column_placeholder(index: int) -> str:
    """Placeholder name for a blank header cell at 0-based ``index``."""
    return f"Column_{index + 1}"


def count_filled(row: Sequence[Cell]) -> int:
    return sum(1 for cell in row if not is_blank(cell))


def locate_header(grid: Sequence[Sequence[Cell]], scan_rows: int = DEFAULT_SCAN_ROWS) -> HeaderInfo:
    """Pick the row with the most filled cells among the first ``scan_rows`` rows.

    The first row to reach a new maximum wins, so a single-cell title row loses
    to the real header below it and ties keep the earlier row. An empty grid
    yields index 0 with no names.
    """
    header_index = 0
    best = 0
    for i in range(min(scan_rows, len(grid))):
        filled = count_filled(grid[i])
        if filled > best:
            best = filled
            header_index = i

    raw = list(grid[header_index]) if grid else []
    names = [
        column_placeholder(i) if is_blank(cell) else str(cell).strip()
        for i, cell in enumerate(raw)
    ]
    logger.debug(f"header row={header_index} filled={best} names={names}")
    return HeaderInfo(row_index=header_index, names=names, raw=raw)


def looks_like_data(cell: Cell) -> bool:
    """True for date instants and text starting like a number or amount."""
    if isinstance(cell, datetime):
        return True
    text = "" if cell is None else str(cell).strip()
    return _DATA_PREFIX.match(text) is not None


def _is_section_label(row: Sequence[Cell]) -> bool:
    filled = [i for i, cell in enumerate(row) if not is_blank(cell)]
    return len(filled) == 1 and filled[0] == 0 and not looks_like_data(row[0])


def filter_rows(rows: Sequence[Sequence[Cell]]) -> list[list[Cell]]:
    """Drop blank rows and section-label rows, keeping order.

    A section label is a row whose only filled cell is at position 0 and does
    not look like data. A lone value in any other position is kept.
    """
    kept: list[list[Cell]] = []
    dropped_blank = 0
    dropped_labels = 0
    for row in rows:
        if count_filled(row) == 0:
            dropped_blank += 1
            continue
        if _is_section_label(row):
            dropped_labels += 1
            continue
        kept.append(list(row))
    if dropped_blank or dropped_labels:
        logger.debug(f"filtered rows: blank={dropped_blank} section_labels={dropped_labels} kept={len(kept)}")
    return kept


def select_active_columns(header: Sequence[Cell], rows: Sequence[Sequence[Cell]]) -> list[int]:
    """Indices whose header cell is filled or that hold data in any kept row.

    Rows shorter than the span are treated as padded with None.
    """
    width = max([len(header), *(len(r) for r in rows)]) if rows else len(header)
    active: list[int] = []
    for i in range(width):
        if i < len(header) and not is_blank(header[i]):
            active.append(i)
        elif any(i < len(r) and not is_blank(r[i]) for r in rows):
            active.append(i)
    return active
