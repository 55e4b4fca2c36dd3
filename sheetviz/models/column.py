from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Union

from .raw_grid import Cell

"""Column metadata model and the closed ColumnType enum.

ColumnType values are exchanged verbatim with callers ("Date", "Number", ...),
so the enum subclasses str and compares equal to its wire value.
"""

__all__ = [
    "ColumnType",
    "Column",
    "NUMERIC_TYPES",
]


class ColumnType(str, Enum):
    """Semantic type assigned to a column.

    - DATE: dominant shape is a date instant or a recognized date string
    - NUMBER / CURRENCY / PERCENTAGE: numeric shapes (charted as measures)
    - CATEGORY: low-cardinality text (≤ 20 distinct values by default)
    - TEXT: everything else, including empty columns
    """
    DATE = "Date"
    NUMBER = "Number"
    CURRENCY = "Currency"
    PERCENTAGE = "Percentage"
    CATEGORY = "Category"
    TEXT = "Text"

    @classmethod
    def coerce(cls, value: Any) -> ColumnType | None:
        """Return the member matching ``value`` or None when outside the enum."""
        if isinstance(value, cls):
            return value
        try:
            return cls(value)
        except ValueError:
            return None


NUMERIC_TYPES = frozenset({ColumnType.NUMBER, ColumnType.CURRENCY, ColumnType.PERCENTAGE})


@dataclass(frozen=True)
class Column:
    """Name, semantic type and leading sample of one active column."""
    name: str  # ユニークな列名 (ヘッダ由来 or Column_N)
    # inferred type, or the literal string a caller override supplied
    type: Union[ColumnType, str]
    sample: tuple[Cell, ...] = ()  # 先頭 5 件の非空値 (行順)

    @property
    def type_name(self) -> str:
        return self.type.value if isinstance(self.type, ColumnType) else str(self.type)
