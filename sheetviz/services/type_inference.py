from __future__ import annotations

import re
from collections import Counter
from collections.abc import Callable, Iterable, Sequence
from datetime import date
from enum import Enum

from ..excel.number_format import CURRENCY_SYMBOLS
from ..models.column import ColumnType
from ..models.raw_grid import Cell, is_blank

"""Column type inference.

Every value is classified into exactly one ValueKind by trying an ordered
table of (predicate, kind) rules against its trimmed text. A column's type is the
first kind whose share of non-empty values reaches the threshold, checked in
the order percentage, currency, date, number (+ currency). Columns with no
dominant shape become Category (few distinct values) or Text.

New date shapes are added to DATE_PATTERNS below; currency glyphs are shared
with the workbook number-format renderer (sheetviz.excel.number_format).
"""

__all__ = [
    "ValueKind",
    "CURRENCY_SYMBOLS",
    "DATE_PATTERNS",
    "DEFAULT_THRESHOLD",
    "DEFAULT_CATEGORY_MAX_DISTINCT",
    "VALUE_RULES",
    "classify_value",
    "is_likely_date",
    "tally_kinds",
    "infer_column_type",
]

DEFAULT_THRESHOLD = 0.6
DEFAULT_CATEGORY_MAX_DISTINCT = 20


class ValueKind(Enum):
    """Shape of a single cell value."""
    PERCENTAGE = "percentage"
    CURRENCY = "currency"
    NUMBER = "number"
    DATE = "date"
    UNCLASSIFIED = "unclassified"


_GLYPH = f"[{re.escape(CURRENCY_SYMBOLS)}]"
_AMOUNT = r"[\d,]+(\.\d+)?"
_MONTH = r"(Jan|Feb|Mar|Apr|May|Jun|Jul|Aug|Sep|Oct|Nov|Dec)"

DATE_PATTERNS: tuple[re.Pattern[str], ...] = (
    re.compile(r"^\d{1,2}[/\-]\d{1,2}[/\-]\d{2,4}$"),  # 31/12/2024, 12-31-24
    re.compile(r"^\d{4}[/\-]\d{1,2}[/\-]\d{1,2}$"),  # 2024-12-31
    re.compile(rf"^{_MONTH}\s+\d{{1,2}},?\s+\d{{4}}$", re.IGNORECASE),  # Dec 31, 2024
    re.compile(rf"^\d{{1,2}}\s+{_MONTH}\s+\d{{4}}$", re.IGNORECASE),  # 31 Dec 2024
)

Predicate = Callable[[Cell, str], bool]


def _text_matches(pattern: str) -> Predicate:
    compiled = re.compile(pattern)
    return lambda _value, text: compiled.match(text) is not None


def is_likely_date(text: str) -> bool:
    """True when ``text`` matches one of the recognized date shapes."""
    stripped = text.strip()
    return any(p.match(stripped) for p in DATE_PATTERNS)


def _is_date(value: Cell, text: str) -> bool:
    return isinstance(value, date) or is_likely_date(text)


# Order matters: a value takes the first kind whose predicate holds.
VALUE_RULES: tuple[tuple[Predicate, ValueKind], ...] = (
    (_text_matches(r"^-?\d+(\.\d+)?%$"), ValueKind.PERCENTAGE),
    (_text_matches(rf"^-?{_GLYPH}\s?{_AMOUNT}$|^{_AMOUNT}\s?{_GLYPH}$"), ValueKind.CURRENCY),
    (_text_matches(rf"^-?{_AMOUNT}$"), ValueKind.NUMBER),
    (_is_date, ValueKind.DATE),
)


def classify_value(value: Cell) -> ValueKind:
    """Classify one raw value by the first matching rule in VALUE_RULES."""
    text = str(value).strip()
    for predicate, kind in VALUE_RULES:
        if predicate(value, text):
            return kind
    return ValueKind.UNCLASSIFIED


def tally_kinds(values: Iterable[Cell]) -> Counter[ValueKind]:
    """Count ValueKinds over the non-empty values."""
    return Counter(classify_value(v) for v in values if not is_blank(v))


def infer_column_type(
    values: Sequence[Cell],
    threshold: float = DEFAULT_THRESHOLD,
    category_max_distinct: int = DEFAULT_CATEGORY_MAX_DISTINCT,
) -> ColumnType:
    """Infer the semantic type of a column from all its non-empty values.

    Args:
        values: Column values in row order (blanks are ignored)
        threshold: Minimum share for a shape to dominate
        category_max_distinct: Distinct-value cap for Category

    Returns:
        ColumnType; Text for a column without any non-empty value
    """
    present = [v for v in values if not is_blank(v)]
    total = len(present)
    if total == 0:
        return ColumnType.TEXT

    counts = tally_kinds(present)

    def share(*kinds: ValueKind) -> float:
        return sum(counts[k] for k in kinds) / total

    # Currency before the combined number check
    if share(ValueKind.PERCENTAGE) >= threshold:
        return ColumnType.PERCENTAGE
    if share(ValueKind.CURRENCY) >= threshold:
        return ColumnType.CURRENCY
    if share(ValueKind.DATE) >= threshold:
        return ColumnType.DATE
    if share(ValueKind.NUMBER, ValueKind.CURRENCY) >= threshold:
        return ColumnType.NUMBER

    distinct = {str(v).strip().lower() for v in present}
    if len(distinct) <= category_max_distinct:
        return ColumnType.CATEGORY
    return ColumnType.TEXT
