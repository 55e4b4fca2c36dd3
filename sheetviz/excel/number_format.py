from __future__ import annotations

import re
from typing import Any

from ..models.raw_grid import Cell

"""Render numeric workbook cells the way Excel displays them.

Only currency and percent formats are re-rendered, since those are the shapes
type inference reads from text ("$1,800.00", "40%"). Every other format keeps
the typed value. Only the first (positive) section of a format is used; a
negative value gets a leading minus.
"""

__all__ = [
    "CURRENCY_SYMBOLS",
    "render_display",
]

CURRENCY_SYMBOLS = "$£€¥₹₨"

# [$€-407] -> "€"
_LOCALE_CURRENCY = re.compile(r"\[\$([^\-\]]*)[^\]]*\]")
_BRACKETS = re.compile(r"\[[^\]]*\]")
_QUOTED = re.compile(r'"[^"]*"')
_DECIMALS = re.compile(r"[0#?]\.([0#?]+)|^\.([0#?]+)")
_THOUSANDS = re.compile(r"[0#?],[0#?]")
_PLACEHOLDER = re.compile(r"[0#?]")


def _first_section(number_format: str) -> str:
    section = number_format.split(";", 1)[0]
    section = _LOCALE_CURRENCY.sub(lambda m: f'"{m.group(1)}"', section)
    return _BRACKETS.sub("", section)


def render_display(value: Cell, number_format: Any) -> Cell:
    """Display text for currency/percent formatted numbers, else ``value``.

    >>> render_display(1800, '"$"#,##0.00')
    '$1,800.00'
    >>> render_display(0.4, "0%")
    '40%'
    >>> render_display(1800, "#,##0.00")
    1800
    """
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return value
    if not isinstance(number_format, str) or number_format in ("", "General"):
        return value

    section = _first_section(number_format)
    digits = _QUOTED.sub("", section)
    m = _DECIMALS.search(digits)
    decimals = len(m.group(1) or m.group(2)) if m else 0
    grouping = "," if _THOUSANDS.search(digits) else ""

    if "%" in digits:
        return f"{value * 100:{grouping}.{decimals}f}%"

    glyph_at = next((i for i, ch in enumerate(section) if ch in CURRENCY_SYMBOLS), None)
    if glyph_at is None:
        return value
    glyph = section[glyph_at]
    amount = f"{abs(value):{grouping}.{decimals}f}"
    sign = "-" if value < 0 else ""
    first_digit = _PLACEHOLDER.search(section)
    if first_digit is None or glyph_at < first_digit.start():
        return f"{sign}{glyph}{amount}"
    return f"{sign}{amount} {glyph}"
