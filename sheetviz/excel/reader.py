from __future__ import annotations

import csv
import io
import logging
from datetime import date, datetime, time
from pathlib import Path
from typing import Any

import numpy as np
import pandas as pd

from ..models.config_models import ParseSettings
from ..models.raw_grid import Cell, RawGrid
from .number_format import render_display

"""Raw grid extraction for workbook and delimited-text uploads.

The whole upload is supplied as bytes. Workbooks go through pandas.ExcelFile
(header なしで生読み, object dtype so integers and header labels keep their type);
for .xlsx the openpyxl number formats then turn currency and percent cells back
into their display text. CSV goes through pandas.read_csv with every cell kept as
text. Either way strings such as "$1,800.00" or "12%" reach type inference.

All failures are reported as InputError subclasses; messages are surfaced to
the caller verbatim.
"""

__all__ = [
    "InputError",
    "NoSheetsError",
    "EmptySheetError",
    "UnreadableFileError",
    "UnsupportedFileTypeError",
    "FileTooLargeError",
    "validate_upload",
    "read_grid",
]

logger = logging.getLogger(__name__)

CSV_EXTENSIONS = {".csv"}


class InputError(Exception):
    """Base class for non-retryable upload problems (a new upload is required)."""


class NoSheetsError(InputError):
    """Raised when a workbook contains zero sheets."""

    def __init__(self) -> None:
        super().__init__("The file contains no sheets")


class EmptySheetError(InputError):
    """Raised when the selected sheet has zero rows."""

    def __init__(self, sheet_name: str) -> None:
        super().__init__("The selected sheet is empty")
        self.sheet_name = sheet_name


class UnreadableFileError(InputError):
    """Raised when the bytes cannot be decoded as a workbook or delimited text."""


class UnsupportedFileTypeError(InputError):
    """Raised when the file extension is not in the allowlist."""


class FileTooLargeError(InputError):
    """Raised when the upload exceeds the configured byte limit."""


def validate_upload(file_name: str, size: int, settings: ParseSettings | None = None) -> None:
    """Check extension allowlist and size cap before any decoding happens.

    Raises:
        UnsupportedFileTypeError: extension not allowed
        FileTooLargeError: ``size`` above ``settings.max_upload_bytes``
    """
    settings = settings or ParseSettings()
    ext = Path(file_name).suffix.lower()
    allowed = {e.lower() for e in settings.allowed_extensions}
    if ext not in allowed:
        raise UnsupportedFileTypeError(
            f"Unsupported file type: {ext or '(none)'}. Please upload {', '.join(sorted(allowed))}"
        )
    if size > settings.max_upload_bytes:
        raise FileTooLargeError(
            f"File too large: {size} bytes (limit {settings.max_upload_bytes} bytes)"
        )


def read_grid(data: bytes, file_name: str, selected_sheet: str | None = None) -> RawGrid:
    """Decode ``data`` into the raw cell grid of one sheet.

    Args:
        data: Full file contents
        file_name: Original file name; its extension selects the decoder
        selected_sheet: Sheet to read. None or an unknown name falls back to
            the first sheet.

    Returns:
        RawGrid with all sheet names, the sheet actually read and its rows

    Raises:
        NoSheetsError: workbook without sheets
        EmptySheetError: selected sheet has zero rows
        UnreadableFileError: decoder failure
    """
    ext = Path(file_name).suffix.lower()
    if ext in CSV_EXTENSIONS:
        sheet_names = [Path(file_name).stem or "Sheet1"]
        target = sheet_names[0]
        df = _read_csv_frame(data, file_name)
        grid = [[_to_cell(v) for v in row] for row in df.itertuples(index=False, name=None)]
    else:
        try:
            xls = pd.ExcelFile(io.BytesIO(data))
        except Exception as e:
            raise UnreadableFileError(f"Unable to read workbook '{file_name}': {e}") from e
        sheet_names = [str(n) for n in xls.sheet_names]
        if not sheet_names:
            raise NoSheetsError()
        target = selected_sheet if selected_sheet in sheet_names else sheet_names[0]
        if selected_sheet is not None and selected_sheet != target:
            logger.debug(f"sheet '{selected_sheet}' not found in {file_name}; using '{target}'")
        try:
            # 文字列 "NA" / "N/A" などは値として残す
            df = xls.parse(target, header=None, dtype=object, keep_default_na=False, na_values=[""])
            grid = [[_to_cell(v) for v in row] for row in df.itertuples(index=False, name=None)]
            if xls.engine == "openpyxl":
                grid = _render_number_formats(grid, xls.book[target])
        except Exception as e:
            raise UnreadableFileError(f"Unable to read sheet '{target}' of '{file_name}': {e}") from e

    if not grid:
        raise EmptySheetError(target)
    logger.debug(f"read {file_name} sheet={target} rows={len(grid)} cols={df.shape[1]}")
    return RawGrid(sheet_names=sheet_names, selected_sheet=target, grid=grid)


def _read_csv_frame(data: bytes, file_name: str) -> pd.DataFrame:
    try:
        text = data.decode("utf-8-sig")
    except UnicodeDecodeError:
        text = data.decode("latin-1")
    try:
        # Ragged rows: size the frame to the widest record up front.
        width = max((len(r) for r in csv.reader(io.StringIO(text))), default=0)
        if width == 0:
            return pd.DataFrame()
        return pd.read_csv(
            io.StringIO(text),
            header=None,
            names=list(range(width)),
            dtype=str,
            keep_default_na=False,
            skip_blank_lines=False,
        )
    except (pd.errors.ParserError, csv.Error, ValueError) as e:
        raise UnreadableFileError(f"Unable to read delimited text '{file_name}': {e}") from e


def _render_number_formats(grid: list[list[Cell]], sheet: Any) -> list[list[Cell]]:
    """Replace numbers in currency/percent formatted cells with display text.

    pandas reads the sheet from A1 without skipping leading blank rows or
    columns, so grid[i][j] is worksheet cell (i + 1, j + 1).
    """
    width = max((len(r) for r in grid), default=0)
    if width == 0:
        return grid
    formats = [
        [getattr(c, "number_format", None) for c in cells]
        for cells in sheet.iter_rows(min_row=1, max_row=len(grid), min_col=1, max_col=width)
    ]
    out: list[list[Cell]] = []
    for i, row in enumerate(grid):
        row_formats = formats[i] if i < len(formats) else []
        out.append([
            render_display(v, row_formats[j]) if j < len(row_formats) else v
            for j, v in enumerate(row)
        ])
    return out


def _to_cell(value: Any) -> Cell:
    """Normalize a pandas cell to str | int | float | datetime | None."""
    if value is None or value is pd.NaT:
        return None
    if isinstance(value, pd.Timestamp):
        return None if pd.isna(value) else value.to_pydatetime()
    if isinstance(value, datetime):
        return value
    if isinstance(value, date):
        return datetime(value.year, value.month, value.day)
    if isinstance(value, time):
        return value.isoformat()
    if isinstance(value, np.generic):
        value = value.item()
    if isinstance(value, float) and np.isnan(value):
        return None
    if isinstance(value, (str, int, float)):
        return value
    return str(value)
