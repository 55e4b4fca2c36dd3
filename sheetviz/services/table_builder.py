from __future__ import annotations

import logging
from collections.abc import Mapping, Sequence

from ..excel.layout import column_placeholder, filter_rows, locate_header, select_active_columns
from ..excel.reader import read_grid, validate_upload
from ..models.column import Column, ColumnType
from ..models.config_models import ParseSettings
from ..models.parsed_table import ParsedTable, Row
from ..models.raw_grid import Cell, RawGrid, is_blank
from .type_inference import infer_column_type

"""Table materialization: raw upload bytes -> ParsedTable.

The pipeline is extractor -> header locator -> row filter -> active column
selection -> type inference -> row projection. TableBuilder keeps no state
between calls apart from its immutable settings, so one instance can serve
concurrent requests.
"""

__all__ = [
    "TableBuilder",
    "parse",
    "apply_type_overrides",
    "dedupe_names",
]

logger = logging.getLogger(__name__)


def dedupe_names(names: Sequence[str]) -> list[str]:
    """Make names unique: later duplicates get ``_2``, ``_3``... suffixes."""
    seen: set[str] = set()
    counts: dict[str, int] = {}
    out: list[str] = []
    for name in names:
        candidate = name
        n = counts.get(name, 1)
        while candidate in seen:
            n += 1
            candidate = f"{name}_{n}"
        counts[name] = n
        seen.add(candidate)
        out.append(candidate)
    return out


def _resolve_override(name: str, value: str | ColumnType) -> ColumnType | str:
    member = ColumnType.coerce(value)
    if member is not None:
        return member
    logger.warning(f"type override for column '{name}' is not a known type: {value!r} (kept as-is)")
    return str(value)


def apply_type_overrides(
    columns: Sequence[Column], overrides: Mapping[str, str | ColumnType] | None
) -> list[Column]:
    """Return new columns with caller-supplied types applied literally.

    Overrides naming unknown columns are ignored. Empty override values keep
    the inferred type.
    """
    if not overrides:
        return list(columns)
    out: list[Column] = []
    for col in columns:
        value = overrides.get(col.name)
        if value:
            out.append(Column(name=col.name, type=_resolve_override(col.name, value), sample=col.sample))
        else:
            out.append(col)
    return out


class TableBuilder:
    """Stateless parser service producing ParsedTable objects."""

    def __init__(self, settings: ParseSettings | None = None) -> None:
        self.settings = settings or ParseSettings()

    def parse(
        self,
        data: bytes,
        file_name: str,
        selected_sheet: str | None = None,
        type_overrides: Mapping[str, str | ColumnType] | None = None,
    ) -> ParsedTable:
        """Parse an upload into a typed table.

        Args:
            data: Full file contents
            file_name: Original file name (extension selects the decoder)
            selected_sheet: Sheet to read; first sheet when None or unknown
            type_overrides: Column name -> type; inference is skipped for these

        Raises:
            InputError: see sheetviz.excel.reader
        """
        validate_upload(file_name, len(data), self.settings)
        raw = read_grid(data, file_name, selected_sheet)
        table = self.build(raw, file_name=file_name, type_overrides=type_overrides)
        logger.info(
            f"parsed {file_name} sheet={table.selected_sheet} rows={table.row_count} "
            f"columns={len(table.columns)}"
        )
        return table

    def build(
        self,
        raw: RawGrid,
        file_name: str = "",
        type_overrides: Mapping[str, str | ColumnType] | None = None,
    ) -> ParsedTable:
        """Materialize an already extracted RawGrid."""
        s = self.settings
        header = locate_header(raw.grid, s.header_scan_rows)
        data_rows = filter_rows(raw.grid[header.row_index + 1:])
        active = select_active_columns(header.raw, data_rows)

        names = dedupe_names([
            header.names[i] if i < len(header.names) else column_placeholder(i)
            for i in active
        ])
        overrides = type_overrides or {}

        columns: list[Column] = []
        for name, idx in zip(names, active):
            values = [v for v in (_cell_at(r, idx) for r in data_rows) if not is_blank(v)]
            if overrides.get(name):
                col_type = _resolve_override(name, overrides[name])
            else:
                col_type = infer_column_type(values, s.type_threshold, s.category_max_distinct)
            logger.debug(f"column '{name}' index={idx} non_empty={len(values)} type={col_type}")
            columns.append(Column(name=name, type=col_type, sample=tuple(values[: s.sample_size])))

        rows: list[Row] = []
        for r in data_rows:
            row: Row = {}
            for name, idx in zip(names, active):
                v = _cell_at(r, idx)
                row[name] = None if is_blank(v) else v  # 空文字は None に正規化
            rows.append(row)

        return ParsedTable(
            sheet_names=list(raw.sheet_names),
            selected_sheet=raw.selected_sheet,
            columns=columns,
            rows=rows,
            preview=[dict(r) for r in rows[: s.preview_rows]],
            file_name=file_name,
            header_row_index=header.row_index,
        )


def _cell_at(row: Sequence[Cell], index: int) -> Cell:
    return row[index] if index < len(row) else None


_default_builder = TableBuilder()


def parse(
    data: bytes,
    file_name: str,
    selected_sheet: str | None = None,
    type_overrides: Mapping[str, str | ColumnType] | None = None,
) -> ParsedTable:
    """Parse with default settings. See TableBuilder.parse."""
    return _default_builder.parse(data, file_name, selected_sheet, type_overrides)
