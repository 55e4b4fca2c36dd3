from __future__ import annotations
import logging
from datetime import datetime

import pytest

from sheetviz.excel.reader import FileTooLargeError, UnsupportedFileTypeError
from sheetviz.logging.init import reset_logging
from sheetviz.models.column import Column, ColumnType
from sheetviz.models.config_models import ParseSettings
from sheetviz.models.raw_grid import RawGrid
from sheetviz.services.table_builder import TableBuilder, apply_type_overrides, dedupe_names, parse


def _grid(rows):
    return RawGrid(sheet_names=["S"], selected_sheet="S", grid=rows)


def test_parse_budget_csv(budget_csv_bytes):
    table = parse(budget_csv_bytes, "budget.csv")
    assert table.header_row_index == 1
    assert table.column_names == ["Date", "Category", "Amount", "Share"]
    assert [c.type for c in table.columns] == [
        ColumnType.DATE, ColumnType.CATEGORY, ColumnType.CURRENCY, ColumnType.PERCENTAGE,
    ]
    assert table.row_count == 3
    assert [r["Category"] for r in table.rows] == ["Rent", "Groceries", "Salary"]
    assert table.preview == table.rows
    assert table.columns[2].sample == ("$1,200.00", "$310.50", "€2,500")


def test_rows_contain_exactly_active_columns_with_none_for_blanks():
    table = TableBuilder().build(_grid([
        ["Name", None, "Score", None],
        ["Ann", None, "5", ""],
        ["Bob", "", "7", None],
        [None, None, None, "late"],
    ]))
    assert table.header_row_index == 0
    assert table.column_names == ["Name", "Score", "Column_4"]
    assert table.row_count == 3
    for row in table.rows:
        assert list(row) == table.column_names
    assert table.rows[0] == {"Name": "Ann", "Score": "5", "Column_4": None}
    assert table.rows[1] == {"Name": "Bob", "Score": "7", "Column_4": None}
    # a lone cell away from position 0 is data, not a section label
    assert table.rows[2] == {"Name": None, "Score": None, "Column_4": "late"}


def test_section_label_and_total_rows():
    table = TableBuilder().build(_grid([
        ["Item", "Q1", "Q2", "Q3"],
        ["▸ INCOME", None, None, None],
        ["Salary", "10", "11", "12"],
        [None, "TOTAL", None, None],
    ]))
    assert table.row_count == 2
    assert table.rows[1] == {"Item": None, "Q1": "TOTAL", "Q2": None, "Q3": None}


def test_sample_is_first_five_in_row_order_and_type_is_order_free():
    values = ["$1", "$2", "", "$3", "$4", "$5", "$6", "$7"]
    forward = TableBuilder().build(_grid([["Amount"], *[[v] for v in values]]))
    backward = TableBuilder().build(_grid([["Amount"], *[[v] for v in reversed(values)]]))
    assert forward.columns[0].sample == ("$1", "$2", "$3", "$4", "$5")
    assert backward.columns[0].sample == ("$7", "$6", "$5", "$4", "$3")
    assert forward.columns[0].type is backward.columns[0].type is ColumnType.CURRENCY


def test_preview_is_first_ten_rows():
    rows = [["n"]] + [[str(i)] for i in range(25)]
    table = TableBuilder().build(_grid(rows))
    assert table.row_count == 25
    assert len(table.preview) == 10
    assert table.preview[-1] == {"n": "9"}


def test_date_instants_infer_date():
    table = TableBuilder().build(_grid([
        ["When", "Amount"],
        [datetime(2024, 1, 1), 10],
        [datetime(2024, 2, 1), 12.5],
    ]))
    assert [c.type for c in table.columns] == [ColumnType.DATE, ColumnType.NUMBER]


def test_empty_named_column_is_text():
    table = TableBuilder().build(_grid([["A", "Notes"], ["1", None], ["2", None]]))
    assert table.columns[1].type is ColumnType.TEXT
    assert table.columns[1].sample == ()


def test_duplicate_header_names_are_made_unique():
    table = TableBuilder().build(_grid([["Amount", "Amount", "Amount"], ["1", "2", "3"]]))
    assert table.column_names == ["Amount", "Amount_2", "Amount_3"]
    assert table.rows[0] == {"Amount": "1", "Amount_2": "2", "Amount_3": "3"}


def test_dedupe_names():
    assert dedupe_names(["a", "b", "a", "a_2", "a"]) == ["a", "b", "a_2", "a_2_2", "a_3"]


def test_type_overrides_bypass_inference(caplog):
    reset_logging()
    grid = _grid([["Code", "Kind"], ["001", "x"], ["002", "y"]])
    with caplog.at_level(logging.WARNING, logger="sheetviz"):
        table = TableBuilder().build(grid, type_overrides={"Code": "Category", "Kind": "Label"})
    assert table.columns[0].type is ColumnType.CATEGORY
    assert table.columns[1].type == "Label"
    assert "Label" in caplog.text


def test_apply_type_overrides_returns_new_columns():
    cols = [Column("Amount", ColumnType.NUMBER, ("1",)), Column("Kind", ColumnType.TEXT)]
    out = apply_type_overrides(cols, {"Amount": "Currency", "Missing": "Date", "Kind": ""})
    assert out[0] == Column("Amount", ColumnType.CURRENCY, ("1",))
    assert out[1] is cols[1]
    assert cols[0].type is ColumnType.NUMBER
    assert apply_type_overrides(cols, None) == cols


def test_settings_are_applied():
    settings = ParseSettings(sample_size=2, preview_rows=1)
    table = TableBuilder(settings).build(_grid([["n"], ["1"], ["2"], ["3"]]))
    assert table.columns[0].sample == ("1", "2")
    assert len(table.preview) == 1


def test_parse_rejects_unsupported_and_oversized():
    with pytest.raises(UnsupportedFileTypeError):
        parse(b"a,b", "data.json")
    with pytest.raises(FileTooLargeError):
        TableBuilder(ParseSettings(max_upload_bytes=3)).parse(b"a,b\n1,2\n", "x.csv")


def test_parse_selected_workbook_sheet(xlsx_factory):
    data = xlsx_factory({
        "Summary": [["Only a title"]],
        "Data": [["Report"], ["Region", "Sales"], ["North", 10], ["South", 20]],
    })
    table = parse(data, "report.xlsx", selected_sheet="Data")
    assert table.sheet_names == ["Summary", "Data"]
    assert table.selected_sheet == "Data"
    assert [(c.name, c.type) for c in table.columns] == [
        ("Region", ColumnType.CATEGORY), ("Sales", ColumnType.NUMBER),
    ]
    assert table.rows[1] == {"Region": "South", "Sales": 20}


def test_preview_rows_are_independent_of_rows():
    table = TableBuilder().build(_grid([["n"], ["1"], ["2"]]))
    assert table.preview == table.rows
    table.preview[0]["n"] = "changed"
    assert table.rows[0] == {"n": "1"}
