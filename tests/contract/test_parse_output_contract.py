from __future__ import annotations
import json

from sheetviz import parse, suggest_charts

COLUMN_TYPES = {"Date", "Number", "Currency", "Percentage", "Category", "Text"}
CHART_TYPES = {"line", "area", "bar", "pie", "stats"}


def test_parsed_table_wire_contract(budget_csv_bytes: bytes):
    doc = parse(budget_csv_bytes, "budget.csv").to_dict()
    # JSON serializable as-is
    json.dumps(doc)
    assert set(doc) == {"fileName", "sheetNames", "selectedSheet", "rowCount", "columns", "preview", "rows"}
    assert doc["fileName"] == "budget.csv"
    assert doc["rowCount"] == len(doc["rows"])
    assert doc["preview"] == doc["rows"][:10]

    names = [c["name"] for c in doc["columns"]]
    assert len(names) == len(set(names))
    for column in doc["columns"]:
        assert set(column) == {"name", "type", "sample"}
        assert column["type"] in COLUMN_TYPES
        assert len(column["sample"]) <= 5
        assert all(v not in (None, "") for v in column["sample"])
    for row in doc["rows"]:
        assert list(row) == names
        assert "" not in row.values()


def test_suggestion_wire_contract(budget_csv_bytes: bytes):
    table = parse(budget_csv_bytes, "budget.csv")
    doc = suggest_charts(table.columns).to_dict()
    assert set(doc) == {"charts", "statCards"}
    for item in doc["charts"]:
        assert set(item) == {"id", "chartType", "title", "xColumn", "yColumn", "description"}
        assert item["chartType"] in CHART_TYPES - {"stats"}
        assert " " not in item["id"]
    for item in doc["statCards"]:
        assert set(item) == {"id", "chartType", "title", "yColumn", "description"}
        assert item["chartType"] == "stats"
    ids = [i["id"] for i in doc["charts"] + doc["statCards"]]
    assert len(ids) == len(set(ids))
