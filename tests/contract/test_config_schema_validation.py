from __future__ import annotations
import json

import jsonschema
import pytest

from sheetviz.config.loader import SCHEMA_PATH


@pytest.fixture(scope="module")
def schema():
    return json.loads(SCHEMA_PATH.read_text(encoding="utf-8"))


def test_schema_is_valid_draft7(schema):
    jsonschema.Draft7Validator.check_schema(schema)


@pytest.mark.parametrize(
    "data",
    [
        {"source_directory": "./data"},
        {"source_directory": "./data", "output_directory": None, "suggest_charts": False},
        {"source_directory": "d", "parser": {"type_threshold": 1, "allowed_extensions": [".csv"]}},
    ],
)
def test_schema_accepts(schema, data):
    jsonschema.validate(data, schema)


@pytest.mark.parametrize(
    "data",
    [
        {},
        {"source_directory": ""},
        {"source_directory": "d", "parser": {"type_threshold": 0}},
        {"source_directory": "d", "parser": {"type_threshold": 1.5}},
        {"source_directory": "d", "parser": {"header_scan_rows": 0}},
        {"source_directory": "d", "parser": {"allowed_extensions": ["csv"]}},
        {"source_directory": "d", "parser": {"unknown": 1}},
        {"source_directory": "d", "suggest_charts": "yes"},
    ],
)
def test_schema_rejects(schema, data):
    with pytest.raises(jsonschema.ValidationError):
        jsonschema.validate(data, schema)
