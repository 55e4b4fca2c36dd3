# Shared pytest fixtures
from __future__ import annotations
import io
import tempfile
from pathlib import Path

import pandas as pd
import pytest


BUDGET_CSV = """Household Budget 2024,,,
Date,Category,Amount,Share
2024-01-05,Rent,"$1,200.00",40%
2024-01-20,Groceries,$310.50,10.5%
,,,
▸ INCOME,,,
2024-02-03,Salary,"€2,500",-3%
"""


@pytest.fixture()
def temp_workdir(monkeypatch) -> Path:
    with tempfile.TemporaryDirectory() as d:
        p = Path(d)
        (p / "config").mkdir()
        (p / "data").mkdir()
        (p / "logs").mkdir()
        monkeypatch.chdir(p)
        yield p


@pytest.fixture()
def sample_config_yaml() -> str:
    return """source_directory: ./data
output_directory: ./out
suggest_charts: true
parser:
  header_scan_rows: 10
  type_threshold: 0.6
  category_max_distinct: 20
  max_upload_bytes: 1048576
"""


@pytest.fixture()
def write_config(temp_workdir: Path, sample_config_yaml: str) -> Path:
    cfg = temp_workdir / "config" / "sheetviz.yml"
    cfg.write_text(sample_config_yaml, encoding="utf-8")
    return cfg


@pytest.fixture()
def budget_csv_bytes() -> bytes:
    return BUDGET_CSV.encode("utf-8")


def make_xlsx_bytes(sheets: dict[str, list[list[object]]]) -> bytes:
    """Build a workbook in memory; rows are written without header/index."""
    buf = io.BytesIO()
    with pd.ExcelWriter(buf, engine="openpyxl") as writer:
        for sheet, rows in sheets.items():
            pd.DataFrame(rows).to_excel(writer, sheet_name=sheet, header=False, index=False)
    return buf.getvalue()


@pytest.fixture()
def xlsx_factory():
    return make_xlsx_bytes
