from __future__ import annotations
from datetime import UTC, datetime, timedelta

import pytest

from sheetviz.models.processing_result import BatchResult, FileStat
from sheetviz.services.summary import format_seconds, render_summary_line

SUMMARY_RE = (
    r"^SUMMARY files=\d+ success=\d+ failed=\d+ rows=\d+ charts=\d+ elapsed_sec=[0-9.]+$"
)


def _result(elapsed: float, **kw) -> BatchResult:
    start = datetime(2024, 1, 1, tzinfo=UTC)
    defaults = dict(success_files=2, failed_files=1, total_rows=120, total_suggestions=9)
    defaults.update(kw)
    return BatchResult(
        start_time=start,
        end_time=start + timedelta(seconds=elapsed),
        elapsed_seconds=elapsed,
        **defaults,
    )


def test_render_summary_line():
    line = render_summary_line(_result(2.0))
    assert line == "SUMMARY files=3 success=2 failed=1 rows=120 charts=9 elapsed_sec=2"


def test_render_summary_line_matches_contract():
    import re
    for elapsed in (0, 0.0004, 1.5, 12.3456):
        assert re.match(SUMMARY_RE, render_summary_line(_result(elapsed)))


@pytest.mark.parametrize(
    "value,expected",
    [(0, "0"), (3.0, "3"), (0.0005, "0.0005"), (1.25, "1.25"), (2.34567, "2.346")],
)
def test_format_seconds(value, expected):
    assert format_seconds(value) == expected


def test_batch_result_from_stats():
    start = datetime(2024, 1, 1, tzinfo=UTC)
    stats = [
        FileStat("a.csv", "success", row_count=3, suggestion_count=10),
        FileStat("b.csv", "failed", error="The selected sheet is empty"),
        FileStat("c.xlsx", "success", row_count=4, suggestion_count=1),
    ]
    result = BatchResult.from_stats(stats, start, start + timedelta(seconds=1.5))
    assert result.success_files == 2
    assert result.failed_files == 1
    assert result.total_files == 3
    assert result.total_rows == 7
    assert result.total_suggestions == 11
    assert result.elapsed_seconds == 1.5
