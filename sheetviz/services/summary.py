from __future__ import annotations

from ..models.processing_result import BatchResult

"""SUMMARY line rendering for batch runs."""

__all__ = [
    "format_seconds",
    "render_summary_line",
]


def format_seconds(value: float) -> str:
    """Render seconds without scientific notation; whole values without decimals."""
    if value == 0:
        return "0"
    if value == int(value):
        return str(int(value))
    if value < 0.01:
        return f"{value:.6f}".rstrip("0").rstrip(".")
    return f"{value:.3f}".rstrip("0").rstrip(".")


def render_summary_line(result: BatchResult) -> str:
    """Render the SUMMARY line for a batch result.

    Format:
    SUMMARY files={total} success={success} failed={failed} rows={rows}
    charts={suggestions} elapsed_sec={elapsed}

    Examples:
        >>> from datetime import datetime, timezone
        >>> start = datetime(2024, 1, 1, 10, 0, 0, tzinfo=timezone.utc)
        >>> end = datetime(2024, 1, 1, 10, 0, 2, tzinfo=timezone.utc)
        >>> result = BatchResult(
        ...     success_files=2, failed_files=1, total_rows=120, total_suggestions=9,
        ...     start_time=start, end_time=end, elapsed_seconds=2.0,
        ... )
        >>> render_summary_line(result)
        'SUMMARY files=3 success=2 failed=1 rows=120 charts=9 elapsed_sec=2'
    """
    return (
        f"SUMMARY files={result.total_files} "
        f"success={result.success_files} "
        f"failed={result.failed_files} "
        f"rows={result.total_rows} "
        f"charts={result.total_suggestions} "
        f"elapsed_sec={format_seconds(result.elapsed_seconds)}"
    )
