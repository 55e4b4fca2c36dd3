from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime

"""Batch result models aggregated by sheetviz.services.orchestrator."""

__all__ = [
    "FileStat",
    "BatchResult",
]


@dataclass(frozen=True)
class FileStat:
    """Per-file outcome of a batch run."""
    file_name: str
    status: str  # success/failed
    sheet: str = ""
    row_count: int = 0
    column_count: int = 0
    suggestion_count: int = 0  # charts + stat cards
    elapsed_seconds: float = 0.0
    error: str | None = None


@dataclass(frozen=True)
class BatchResult:
    """Aggregated results and metrics for the SUMMARY line."""
    success_files: int
    failed_files: int
    total_rows: int
    total_suggestions: int
    start_time: datetime
    end_time: datetime
    elapsed_seconds: float
    file_stats: list[FileStat] | None = None

    @property
    def total_files(self) -> int:
        return self.success_files + self.failed_files

    @classmethod
    def from_stats(cls, stats: list[FileStat], start_time: datetime, end_time: datetime) -> BatchResult:
        """Build a BatchResult from per-file stats."""
        success = [s for s in stats if s.status == "success"]
        return cls(
            success_files=len(success),
            failed_files=len(stats) - len(success),
            total_rows=sum(s.row_count for s in success),
            total_suggestions=sum(s.suggestion_count for s in success),
            start_time=start_time,
            end_time=end_time,
            elapsed_seconds=(end_time - start_time).total_seconds(),
            file_stats=stats,
        )
