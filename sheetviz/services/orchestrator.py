from __future__ import annotations

import json
import logging
import time
from collections.abc import Iterable
from datetime import UTC, datetime
from pathlib import Path
from typing import Any

from ..excel.reader import InputError
from ..logging.error_log import ErrorLogBuffer
from ..models.config_models import AppConfig
from ..models.error_record import ErrorRecord
from ..models.processing_result import BatchResult, FileStat
from .chart_suggester import ChartRecommender
from .progress import ProgressTracker
from .table_builder import TableBuilder

"""Batch orchestration: parse every upload in a directory.

For each file: parse -> (optionally) suggest charts -> write ``<stem>.json``
to the output directory. Input errors and OS errors reading a file fail only
that file; they are logged and recorded in the JSON Lines error log. Other
exceptions propagate.
"""

__all__ = [
    "ProcessingError",
    "scan_input_files",
    "process_file",
    "process_all",
]

logger = logging.getLogger(__name__)


class ProcessingError(Exception):
    """Batch-level failure (missing or unreadable source directory)."""


def scan_input_files(directory: Path, extensions: Iterable[str]) -> list[Path]:
    """List files with an allowed extension (non-recursive, sorted by name).

    Raises:
        ProcessingError: If directory doesn't exist or can't be read
    """
    if not directory.exists():
        raise ProcessingError(f"Directory not found: {directory}")
    if not directory.is_dir():
        raise ProcessingError(f"Path is not a directory: {directory}")

    allowed = {e.lower() for e in extensions}
    try:
        return sorted(
            (p for p in directory.iterdir() if p.is_file() and p.suffix.lower() in allowed),
            key=lambda p: p.name,
        )
    except OSError as e:
        raise ProcessingError(f"Error reading directory {directory}: {e}") from e


def _error_type(exc: Exception) -> str:
    # NoSheetsError -> NO_SHEETS
    name = type(exc).__name__.removesuffix("Error") or "Input"
    out = []
    for i, ch in enumerate(name):
        if ch.isupper() and i > 0:
            out.append("_")
        out.append(ch.upper())
    return "".join(out)


def process_file(
    path: Path,
    builder: TableBuilder,
    recommender: ChartRecommender | None = None,
    output_directory: Path | None = None,
) -> tuple[FileStat, dict[str, Any]]:
    """Parse one file and return its stat plus the JSON document.

    Raises:
        InputError: the file could not be parsed
        OSError: the file could not be read
    """
    started = time.perf_counter()
    table = builder.parse(path.read_bytes(), path.name)
    document: dict[str, Any] = table.to_dict()
    suggestion_count = 0
    if recommender is not None:
        suggestions = recommender.suggest(table.columns)
        document["suggestions"] = suggestions.to_dict()
        suggestion_count = len(suggestions)

    if output_directory is not None:
        output_directory.mkdir(parents=True, exist_ok=True)
        out_path = output_directory / f"{path.stem}.json"
        out_path.write_text(json.dumps(document, ensure_ascii=False, indent=2), encoding="utf-8")
        logger.debug(f"wrote {out_path}")

    stat = FileStat(
        file_name=path.name,
        status="success",
        sheet=table.selected_sheet,
        row_count=table.row_count,
        column_count=len(table.columns),
        suggestion_count=suggestion_count,
        elapsed_seconds=time.perf_counter() - started,
    )
    return stat, document


def process_all(config: AppConfig, error_log: ErrorLogBuffer | None = None) -> BatchResult:
    """Parse every supported file under ``config.source_directory``.

    Args:
        config: Loaded application config
        error_log: Buffer receiving one record per failed file (flushed here)

    Returns:
        Aggregated BatchResult

    Raises:
        ProcessingError: source directory missing or unreadable
    """
    start_time = datetime.now(UTC)
    files = scan_input_files(Path(config.source_directory), config.parser.allowed_extensions)
    logger.info(f"found {len(files)} file(s) in {config.source_directory}")

    builder = TableBuilder(config.parser)
    recommender = ChartRecommender() if config.suggest_charts else None
    output_directory = Path(config.output_directory) if config.output_directory else None
    error_log = error_log if error_log is not None else ErrorLogBuffer()

    stats: list[FileStat] = []
    with ProgressTracker(len(files)) as progress:
        for path in files:
            progress.start_file(path)
            try:
                stat, _ = process_file(path, builder, recommender, output_directory)
            except (InputError, OSError) as e:
                logger.warning(f"{path.name}: {e}")
                error_log.append(ErrorRecord.create(path.name, "", _error_type(e), str(e)))
                stat = FileStat(file_name=path.name, status="failed", error=str(e))
            stats.append(stat)
            progress.finish_file(stat.status == "success")

    flushed = error_log.flush()
    if flushed is not None:
        logger.info(f"error log written: {flushed}")

    return BatchResult.from_stats(stats, start_time, datetime.now(UTC))
