from __future__ import annotations

from dataclasses import dataclass, field

"""Config dataclasses for the sheetviz parser and batch runner.

These are the typed forms of config/sheetviz.yml. The loader
(sheetviz.config.loader) fills in defaults and validates the raw YAML first.
"""

__all__ = [
    "DEFAULT_EXTENSIONS",
    "ParseSettings",
    "AppConfig",
]

DEFAULT_EXTENSIONS = (".xlsx", ".xls", ".csv")


@dataclass(frozen=True)
class ParseSettings:
    """Tunables for header detection, type inference and materialization.

    Defaults reproduce the fixed heuristics (10-row header scan, 0.6 dominant
    fraction, 20 distinct values for Category, 5 samples, 10 preview rows).
    """
    header_scan_rows: int = 10  # ヘッダ探索の対象行数
    type_threshold: float = 0.6  # 支配的な型とみなす割合
    category_max_distinct: int = 20  # Category と判定する最大ユニーク数
    sample_size: int = 5
    preview_rows: int = 10
    max_upload_bytes: int = 10 * 1024 * 1024  # 10 MiB
    allowed_extensions: tuple[str, ...] = DEFAULT_EXTENSIONS


@dataclass(frozen=True)
class AppConfig:
    """Root configuration for batch runs."""
    source_directory: str  # Directory scanned for input files
    output_directory: str | None = None  # JSON 出力先 (None なら出力しない)
    suggest_charts: bool = True
    parser: ParseSettings = field(default_factory=ParseSettings)
