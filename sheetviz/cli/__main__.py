from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Any

from dotenv import load_dotenv

from sheetviz.config.loader import ConfigError, load_config, resolve_config_path
from sheetviz.excel.reader import InputError
from sheetviz.logging.init import log_summary, setup_logging
from sheetviz.services.chart_suggester import suggest_charts
from sheetviz.services.orchestrator import ProcessingError, process_all
from sheetviz.services.summary import render_summary_line
from sheetviz.services.table_builder import TableBuilder

"""CLI entrypoint.

Subcommands:
- parse FILE      : parse one upload and print the table JSON
- suggest COLUMNS : print chart suggestions for a JSON column list
- batch           : parse every file in the configured source directory

JSON goes to stdout; log lines use the labeled INFO/WARN/ERROR/SUMMARY format.
"""

EXIT_SUCCESS_ALL = 0
EXIT_FATAL = 1
EXIT_PARTIAL_FAILURE = 2


def _load_env_file(path: Path, override: bool = True) -> None:
    """Load .env (SHEETVIZ_CONFIG etc.) before resolving the config path."""
    if path.exists():
        load_dotenv(dotenv_path=path, override=override)


def _parse_type_overrides(pairs: list[str] | None) -> dict[str, str]:
    overrides: dict[str, str] = {}
    for pair in pairs or []:
        name, sep, col_type = pair.partition("=")
        if not sep or not name.strip():
            raise argparse.ArgumentTypeError(f"expected COLUMN=TYPE, got {pair!r}")
        overrides[name.strip()] = col_type.strip()
    return overrides


def _build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(prog="sheetviz", description="Spreadsheet ingestion & chart suggestions")
    p.add_argument("--debug", action="store_true", help="Enable debug logging")
    sub = p.add_subparsers(dest="command", required=True)

    parse_p = sub.add_parser("parse", help="Parse a .xlsx/.xls/.csv file and print JSON")
    parse_p.add_argument("file", type=Path)
    parse_p.add_argument("--sheet", default=None, help="Sheet name (default: first sheet)")
    parse_p.add_argument(
        "--type", dest="types", action="append", metavar="COLUMN=TYPE",
        help="Override an inferred column type (repeatable)",
    )
    parse_p.add_argument("--rows", action="store_true", help="Include all rows, not only the preview")
    parse_p.add_argument("--suggest", action="store_true", help="Append chart suggestions")

    suggest_p = sub.add_parser("suggest", help="Suggest charts for a JSON list of {name, type}")
    suggest_p.add_argument("columns", help="JSON array, or '-' to read stdin")

    batch_p = sub.add_parser("batch", help="Parse every file in the configured source directory")
    batch_p.add_argument("--config", default=None, help="Config path (default: $SHEETVIZ_CONFIG or config/sheetviz.yml)")
    return p


def _print_json(document: Any) -> None:
    print(json.dumps(document, ensure_ascii=False, indent=2))


def _cmd_parse(args: argparse.Namespace, logger: logging.Logger) -> int:
    try:
        overrides = _parse_type_overrides(args.types)
    except argparse.ArgumentTypeError as e:
        logger.error(str(e))
        return EXIT_FATAL
    if not args.file.exists():
        logger.error(f"file not found: {args.file}")
        return EXIT_FATAL
    try:
        table = TableBuilder().parse(args.file.read_bytes(), args.file.name, args.sheet, overrides)
    except InputError as e:
        logger.error(f"input: {e}")
        return EXIT_FATAL
    document = table.to_dict(include_rows=args.rows)
    if args.suggest:
        document["suggestions"] = suggest_charts(table.columns).to_dict()
    _print_json(document)
    return EXIT_SUCCESS_ALL


def _cmd_suggest(args: argparse.Namespace, logger: logging.Logger) -> int:
    text = sys.stdin.read() if args.columns == "-" else args.columns
    try:
        columns = json.loads(text)
    except json.JSONDecodeError as e:
        logger.error(f"columns: invalid JSON: {e}")
        return EXIT_FATAL
    if not isinstance(columns, list):
        logger.error("columns: a JSON array is required")
        return EXIT_FATAL
    _print_json(suggest_charts(c for c in columns if isinstance(c, dict)).to_dict())
    return EXIT_SUCCESS_ALL


def _cmd_batch(args: argparse.Namespace, logger: logging.Logger) -> int:
    config_path = resolve_config_path(args.config)
    try:
        cfg = load_config(config_path)
    except ConfigError as e:
        logger.error(f"config: {e}")
        return EXIT_FATAL

    logger.info(f"Processing files from: {cfg.source_directory}")
    try:
        result = process_all(cfg)
    except ProcessingError as e:
        logger.error(f"processing: {e}")
        return EXIT_FATAL

    log_summary(render_summary_line(result).removeprefix("SUMMARY "))
    if result.failed_files > 0:
        return EXIT_PARTIAL_FAILURE
    return EXIT_SUCCESS_ALL


def main(argv: list[str] | None = None) -> int:
    logger = setup_logging()

    # None のときのみシステム引数を読む (テストで main([]) を呼ぶため)
    if argv is None:
        argv = sys.argv[1:]
    args = _build_parser().parse_args(argv)
    _load_env_file(Path(".env"), override=True)

    if args.debug:
        for h in logger.handlers:
            h.setLevel(logging.DEBUG)
        logger.setLevel(logging.DEBUG)
        logger.debug("debug mode enabled")
    elif args.command != "batch":
        # stdout carries the JSON document; keep INFO lines out of it
        logger.setLevel(logging.WARNING)
    else:
        logger.setLevel(logging.INFO)

    if args.command == "parse":
        return _cmd_parse(args, logger)
    if args.command == "suggest":
        return _cmd_suggest(args, logger)
    return _cmd_batch(args, logger)


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
