from __future__ import annotations

import json
import os
from pathlib import Path
from typing import Any

import jsonschema
import yaml
from jsonschema.exceptions import ValidationError

from ..models.config_models import AppConfig, ParseSettings

"""Config loader.

Responsibilities:
- Load YAML (default config/sheetviz.yml, overridable with SHEETVIZ_CONFIG)
- Validate against config_schema.json (additionalProperties: false)
- Apply defaults for every optional key
"""

__all__ = [
    "ConfigError",
    "DEFAULT_CONFIG_PATH",
    "CONFIG_ENV_VAR",
    "SCHEMA_PATH",
    "resolve_config_path",
    "load_config",
    "parse_settings_from_dict",
]

DEFAULT_CONFIG_PATH = Path("config/sheetviz.yml")
CONFIG_ENV_VAR = "SHEETVIZ_CONFIG"
SCHEMA_PATH = Path(__file__).with_name("config_schema.json")


class ConfigError(Exception):
    pass


def resolve_config_path(explicit: str | Path | None = None) -> Path:
    """Explicit path > $SHEETVIZ_CONFIG > config/sheetviz.yml."""
    if explicit:
        return Path(explicit)
    env = os.getenv(CONFIG_ENV_VAR)
    if env:
        return Path(env)
    return DEFAULT_CONFIG_PATH


def _validate_config_schema(data: dict[str, Any]) -> None:
    """Validate config data against the bundled JSON schema.

    Raises:
        ConfigError: schema file missing/invalid or data fails validation
    """
    if not SCHEMA_PATH.exists():
        raise ConfigError(f"config schema not found: {SCHEMA_PATH}")
    try:
        schema = json.loads(SCHEMA_PATH.read_text(encoding="utf-8"))
        jsonschema.validate(data, schema)
    except json.JSONDecodeError as e:
        raise ConfigError(f"invalid schema file: {e}") from e
    except ValidationError as e:
        raise ConfigError(f"config validation failed: {e.message}") from e


def parse_settings_from_dict(raw: dict[str, Any] | None) -> ParseSettings:
    """Build ParseSettings, falling back to defaults for missing keys."""
    raw = raw or {}
    defaults = ParseSettings()
    extensions = raw.get("allowed_extensions")
    return ParseSettings(
        header_scan_rows=raw.get("header_scan_rows", defaults.header_scan_rows),
        type_threshold=float(raw.get("type_threshold", defaults.type_threshold)),
        category_max_distinct=raw.get("category_max_distinct", defaults.category_max_distinct),
        sample_size=raw.get("sample_size", defaults.sample_size),
        preview_rows=raw.get("preview_rows", defaults.preview_rows),
        max_upload_bytes=raw.get("max_upload_bytes", defaults.max_upload_bytes),
        allowed_extensions=(
            tuple(e.lower() for e in extensions) if extensions else defaults.allowed_extensions
        ),
    )


def load_config(path: Path) -> AppConfig:
    if not path.exists():
        raise ConfigError(f"config file not found: {path}")
    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
    except yaml.YAMLError as e:
        raise ConfigError(f"invalid yaml: {e}") from e
    if not isinstance(data, dict):
        raise ConfigError(f"config root must be a mapping: {path}")

    _validate_config_schema(data)

    return AppConfig(
        source_directory=data["source_directory"],
        output_directory=data.get("output_directory"),
        suggest_charts=data.get("suggest_charts", True),
        parser=parse_settings_from_dict(data.get("parser")),
    )
