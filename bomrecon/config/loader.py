from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import jsonschema
import yaml
from jsonschema.exceptions import ValidationError

from ..models.config_models import CompareConfig, SideConfig
from ..models.mapping import Mapping

"""Config loader.

Responsibilities:
- Load the YAML job file (default config/compare.yml)
- Validate it against config_schema.json (shipped next to this module)
- Apply defaults (ignore_revision=True, everything else off)
"""

SCHEMA_PATH = Path(__file__).with_name("config_schema.json")
DEFAULT_CONFIG_PATH = Path("config/compare.yml")


class ConfigError(Exception):
    pass


def _validate_config_schema(data: dict[str, Any]) -> None:
    """Validate config data against the JSON schema.

    Raises:
        ConfigError: If the schema file does not exist or is not valid JSON,
            or if the config data violates the schema (missing required keys,
            wrong types, unknown keys).
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


def _side(raw: dict[str, Any], base_dir: Path) -> SideConfig:
    path = Path(raw["path"])
    if not path.is_absolute():
        path = base_dir / path
    return SideConfig(
        path=str(path),
        skip_rows=raw.get("skip_rows", 0),
        sheet=raw.get("sheet"),
        mapping=Mapping.from_dict(raw.get("mapping")),
    )


def load_config(path: Path, base_dir: Path | None = None) -> CompareConfig:
    """Load and validate a job file.

    Relative file paths inside the job are resolved against `base_dir`
    (current directory when None).
    """
    if not path.exists():
        raise ConfigError(f"config file not found: {path}")
    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
    except yaml.YAMLError as e:
        raise ConfigError(f"invalid yaml: {e}") from e
    if not isinstance(data, dict):
        raise ConfigError("config validation failed: top level must be a mapping")

    _validate_config_schema(data)

    base = base_dir if base_dir is not None else Path(".")
    rules = data.get("rules")
    if rules and not Path(rules).is_absolute():
        rules = str(base / rules)
    return CompareConfig(
        original=_side(data["original"], base),
        partial=_side(data["partial"], base),
        rules=rules or None,
        aggregate=data.get("aggregate", False),
        ignore_revision=data.get("ignore_revision", True),  # code-only keys by default
        ignore_quantity=data.get("ignore_quantity", False),
        ignore_rules=data.get("ignore_rules", False),
        output=data.get("output"),
    )
