from __future__ import annotations

import json
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import jsonschema
import yaml
from jsonschema.exceptions import ValidationError

from ..models.upload import CommitPolicy, FileType
from .aliases import DEFAULT_ALIASES, AliasTable, merge_aliases

"""Config loader for the ingestion tool.

Responsibilities:
- Load the YAML config (default ``config/ingest.yml``, or the path named by
  ``TRADEIN_INGEST_CONFIG``)
- Validate it against the bundled JSON schema
- Apply defaults for every optional key
- Merge column alias overrides onto the built-in alias table
"""

__all__ = [
    "CONFIG_ENV_VAR",
    "DEFAULT_CONFIG_PATH",
    "SCHEMA_PATH",
    "ConfigError",
    "IngestConfig",
    "load_config",
    "load_config_or_default",
    "resolve_config_path",
]

CONFIG_ENV_VAR = "TRADEIN_INGEST_CONFIG"
DEFAULT_CONFIG_PATH = Path("config/ingest.yml")
SCHEMA_PATH = Path(__file__).with_name("config_schema.json")


class ConfigError(Exception):
    pass


@dataclass(frozen=True)
class IngestConfig:
    commit_policy: CommitPolicy = CommitPolicy.ALL_OR_NOTHING
    sheet: str | None = None  # None -> first sheet in the workbook
    null_sentinels: frozenset[str] = frozenset()  # upper-cased
    keep_na_strings: tuple[str, ...] = ()  # strings pandas must not turn into NaN
    log_dir: Path = Path("logs")
    column_aliases: dict[FileType, AliasTable] = field(default_factory=lambda: dict(DEFAULT_ALIASES))

    def aliases_for(self, kind: FileType) -> AliasTable:
        return self.column_aliases.get(kind, DEFAULT_ALIASES[kind])


def _validate_config_schema(data: dict[str, Any]) -> None:
    """Validate config data against the bundled JSON schema.

    Raises:
        ConfigError: if the schema file is missing or unreadable, or the data
            violates it (unknown keys, wrong types, bad enum values)
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


def _build_aliases(raw: dict[str, Any]) -> dict[FileType, AliasTable]:
    aliases: dict[FileType, AliasTable] = {}
    for kind in FileType:
        try:
            aliases[kind] = merge_aliases(DEFAULT_ALIASES[kind], raw.get(kind.value))
        except KeyError as e:
            raise ConfigError(f"column_aliases.{kind.value}: {e.args[0]}") from e
    return aliases


def resolve_config_path(explicit: Path | None = None) -> Path:
    """Pick the config path: explicit argument, then env var, then the default."""
    if explicit is not None:
        return explicit
    env_path = os.getenv(CONFIG_ENV_VAR)
    if env_path:
        return Path(env_path)
    return DEFAULT_CONFIG_PATH


def load_config(path: Path) -> IngestConfig:
    if not path.exists():
        raise ConfigError(f"config file not found: {path}")
    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
    except yaml.YAMLError as e:
        raise ConfigError(f"invalid yaml: {e}") from e
    if not isinstance(data, dict):
        raise ConfigError(f"config root must be a mapping, got {type(data).__name__}")

    _validate_config_schema(data)

    sentinels = frozenset(s.strip().upper() for s in data.get("null_sentinels", []))
    return IngestConfig(
        commit_policy=CommitPolicy(data.get("commit_policy", CommitPolicy.ALL_OR_NOTHING.value)),
        sheet=data.get("sheet"),
        null_sentinels=sentinels,
        keep_na_strings=tuple(data.get("keep_na_strings", [])),
        log_dir=Path(data.get("log_dir", "logs")),
        column_aliases=_build_aliases(data.get("column_aliases", {})),
    )


def load_config_or_default(path: Path | None = None) -> IngestConfig:
    """Load the config if the resolved file exists, else return defaults.

    An explicitly requested path that does not exist is still an error.
    """
    resolved = resolve_config_path(path)
    if path is None and not resolved.exists():
        return IngestConfig()
    return load_config(resolved)
