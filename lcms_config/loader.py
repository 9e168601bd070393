"""
Configuration Loader (``lcms_config.loader``).

Responsibility
--------------
Loads the YAML configuration file, applies caller overrides and parses the
result into the frozen ``lcms_config.schema`` dataclasses.  Runtime callers
go through ``lcms_config.get_active_config()``.

Failure modes
-------------
* Missing YAML file  -> ``FileNotFoundError`` propagates.
* Malformed YAML  -> ``ConfigError`` (key ``<file>``).
* Wrong type or unknown section key  -> ``ConfigError`` naming the dotted key.
"""

from __future__ import annotations

import copy
import hashlib
import json
from pathlib import Path
from typing import Any, Mapping

import yaml

from lcms_kernel.exceptions import ConfigError

from lcms_config.schema import (
    CurationConfig,
    DatabaseConfig,
    SourceConfig,
    VocabularyConfig,
)

_SECTIONS = ("database", "vocabulary", "source")


def load_yaml_file(path: Path) -> dict[str, Any]:
    """
    Load a single YAML file and return its contents as a dict.

    Raises:
        FileNotFoundError: if the file does not exist.
        ConfigError: if the file is not valid YAML or not a mapping.
    """
    with open(path) as f:
        try:
            data = yaml.safe_load(f) or {}
        except yaml.YAMLError as exc:
            raise ConfigError("<file>", f"invalid YAML in {path}: {exc}") from exc
    if not isinstance(data, dict):
        raise ConfigError("<file>", f"top level of {path} must be a mapping")
    return data


def apply_overrides(data: dict[str, Any], overrides: Mapping[str, Any] | None) -> dict[str, Any]:
    """
    Return a copy of ``data`` with dotted-key overrides applied.

    ``{"database.url": "sqlite://"}`` sets ``data["database"]["url"]``.
    None values are ignored so unset CLI flags leave file values alone.
    """
    merged = copy.deepcopy(data)
    for dotted, value in (overrides or {}).items():
        if value is None:
            continue
        section, _, key = dotted.partition(".")
        if not key:
            raise ConfigError(dotted, "override keys must look like 'section.key'")
        target = merged.setdefault(section, {})
        if not isinstance(target, dict):
            raise ConfigError(section, "must be a mapping")
        target[key] = value
    return merged


def _section(data: dict[str, Any], name: str) -> dict[str, Any]:
    section = data.get(name) or {}
    if not isinstance(section, dict):
        raise ConfigError(name, "must be a mapping")
    return section


def _check_keys(section: dict[str, Any], name: str, allowed: tuple[str, ...]) -> None:
    for key in section:
        if key not in allowed:
            raise ConfigError(f"{name}.{key}", "unknown setting")


def _int(section: dict[str, Any], name: str, key: str, default: int) -> int:
    value = section.get(key, default)
    if isinstance(value, bool):
        raise ConfigError(f"{name}.{key}", f"expected an integer, got {value!r}")
    try:
        return int(value)
    except (TypeError, ValueError):
        raise ConfigError(f"{name}.{key}", f"expected an integer, got {value!r}") from None


def _bool(section: dict[str, Any], name: str, key: str, default: bool) -> bool:
    value = section.get(key, default)
    if not isinstance(value, bool):
        raise ConfigError(f"{name}.{key}", f"expected true or false, got {value!r}")
    return value


def _str(section: dict[str, Any], name: str, key: str, default: str | None) -> str | None:
    value = section.get(key, default)
    if value is None:
        return None
    if isinstance(value, (dict, list, bool)):
        raise ConfigError(f"{name}.{key}", f"expected a string, got {value!r}")
    return str(value)


def parse_database(data: dict[str, Any]) -> DatabaseConfig:
    section = _section(data, "database")
    _check_keys(
        section,
        "database",
        ("url", "host", "port", "name", "user", "password", "echo",
         "pool_size", "max_overflow", "pool_timeout"),
    )
    defaults = DatabaseConfig()
    config = DatabaseConfig(
        url=_str(section, "database", "url", None),
        host=_str(section, "database", "host", defaults.host),
        port=_int(section, "database", "port", defaults.port),
        name=_str(section, "database", "name", defaults.name),
        user=_str(section, "database", "user", None),
        password=_str(section, "database", "password", None),
        echo=_bool(section, "database", "echo", defaults.echo),
        pool_size=_int(section, "database", "pool_size", defaults.pool_size),
        max_overflow=_int(section, "database", "max_overflow", defaults.max_overflow),
        pool_timeout=_int(section, "database", "pool_timeout", defaults.pool_timeout),
    )
    if not 0 < config.port < 65536:
        raise ConfigError("database.port", f"out of range: {config.port}")
    if config.pool_size < 1:
        raise ConfigError("database.pool_size", "must be at least 1")
    return config


def parse_vocabulary(data: dict[str, Any]) -> VocabularyConfig:
    section = _section(data, "vocabulary")
    _check_keys(section, "vocabulary", ("ions", "include_metlin_defaults"))
    ions = section.get("ions") or []
    if not isinstance(ions, list) or not all(isinstance(i, str) and i.strip() for i in ions):
        raise ConfigError("vocabulary.ions", "expected a list of non-empty ion names")
    include = _bool(section, "vocabulary", "include_metlin_defaults", True)
    if not include and not ions:
        raise ConfigError("vocabulary", "no ions allowed: set ions or include_metlin_defaults")
    return VocabularyConfig(
        ions=tuple(i.strip() for i in ions),
        include_metlin_defaults=include,
    )


def parse_source(data: dict[str, Any]) -> SourceConfig:
    section = _section(data, "source")
    _check_keys(section, "source", ("delimiter", "encoding"))
    delimiter = section.get("delimiter", "\t")
    if not isinstance(delimiter, str) or len(delimiter) != 1:
        raise ConfigError("source.delimiter", f"expected one character, got {delimiter!r}")
    encoding = _str(section, "source", "encoding", "utf-8")
    return SourceConfig(delimiter=delimiter, encoding=encoding)


def compute_checksum(data: dict[str, Any]) -> str:
    """SHA-256 of the canonical JSON serialization of ``data``."""
    canonical = json.dumps(data, sort_keys=True, default=str)
    return hashlib.sha256(canonical.encode()).hexdigest()


def parse_config(
    data: dict[str, Any],
    config_path: Path | None = None,
) -> CurationConfig:
    for key in data:
        if key not in _SECTIONS:
            raise ConfigError(str(key), "unknown section")
    return CurationConfig(
        database=parse_database(data),
        vocabulary=parse_vocabulary(data),
        source=parse_source(data),
        checksum=compute_checksum(data),
        config_path=str(config_path) if config_path is not None else None,
    )


def load_config(
    config_path: Path | None = None,
    overrides: Mapping[str, Any] | None = None,
) -> CurationConfig:
    data = load_yaml_file(config_path) if config_path is not None else {}
    return parse_config(apply_overrides(data, overrides), config_path)
