"""
lcms_config -- single public entrypoint for curation configuration.

Responsibility:
    Provides the only way to obtain configuration at runtime through
    ``get_active_config()``.  Returns a frozen ``CurationConfig``.

Architecture position:
    Sits above ``lcms_kernel``.  The kernel never imports from
    ``lcms_config``; scripts translate the config into kernel inputs
    (engine URL, ``IonVocabulary``, source adapter options).

Failure modes:
    - ``FileNotFoundError`` -- the named configuration file does not exist.
    - ``ConfigError`` -- a value is missing, unknown or of the wrong type.

Audit relevance:
    Every successful ``get_active_config()`` call emits a ``config_loaded``
    log entry carrying the SHA-256 checksum of the effective settings.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Mapping

from lcms_config.loader import load_config
from lcms_config.schema import (
    CurationConfig,
    DatabaseConfig,
    SourceConfig,
    VocabularyConfig,
)

_logger = logging.getLogger("lcms_kernel.config")


def get_active_config(
    config_path: Path | str | None = None,
    overrides: Mapping[str, Any] | None = None,
) -> CurationConfig:
    """The only public configuration entrypoint.

    Args:
        config_path: YAML file to read.  None means built-in defaults.
        overrides: Dotted-key values (``{"database.url": ...}``) applied on
            top of the file, e.g. from command-line flags.  None values
            are ignored.

    Raises:
        FileNotFoundError: If ``config_path`` does not exist.
        ConfigError: If any value is unusable.
    """
    path = Path(config_path) if config_path is not None else None
    if path is not None and not path.is_file():
        raise FileNotFoundError(f"Configuration file not found: {path}")

    config = load_config(path, overrides)

    _logger.info(
        "config_loaded",
        extra={
            "config_path": config.config_path,
            "checksum": config.checksum,
            "vocabulary_size": len(config.vocabulary.build()),
            "include_metlin_defaults": config.vocabulary.include_metlin_defaults,
        },
    )
    return config


__all__ = [
    "CurationConfig",
    "DatabaseConfig",
    "SourceConfig",
    "VocabularyConfig",
    "get_active_config",
]
