"""
CurationConfig schema.

Frozen dataclasses the loader parses YAML into.  ``CurationConfig`` is the
only runtime artifact; callers obtain it through
``lcms_config.get_active_config()``.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from sqlalchemy.engine import URL

from lcms_kernel.domain.vocabulary import IonVocabulary

# ---------------------------------------------------------------------------
# Database
# ---------------------------------------------------------------------------

DEFAULT_DRIVER = "postgresql+psycopg2"


@dataclass(frozen=True)
class DatabaseConfig:
    """Connection settings. ``url`` wins over the individual components."""

    url: str | None = None
    host: str = "localhost"
    port: int = 5432
    name: str = "lcms"
    user: str | None = None
    password: str | None = None
    echo: bool = False
    pool_size: int = 5
    max_overflow: int = 10
    pool_timeout: int = 30

    def connection_url(self) -> str:
        if self.url:
            return self.url
        return URL.create(
            DEFAULT_DRIVER,
            username=self.user,
            password=self.password,
            host=self.host,
            port=self.port,
            database=self.name,
        ).render_as_string(hide_password=False)

    def engine_kwargs(self) -> dict[str, Any]:
        return {
            "echo": self.echo,
            "pool_size": self.pool_size,
            "max_overflow": self.max_overflow,
            "pool_timeout": self.pool_timeout,
        }


# ---------------------------------------------------------------------------
# Vocabulary
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class VocabularyConfig:
    """Permitted ion names: the Metlin adducts and/or an explicit list."""

    ions: tuple[str, ...] = ()
    include_metlin_defaults: bool = True

    def build(self) -> IonVocabulary:
        if self.include_metlin_defaults:
            return IonVocabulary.metlin(extra=self.ions)
        return IonVocabulary.of(self.ions)


# ---------------------------------------------------------------------------
# Source files
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class SourceConfig:
    delimiter: str = "\t"
    encoding: str = "utf-8"

    def as_options(self) -> dict[str, Any]:
        return {"delimiter": self.delimiter, "encoding": self.encoding}


# ---------------------------------------------------------------------------
# Root
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class CurationConfig:
    """Effective configuration for one load or export run."""

    database: DatabaseConfig = field(default_factory=DatabaseConfig)
    vocabulary: VocabularyConfig = field(default_factory=VocabularyConfig)
    source: SourceConfig = field(default_factory=SourceConfig)
    checksum: str = ""
    config_path: str | None = None
