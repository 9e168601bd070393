"""
Source adapter protocol and the probe snapshot it returns.

Adapters turn an edited table file into ``{column: cell}`` dicts and know
nothing about results, curations or sessions.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any, Iterable, Iterator, Protocol, runtime_checkable


@runtime_checkable
class SourceAdapter(Protocol):
    def read(self, source_path: Path, options: dict[str, Any]) -> Iterator[dict[str, Any]]:
        """Yield one dict per data row, keyed by header name."""
        ...

    def probe(self, source_path: Path, options: dict[str, Any]) -> SourceProbe:
        ...


@dataclass(frozen=True)
class SourceProbe:
    """Header, data-row count and the first few rows of a source file."""

    row_count: int
    columns: tuple[str, ...]
    sample_rows: tuple[dict[str, Any], ...]
    encoding: str | None = None
    detected_delimiter: str | None = None

    def missing_columns(self, required: Iterable[str]) -> tuple[str, ...]:
        """Required column names absent from the header, in the given order."""
        present = set(self.columns)
        return tuple(name for name in required if name not in present)
