"""
TSV source adapter for exported standard ion tables.

Uses csv.DictReader with a tab delimiter. Configurable: delimiter, encoding,
quoting, skip_rows. Handles BOM via utf-8-sig when encoding is utf-8.
Streams rows. The first (non-skipped) line is always the header.
"""

from __future__ import annotations

import csv
from contextlib import contextmanager
from pathlib import Path
from typing import Any, Iterator

from lcms_ingestion.adapters.base import SourceProbe


_QUOTING = {
    "minimal": csv.QUOTE_MINIMAL,
    "all": csv.QUOTE_ALL,
    "none": csv.QUOTE_NONE,
}

DEFAULT_DELIMITER = "\t"


def _get_encoding(options: dict[str, Any]) -> str:
    enc = options.get("encoding", "utf-8")
    if enc.lower() == "utf-8":
        return "utf-8-sig"  # Strip BOM if present
    return enc


def _get_quoting(options: dict[str, Any]) -> int:
    q = options.get("quoting", "minimal")
    if isinstance(q, int):
        return q
    return _QUOTING.get(str(q).lower(), csv.QUOTE_MINIMAL)


def _is_blank(row: dict[str, Any]) -> bool:
    """True for lines that hold only delimiters and whitespace."""
    return not any(v and v.strip() for v in row.values() if isinstance(v, str))


@contextmanager
def _open_reader(source_path: Path, options: dict[str, Any]) -> Iterator[csv.DictReader]:
    skip_rows = int(options.get("skip_rows", 0))
    with source_path.open("r", encoding=_get_encoding(options), newline="") as f:
        for _ in range(skip_rows):
            next(f, None)
        yield csv.DictReader(
            f,
            delimiter=options.get("delimiter", DEFAULT_DELIMITER),
            quoting=_get_quoting(options),
        )


class TsvSourceAdapter:
    """Read tab-separated files as one dict per row, keyed by header names."""

    def read(self, source_path: Path, options: dict[str, Any]) -> Iterator[dict[str, Any]]:
        with _open_reader(source_path, options) as reader:
            for row in reader:
                # Blank lines inside an edited file carry no edit
                if _is_blank(row):
                    continue
                yield row

    def probe(self, source_path: Path, options: dict[str, Any]) -> SourceProbe:
        """Count and sample the rows ``read`` would yield."""
        sample_size = 5

        sample: list[dict[str, Any]] = []
        count = 0
        with _open_reader(source_path, options) as reader:
            columns = tuple(reader.fieldnames or ())
            for row in reader:
                if _is_blank(row):
                    continue
                count += 1
                if len(sample) < sample_size:
                    sample.append(dict(row))

        return SourceProbe(
            row_count=count,
            columns=columns,
            sample_rows=tuple(sample),
            encoding=_get_encoding(options),
            detected_delimiter=options.get("delimiter", DEFAULT_DELIMITER),
        )
