"""
Export service: write the editable standard ion table.

The exported MANUAL_PICK column holds each result's effective pick (or
NULL), so loading an unedited export back through LoadService is a no-op.
AUTHOR and NOTE describe the current curation and are informational.
"""

from __future__ import annotations

import csv
from pathlib import Path
from typing import Any, Mapping, TextIO

from sqlalchemy.orm import Session

from lcms_kernel.domain.dtos import StandardIonResultSnapshot
from lcms_kernel.domain.edit_row import NULL_VALUE, StandardIonHeader
from lcms_kernel.logging_config import get_logger
from lcms_kernel.selectors.curation_selector import CurationSelector

from lcms_ingestion.adapters.tsv_adapter import DEFAULT_DELIMITER

logger = get_logger("ingestion.export_service")


def _cell(value: Any) -> str:
    if value is None or value == "":
        return NULL_VALUE
    return str(value)


def snapshot_to_row(snapshot: StandardIonResultSnapshot) -> list[str]:
    """One export row, in StandardIonHeader order."""
    current = snapshot.current_curation
    return [
        _cell(snapshot.result_id),
        _cell(snapshot.chemical),
        _cell(snapshot.standard_well_id),
        _cell(snapshot.best_metlin_ion),
        _cell(current.best_metlin_ion if current else None),
        _cell(current.author if current else None),
        _cell(current.note if current else None),
    ]


class ExportService:
    """Writes every standard ion result with its current curation."""

    def __init__(self, session: Session, source_options: Mapping[str, Any] | None = None):
        self._selector = CurationSelector(session)
        options = dict(source_options or {})
        self._delimiter = options.get("delimiter", DEFAULT_DELIMITER)
        self._encoding = options.get("encoding", "utf-8")

    def write(self, stream: TextIO) -> int:
        """Write header and rows to ``stream``. Returns the number of data rows."""
        writer = csv.writer(stream, delimiter=self._delimiter, lineterminator="\n")
        writer.writerow(StandardIonHeader.names())
        count = 0
        for snapshot in self._selector.iter_results():
            writer.writerow(snapshot_to_row(snapshot))
            count += 1
        return count

    def export_file(self, target_path: Path) -> int:
        with target_path.open("w", encoding=self._encoding, newline="") as f:
            count = self.write(f)
        logger.info(
            "export_completed",
            extra={"target_file": str(target_path), "rows": count},
        )
        return count
