"""
Edit rows -- one line of a curator-edited standard ion table.

Responsibility:
    Names the exported TSV columns and parses a raw ``{column: value}`` row
    into a frozen ``EditRow``.  Pure, zero I/O.

Failure modes:
    - MalformedInputError when the result id is missing, blank or not an
      ASCII integer, when it lies outside the 64-bit id range, or when the
      MANUAL_PICK column is absent.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from enum import Enum
from typing import Any, Mapping

from lcms_kernel.exceptions import MalformedInputError

# Token written for "no value" in exported tables.
NULL_VALUE = "NULL"

# Result ids are stored as signed 64-bit integers.
RESULT_ID_MIN = -(2**63)
RESULT_ID_MAX = 2**63 - 1

_INTEGER = re.compile(r"[+-]?[0-9]+")


class StandardIonHeader(str, Enum):
    """Columns of the exported standard ion table, in export order."""

    STANDARD_ION_RESULT_ID = "STANDARD_ION_RESULT_ID"
    CHEMICAL = "CHEMICAL"
    STANDARD_WELL_ID = "STANDARD_WELL_ID"
    BEST_ION_FROM_ALGO = "BEST_ION_FROM_ALGO"
    MANUAL_PICK = "MANUAL_PICK"
    AUTHOR = "AUTHOR"
    NOTE = "NOTE"

    @classmethod
    def names(cls) -> tuple[str, ...]:
        return tuple(h.value for h in cls)


@dataclass(frozen=True)
class EditRow:
    """A proposed manual pick for one standard ion result."""

    source_row: int  # 1-indexed data row (header excluded)
    result_id: int
    manual_pick: str
    note: str | None = None

    @property
    def is_unset(self) -> bool:
        return self.manual_pick == NULL_VALUE


def _cell(raw: Mapping[str, Any], header: StandardIonHeader) -> str | None:
    value = raw.get(header.value)
    if value is None:
        return None
    return str(value).strip()


def parse_result_id(raw: Mapping[str, Any], source_row: int) -> int:
    """Parse the STANDARD_ION_RESULT_ID column of a raw row."""
    field = StandardIonHeader.STANDARD_ION_RESULT_ID.value
    value = _cell(raw, StandardIonHeader.STANDARD_ION_RESULT_ID)
    if not value:
        raise MalformedInputError(field, value, "missing result id", source_row=source_row)
    if not _INTEGER.fullmatch(value):
        raise MalformedInputError(field, value, "not an integer", source_row=source_row)
    result_id = int(value)
    if not RESULT_ID_MIN <= result_id <= RESULT_ID_MAX:
        raise MalformedInputError(field, value, "out of range", source_row=source_row)
    return result_id


def parse_edit_row(raw: Mapping[str, Any], source_row: int) -> EditRow:
    """
    Build an EditRow from one raw table row.

    Unknown columns are ignored.  An empty or NULL NOTE is stored as None.
    """
    result_id = parse_result_id(raw, source_row)
    manual_pick = _cell(raw, StandardIonHeader.MANUAL_PICK)
    if manual_pick is None:
        raise MalformedInputError(
            StandardIonHeader.MANUAL_PICK.value,
            None,
            "column missing",
            source_row=source_row,
        )
    note = _cell(raw, StandardIonHeader.NOTE)
    if not note or note == NULL_VALUE:
        note = None
    return EditRow(
        source_row=source_row,
        result_id=result_id,
        manual_pick=manual_pick,
        note=note,
    )
