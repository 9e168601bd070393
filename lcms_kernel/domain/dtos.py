"""
Frozen read DTOs for standard ion results and curated ions.

Selectors and the export service hand these out instead of live ORM
instances, so callers cannot mutate store state by accident.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime


@dataclass(frozen=True)
class CuratedIonSnapshot:
    """One immutable curation assertion."""

    curation_id: int
    result_id: int
    best_metlin_ion: str
    author: str
    note: str | None
    created_at: datetime


@dataclass(frozen=True)
class StandardIonResultSnapshot:
    """A standard ion result together with its effective manual pick."""

    result_id: int
    chemical: str
    standard_well_id: int | None
    best_metlin_ion: str | None
    manual_override_id: int | None
    current_curation: CuratedIonSnapshot | None = None

    @property
    def has_override(self) -> bool:
        return self.manual_override_id is not None
