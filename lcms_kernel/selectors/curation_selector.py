"""
CurationSelector -- read-only views of results and their curation history.

Currency is always decided by ``StandardIonResult.manual_override_id``;
``history()`` is ordered by (created_at, id) for display only and is never
used to pick the current curation.
"""

from __future__ import annotations

from typing import Iterator

from sqlalchemy import select

from lcms_kernel.domain.dtos import CuratedIonSnapshot, StandardIonResultSnapshot
from lcms_kernel.domain.edit_row import NULL_VALUE
from lcms_kernel.models.curated_metlin_ion import CuratedStandardMetlinIon
from lcms_kernel.models.standard_ion_result import StandardIonResult
from lcms_kernel.selectors.base import BaseSelector


class CurationSelector(BaseSelector[CuratedStandardMetlinIon]):
    """Queries over standard ion results and curated ions."""

    def history(self, result_id: int) -> list[CuratedIonSnapshot]:
        """Every curated ion recorded for ``result_id``, oldest first."""
        stmt = (
            select(CuratedStandardMetlinIon)
            .where(CuratedStandardMetlinIon.standard_ion_result_id == result_id)
            .order_by(CuratedStandardMetlinIon.created_at, CuratedStandardMetlinIon.id)
        )
        return [row.to_dto() for row in self.session.scalars(stmt)]

    def current(self, result_id: int) -> CuratedIonSnapshot | None:
        """The curated ion the result currently points at, if any."""
        result = self.session.get(StandardIonResult, result_id)
        if result is None or result.manual_override_id is None:
            return None
        curation = self.session.get(CuratedStandardMetlinIon, result.manual_override_id)
        return curation.to_dto() if curation is not None else None

    def effective_value(self, result_id: int) -> str:
        """The effective manual pick of ``result_id``, or NULL."""
        current = self.current(result_id)
        return current.best_metlin_ion if current is not None else NULL_VALUE

    def count_for_result(self, result_id: int) -> int:
        return len(self.history(result_id))

    def iter_results(self) -> Iterator[StandardIonResultSnapshot]:
        """All results ordered by id, each with its current curation attached."""
        current_ion = CuratedStandardMetlinIon
        stmt = (
            select(StandardIonResult, current_ion)
            .outerjoin(current_ion, StandardIonResult.manual_override_id == current_ion.id)
            .order_by(StandardIonResult.id)
        )
        for result, curation in self.session.execute(stmt):
            yield result.to_dto(curation.to_dto() if curation is not None else None)
