"""
Module: lcms_kernel.models.standard_ion_result
Responsibility: ORM persistence for standard ion analysis results -- one row per
    chemical standard whose best ion may be overridden by a curator.
Architecture position: Kernel > Models.  May import from db/base.py only.

Invariants enforced:
    - The current manual override is whatever ``manual_override_id`` points
      at, never the newest curated ion by timestamp.
    - Analysis fields (chemical, standard_well_id, best_metlin_ion) are
      written upstream and frozen here (db/immutability.py).
    - ``version`` is the optimistic-concurrency counter; a flush against a
      row whose version moved raises StaleDataError.

Failure modes:
    - StaleDataError when the row changed or vanished since it was loaded.
    - ImmutabilityViolationError on analysis-field UPDATE or any DELETE.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from sqlalchemy import ForeignKey, Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from lcms_kernel.db.base import Base, IdType

if TYPE_CHECKING:
    from lcms_kernel.domain.dtos import CuratedIonSnapshot, StandardIonResultSnapshot


class StandardIonResult(Base):
    """
    Analysis result for one chemical standard.

    Contract:
        ``manual_override_id`` is null until a curator picks an ion; after
        that it always references the most recently applied curated ion.
    """

    __tablename__ = "standard_ion_results"

    chemical: Mapped[str] = mapped_column(String(255), nullable=False)
    standard_well_id: Mapped[int | None] = mapped_column(IdType, nullable=True)
    best_metlin_ion: Mapped[str | None] = mapped_column(String(50), nullable=True)

    # Circular with curated_standard_metlin_ions.standard_ion_result_id.
    manual_override_id: Mapped[int | None] = mapped_column(
        IdType,
        ForeignKey(
            "curated_standard_metlin_ions.id",
            use_alter=True,
            name="fk_standard_ion_results_manual_override",
        ),
        nullable=True,
    )

    version: Mapped[int] = mapped_column(Integer, nullable=False)

    __mapper_args__ = {"version_id_col": version}

    def __repr__(self) -> str:
        return (
            f"<StandardIonResult {self.id}: {self.chemical} "
            f"override={self.manual_override_id}>"
        )

    def to_dto(self, current_curation: CuratedIonSnapshot | None = None) -> StandardIonResultSnapshot:
        from lcms_kernel.domain.dtos import StandardIonResultSnapshot

        return StandardIonResultSnapshot(
            result_id=self.id,
            chemical=self.chemical,
            standard_well_id=self.standard_well_id,
            best_metlin_ion=self.best_metlin_ion,
            manual_override_id=self.manual_override_id,
            current_curation=current_curation,
        )
