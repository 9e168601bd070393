"""
Module: lcms_kernel.models.curated_metlin_ion
Responsibility: ORM persistence for the append-only curation history of
    manually picked Metlin ions.
Architecture position: Kernel > Models.  May import from db/base.py only.

Invariants enforced:
    - Append-only: no UPDATE or DELETE, ever (ORM listener + PostgreSQL trigger).
    - ``best_metlin_ion`` was checked against the ion vocabulary before insert.
    - The history of one result is every row with its standard_ion_result_id,
      ordered by (created_at, id).

Failure modes:
    - ImmutabilityViolationError on any UPDATE/DELETE attempt.
    - IntegrityError if standard_ion_result_id references a missing result
      (on backends that enforce foreign keys).
"""

from __future__ import annotations

from datetime import datetime
from typing import TYPE_CHECKING

from sqlalchemy import ForeignKey, Index, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from lcms_kernel.db.base import Base, IdType, UTCDateTime

if TYPE_CHECKING:
    from lcms_kernel.domain.dtos import CuratedIonSnapshot


class CuratedStandardMetlinIon(Base):
    """
    One immutable, timestamped manual ion pick for a standard ion result.

    Contract:
        Rows are created exactly once per accepted edit and never touched
        again.  A row becomes "current" only when the owning result's
        manual_override_id is pointed at it.
    """

    __tablename__ = "curated_standard_metlin_ions"

    __table_args__ = (
        Index("idx_curated_ion_result_created", "standard_ion_result_id", "created_at"),
    )

    created_at: Mapped[datetime] = mapped_column(UTCDateTime(), nullable=False)
    author: Mapped[str] = mapped_column(String(255), nullable=False)
    best_metlin_ion: Mapped[str] = mapped_column(String(50), nullable=False)
    note: Mapped[str | None] = mapped_column(Text, nullable=True)
    standard_ion_result_id: Mapped[int] = mapped_column(
        IdType,
        ForeignKey("standard_ion_results.id"),
        nullable=False,
    )

    def __repr__(self) -> str:
        return (
            f"<CuratedStandardMetlinIon {self.id}: {self.best_metlin_ion} "
            f"result={self.standard_ion_result_id}>"
        )

    def to_dto(self) -> CuratedIonSnapshot:
        from lcms_kernel.domain.dtos import CuratedIonSnapshot

        return CuratedIonSnapshot(
            curation_id=self.id,
            result_id=self.standard_ion_result_id,
            best_metlin_ion=self.best_metlin_ion,
            author=self.author,
            note=self.note,
            created_at=self.created_at,
        )
