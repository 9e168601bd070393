"""
CurationStore -- append-only writes and id lookups for curated ions.

Responsibility:
    Inserts new CuratedStandardMetlinIon rows and reads them back by id.
    There is deliberately no update or delete method.

Failure modes:
    - NotFoundError: no curated ion with the requested id (a dangling
      manual_override_id).
    - PersistenceError: the database rejected the INSERT, or the flushed row
      came back without an id.
"""

from __future__ import annotations

from datetime import datetime

from sqlalchemy.exc import SQLAlchemyError

from lcms_kernel.exceptions import NotFoundError, PersistenceError
from lcms_kernel.logging_config import get_logger
from lcms_kernel.models.curated_metlin_ion import CuratedStandardMetlinIon
from lcms_kernel.services.base import BaseService

logger = get_logger("services.curation_store")


class CurationStore(BaseService[CuratedStandardMetlinIon]):
    """Curated ion persistence within the caller's transaction."""

    def get_curation_by_id(self, curation_id: int) -> CuratedStandardMetlinIon:
        try:
            curation = self.session.get(CuratedStandardMetlinIon, curation_id)
        except SQLAlchemyError as exc:
            raise PersistenceError("read curated ion", str(exc)) from exc
        if curation is None:
            raise NotFoundError("CuratedStandardMetlinIon", curation_id)
        return curation

    def insert_curation(
        self,
        author: str,
        created_at: datetime,
        best_metlin_ion: str,
        note: str | None,
        result_id: int,
    ) -> CuratedStandardMetlinIon:
        """Append one curated ion and flush so its id is assigned."""
        curation = CuratedStandardMetlinIon(
            created_at=created_at,
            author=author,
            best_metlin_ion=best_metlin_ion,
            note=note,
            standard_ion_result_id=result_id,
        )
        try:
            self.session.add(curation)
            self.session.flush()
        except SQLAlchemyError as exc:
            raise PersistenceError(
                "insert curated entry into the curated metlin ion table",
                str(exc),
                result_id=result_id,
            ) from exc
        if curation.id is None:
            raise PersistenceError(
                "insert curated entry into the curated metlin ion table",
                "store returned no id",
                result_id=result_id,
            )
        logger.debug(
            "curated_ion_inserted",
            extra={"curation_id": curation.id, "result_id": result_id, "ion": best_metlin_ion},
        )
        return curation
