"""
ResultStore -- read and reference-update access to standard ion results.

Responsibility:
    The only write this store performs is moving a result's
    ``manual_override_id``.  SQLAlchemy failures are translated into
    ``PersistenceError`` here so the reconciliation service deals with the
    curation error taxonomy only.

Failure modes:
    - NotFoundError: no result with the requested id.
    - PersistenceError: the UPDATE matched no row (version moved or the row
      vanished), or the database rejected the statement.
"""

from __future__ import annotations

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm.exc import StaleDataError

from lcms_kernel.exceptions import NotFoundError, PersistenceError
from lcms_kernel.logging_config import get_logger
from lcms_kernel.models.standard_ion_result import StandardIonResult
from lcms_kernel.services.base import BaseService

logger = get_logger("services.result_store")


class ResultStore(BaseService[StandardIonResult]):
    """Standard ion result persistence within the caller's transaction."""

    def get_result_by_id(self, result_id: int) -> StandardIonResult:
        try:
            result = self.session.get(StandardIonResult, result_id)
        except SQLAlchemyError as exc:
            raise PersistenceError("read standard ion result", str(exc), result_id=result_id) from exc
        if result is None:
            raise NotFoundError("StandardIonResult", result_id)
        return result

    def update_result(self, result: StandardIonResult) -> None:
        """Flush pending changes to ``result`` (optimistic version check)."""
        # A failed flush leaves the session unusable, so read these first.
        result_id = result.id
        version = result.version
        try:
            self.session.flush()
        except StaleDataError as exc:
            logger.warning(
                "result_update_stale",
                extra={"result_id": result_id, "version": version},
            )
            raise PersistenceError(
                "update manual override id on standard ion result",
                "row was modified or deleted by another transaction",
                result_id=result_id,
            ) from exc
        except SQLAlchemyError as exc:
            raise PersistenceError(
                "update manual override id on standard ion result",
                str(exc),
                result_id=result_id,
            ) from exc

    def set_manual_override(self, result: StandardIonResult, curation_id: int) -> StandardIonResult:
        """Point ``result`` at a curated ion and write it back."""
        result.manual_override_id = curation_id
        self.update_result(result)
        return result
