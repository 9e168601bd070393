"""
ReconciliationService -- apply curator edits to standard ion results.

Responsibility:
    For every edit row, in input order, decide whether it is a genuine
    manual override and, if so, append a curated ion and repoint the
    result's manual_override_id at it.

Architecture position:
    Kernel > Services.  Flushes inside the caller's transaction and never
    commits or rolls back; ``lcms_ingestion.services.load_service`` owns the
    transaction and turns a failed ``ReconciliationResult`` into a rollback.

Per-row algorithm:
    1. Parse the result id                      -> MalformedInputError
    2. Load the result                          -> NotFoundError
    3. Effective current value = pick of the referenced curated ion, or NULL
    4. Proposed pick is NULL                    -> skip
    5. Proposed pick equals effective value     -> skip
    6. Vocabulary check (before any write)      -> InvalidValueError
       Insert curated ion                       -> PersistenceError
       Repoint result.manual_override_id        -> PersistenceError
    7. Log ``manual_override_applied``

Failure modes:
    Errors never escape ``reconcile``: the first one is captured in the
    returned result's ``failure`` and processing stops.  Earlier rows have
    been flushed, so the caller MUST roll back.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Iterable, Mapping

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from lcms_kernel.domain.clock import Clock, SystemClock
from lcms_kernel.domain.edit_row import NULL_VALUE, EditRow, StandardIonHeader, parse_edit_row
from lcms_kernel.domain.vocabulary import IonVocabulary
from lcms_kernel.exceptions import (
    CurationError,
    InvalidValueError,
    LcmsKernelError,
    PersistenceError,
)
from lcms_kernel.logging_config import LogContext, get_logger
from lcms_kernel.models.standard_ion_result import StandardIonResult
from lcms_kernel.services.curation_store import CurationStore
from lcms_kernel.services.result_store import ResultStore

logger = get_logger("services.reconciliation")


# -----------------------------------------------------------------------------
# Result types
# -----------------------------------------------------------------------------


class RowAction(str, Enum):
    """What happened to one edit row."""

    APPLIED = "applied"
    SKIPPED_UNSET = "skipped_unset"
    SKIPPED_UNCHANGED = "skipped_unchanged"
    FAILED = "failed"


@dataclass(frozen=True)
class RowOutcome:
    """Outcome of one edit row."""

    source_row: int
    action: RowAction
    result_id: int | None = None
    manual_pick: str | None = None
    previous_value: str | None = None
    curation_id: int | None = None
    error: CurationError | None = None


@dataclass(frozen=True)
class ReconciliationResult:
    """Result of reconcile(): per-row outcomes up to and including the first failure."""

    outcomes: tuple[RowOutcome, ...] = ()
    failure: RowOutcome | None = None
    committed: bool = False
    dry_run: bool = False

    @property
    def succeeded(self) -> bool:
        return self.failure is None

    @property
    def applied(self) -> tuple[RowOutcome, ...]:
        return tuple(o for o in self.outcomes if o.action is RowAction.APPLIED)

    @property
    def skipped(self) -> tuple[RowOutcome, ...]:
        return tuple(
            o for o in self.outcomes
            if o.action in (RowAction.SKIPPED_UNSET, RowAction.SKIPPED_UNCHANGED)
        )


# -----------------------------------------------------------------------------
# Service
# -----------------------------------------------------------------------------


class ReconciliationService:
    """Applies edit rows through the result and curation stores."""

    def __init__(
        self,
        session: Session,
        vocabulary: IonVocabulary,
        clock: Clock | None = None,
    ):
        self._vocabulary = vocabulary
        self._clock = clock or SystemClock()
        self._results = ResultStore(session)
        self._curations = CurationStore(session)

    def effective_value(self, result: StandardIonResult) -> str:
        """The currently effective manual pick of ``result``, or NULL."""
        if result.manual_override_id is None:
            return NULL_VALUE
        curation = self._curations.get_curation_by_id(result.manual_override_id)
        return curation.best_metlin_ion

    def reconcile(
        self,
        rows: Iterable[Mapping[str, Any]],
        author: str,
    ) -> ReconciliationResult:
        """
        Reconcile raw table rows, stopping at the first error.

        Rows are numbered from 1 in iteration order.
        """
        outcomes: list[RowOutcome] = []
        logger.info("reconciliation_started", extra={"author": author})

        for source_row, raw in enumerate(rows, start=1):
            try:
                outcome = self.reconcile_row(raw, source_row, author)
            except CurationError as exc:
                outcome = self._failed(source_row, raw, exc)
            except (SQLAlchemyError, LcmsKernelError) as exc:
                wrapped = PersistenceError("apply edit row", str(exc), source_row=source_row)
                wrapped.__cause__ = exc
                outcome = self._failed(source_row, raw, wrapped)

            outcomes.append(outcome)
            if outcome.action is RowAction.FAILED:
                logger.error(
                    "reconciliation_row_failed",
                    extra={
                        "source_row": source_row,
                        "error_code": outcome.error.code,
                        "error_msg": str(outcome.error),
                    },
                )
                return ReconciliationResult(outcomes=tuple(outcomes), failure=outcome)

        result = ReconciliationResult(outcomes=tuple(outcomes))
        logger.info(
            "reconciliation_completed",
            extra={
                "rows": len(outcomes),
                "applied": len(result.applied),
                "skipped": len(result.skipped),
            },
        )
        return result

    def reconcile_row(
        self,
        raw: Mapping[str, Any],
        source_row: int,
        author: str,
    ) -> RowOutcome:
        """Process one raw row.  Raises CurationError subclasses on failure."""
        try:
            edit = parse_edit_row(raw, source_row)
            return self.apply_edit(edit, author)
        except CurationError as exc:
            if exc.source_row is None:
                exc.source_row = source_row
            raise

    def apply_edit(self, edit: EditRow, author: str) -> RowOutcome:
        result = self._results.get_result_by_id(edit.result_id)
        current = self.effective_value(result)

        if edit.is_unset:
            return RowOutcome(
                source_row=edit.source_row,
                action=RowAction.SKIPPED_UNSET,
                result_id=edit.result_id,
                manual_pick=edit.manual_pick,
                previous_value=current,
            )
        if edit.manual_pick == current:
            return RowOutcome(
                source_row=edit.source_row,
                action=RowAction.SKIPPED_UNCHANGED,
                result_id=edit.result_id,
                manual_pick=edit.manual_pick,
                previous_value=current,
            )

        if not self._vocabulary.contains(edit.manual_pick):
            raise InvalidValueError(edit.manual_pick, result_id=edit.result_id, source_row=edit.source_row)

        curation = self._curations.insert_curation(
            author=author,
            created_at=self._clock.now_utc(),
            best_metlin_ion=edit.manual_pick,
            note=edit.note,
            result_id=edit.result_id,
        )
        self._results.set_manual_override(result, curation.id)

        with LogContext.bind(result_id=str(edit.result_id)):
            logger.info(
                "manual_override_applied",
                extra={
                    "source_row": edit.source_row,
                    "curation_id": curation.id,
                    "ion": edit.manual_pick,
                    "previous_ion": current,
                },
            )

        return RowOutcome(
            source_row=edit.source_row,
            action=RowAction.APPLIED,
            result_id=edit.result_id,
            manual_pick=edit.manual_pick,
            previous_value=current,
            curation_id=curation.id,
        )

    @staticmethod
    def _failed(source_row: int, raw: Mapping[str, Any], exc: CurationError) -> RowOutcome:
        result_id = getattr(exc, "result_id", None)
        if result_id is None and getattr(exc, "entity_type", None) == "StandardIonResult":
            result_id = exc.entity_id
        return RowOutcome(
            source_row=source_row,
            action=RowAction.FAILED,
            result_id=result_id,
            manual_pick=raw.get(StandardIonHeader.MANUAL_PICK.value),
            error=exc,
        )
