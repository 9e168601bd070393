"""
Load service: read an edited standard ion table and reconcile it in one transaction.

Owns the transaction boundary that the kernel services deliberately leave
open.  One session per run; every failure path rolls back explicitly before
the session is released, and commit happens only when every row succeeded.
Uses structured logging (LogContext, get_logger("ingestion.*")).
"""

from __future__ import annotations

import csv
from dataclasses import replace
from pathlib import Path
from typing import Any, Callable, Iterable, Mapping
from uuid import uuid4

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from lcms_kernel.domain.clock import Clock, SystemClock
from lcms_kernel.domain.vocabulary import IonVocabulary
from lcms_kernel.exceptions import MalformedInputError, PersistenceError
from lcms_kernel.logging_config import LogContext, get_logger
from lcms_kernel.services.reconciliation_service import (
    ReconciliationResult,
    ReconciliationService,
    RowAction,
    RowOutcome,
)

from lcms_ingestion.adapters.base import SourceAdapter, SourceProbe
from lcms_ingestion.adapters.tsv_adapter import TsvSourceAdapter

logger = get_logger("ingestion.load_service")


class LoadService:
    """Runs a reconciliation against a fresh session and commits or rolls back."""

    def __init__(
        self,
        session_factory: Callable[[], Session],
        vocabulary: IonVocabulary,
        clock: Clock | None = None,
        adapter: SourceAdapter | None = None,
        source_options: Mapping[str, Any] | None = None,
    ):
        self._session_factory = session_factory
        self._vocabulary = vocabulary
        self._clock = clock or SystemClock()
        self._adapter = adapter or TsvSourceAdapter()
        self._source_options = dict(source_options or {})

    def probe_source(self, source_path: Path) -> SourceProbe:
        """
        Row count, columns and sample rows of ``source_path``. No DB access.

        Raises:
            MalformedInputError: the file cannot be decoded or parsed.
        """
        try:
            return self._adapter.probe(source_path, self._source_options)
        except (UnicodeDecodeError, csv.Error) as exc:
            raise MalformedInputError("input_file", str(source_path), str(exc)) from exc

    def read_rows(self, source_path: Path) -> list[dict[str, Any]]:
        """
        Read every row of ``source_path`` before any session is opened.

        Raises:
            FileNotFoundError: the file does not exist.
            MalformedInputError: the file cannot be decoded or parsed.
        """
        if not source_path.is_file():
            raise FileNotFoundError(f"Input file not found: {source_path}")
        try:
            return list(self._adapter.read(source_path, self._source_options))
        except (UnicodeDecodeError, csv.Error) as exc:
            raise MalformedInputError("input_file", str(source_path), str(exc)) from exc

    def load_file(
        self,
        source_path: Path,
        author: str,
        dry_run: bool = False,
    ) -> ReconciliationResult:
        rows = self.read_rows(source_path)
        logger.info(
            "source_read",
            extra={"source_file": str(source_path), "rows": len(rows)},
        )
        return self.run(rows, author, dry_run=dry_run, source_file=str(source_path))

    def run(
        self,
        rows: Iterable[Mapping[str, Any]],
        author: str,
        dry_run: bool = False,
        source_file: str | None = None,
    ) -> ReconciliationResult:
        """
        Reconcile ``rows`` inside a single transaction.

        Postconditions:
            - ``committed`` is True only when every row succeeded and
              ``dry_run`` was False.
            - Otherwise nothing written during the run is visible afterwards.
            - The session is closed on every path.
        """
        correlation_id = str(uuid4())
        session = self._session_factory()
        try:
            with LogContext.bind(
                correlation_id=correlation_id,
                author=author,
                producer="ingestion",
                source_file=source_file,
            ):
                service = ReconciliationService(session, self._vocabulary, self._clock)
                result = service.reconcile(rows, author)

                if not result.succeeded:
                    self._rollback(session, reason="row_failed")
                    return replace(result, dry_run=dry_run)
                if dry_run:
                    self._rollback(session, reason="dry_run")
                    return replace(result, dry_run=True)

                try:
                    session.commit()
                except SQLAlchemyError as exc:
                    self._rollback(session, reason="commit_failed")
                    return replace(result, failure=self._commit_failure(result, exc))

                logger.info(
                    "transaction_committed",
                    extra={
                        "applied": len(result.applied),
                        "skipped": len(result.skipped),
                    },
                )
                return replace(result, committed=True)
        except BaseException:
            self._rollback(session, reason="exception")
            raise
        finally:
            session.close()

    @staticmethod
    def _rollback(session: Session, reason: str) -> None:
        session.rollback()
        logger.warning("transaction_rolled_back", extra={"reason": reason})

    @staticmethod
    def _commit_failure(result: ReconciliationResult, exc: SQLAlchemyError) -> RowOutcome:
        source_row = result.outcomes[-1].source_row if result.outcomes else 0
        error = PersistenceError("commit curation changes", str(exc), source_row=source_row)
        error.__cause__ = exc
        return RowOutcome(
            source_row=source_row,
            action=RowAction.FAILED,
            error=error,
        )
