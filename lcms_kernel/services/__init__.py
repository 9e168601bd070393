"""Kernel services: stores and the reconciliation service."""

from lcms_kernel.services.base import BaseService
from lcms_kernel.services.curation_store import CurationStore
from lcms_kernel.services.reconciliation_service import (
    ReconciliationResult,
    ReconciliationService,
    RowAction,
    RowOutcome,
)
from lcms_kernel.services.result_store import ResultStore

__all__ = [
    "BaseService",
    "CurationStore",
    "ResultStore",
    "ReconciliationService",
    "ReconciliationResult",
    "RowAction",
    "RowOutcome",
]
