"""Ingestion services: transactional load of edited tables and export."""

from lcms_ingestion.services.export_service import ExportService
from lcms_ingestion.services.load_service import LoadService

__all__ = [
    "ExportService",
    "LoadService",
]
