"""Source adapters for curated tables (file I/O only, no DB)."""

from lcms_ingestion.adapters.base import SourceAdapter, SourceProbe
from lcms_ingestion.adapters.tsv_adapter import TsvSourceAdapter

__all__ = [
    "SourceAdapter",
    "SourceProbe",
    "TsvSourceAdapter",
]
