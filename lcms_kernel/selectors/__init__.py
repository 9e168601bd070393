"""Read-only selectors."""

from lcms_kernel.selectors.base import BaseSelector
from lcms_kernel.selectors.curation_selector import CurationSelector

__all__ = [
    "BaseSelector",
    "CurationSelector",
]
