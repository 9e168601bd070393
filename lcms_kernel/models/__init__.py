"""ORM models for standard ion results and their curation history."""

from lcms_kernel.models.curated_metlin_ion import CuratedStandardMetlinIon
from lcms_kernel.models.standard_ion_result import StandardIonResult

__all__ = [
    "CuratedStandardMetlinIon",
    "StandardIonResult",
]
