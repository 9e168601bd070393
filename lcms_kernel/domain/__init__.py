"""Pure domain layer: clock, ion vocabulary, edit rows and read DTOs."""

from lcms_kernel.domain.clock import Clock, DeterministicClock, SystemClock
from lcms_kernel.domain.dtos import CuratedIonSnapshot, StandardIonResultSnapshot
from lcms_kernel.domain.edit_row import (
    NULL_VALUE,
    EditRow,
    StandardIonHeader,
    parse_edit_row,
    parse_result_id,
)
from lcms_kernel.domain.vocabulary import METLIN_IONS, IonMode, IonVocabulary

__all__ = [
    "Clock",
    "SystemClock",
    "DeterministicClock",
    "CuratedIonSnapshot",
    "StandardIonResultSnapshot",
    "NULL_VALUE",
    "EditRow",
    "StandardIonHeader",
    "parse_edit_row",
    "parse_result_id",
    "IonMode",
    "IonVocabulary",
    "METLIN_IONS",
]
