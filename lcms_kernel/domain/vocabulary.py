"""
Ion vocabulary -- the fixed set of recognized manual-pick values.

Responsibility:
    Holds the permitted override values (Metlin ESI adduct names) as an
    immutable value that is injected into the reconciliation service.
    Nothing in the kernel reads a process-wide mutable set.

Architecture position:
    Kernel > Domain -- pure, zero I/O.  Built by ``lcms_config`` from the
    defaults below plus any ions listed in the YAML configuration.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Iterable


class IonMode(str, Enum):
    """Polarity an adduct is observed in."""

    POS = "pos"
    NEG = "neg"


# Metlin adduct table, positive then negative mode.
METLIN_IONS: tuple[tuple[str, IonMode], ...] = (
    ("M+H", IonMode.POS),
    ("M+Na", IonMode.POS),
    ("M+H-H2O", IonMode.POS),
    ("M+NH4", IonMode.POS),
    ("M+K", IonMode.POS),
    ("M+Li", IonMode.POS),
    ("M+ACN+H", IonMode.POS),
    ("M+CH3OH+H", IonMode.POS),
    ("M+2Na-H", IonMode.POS),
    ("M+IsoProp+H", IonMode.POS),
    ("M+ACN+Na", IonMode.POS),
    ("M+2K-H", IonMode.POS),
    ("M+DMSO+H", IonMode.POS),
    ("M+2ACN+H", IonMode.POS),
    ("M+IsoProp+Na+H", IonMode.POS),
    ("2M+H", IonMode.POS),
    ("2M+NH4", IonMode.POS),
    ("2M+Na", IonMode.POS),
    ("2M+K", IonMode.POS),
    ("2M+ACN+H", IonMode.POS),
    ("2M+ACN+Na", IonMode.POS),
    ("M+2H", IonMode.POS),
    ("M+H+NH4", IonMode.POS),
    ("M+H+Na", IonMode.POS),
    ("M+H+K", IonMode.POS),
    ("M+ACN+2H", IonMode.POS),
    ("M+2Na", IonMode.POS),
    ("M+2ACN+2H", IonMode.POS),
    ("M+3ACN+2H", IonMode.POS),
    ("M+3H", IonMode.POS),
    ("M+2H+Na", IonMode.POS),
    ("M+H+2Na", IonMode.POS),
    ("M+3Na", IonMode.POS),
    ("M-H", IonMode.NEG),
    ("M-H2O-H", IonMode.NEG),
    ("M+Na-2H", IonMode.NEG),
    ("M+Cl", IonMode.NEG),
    ("M+K-2H", IonMode.NEG),
    ("M+FA-H", IonMode.NEG),
    ("M+Hac-H", IonMode.NEG),
    ("M+Br", IonMode.NEG),
    ("M+TFA-H", IonMode.NEG),
    ("2M-H", IonMode.NEG),
    ("2M+FA-H", IonMode.NEG),
    ("2M+Hac-H", IonMode.NEG),
    ("3M-H", IonMode.NEG),
    ("M-2H", IonMode.NEG),
    ("M-3H", IonMode.NEG),
)


@dataclass(frozen=True)
class IonVocabulary:
    """Immutable membership test over permitted ion names (case-sensitive)."""

    ions: frozenset[str]

    @classmethod
    def metlin(cls, extra: Iterable[str] = ()) -> IonVocabulary:
        """Default vocabulary: every Metlin adduct, plus any ``extra`` names."""
        return cls(frozenset(name for name, _ in METLIN_IONS) | frozenset(extra))

    @classmethod
    def of(cls, names: Iterable[str]) -> IonVocabulary:
        return cls(frozenset(names))

    def contains(self, value: str) -> bool:
        return value in self.ions

    def __contains__(self, value: object) -> bool:
        return value in self.ions

    def __len__(self) -> int:
        return len(self.ions)
