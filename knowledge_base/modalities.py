"""
knowledge_base/modalities.py
============================
Imaging modality catalog.

Contains:
    - Modality: An imaging study plus contrast variant, with its
      effective radiation dose and typical cost.
    - MODALITY_CATALOG: The modalities the evidence rule base knows.
    - radiation_level(): Relative radiation label for a dose.
"""

from __future__ import annotations

import math
from dataclasses import dataclass

from aiie_engine.exceptions import InvalidModalityError


@dataclass(frozen=True)
class Modality:
    """An imaging study type plus contrast variant.

    Attributes:
        key: Identifier used by the rule base (e.g. "CT without contrast").
        radiation_msv: Typical effective dose in millisieverts (>= 0).
        cost: Typical cost in currency units (>= 0).
        name: Display name; defaults to ``key``.
    """

    key: str
    radiation_msv: float = 0.0
    cost: float = 0.0
    name: str = ""

    def __post_init__(self) -> None:
        if not isinstance(self.key, str) or not self.key.strip():
            raise InvalidModalityError(self.key, "identifier must be a non-empty string")
        for attr in ("radiation_msv", "cost"):
            value = getattr(self, attr)
            if (
                isinstance(value, bool)
                or not isinstance(value, (int, float))
                or math.isnan(value)
                or value < 0
            ):
                raise InvalidModalityError(self.key, f"{attr} must be a number >= 0")
        object.__setattr__(self, "key", self.key.strip())
        if not self.name:
            object.__setattr__(self, "name", self.key)

    def __str__(self) -> str:
        return self.name


X_RAY = "X-ray"
CT_WITHOUT_CONTRAST = "CT without contrast"
CT_WITH_CONTRAST = "CT with contrast"
MRI_WITHOUT_CONTRAST = "MRI without contrast"
MRI_WITH_CONTRAST = "MRI with contrast"
ULTRASOUND = "Ultrasound"
NUCLEAR_MEDICINE = "Nuclear medicine"
NO_IMAGING = "No imaging"

IONISING: frozenset[str] = frozenset(
    {X_RAY, CT_WITHOUT_CONTRAST, CT_WITH_CONTRAST, NUCLEAR_MEDICINE}
)
CT: frozenset[str] = frozenset({CT_WITHOUT_CONTRAST, CT_WITH_CONTRAST})
MRI: frozenset[str] = frozenset({MRI_WITHOUT_CONTRAST, MRI_WITH_CONTRAST})
CONTRAST: frozenset[str] = frozenset({CT_WITH_CONTRAST, MRI_WITH_CONTRAST})

MODALITY_CATALOG: dict[str, Modality] = {
    m.key: m
    for m in (
        Modality(X_RAY, radiation_msv=0.1, cost=100),
        Modality(CT_WITHOUT_CONTRAST, radiation_msv=2.0, cost=450),
        Modality(CT_WITH_CONTRAST, radiation_msv=4.0, cost=600),
        Modality(MRI_WITHOUT_CONTRAST, radiation_msv=0.0, cost=1000),
        Modality(MRI_WITH_CONTRAST, radiation_msv=0.0, cost=1350),
        Modality(ULTRASOUND, radiation_msv=0.0, cost=200),
        Modality(NUCLEAR_MEDICINE, radiation_msv=12.0, cost=1000),
        Modality(NO_IMAGING, radiation_msv=0.0, cost=0),
    )
}

# (upper bound, label); "Minimal" is exclusive, the rest inclusive
_RADIATION_LEVELS: tuple[tuple[float, str], ...] = (
    (1.0, "Low"),
    (10.0, "Medium"),
    (30.0, "High"),
)


def get_modality(key: str) -> Modality | None:
    """Return the catalog entry for ``key``, or ``None`` if unknown."""
    return MODALITY_CATALOG.get(key.strip()) if isinstance(key, str) else None


def radiation_level(msv: float) -> str:
    """Relative radiation label for an effective dose in millisieverts."""
    if msv <= 0:
        return "None"
    if msv < 0.1:
        return "Minimal"
    for upper, label in _RADIATION_LEVELS:
        if msv <= upper:
            return label
    return "Very High"
