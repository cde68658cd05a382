"""
knowledge_base/appropriateness.py
=================================
The single score-to-category mapping for appropriateness scores.

Bands (RAND/UCLA appropriateness scale, 1-9)::

    7.0 - 9.0  usually-appropriate
    4.0 - 6.9  may-be-appropriate
    1.0 - 3.9  usually-inappropriate

``uncertain`` is not a band; it is reserved for results with no
evidence behind them (e.g. a modality the rule base does not know).
The engine, the API and any badge logic must call :func:`categorize`
rather than re-implementing the thresholds.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class AppropriatenessCategory(str, Enum):
    """Allowed appropriateness categories."""

    USUALLY_APPROPRIATE = "usually-appropriate"
    MAY_BE_APPROPRIATE = "may-be-appropriate"
    USUALLY_INAPPROPRIATE = "usually-inappropriate"
    UNCERTAIN = "uncertain"


@dataclass(frozen=True)
class AppropriatenessBand:
    """Display metadata for one appropriateness category.

    Attributes:
        category: The category this band maps to.
        label: Human-readable label.
        color_token: Colour token consumed by badge components.
        min_score: Inclusive lower bound of the band.
    """

    category: AppropriatenessCategory
    label: str
    color_token: str
    min_score: float


# ordered highest first; the first band whose min_score <= score wins
BANDS: tuple[AppropriatenessBand, ...] = (
    AppropriatenessBand(
        AppropriatenessCategory.USUALLY_APPROPRIATE,
        "Usually Appropriate",
        "green",
        7.0,
    ),
    AppropriatenessBand(
        AppropriatenessCategory.MAY_BE_APPROPRIATE,
        "May Be Appropriate",
        "amber",
        4.0,
    ),
    AppropriatenessBand(
        AppropriatenessCategory.USUALLY_INAPPROPRIATE,
        "Usually Not Appropriate",
        "red",
        float("-inf"),
    ),
)

UNCERTAIN_BAND: AppropriatenessBand = AppropriatenessBand(
    AppropriatenessCategory.UNCERTAIN,
    "Insufficient Evidence",
    "slate",
    float("-inf"),
)


def categorize(score: float) -> AppropriatenessBand:
    """Map a raw 1-9 score onto its appropriateness band."""
    for band in BANDS:
        if score >= band.min_score:
            return band
    # unreachable: the last band is open-ended
    return BANDS[-1]


def category_label(score: float) -> str:
    """Shortcut for badge text."""
    return categorize(score).label
