"""
aiie_engine/numeric.py
======================
Small numeric helpers shared by the engine and the assessment layer.
"""

from __future__ import annotations

import math


def clamp(value: float, lower: float, upper: float) -> float:
    """Clamp ``value`` to the closed interval ``[lower, upper]``."""
    return max(lower, min(upper, value))


def round_half_up(value: float) -> int:
    """Round to the nearest integer, halves away from zero for positives.

    Python's built-in :func:`round` uses banker's rounding (``round(12.5)
    == 12``); percentages shown to learners round halves up.
    """
    return int(math.floor(value + 0.5))


def percentage(part: int, whole: int) -> int:
    """Integer percentage ``round(100 * part / whole)``; ``0`` if ``whole`` is 0."""
    if whole <= 0:
        return 0
    return round_half_up(100 * part / whole)
