"""
aiie_engine/conf.py
===================
Access to the engine tunables stored in the ``AIIE`` Django setting.

Every service reads its defaults through :func:`get_setting`;
constructor arguments always take precedence so tests can pin values
without touching settings.
"""

from __future__ import annotations

from typing import Any

from django.conf import settings

DEFAULTS: dict[str, Any] = {
    # neutral starting score on the 1-9 appropriateness scale
    "BASELINE_SCORE": 5.0,
    # per-modality overrides of the baseline, keyed by modality key
    "MODALITY_BASELINES": {},
    # a sibling must beat the evaluated modality by this much to be suggested
    "ALTERNATIVE_MARGIN": 1.5,
    # buckets strictly below this percentage are reported as weak areas
    "WEAK_AREA_THRESHOLD": 70,
    "PASSING_SCORE": 70,
    "RECOMMENDATIONS_PER_CATEGORY": 3,
}


def get_setting(name: str) -> Any:
    """Return an engine setting, falling back to :data:`DEFAULTS`.

    Raises:
        KeyError: If ``name`` is not a known engine setting.
    """
    if name not in DEFAULTS:
        raise KeyError(f"unknown AIIE setting: {name}")
    overrides: dict[str, Any] = getattr(settings, "AIIE", {}) or {}
    return overrides.get(name, DEFAULTS[name])
