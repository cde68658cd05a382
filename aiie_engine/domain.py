"""
aiie_engine/domain.py
=====================
Immutable value types exchanged with the scoring engine.

Contains:
    - ClinicalInput: Snapshot of the clinical facts used for scoring.
    - ShapFactor: One rule's signed effect on a single scoring run.
    - ScoringResult: Full output of one engine evaluation, including
      the additive factor decomposition.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable

from .exceptions import InvalidClinicalInputError

SEXES: frozenset[str] = frozenset({"male", "female", "other"})
DURATIONS: frozenset[str] = frozenset({"acute", "subacute", "chronic"})
SEVERITIES: frozenset[str] = frozenset({"mild", "moderate", "severe"})

MIN_SCORE: float = 1.0
MAX_SCORE: float = 9.0

_MAX_AGE: int = 130


def _normalise_flags(values: Iterable[str]) -> frozenset[str]:
    return frozenset(str(v).strip().lower() for v in values if str(v).strip())


@dataclass(frozen=True)
class ClinicalInput:
    """Snapshot of a case's clinical facts relevant to imaging decisions.

    Built once per case load and never mutated.  List-like fields are
    normalised to tuples (ordered, for display) or frozensets (red
    flags, for membership tests) so instances are hashable and compare
    by value.

    Attributes:
        age: Age in whole years (0-130).
        sex: One of ``male``, ``female``, ``other``.
        chief_complaint: Free-text complaint or category slug.
        duration: ``acute`` (<7 days), ``subacute`` (1-6 weeks) or
            ``chronic`` (>6 weeks).
        severity: ``mild``, ``moderate`` or ``severe``.
        red_flags: Named red-flag findings, e.g. ``thunderclap``.
        cancer_history: History of malignancy.
        immunocompromised: Immunocompromised host.
        recent_trauma: Recent traumatic mechanism.
        neurologic_deficit: Focal neurologic deficit on exam.
        progressive_symptoms: Worsening despite prior workup.
        prior_imaging: Studies already performed.
        labs_available: Lab results on hand.
        physical_exam_findings: Relevant exam findings.
    """

    age: int
    sex: str
    chief_complaint: str = ""
    duration: str = "acute"
    severity: str = "moderate"
    red_flags: frozenset[str] = field(default_factory=frozenset)
    cancer_history: bool = False
    immunocompromised: bool = False
    recent_trauma: bool = False
    neurologic_deficit: bool = False
    progressive_symptoms: bool = False
    prior_imaging: tuple[str, ...] = ()
    labs_available: tuple[str, ...] = ()
    physical_exam_findings: tuple[str, ...] = ()

    def __post_init__(self) -> None:
        if isinstance(self.age, bool) or not isinstance(self.age, int):
            raise InvalidClinicalInputError("age", self.age, "must be an integer")
        if not 0 <= self.age <= _MAX_AGE:
            raise InvalidClinicalInputError(
                "age", self.age, f"must be between 0 and {_MAX_AGE}"
            )

        for name, allowed in (
            ("sex", SEXES),
            ("duration", DURATIONS),
            ("severity", SEVERITIES),
        ):
            value = getattr(self, name)
            if not isinstance(value, str) or value.strip().lower() not in allowed:
                raise InvalidClinicalInputError(
                    name, value, f"must be one of {sorted(allowed)}"
                )
            object.__setattr__(self, name, value.strip().lower())

        if self.chief_complaint is None:
            raise InvalidClinicalInputError(
                "chief_complaint", None, "must not be null"
            )

        # frozen dataclass: normalise through object.__setattr__
        object.__setattr__(self, "red_flags", _normalise_flags(self.red_flags))
        for name in ("prior_imaging", "labs_available", "physical_exam_findings"):
            value = getattr(self, name)
            if isinstance(value, str):
                raise InvalidClinicalInputError(name, value, "must be a list of strings")
            object.__setattr__(self, name, tuple(value))

    def has_red_flag(self, name: str) -> bool:
        """Return ``True`` if the named red flag is present."""
        return name.strip().lower() in self.red_flags

    @property
    def has_neurologic_deficit(self) -> bool:
        """Exam deficit recorded either as a flag or as a red flag."""
        return self.neurologic_deficit or self.has_red_flag("neuro-deficit")


@dataclass(frozen=True)
class ShapFactor:
    """One evidence rule's additive contribution to a score.

    ``contribution`` is never exactly zero; rules with no effect are
    not emitted.
    """

    factor: str
    value: str
    contribution: float
    explanation: str
    evidence_citation: str


@dataclass(frozen=True)
class ScoringResult:
    """Output of a single Scoring Engine evaluation.

    Invariant::

        final_score == clamp(baseline_score + sum(contributions), 1, 9)

    Attributes:
        modality: Key of the evaluated modality.
        baseline_score: Neutral starting score.
        shap_factors: Fired factors in rule-evaluation order.
        final_score: Clamped score on the 1-9 scale (unrounded).
        category: Appropriateness category value.
        category_label: Display label for ``category``.
        color_token: Display colour token for ``category``.
        radiation_level: Relative radiation label for the modality.
        estimated_cost: Typical cost in currency units.
        alternative_recommendation: Prose note naming a materially
            better modality, if one exists.
    """

    modality: str
    baseline_score: float
    shap_factors: tuple[ShapFactor, ...]
    final_score: float
    category: str
    category_label: str
    color_token: str = ""
    radiation_level: str = ""
    estimated_cost: float | None = None
    alternative_recommendation: str | None = None

    @property
    def raw_score(self) -> float:
        """Baseline plus every contribution, before clamping."""
        return self.baseline_score + sum(f.contribution for f in self.shap_factors)

    @property
    def display_score(self) -> int:
        """Whole-number score for "N/9" badges (presentation only)."""
        return round(self.final_score)

    def waterfall(self) -> list[dict]:
        """Cumulative steps for a waterfall / score-breakdown chart.

        Returns:
            List of dicts ``{"label", "contribution", "value"}`` starting
            with the baseline and ending with the clamped final score.
        """
        steps: list[dict] = [
            {"label": "Baseline", "contribution": 0.0, "value": self.baseline_score}
        ]
        running: float = self.baseline_score
        for factor in self.shap_factors:
            running += factor.contribution
            steps.append(
                {
                    "label": factor.factor,
                    "contribution": factor.contribution,
                    "value": running,
                }
            )
        steps.append(
            {
                "label": "Final",
                "contribution": self.final_score - running,
                "value": self.final_score,
            }
        )
        return steps
