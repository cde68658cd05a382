"""
aiie_engine/services/scoring_engine.py
======================================
Rule-driven, additive-attribution **appropriateness scoring**.

Algorithm:
    1. Start from the baseline score for the modality (default 5.0).
    2. Evaluate every evidence rule that applies to the modality; each
       rule whose condition holds emits one :class:`ShapFactor`.
    3. Sum the contributions onto the baseline in full precision.
    4. Clamp the running score to ``[1, 9]`` (last step, never
       incremental).
    5. Classify the clamped score through
       :func:`knowledge_base.appropriateness.categorize`.
    6. If a sibling modality scored at least ``alternative_margin``
       higher, name it in ``alternative_recommendation``.
"""

from __future__ import annotations

import logging
from dataclasses import replace
from typing import Mapping

from knowledge_base.appropriateness import UNCERTAIN_BAND, categorize
from knowledge_base.evidence_rules import MAX_CONTRIBUTION, get_rules, is_known_modality
from knowledge_base.modalities import Modality, get_modality, radiation_level

from ..conf import get_setting
from ..domain import MAX_SCORE, MIN_SCORE, ClinicalInput, ScoringResult, ShapFactor
from ..exceptions import InvalidClinicalInputError, InvalidModalityError
from ..numeric import clamp, round_half_up
from .base_strategy import ScoringStrategy

logger: logging.Logger = logging.getLogger(__name__)


def _resolve_modality(modality: Modality | str) -> tuple[str, Modality | None]:
    """Return ``(key, catalog_or_given_modality)`` for a modality argument."""
    if isinstance(modality, Modality):
        return modality.key, modality
    if not isinstance(modality, str) or not modality.strip():
        raise InvalidModalityError(modality, "identifier must be a non-empty string")
    key: str = modality.strip()
    return key, get_modality(key)


class RuleBasedScoringStrategy(ScoringStrategy):
    """Score modalities by interpreting the evidence rule table.

    Typical usage::

        from aiie_engine.services import RuleBasedScoringStrategy

        engine = RuleBasedScoringStrategy()
        result = engine.score(clinical_input, "CT without contrast")
        print(engine.explain_result(result))
    """

    def __init__(
        self,
        baseline_score: float | None = None,
        modality_baselines: Mapping[str, float] | None = None,
        alternative_margin: float | None = None,
    ) -> None:
        """Initialise the engine; ``None`` arguments fall back to settings.

        Raises:
            ValueError: If a baseline lies outside ``[1, 9]`` or the
                margin is not positive.
        """
        self.baseline_score: float = float(
            get_setting("BASELINE_SCORE") if baseline_score is None else baseline_score
        )
        self.modality_baselines: dict[str, float] = {
            key: float(value)
            for key, value in (
                get_setting("MODALITY_BASELINES")
                if modality_baselines is None
                else modality_baselines
            ).items()
        }
        self.alternative_margin: float = float(
            get_setting("ALTERNATIVE_MARGIN")
            if alternative_margin is None
            else alternative_margin
        )

        for label, value in [("baseline_score", self.baseline_score)] + [
            (f"modality_baselines[{k!r}]", v) for k, v in self.modality_baselines.items()
        ]:
            if not MIN_SCORE <= value <= MAX_SCORE:
                raise ValueError(f"{label} must be in [{MIN_SCORE}, {MAX_SCORE}]")
        if self.alternative_margin <= 0:
            raise ValueError("alternative_margin must be positive")

    def baseline_for(self, modality_key: str) -> float:
        """Baseline for a modality; the engine default when none is configured."""
        return self.modality_baselines.get(modality_key, self.baseline_score)

    def score(
        self,
        clinical_input: ClinicalInput,
        modality: Modality | str,
        sibling_scores: Mapping[str, float] | None = None,
    ) -> ScoringResult:
        """Score ``clinical_input`` against ``modality``.

        Unknown modalities are not an error: the result carries no
        factors, the engine baseline as its final score and the
        ``uncertain`` category.

        Raises:
            InvalidClinicalInputError: If ``clinical_input`` is not a
                :class:`ClinicalInput`.
            InvalidModalityError: If the modality identifier is empty.
        """
        if not isinstance(clinical_input, ClinicalInput):
            raise InvalidClinicalInputError(
                "clinical_input",
                type(clinical_input).__name__,
                "must be a ClinicalInput instance",
            )
        key, resolved = _resolve_modality(modality)
        radiation: str = radiation_level(resolved.radiation_msv) if resolved else ""
        cost: float | None = resolved.cost if resolved else None

        if not is_known_modality(key):
            logger.warning("no evidence rules for modality %r; returning baseline", key)
            result = ScoringResult(
                modality=key,
                baseline_score=self.baseline_score,
                shap_factors=(),
                final_score=self.baseline_score,
                category=UNCERTAIN_BAND.category.value,
                category_label=UNCERTAIN_BAND.label,
                color_token=UNCERTAIN_BAND.color_token,
                radiation_level=radiation,
                estimated_cost=cost,
            )
            return self._with_siblings(result, sibling_scores)

        baseline: float = self.baseline_for(key)
        factors: list[ShapFactor] = []

        for rule in get_rules(key):
            if not rule.condition(clinical_input):
                continue
            contribution: float = rule.weigh(clinical_input)
            if contribution == 0:
                continue
            assert abs(contribution) <= MAX_CONTRIBUTION, (
                f"rule {rule.name!r} contributed {contribution}"
            )
            factors.append(
                ShapFactor(
                    factor=rule.name,
                    value=rule.value(clinical_input),
                    contribution=contribution,
                    explanation=rule.explanation,
                    evidence_citation=rule.citation,
                )
            )

        raw_score: float = baseline + sum(f.contribution for f in factors)
        final_score: float = clamp(raw_score, MIN_SCORE, MAX_SCORE)
        assert MIN_SCORE <= final_score <= MAX_SCORE, final_score

        band = categorize(final_score)
        logger.debug(
            "scored %s: baseline %.2f, %d factors, raw %.2f, final %.2f",
            key,
            baseline,
            len(factors),
            raw_score,
            final_score,
        )

        result = ScoringResult(
            modality=key,
            baseline_score=baseline,
            shap_factors=tuple(factors),
            final_score=final_score,
            category=band.category.value,
            category_label=band.label,
            color_token=band.color_token,
            radiation_level=radiation,
            estimated_cost=cost,
        )
        return self._with_siblings(result, sibling_scores)

    def _with_siblings(
        self,
        result: ScoringResult,
        sibling_scores: Mapping[str, float] | None,
    ) -> ScoringResult:
        if not sibling_scores:
            return result
        return self.recommend_alternative(result, sibling_scores)

    def recommend_alternative(
        self,
        result: ScoringResult,
        sibling_scores: Mapping[str, float],
    ) -> ScoringResult:
        """Attach a note naming the best sibling that beats ``result``.

        A sibling qualifies when its score is at least
        ``alternative_margin`` above ``result.final_score``; among
        qualifying siblings the highest wins, the first one listed on ties.
        """
        threshold: float = result.final_score + self.alternative_margin
        best_key: str | None = None
        best_score: float = float("-inf")

        for key, sibling_score in sibling_scores.items():
            if key == result.modality:
                continue
            if sibling_score >= threshold and sibling_score > best_score:
                best_key, best_score = key, sibling_score

        note: str | None = None
        if best_key is not None:
            note = (
                f"Consider {best_key} instead "
                f"({best_score:.1f}/9 vs {result.final_score:.1f}/9)"
            )
        return replace(result, alternative_recommendation=note)

    def explain_result(self, result: ScoringResult) -> str:
        """Format a scoring result into a human-readable report.

        Args:
            result: Result returned by :meth:`score`.

        Returns:
            Multi-line explanation string.
        """
        lines: list[str] = [
            "=== AIIE appropriateness report ===",
            f"modality: {result.modality}",
            f"baseline: {result.baseline_score:.1f}",
            "",
            "--- contributing factors ---",
        ]

        if not result.shap_factors:
            lines.append("no evidence rules fired")
        for factor in result.shap_factors:
            lines.append(
                f"{factor.contribution:+.1f}  {factor.factor} ({factor.value})"
            )
            lines.append(f"      {factor.explanation}")

        lines.extend(
            [
                "",
                f"final score: {result.final_score:.1f}/9 "
                f"({result.category_label})",
            ]
        )
        if result.radiation_level:
            lines.append(f"radiation: {result.radiation_level}")
        if result.alternative_recommendation:
            lines.append(f"alternative: {result.alternative_recommendation}")

        citations: list[str] = list(
            dict.fromkeys(f.evidence_citation for f in result.shap_factors)
        )
        if citations:
            lines.append("")
            lines.append("--- evidence ---")
            lines.extend(f"- {citation}" for citation in citations)

        return "\n".join(lines)


def partial_credit(result: ScoringResult) -> int:
    """Display-only partial credit for a non-optimal pick, 0-100.

    ``round(final_score / 9 * 100)``.  A presentation metric only; the
    strict assessment scorer never uses it.
    """
    return round_half_up(result.final_score / MAX_SCORE * 100)
