"""
aiie_engine/services/option_ranker.py
=====================================
Ranks every candidate modality for a case by appropriateness score.

A thin map + stable sort over a :class:`ScoringStrategy`; ties keep
the caller's input order so comparison tables render identically on
every request.
"""

from __future__ import annotations

import logging
import time
from typing import Sequence

from knowledge_base.modalities import Modality

from ..domain import ClinicalInput, ScoringResult
from .base_strategy import ScoringStrategy
from .scoring_engine import RuleBasedScoringStrategy

logger: logging.Logger = logging.getLogger(__name__)

RankedOption = tuple["Modality | str", ScoringResult]


class OptionRanker:
    """Apply a scoring strategy across candidate modalities and order them."""

    def __init__(self, strategy: ScoringStrategy | None = None) -> None:
        """Initialise with a scoring strategy (dependency injection).

        Args:
            strategy: Concrete :class:`ScoringStrategy`; defaults to
                :class:`RuleBasedScoringStrategy` built from settings.
        """
        self._strategy: ScoringStrategy = strategy or RuleBasedScoringStrategy()

    @property
    def strategy(self) -> ScoringStrategy:
        return self._strategy

    def set_strategy(self, strategy: ScoringStrategy) -> None:
        """Replace the active scoring strategy at runtime."""
        logger.info("switching scoring strategy to %s", strategy.__class__.__name__)
        self._strategy = strategy

    def rank_options(
        self,
        clinical_input: ClinicalInput,
        modalities: Sequence[Modality | str],
    ) -> list[RankedOption]:
        """Score and rank ``modalities`` for ``clinical_input``.

        Args:
            clinical_input: Validated clinical snapshot.
            modalities: Candidate modalities (objects or keys).

        Returns:
            ``(modality, result)`` pairs sorted by ``final_score``
            descending; equal scores keep input order.  Each result has
            its alternative recommendation populated from the sibling
            scores.

        Raises:
            InvalidClinicalInputError: If ``clinical_input`` is invalid.
            InvalidModalityError: If any modality identifier is empty.
        """
        start: float = time.perf_counter()

        scored: list[RankedOption] = [
            (modality, self._strategy.score(clinical_input, modality))
            for modality in modalities
        ]
        sibling_scores: dict[str, float] = {}
        for _, result in scored:
            # first occurrence wins for duplicated keys
            sibling_scores.setdefault(result.modality, result.final_score)

        annotated: list[RankedOption] = [
            (modality, self._strategy.recommend_alternative(result, sibling_scores))
            for modality, result in scored
        ]
        # sorted() is stable, which preserves input order on ties
        ranked: list[RankedOption] = sorted(
            annotated, key=lambda pair: pair[1].final_score, reverse=True
        )

        elapsed_ms: int = int((time.perf_counter() - start) * 1000)
        logger.info(
            "ranked %d imaging options in %dms (top: %s)",
            len(ranked),
            elapsed_ms,
            ranked[0][1].modality if ranked else "none",
        )
        return ranked

    def best_option(
        self,
        clinical_input: ClinicalInput,
        modalities: Sequence[Modality | str],
    ) -> RankedOption | None:
        """Return the top-ranked pair, or ``None`` for no candidates."""
        ranked = self.rank_options(clinical_input, modalities)
        return ranked[0] if ranked else None


def rank_options(
    clinical_input: ClinicalInput,
    modalities: Sequence[Modality | str],
) -> list[RankedOption]:
    """Rank ``modalities`` with a default :class:`OptionRanker`."""
    return OptionRanker().rank_options(clinical_input, modalities)
