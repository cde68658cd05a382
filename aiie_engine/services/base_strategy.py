"""
aiie_engine/services/base_strategy.py
=====================================
Abstract base class defining the contract every scoring strategy
must fulfil.  Follows the **Strategy** design pattern so the
:class:`OptionRanker` can swap scoring models at runtime.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Mapping

from knowledge_base.modalities import Modality

from ..domain import ClinicalInput, ScoringResult


class ScoringStrategy(ABC):
    """Abstract appropriateness-scoring interface.

    Implementations must be pure: the same inputs always produce an
    identical :class:`ScoringResult` (no hidden state, randomness or
    I/O).
    """

    @abstractmethod
    def score(
        self,
        clinical_input: ClinicalInput,
        modality: Modality | str,
        sibling_scores: Mapping[str, float] | None = None,
    ) -> ScoringResult:
        """Score one clinical scenario against one imaging modality.

        Args:
            clinical_input: Validated clinical snapshot.
            modality: A :class:`Modality` or a modality key.
            sibling_scores: Optional ``{modality_key: final_score}`` for
                the other candidate modalities, used only to populate
                ``alternative_recommendation``.  The strategy never
                scores sibling modalities itself.

        Returns:
            The scoring result with its factor decomposition.

        Raises:
            InvalidClinicalInputError: If ``clinical_input`` is not a
                :class:`ClinicalInput`.
            InvalidModalityError: If the modality identifier is empty.
        """
        ...

    @abstractmethod
    def recommend_alternative(
        self,
        result: ScoringResult,
        sibling_scores: Mapping[str, float],
    ) -> ScoringResult:
        """Return ``result`` with its alternative recommendation set.

        Args:
            result: A result previously returned by :meth:`score`.
            sibling_scores: ``{modality_key: final_score}`` for the
                other candidate modalities.
        """
        ...

    @abstractmethod
    def explain_result(self, result: ScoringResult) -> str:
        """Produce a human-readable explanation of a scoring result.

        Args:
            result: A result previously returned by :meth:`score`.

        Returns:
            A formatted multi-line explanation string.
        """
        ...
