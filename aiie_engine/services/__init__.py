"""
aiie_engine/services/__init__.py
================================
Service layer for the AIIE scoring engine.

Exports:
    - ScoringStrategy: Abstract base class for scoring strategies.
    - RuleBasedScoringStrategy: Evidence-rule interpreter with additive
      factor attributions.
    - OptionRanker / rank_options: Ranking across candidate modalities.
    - partial_credit: Display-only partial credit for a scoring result.
    - AIIEEngineError, InvalidClinicalInputError, InvalidModalityError,
      AssessmentValidationError: Custom exceptions.
"""

from ..exceptions import (
    AIIEEngineError,
    AssessmentValidationError,
    InvalidClinicalInputError,
    InvalidModalityError,
)
from .base_strategy import ScoringStrategy
from .option_ranker import OptionRanker, rank_options
from .scoring_engine import RuleBasedScoringStrategy, partial_credit

__all__: list[str] = [
    "ScoringStrategy",
    "RuleBasedScoringStrategy",
    "OptionRanker",
    "rank_options",
    "partial_credit",
    "AIIEEngineError",
    "InvalidClinicalInputError",
    "InvalidModalityError",
    "AssessmentValidationError",
]
