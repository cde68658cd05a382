"""
Tests for ranking imaging options across a case.
"""

from __future__ import annotations

import pytest

from aiie_engine.services import OptionRanker, RuleBasedScoringStrategy, rank_options
from aiie_engine.services.base_strategy import ScoringStrategy
from knowledge_base.modalities import (
    CT_WITHOUT_CONTRAST,
    MODALITY_CATALOG,
    MRI_WITHOUT_CONTRAST,
    NO_IMAGING,
    X_RAY,
)


class TestOptionRanker:
    def test_sorted_by_score_descending(self, thunderclap_input):
        ranked = rank_options(thunderclap_input, list(MODALITY_CATALOG))
        scores = [result.final_score for _, result in ranked]
        assert scores == sorted(scores, reverse=True)
        assert ranked[0][1].modality == CT_WITHOUT_CONTRAST

    def test_ties_keep_input_order(self, mild_chronic_input):
        # X-ray and non-contrast CT both score 4.0 here
        ranked = OptionRanker().rank_options(
            mild_chronic_input, [CT_WITHOUT_CONTRAST, NO_IMAGING, X_RAY]
        )
        assert [result.modality for _, result in ranked] == [
            NO_IMAGING,
            CT_WITHOUT_CONTRAST,
            X_RAY,
        ]

        reversed_ranked = OptionRanker().rank_options(
            mild_chronic_input, [X_RAY, NO_IMAGING, CT_WITHOUT_CONTRAST]
        )
        assert [result.modality for _, result in reversed_ranked] == [
            NO_IMAGING,
            X_RAY,
            CT_WITHOUT_CONTRAST,
        ]

    def test_pairs_keep_the_caller_modality(self, mild_chronic_input):
        modality = MODALITY_CATALOG[X_RAY]
        ranked = OptionRanker().rank_options(mild_chronic_input, [modality])
        assert ranked[0][0] is modality

    def test_alternatives_come_from_siblings(self, mild_chronic_input):
        ranked = dict(
            (result.modality, result)
            for _, result in OptionRanker().rank_options(
                mild_chronic_input, [X_RAY, NO_IMAGING]
            )
        )
        assert ranked[X_RAY].alternative_recommendation == (
            "Consider No imaging instead (8.0/9 vs 4.0/9)"
        )
        assert ranked[NO_IMAGING].alternative_recommendation is None

    def test_empty_candidates(self, thunderclap_input):
        ranker = OptionRanker()
        assert ranker.rank_options(thunderclap_input, []) == []
        assert ranker.best_option(thunderclap_input, []) is None

    def test_best_option(self, thunderclap_input):
        modality, result = OptionRanker().best_option(
            thunderclap_input, [MRI_WITHOUT_CONTRAST, CT_WITHOUT_CONTRAST]
        )
        assert modality == CT_WITHOUT_CONTRAST
        assert result.final_score == 9.0

    def test_unknown_modality_is_ranked_not_rejected(self, thunderclap_input):
        ranked = OptionRanker().rank_options(thunderclap_input, ["PET-MRI hybrid", X_RAY])
        categories = {result.modality: result.category for _, result in ranked}
        assert categories["PET-MRI hybrid"] == "uncertain"


class TestStrategyInjection:
    def test_injected_strategy_is_used(self, mild_chronic_input):
        strategy = RuleBasedScoringStrategy(baseline_score=2.0)
        ranker = OptionRanker(strategy=strategy)
        assert ranker.strategy is strategy
        ranked = ranker.rank_options(mild_chronic_input, [X_RAY])
        assert ranked[0][1].baseline_score == 2.0

    def test_set_strategy(self, mild_chronic_input):
        ranker = OptionRanker()
        ranker.set_strategy(RuleBasedScoringStrategy(baseline_score=6.0))
        assert ranker.rank_options(mild_chronic_input, [X_RAY])[0][1].final_score == pytest.approx(5.0)

    def test_strategy_is_abstract(self):
        with pytest.raises(TypeError):
            ScoringStrategy()
