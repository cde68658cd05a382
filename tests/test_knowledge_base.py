"""
Tests for the evidence rule base, modality catalog and appropriateness bands.
"""

from __future__ import annotations

import pytest

from aiie_engine.domain import ClinicalInput
from aiie_engine.exceptions import InvalidModalityError
from knowledge_base.appropriateness import (
    UNCERTAIN_BAND,
    AppropriatenessCategory,
    categorize,
    category_label,
)
from knowledge_base.evidence_rules import (
    MAX_CONTRIBUTION,
    RULES,
    EvidenceRule,
    audit_rules,
    get_rules,
    is_known_modality,
)
from knowledge_base.modalities import (
    MODALITY_CATALOG,
    NO_IMAGING,
    X_RAY,
    Modality,
    get_modality,
    radiation_level,
)


class TestRuleTable:
    def test_shipped_table_passes_audit(self):
        assert audit_rules() == []

    def test_every_rule_has_citation_and_bounded_static_weight(self):
        for rule in RULES:
            assert rule.citation.strip(), rule.name
            if not callable(rule.contribution):
                assert rule.contribution != 0, rule.name
                assert abs(rule.contribution) <= MAX_CONTRIBUTION, rule.name

    def test_every_catalog_modality_has_rules(self):
        for key in MODALITY_CATALOG:
            assert is_known_modality(key), key
            assert get_rules(key), key

    def test_unknown_modality_has_no_rules(self):
        assert get_rules("PET-MRI hybrid") == []
        assert not is_known_modality("PET-MRI hybrid")

    def test_get_rules_keeps_table_order(self):
        rules = get_rules(X_RAY)
        positions = [RULES.index(rule) for rule in rules]
        assert positions == sorted(positions)

    def test_no_imaging_rules_are_separate_from_imaging_rules(self):
        names = [rule.name for rule in get_rules(NO_IMAGING)]
        assert "No Red Flags" in names
        assert "Acute Onset" not in names

    def test_red_flag_weight_is_capped(self):
        rule = get_rules(X_RAY)[0]
        assert rule.name == "Red Flag Symptoms"
        many = ClinicalInput(age=30, sex="other", red_flags=[f"f{i}" for i in range(10)])
        one = ClinicalInput(age=30, sex="other", red_flags=["fever"])
        assert rule.weigh(many) == 2.0
        assert rule.weigh(one) == 0.5

    def test_deferral_penalty_is_capped(self):
        rule = next(r for r in get_rules(NO_IMAGING) if r.name == "Red Flags Present")
        many = ClinicalInput(age=30, sex="other", red_flags=[f"f{i}" for i in range(10)])
        assert rule.weigh(many) == -3.0


class TestAudit:
    def _rule(self, **overrides) -> EvidenceRule:
        fields = dict(
            name="Example",
            condition=lambda ci: True,
            contribution=1.0,
            explanation="example",
            citation="Example 2020",
            modalities=frozenset({X_RAY}),
        )
        fields.update(overrides)
        return EvidenceRule(**fields)

    def test_zero_contribution_is_flagged(self):
        violations = audit_rules((self._rule(contribution=0.0),))
        assert any("zero contribution" in v for v in violations)

    def test_out_of_range_contribution_is_flagged(self):
        violations = audit_rules((self._rule(contribution=4.5),))
        assert any("outside" in v for v in violations)

    def test_missing_citation_is_flagged(self):
        violations = audit_rules((self._rule(citation="  "),))
        assert any("missing evidence citation" in v for v in violations)

    def test_unknown_and_empty_modalities_are_flagged(self):
        assert any(
            "unknown modalities" in v
            for v in audit_rules((self._rule(modalities=frozenset({"Laser"})),))
        )
        assert any(
            "applies to no modality" in v
            for v in audit_rules((self._rule(modalities=frozenset()),))
        )

    def test_default_modalities_are_every_imaging_modality(self):
        rule = EvidenceRule(
            name="Example",
            condition=lambda ci: True,
            contribution=1.0,
            explanation="example",
            citation="Example 2020",
        )
        assert rule.modalities == frozenset(MODALITY_CATALOG) - {NO_IMAGING}
        assert not rule.applies_to(NO_IMAGING)
        assert audit_rules((rule,)) == []

    def test_duplicate_rule_for_same_modality_is_flagged(self):
        rule = self._rule()
        assert any("duplicated" in v for v in audit_rules((rule, rule)))

    def test_graded_contribution_is_not_checked_statically(self):
        assert audit_rules((self._rule(contribution=lambda ci: 0.0),)) == []


class TestModalityCatalog:
    def test_catalog_has_eight_entries(self):
        assert len(MODALITY_CATALOG) == 8

    def test_name_defaults_to_key(self):
        modality = Modality("Fluoroscopy", radiation_msv=1.5, cost=300)
        assert modality.name == "Fluoroscopy"
        assert str(modality) == "Fluoroscopy"

    @pytest.mark.parametrize(
        "kwargs",
        [
            {"key": ""},
            {"key": "   "},
            {"key": "X", "radiation_msv": -0.1},
            {"key": "X", "cost": -1},
        ],
    )
    def test_invalid_modality_is_rejected(self, kwargs):
        with pytest.raises(InvalidModalityError):
            Modality(**kwargs)

    def test_get_modality(self):
        assert get_modality(" X-ray ") is MODALITY_CATALOG["X-ray"]
        assert get_modality("Laser") is None

    @pytest.mark.parametrize(
        "msv, label",
        [
            (0.0, "None"),
            (0.05, "Minimal"),
            (0.1, "Low"),
            (1.0, "Low"),
            (2.0, "Medium"),
            (10.0, "Medium"),
            (12.0, "High"),
            (30.0, "High"),
            (45.0, "Very High"),
        ],
    )
    def test_radiation_level(self, msv, label):
        assert radiation_level(msv) == label


class TestAppropriatenessBands:
    @pytest.mark.parametrize(
        "score, category",
        [
            (9.0, AppropriatenessCategory.USUALLY_APPROPRIATE),
            (7.0, AppropriatenessCategory.USUALLY_APPROPRIATE),
            (6.99, AppropriatenessCategory.MAY_BE_APPROPRIATE),
            (4.0, AppropriatenessCategory.MAY_BE_APPROPRIATE),
            (3.99, AppropriatenessCategory.USUALLY_INAPPROPRIATE),
            (1.0, AppropriatenessCategory.USUALLY_INAPPROPRIATE),
        ],
    )
    def test_categorize(self, score, category):
        assert categorize(score).category is category

    def test_category_label(self):
        assert category_label(8) == "Usually Appropriate"
        assert category_label(2) == "Usually Not Appropriate"

    def test_uncertain_band_is_distinct(self):
        assert UNCERTAIN_BAND.category.value == "uncertain"
        assert UNCERTAIN_BAND.label not in {category_label(s) for s in (1, 5, 9)}
