"""
knowledge_base/evidence_rules.py
================================
The Evidence Rule Base: a declarative table of clinical-factor rules.

Each :class:`EvidenceRule` is an IF-THEN record: *if* ``condition``
holds for a :class:`~aiie_engine.domain.ClinicalInput` and the
evaluated modality is in ``modalities``, *then* add ``contribution``
to the appropriateness score and explain why.  The scoring engine
evaluates this table with one generic loop, so adding a clinical rule
is a data change.

Contains:
    - EvidenceRule: One rule record.
    - RULES: The rule table, in evaluation order.
    - get_rules(): Rules applicable to a modality.
    - audit_rules(): Static checks of the table invariants.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Callable, Union

from .modalities import (
    CONTRAST,
    CT,
    CT_WITH_CONTRAST,
    CT_WITHOUT_CONTRAST,
    MODALITY_CATALOG,
    MRI,
    NO_IMAGING,
    NUCLEAR_MEDICINE,
    ULTRASOUND,
    X_RAY,
)

if TYPE_CHECKING:
    from aiie_engine.domain import ClinicalInput

Predicate = Callable[["ClinicalInput"], bool]
Contribution = Union[float, Callable[["ClinicalInput"], float]]

# no single rule may move the score by more than this
MAX_CONTRIBUTION: float = 4.0

IMAGING: frozenset[str] = frozenset(MODALITY_CATALOG) - {NO_IMAGING}


def _present(_: "ClinicalInput") -> str:
    return "Present"


@dataclass(frozen=True)
class EvidenceRule:
    """A single clinical-factor rule.

    Attributes:
        name: Human-readable factor name shown in explanations.
        condition: Predicate over the clinical input.
        contribution: Signed score adjustment, or a callable computing a
            graded adjustment from the clinical input.
        explanation: Prose shown next to the factor.
        citation: Evidence reference.
        modalities: Modality keys this rule applies to.
        value: Renders the clinical value that triggered the rule.
        references: Red-flag names the rule is about.
    """

    name: str
    condition: Predicate
    contribution: Contribution
    explanation: str
    citation: str
    modalities: frozenset[str] = IMAGING
    value: Callable[["ClinicalInput"], str] = _present
    references: frozenset[str] = frozenset()

    def applies_to(self, modality_key: str) -> bool:
        return modality_key in self.modalities

    def weigh(self, clinical_input: "ClinicalInput") -> float:
        """Return the contribution for ``clinical_input``."""
        if callable(self.contribution):
            return float(self.contribution(clinical_input))
        return float(self.contribution)


def _red_flag_weight(ci: "ClinicalInput") -> float:
    return min(len(ci.red_flags) * 0.5, 2.0)


def _red_flags_block_deferral(ci: "ClinicalInput") -> float:
    return -min(len(ci.red_flags) * 1.0, 3.0)


def _flags(ci: "ClinicalInput") -> str:
    return ", ".join(sorted(ci.red_flags))


def _thunderclap(ci: "ClinicalInput") -> bool:
    return ci.has_red_flag("thunderclap")


def _low_risk(ci: "ClinicalInput") -> bool:
    return not (
        ci.red_flags
        or ci.has_neurologic_deficit
        or ci.recent_trauma
        or ci.cancer_history
        or ci.immunocompromised
    )


def _conservative(ci: "ClinicalInput") -> bool:
    """Conservative-management factors never apply to a thunderclap onset."""
    return not _thunderclap(ci)


# ─────────────────────────────────────────────────────────────────────
# Rule table (evaluation order)
# ─────────────────────────────────────────────────────────────────────

RULES: tuple[EvidenceRule, ...] = (
    # -- clinical factors shared by every imaging modality -------------
    EvidenceRule(
        name="Red Flag Symptoms",
        condition=lambda ci: bool(ci.red_flags),
        contribution=_red_flag_weight,
        value=_flags,
        explanation="Red flag findings increase imaging urgency",
        citation="JAMA 2019: Red flags in imaging guidelines",
    ),
    EvidenceRule(
        name="Neurologic Deficit",
        condition=lambda ci: ci.has_neurologic_deficit,
        contribution=2.0,
        explanation="Focal neurologic findings warrant urgent imaging",
        citation="Neurology 2020: Imaging in neurologic emergencies",
        references=frozenset({"neuro-deficit"}),
    ),
    EvidenceRule(
        name="Cancer History",
        condition=lambda ci: ci.cancer_history,
        contribution=1.5,
        explanation="History of malignancy requires exclusion of metastatic disease",
        citation="JCO 2021: Imaging in oncology surveillance",
    ),
    EvidenceRule(
        name="Acute Onset",
        condition=lambda ci: ci.duration == "acute",
        contribution=0.8,
        value=lambda ci: "<7 days",
        explanation="Recent onset supports imaging workup",
        citation="Radiology 2020: Timing and imaging appropriateness",
    ),
    EvidenceRule(
        name="Chronic Duration",
        condition=lambda ci: ci.duration == "chronic" and _conservative(ci),
        contribution=-0.5,
        value=lambda ci: ">6 weeks",
        explanation="Chronic conditions are often managed conservatively first",
        citation="AJR 2021: Conservative management in chronic conditions",
    ),
    EvidenceRule(
        name="Prior Imaging Available",
        condition=lambda ci: (
            bool(ci.prior_imaging) and not ci.progressive_symptoms and _conservative(ci)
        ),
        contribution=-1.0,
        value=lambda ci: ", ".join(ci.prior_imaging),
        explanation="Recent imaging reduces the utility of a repeat study",
        citation="JACR 2022: Repeat imaging utility",
    ),
    EvidenceRule(
        name="Pediatric Patient",
        condition=lambda ci: ci.age < 18,
        contribution=0.5,
        value=lambda ci: f"{ci.age} years",
        explanation="Pediatric presentations carry a lower threshold for evaluation",
        citation="Pediatrics 2020: Age-based imaging considerations",
    ),
    EvidenceRule(
        name="Geriatric Patient",
        condition=lambda ci: ci.age > 65,
        contribution=0.5,
        value=lambda ci: f"{ci.age} years",
        explanation="Advanced age increases suspicion for serious pathology",
        citation="J Am Geriatr Soc 2020: Imaging considerations in older adults",
    ),
    EvidenceRule(
        name="Progressive Symptoms",
        condition=lambda ci: ci.progressive_symptoms and bool(ci.prior_imaging),
        contribution=1.0,
        value=lambda ci: "Worsening despite prior workup",
        explanation="Progressive symptoms warrant repeat imaging even with prior studies",
        citation="Spine 2019: Imaging after conservative therapy",
    ),
    EvidenceRule(
        name="Recent Trauma",
        condition=lambda ci: ci.recent_trauma,
        contribution=1.2,
        explanation="Traumatic mechanism increases likelihood of structural injury",
        citation="J Trauma Acute Care Surg 2021: Imaging in trauma evaluation",
    ),
    EvidenceRule(
        name="Immunocompromised",
        condition=lambda ci: ci.immunocompromised,
        contribution=1.0,
        explanation="Immunocompromised patients are at higher risk for opportunistic infection",
        citation="Clin Infect Dis 2020: Imaging in immunocompromised hosts",
    ),
    EvidenceRule(
        name="Severe Symptoms",
        condition=lambda ci: ci.severity == "severe",
        contribution=0.5,
        value=lambda ci: "Severe",
        explanation="High symptom severity increases imaging appropriateness",
        citation="Ann Emerg Med 2019: Symptom severity and imaging decisions",
    ),
    EvidenceRule(
        name="Mild Chronic Symptoms",
        condition=lambda ci: (
            ci.severity == "mild" and ci.duration == "chronic" and _conservative(ci)
        ),
        contribution=-0.5,
        value=lambda ci: "Mild, chronic",
        explanation="Mild chronic symptoms may be managed conservatively",
        citation="BMJ 2020: Conservative management in chronic pain",
    ),
    # -- modality-specific evidence ------------------------------------
    EvidenceRule(
        name="Red Flag: Thunderclap Headache",
        condition=_thunderclap,
        contribution=2.5,
        modalities=frozenset({CT_WITHOUT_CONTRAST}),
        value=lambda ci: "thunderclap",
        explanation=(
            "Non-contrast CT is the most sensitive first test for "
            "subarachnoid hemorrhage within 6 hours of onset"
        ),
        citation="ACR Appropriateness Criteria: Headache (2019)",
        references=frozenset({"thunderclap"}),
    ),
    EvidenceRule(
        name="Red Flag: Thunderclap Headache After Age 50",
        condition=lambda ci: _thunderclap(ci) and ci.age > 50,
        contribution=1.0,
        modalities=CT,
        value=lambda ci: f"thunderclap, {ci.age} years",
        explanation="New severe headache after age 50 raises pretest probability of aneurysmal bleed",
        citation="Ann Emerg Med 2019: Clinical decision rules for subarachnoid hemorrhage",
        references=frozenset({"thunderclap"}),
    ),
    EvidenceRule(
        name="Thunderclap Headache: Contrast Masks Blood",
        condition=_thunderclap,
        contribution=-1.0,
        modalities=frozenset({CT_WITH_CONTRAST}),
        value=lambda ci: "thunderclap",
        explanation="Iodinated contrast can obscure subarachnoid blood on the initial study",
        citation="ACR Appropriateness Criteria: Headache (2019)",
        references=frozenset({"thunderclap"}),
    ),
    EvidenceRule(
        name="Thunderclap Headache: MRI Not First-Line",
        condition=_thunderclap,
        contribution=-1.5,
        modalities=MRI,
        value=lambda ci: "thunderclap",
        explanation="MRI is less available and less sensitive than CT for acute hemorrhage",
        citation="ACR Appropriateness Criteria: Headache (2019)",
        references=frozenset({"thunderclap"}),
    ),
    EvidenceRule(
        name="Suspected Fracture",
        condition=lambda ci: ci.recent_trauma and not ci.has_neurologic_deficit,
        contribution=1.0,
        modalities=frozenset({X_RAY}),
        explanation="Radiographs are first-line for suspected fracture after trauma",
        citation="ACR Appropriateness Criteria: Acute Trauma to the Ankle (2020)",
    ),
    EvidenceRule(
        name="Pediatric Radiation Exposure",
        condition=lambda ci: ci.age < 18,
        contribution=-1.5,
        modalities=CT | {NUCLEAR_MEDICINE},
        value=lambda ci: f"{ci.age} years",
        explanation="Children are more radiosensitive; non-ionising modalities are preferred",
        citation="Pediatr Radiol 2019: Radiation risk in pediatric CT",
    ),
    EvidenceRule(
        name="Pediatric Ultrasound Preference",
        condition=lambda ci: ci.age < 18,
        contribution=1.0,
        modalities=frozenset({ULTRASOUND}),
        value=lambda ci: f"{ci.age} years",
        explanation="Ultrasound avoids ionising radiation and sedation in children",
        citation="Pediatr Radiol 2019: Radiation risk in pediatric CT",
    ),
    EvidenceRule(
        name="Cancer History: Contrast Enhancement",
        condition=lambda ci: ci.cancer_history,
        contribution=0.5,
        modalities=CONTRAST,
        explanation="Contrast enhancement improves detection of metastatic deposits",
        citation="JCO 2021: Imaging in oncology surveillance",
    ),
    EvidenceRule(
        name="Neurologic Deficit: Parenchymal Detail",
        condition=lambda ci: ci.has_neurologic_deficit and not _thunderclap(ci),
        contribution=0.5,
        modalities=MRI,
        explanation="MRI best characterises brain and spinal cord lesions",
        citation="Neurology 2020: Imaging in neurologic emergencies",
        references=frozenset({"neuro-deficit"}),
    ),
    # -- deferring imaging -----------------------------------------------
    EvidenceRule(
        name="Red Flags Present",
        condition=lambda ci: bool(ci.red_flags),
        contribution=_red_flags_block_deferral,
        modalities=frozenset({NO_IMAGING}),
        value=_flags,
        explanation="Red flag findings make deferral of imaging unsafe",
        citation="JAMA 2019: Red flags in imaging guidelines",
    ),
    EvidenceRule(
        name="Neurologic Deficit",
        condition=lambda ci: ci.has_neurologic_deficit,
        contribution=-2.0,
        modalities=frozenset({NO_IMAGING}),
        explanation="Focal deficits should not be observed without imaging",
        citation="Neurology 2020: Imaging in neurologic emergencies",
        references=frozenset({"neuro-deficit"}),
    ),
    EvidenceRule(
        name="Recent Trauma",
        condition=lambda ci: ci.recent_trauma,
        contribution=-1.5,
        modalities=frozenset({NO_IMAGING}),
        explanation="Traumatic mechanism makes structural injury hard to exclude clinically",
        citation="J Trauma Acute Care Surg 2021: Imaging in trauma evaluation",
    ),
    EvidenceRule(
        name="No Red Flags",
        condition=_low_risk,
        contribution=1.0,
        modalities=frozenset({NO_IMAGING}),
        value=lambda ci: "None",
        explanation="Absence of red flags supports a period of observation",
        citation="Ann Intern Med 2017: Low-value imaging in primary care",
    ),
    EvidenceRule(
        name="Mild Chronic Presentation",
        condition=lambda ci: (
            ci.severity == "mild" and ci.duration == "chronic" and not ci.red_flags
        ),
        contribution=2.0,
        modalities=frozenset({NO_IMAGING}),
        value=lambda ci: "Mild, chronic",
        explanation="Conservative management is first-line for mild chronic symptoms",
        citation="BMJ 2020: Conservative management in chronic pain",
    ),
    EvidenceRule(
        name="Prior Imaging Available",
        condition=lambda ci: (
            bool(ci.prior_imaging) and not ci.progressive_symptoms and _conservative(ci)
        ),
        contribution=1.0,
        modalities=frozenset({NO_IMAGING}),
        value=lambda ci: ", ".join(ci.prior_imaging),
        explanation="Stable symptoms with recent imaging rarely benefit from repeat studies",
        citation="JACR 2022: Repeat imaging utility",
    ),
)


def is_known_modality(modality_key: str) -> bool:
    """Return ``True`` if any rule is defined for ``modality_key``."""
    return any(rule.applies_to(modality_key) for rule in RULES)


def get_rules(modality_key: str) -> list[EvidenceRule]:
    """Return the rules applicable to ``modality_key`` in table order.

    Unknown modalities yield an empty list.
    """
    return [rule for rule in RULES if rule.applies_to(modality_key)]


def audit_rules(rules: tuple[EvidenceRule, ...] = RULES) -> list[str]:
    """Check the rule table invariants.

    Graded (callable) contributions can only be checked at scoring time.

    Returns:
        A list of human-readable violations; empty when the table is sound.
    """
    violations: list[str] = []
    seen: set[tuple[str, str]] = set()

    for rule in rules:
        if not rule.modalities:
            violations.append(f"{rule.name}: applies to no modality")
        unknown = sorted(rule.modalities - set(MODALITY_CATALOG))
        if unknown:
            violations.append(f"{rule.name}: unknown modalities {unknown}")
        if not rule.citation.strip():
            violations.append(f"{rule.name}: missing evidence citation")
        if not callable(rule.contribution):
            weight = float(rule.contribution)
            if weight == 0:
                violations.append(f"{rule.name}: zero contribution")
            elif abs(weight) > MAX_CONTRIBUTION:
                violations.append(
                    f"{rule.name}: contribution {weight} outside "
                    f"[-{MAX_CONTRIBUTION}, {MAX_CONTRIBUTION}]"
                )
        for key in rule.modalities:
            if (rule.name, key) in seen:
                violations.append(f"{rule.name}: duplicated for {key}")
            seen.add((rule.name, key))

    return violations
