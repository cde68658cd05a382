"""
Shared fixtures for the AIIE test suite.
"""

from __future__ import annotations

import pytest

from aiie_engine.domain import ClinicalInput
from assessments.domain import AssessmentAnswer, CaseRecord


@pytest.fixture
def thunderclap_input() -> ClinicalInput:
    """55-year-old with an acute thunderclap headache."""
    return ClinicalInput(
        age=55,
        sex="female",
        chief_complaint="headache",
        duration="acute",
        severity="moderate",
        red_flags=["thunderclap"],
    )


@pytest.fixture
def mild_chronic_input() -> ClinicalInput:
    """Low-risk adult with mild chronic symptoms."""
    return ClinicalInput(
        age=40,
        sex="male",
        chief_complaint="low-back-pain",
        duration="chronic",
        severity="mild",
    )


@pytest.fixture
def case_pool() -> list[CaseRecord]:
    return [
        CaseRecord("c1", "Thunderclap headache", "headache", "beginner", ("ct",)),
        CaseRecord(
            "c2",
            "Headache with papilledema",
            "headache",
            "intermediate",
            ("mri",),
            explanation="MRI characterises the mass lesion",
        ),
        CaseRecord("c3", "Mechanical back pain", "low-back-pain", "beginner", ("none",)),
        CaseRecord("c4", "Migraine with aura", "headache", "beginner", ("none",)),
        CaseRecord("c5", "Headache in pregnancy", "headache", "advanced", ("mri", "lp")),
        CaseRecord("c6", "Back pain with fever", "low-back-pain", "intermediate", ("mri",)),
    ]


@pytest.fixture
def attempt() -> list[AssessmentAnswer]:
    """One correct and two incorrect answers (one left blank)."""
    return [
        AssessmentAnswer("q1", "c1", ("ct",), correct=True, time_spent=30),
        AssessmentAnswer("q2", "c2", ("ct",), correct=False, time_spent=60),
        AssessmentAnswer("q3", "c3", (), correct=False, time_spent=90),
    ]


@pytest.fixture
def option_names() -> dict[str, str]:
    return {
        "ct": "CT without contrast",
        "mri": "MRI without contrast",
        "none": "No imaging",
    }
