"""
Tests for the AIIE REST API.
"""

from __future__ import annotations

import pytest
from django.urls import reverse
from rest_framework.test import APIClient

from aiie_engine.exceptions import InvalidModalityError
from aiie_engine.services import RuleBasedScoringStrategy

THUNDERCLAP = {
    "age": 55,
    "sex": "female",
    "chief_complaint": "headache",
    "duration": "acute",
    "red_flags": ["thunderclap"],
}

MILD_CHRONIC = {
    "age": 40,
    "sex": "male",
    "duration": "chronic",
    "severity": "mild",
}


@pytest.fixture
def api_client() -> APIClient:
    return APIClient()


class TestModalityList:
    def test_lists_catalog(self, api_client):
        response = api_client.get(reverse("api:modality-list"))
        assert response.status_code == 200
        body = response.json()
        assert len(body) == 8
        ct = next(item for item in body if item["key"] == "CT without contrast")
        assert ct["radiation_level"] == "Medium"
        assert ct["cost"] == 450


class TestScoreEndpoint:
    def test_thunderclap_scores_high(self, api_client):
        response = api_client.post(
            reverse("api:aiie-score"),
            {"clinical_input": THUNDERCLAP, "modality": "CT without contrast"},
            format="json",
        )
        assert response.status_code == 200
        body = response.json()
        assert body["final_score"] == 9.0
        assert body["category"] == "usually-appropriate"
        assert body["partial_credit"] == 100
        assert body["waterfall"][0]["label"] == "Baseline"
        assert "Red Flag: Thunderclap Headache" in body["explanation"]
        assert {f["factor"] for f in body["shap_factors"]} >= {
            "Red Flag: Thunderclap Headache"
        }

    def test_sibling_scores_produce_alternative(self, api_client):
        response = api_client.post(
            reverse("api:aiie-score"),
            {
                "clinical_input": THUNDERCLAP,
                "modality": "MRI without contrast",
                "sibling_scores": {"CT without contrast": 9},
            },
            format="json",
        )
        assert response.status_code == 200
        assert response.json()["alternative_recommendation"].startswith(
            "Consider CT without contrast"
        )

    def test_unknown_modality_is_uncertain(self, api_client):
        response = api_client.post(
            reverse("api:aiie-score"),
            {"clinical_input": THUNDERCLAP, "modality": "PET-MRI hybrid"},
            format="json",
        )
        assert response.status_code == 200
        body = response.json()
        assert body["category"] == "uncertain"
        assert body["shap_factors"] == []
        assert body["estimated_cost"] is None

    @pytest.mark.parametrize(
        "payload, field",
        [
            ({"clinical_input": {**THUNDERCLAP, "age": -3}, "modality": "X-ray"}, "clinical_input"),
            ({"clinical_input": {**THUNDERCLAP, "sex": "n/a"}, "modality": "X-ray"}, "clinical_input"),
            ({"clinical_input": THUNDERCLAP, "modality": ""}, "modality"),
            ({"modality": "X-ray"}, "clinical_input"),
        ],
    )
    def test_invalid_request(self, api_client, payload, field):
        response = api_client.post(reverse("api:aiie-score"), payload, format="json")
        assert response.status_code == 400
        assert field in response.json()

    def test_engine_error_maps_to_400(self, api_client, monkeypatch):
        def fail(self, *args, **kwargs):
            raise InvalidModalityError("X-ray", "rejected")

        monkeypatch.setattr(RuleBasedScoringStrategy, "score", fail)
        response = api_client.post(
            reverse("api:aiie-score"),
            {"clinical_input": THUNDERCLAP, "modality": "X-ray"},
            format="json",
        )
        assert response.status_code == 400
        body = response.json()
        assert "rejected" in body["error"]
        assert body["details"]["reason"] == "rejected"

    def test_unexpected_error_maps_to_500(self, api_client, monkeypatch):
        def fail(self, *args, **kwargs):
            raise RuntimeError("boom")

        monkeypatch.setattr(RuleBasedScoringStrategy, "score", fail)
        response = api_client.post(
            reverse("api:aiie-score"),
            {"clinical_input": THUNDERCLAP, "modality": "X-ray"},
            format="json",
        )
        assert response.status_code == 500
        assert response.json() == {"error": "An unexpected error occurred."}


class TestRankEndpoint:
    def test_ranks_requested_modalities(self, api_client):
        response = api_client.post(
            reverse("api:aiie-rank"),
            {
                "clinical_input": MILD_CHRONIC,
                "modalities": ["X-ray", "CT without contrast", "No imaging"],
            },
            format="json",
        )
        assert response.status_code == 200
        body = response.json()
        assert body["best"] == "No imaging"
        assert [r["modality"] for r in body["results"]] == [
            "No imaging",
            "X-ray",
            "CT without contrast",
        ]

    def test_defaults_to_catalog(self, api_client):
        response = api_client.post(
            reverse("api:aiie-rank"), {"clinical_input": THUNDERCLAP}, format="json"
        )
        assert response.status_code == 200
        body = response.json()
        assert len(body["results"]) == 8
        assert body["best"] == "CT without contrast"

    def test_blank_modality_rejected(self, api_client):
        response = api_client.post(
            reverse("api:aiie-rank"),
            {"clinical_input": THUNDERCLAP, "modalities": ["X-ray", " "]},
            format="json",
        )
        assert response.status_code == 400


class TestAssessmentResultsEndpoint:
    CASES = [
        {"id": "c1", "title": "Thunderclap", "category": "headache",
         "difficulty": "beginner", "correct_options": ["ct"]},
        {"id": "c2", "title": "Papilledema", "category": "headache",
         "difficulty": "intermediate", "correct_options": ["mri"]},
        {"id": "c3", "title": "Migraine", "category": "headache",
         "difficulty": "beginner", "correct_options": ["none"]},
    ]

    def test_results(self, api_client):
        response = api_client.post(
            reverse("api:assessment-results"),
            {
                "answers": [
                    {"case_id": "c1", "selected_options": ["ct"], "time_spent": 40},
                    {"case_id": "c2", "selected_options": ["ct"], "time_spent": 80},
                ],
                "cases": self.CASES,
                "options": {"ct": "CT without contrast", "mri": "MRI without contrast"},
                "total_questions": 2,
            },
            format="json",
        )
        assert response.status_code == 200
        body = response.json()
        assert body["score"] == 50
        assert body["correct_count"] == 1
        assert body["passed"] is False
        assert body["missed_questions"][0]["user_answer"] == "CT without contrast"
        assert body["weak_areas"] == ["headache imaging", "intermediate difficulty cases"]
        assert [r["case_id"] for r in body["recommendations"]] == ["c3"]
        assert body["time_analysis"]["average_per_case"] == 60

    def test_client_correct_flag_is_ignored(self, api_client):
        response = api_client.post(
            reverse("api:assessment-results"),
            {
                "answers": [
                    {"case_id": "c1", "selected_options": ["wrong"], "correct": True}
                ],
                "cases": self.CASES,
            },
            format="json",
        )
        assert response.status_code == 200
        body = response.json()
        assert body["score"] == 0
        assert body["correct_count"] == 0
        assert [m["case_id"] for m in body["missed_questions"]] == ["c1"]

    def test_unknown_case_grades_incorrect(self, api_client):
        response = api_client.post(
            reverse("api:assessment-results"),
            {
                "answers": [{"case_id": "ghost", "selected_options": []}],
                "cases": self.CASES,
            },
            format="json",
        )
        assert response.status_code == 200
        body = response.json()
        assert body["score"] == 0
        assert body["missed_questions"][0]["case_title"] == "ghost"

    def test_empty_attempt(self, api_client):
        response = api_client.post(
            reverse("api:assessment-results"),
            {"answers": [], "cases": [], "total_questions": 0},
            format="json",
        )
        assert response.status_code == 200
        body = response.json()
        assert body["score"] == 0
        assert body["letter_grade"] == "F"

    @pytest.mark.parametrize(
        "payload, field",
        [
            ({"answers": [], "cases": [], "total_questions": -1}, "total_questions"),
            ({"answers": [{"case_id": "c1", "time_spent": -5}], "cases": []}, "answers"),
            ({"answers": [], "cases": [{"id": "c1"}, {"id": "c1"}]}, "cases"),
            ({"answers": [], "cases": [], "passing_score": 120}, "passing_score"),
        ],
    )
    def test_invalid_request(self, api_client, payload, field):
        response = api_client.post(reverse("api:assessment-results"), payload, format="json")
        assert response.status_code == 400
        assert field in response.json()
