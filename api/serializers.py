"""
api/serializers.py
==================
DRF serializers for the AIIE REST API.

The engine works on frozen dataclasses, not models, so every serializer
here is a plain :class:`~rest_framework.serializers.Serializer`: input
serializers validate JSON and build domain values, output serializers
render domain values read-only.

Contains:
    - ModalitySerializer: Catalog entry with its radiation label.
    - ClinicalInputSerializer: Input validation for a clinical snapshot.
    - ScoreRequestSerializer / RankRequestSerializer: Engine requests.
    - ShapFactorSerializer / ScoringResultSerializer: Engine output.
    - AssessmentResultsRequestSerializer: A completed attempt.
    - AssessmentResultsSerializer: Full results analytics output.
"""

from __future__ import annotations

from rest_framework import serializers

from aiie_engine.domain import DURATIONS, SEVERITIES, SEXES, ClinicalInput
from assessments.domain import UNKNOWN, AssessmentAnswer, CaseRecord
from assessments.scorer import is_correct
from knowledge_base.modalities import MODALITY_CATALOG, radiation_level


# ─────────────────────────────────────────────────────────────────────
# Read-only serializers
# ─────────────────────────────────────────────────────────────────────


class ModalitySerializer(serializers.Serializer):
    """Serializer for a catalog :class:`~knowledge_base.modalities.Modality`."""

    key = serializers.CharField(read_only=True)
    name = serializers.CharField(read_only=True)
    radiation_msv = serializers.FloatField(read_only=True)
    radiation_level = serializers.SerializerMethodField()
    cost = serializers.FloatField(read_only=True)

    def get_radiation_level(self, obj) -> str:
        return radiation_level(obj.radiation_msv)


class ShapFactorSerializer(serializers.Serializer):
    factor = serializers.CharField(read_only=True)
    value = serializers.CharField(read_only=True)
    contribution = serializers.FloatField(read_only=True)
    explanation = serializers.CharField(read_only=True)
    evidence_citation = serializers.CharField(read_only=True)


class ScoringResultSerializer(serializers.Serializer):
    """Serializer for :class:`~aiie_engine.domain.ScoringResult`.

    Adds the rounded ``display_score`` and the cumulative ``waterfall``
    steps used by score-breakdown charts.
    """

    modality = serializers.CharField(read_only=True)
    baseline_score = serializers.FloatField(read_only=True)
    shap_factors = ShapFactorSerializer(many=True, read_only=True)
    final_score = serializers.FloatField(read_only=True)
    display_score = serializers.IntegerField(read_only=True)
    category = serializers.CharField(read_only=True)
    category_label = serializers.CharField(read_only=True)
    color_token = serializers.CharField(read_only=True)
    radiation_level = serializers.CharField(read_only=True)
    estimated_cost = serializers.FloatField(read_only=True, allow_null=True)
    alternative_recommendation = serializers.CharField(read_only=True, allow_null=True)
    waterfall = serializers.SerializerMethodField()

    def get_waterfall(self, obj) -> list[dict]:
        return obj.waterfall()


class CategoryScoreSerializer(serializers.Serializer):
    category = serializers.CharField(read_only=True)
    label = serializers.CharField(read_only=True)
    correct = serializers.IntegerField(read_only=True)
    total = serializers.IntegerField(read_only=True)
    percentage = serializers.IntegerField(read_only=True)


class DifficultyScoreSerializer(serializers.Serializer):
    difficulty = serializers.CharField(read_only=True)
    label = serializers.CharField(read_only=True)
    correct = serializers.IntegerField(read_only=True)
    total = serializers.IntegerField(read_only=True)
    percentage = serializers.IntegerField(read_only=True)


class MissedQuestionSerializer(serializers.Serializer):
    case_id = serializers.CharField(read_only=True)
    case_title = serializers.CharField(read_only=True)
    category = serializers.CharField(read_only=True)
    difficulty = serializers.CharField(read_only=True)
    user_answer = serializers.CharField(read_only=True)
    correct_answer = serializers.CharField(read_only=True)
    explanation = serializers.CharField(read_only=True)
    time_spent = serializers.FloatField(read_only=True)


class RecommendationSerializer(serializers.Serializer):
    case_id = serializers.CharField(read_only=True)
    title = serializers.CharField(read_only=True)
    category = serializers.CharField(read_only=True)
    difficulty = serializers.CharField(read_only=True)
    reason = serializers.CharField(read_only=True)


class TimeAnalysisSerializer(serializers.Serializer):
    total_time = serializers.FloatField(read_only=True)
    average_per_case = serializers.FloatField(read_only=True)
    fastest_case = serializers.FloatField(read_only=True)
    slowest_case = serializers.FloatField(read_only=True)


class AssessmentResultsSerializer(serializers.Serializer):
    """Serializer for :class:`~assessments.domain.AssessmentResults`."""

    score = serializers.IntegerField(read_only=True)
    total_questions = serializers.IntegerField(read_only=True)
    correct_count = serializers.IntegerField(read_only=True)
    passed = serializers.BooleanField(read_only=True)
    passing_score = serializers.IntegerField(read_only=True)
    letter_grade = serializers.CharField(read_only=True)
    category_breakdown = CategoryScoreSerializer(many=True, read_only=True)
    difficulty_breakdown = DifficultyScoreSerializer(many=True, read_only=True)
    missed_questions = MissedQuestionSerializer(many=True, read_only=True)
    weak_areas = serializers.ListField(child=serializers.CharField(), read_only=True)
    recommendations = RecommendationSerializer(many=True, read_only=True)
    time_analysis = TimeAnalysisSerializer(read_only=True)


# ─────────────────────────────────────────────────────────────────────
# Input serializers
# ─────────────────────────────────────────────────────────────────────


class ClinicalInputSerializer(serializers.Serializer):
    """Input validation for a :class:`~aiie_engine.domain.ClinicalInput`.

    Field-level checks mirror the dataclass so bad requests fail with
    per-field errors before reaching the engine.
    """

    age = serializers.IntegerField(min_value=0, max_value=130)
    sex = serializers.ChoiceField(choices=sorted(SEXES))
    chief_complaint = serializers.CharField(required=False, allow_blank=True, default="")
    duration = serializers.ChoiceField(choices=sorted(DURATIONS), default="acute")
    severity = serializers.ChoiceField(choices=sorted(SEVERITIES), default="moderate")
    red_flags = serializers.ListField(
        child=serializers.CharField(), required=False, default=list
    )
    cancer_history = serializers.BooleanField(required=False, default=False)
    immunocompromised = serializers.BooleanField(required=False, default=False)
    recent_trauma = serializers.BooleanField(required=False, default=False)
    neurologic_deficit = serializers.BooleanField(required=False, default=False)
    progressive_symptoms = serializers.BooleanField(required=False, default=False)
    prior_imaging = serializers.ListField(
        child=serializers.CharField(), required=False, default=list
    )
    labs_available = serializers.ListField(
        child=serializers.CharField(), required=False, default=list
    )
    physical_exam_findings = serializers.ListField(
        child=serializers.CharField(), required=False, default=list
    )


def build_clinical_input(data: dict) -> ClinicalInput:
    """Construct a :class:`ClinicalInput` from validated serializer data.

    Raises:
        InvalidClinicalInputError: If the dataclass rejects a value.
    """
    return ClinicalInput(**dict(data))


class ScoreRequestSerializer(serializers.Serializer):
    """Input validation for the score endpoint."""

    clinical_input = ClinicalInputSerializer()
    modality = serializers.CharField(
        max_length=100,
        help_text="Modality key, e.g. 'CT without contrast'.",
    )
    sibling_scores = serializers.DictField(
        child=serializers.FloatField(min_value=1, max_value=9),
        required=False,
        help_text="Scores of the other options for the same case.",
    )


class RankRequestSerializer(serializers.Serializer):
    """Input validation for the rank endpoint.

    ``modalities`` defaults to the whole catalog.
    """

    clinical_input = ClinicalInputSerializer()
    modalities = serializers.ListField(
        child=serializers.CharField(max_length=100),
        required=False,
        min_length=1,
    )

    def validate_modalities(self, value: list[str]) -> list[str]:
        blank = [key for key in value if not key.strip()]
        if blank:
            raise serializers.ValidationError("Modality keys must not be blank.")
        return value

    def modality_keys(self) -> list[str]:
        return self.validated_data.get("modalities") or list(MODALITY_CATALOG)


class CaseRecordSerializer(serializers.Serializer):
    id = serializers.CharField(max_length=100)
    title = serializers.CharField(required=False, allow_blank=True, default="")
    category = serializers.CharField(required=False, default=UNKNOWN)
    difficulty = serializers.CharField(required=False, default=UNKNOWN)
    correct_options = serializers.ListField(
        child=serializers.CharField(), required=False, default=list
    )
    explanation = serializers.CharField(required=False, allow_blank=True, default="")
    teaching_points = serializers.ListField(
        child=serializers.CharField(), required=False, default=list
    )


class AnswerSerializer(serializers.Serializer):
    """One submitted answer.

    Correctness is never taken from the client; ``to_domain`` grades
    the selection against the case's correct option set.
    """

    question_id = serializers.CharField(required=False, allow_blank=True, default="")
    case_id = serializers.CharField(max_length=100)
    selected_options = serializers.ListField(
        child=serializers.CharField(), required=False, default=list
    )
    time_spent = serializers.FloatField(min_value=0, required=False, default=0)


class AssessmentResultsRequestSerializer(serializers.Serializer):
    """Input validation for the assessment results endpoint."""

    answers = AnswerSerializer(many=True)
    cases = CaseRecordSerializer(many=True)
    options = serializers.DictField(
        child=serializers.CharField(),
        required=False,
        help_text="Option id to display name.",
    )
    passing_score = serializers.IntegerField(min_value=0, max_value=100, required=False)
    total_questions = serializers.IntegerField(min_value=0, required=False)

    def validate_cases(self, value: list[dict]) -> list[dict]:
        seen: set[str] = set()
        duplicates: set[str] = set()
        for case in value:
            if case["id"] in seen:
                duplicates.add(case["id"])
            seen.add(case["id"])
        if duplicates:
            raise serializers.ValidationError(
                f"Duplicate case ids: {sorted(duplicates)}"
            )
        return value

    def to_domain(self) -> tuple[list[AssessmentAnswer], list[CaseRecord]]:
        """Build graded answers and case records from validated data."""
        cases: list[CaseRecord] = [
            CaseRecord(**dict(case)) for case in self.validated_data["cases"]
        ]
        index: dict[str, CaseRecord] = {case.id: case for case in cases}

        answers: list[AssessmentAnswer] = []
        for data in self.validated_data["answers"]:
            case = index.get(data["case_id"])
            # unknown cases grade as incorrect
            correct: bool = case is not None and is_correct(
                data["selected_options"], case.correct_options
            )
            answers.append(
                AssessmentAnswer(
                    question_id=data.get("question_id") or data["case_id"],
                    case_id=data["case_id"],
                    selected_options=tuple(data["selected_options"]),
                    correct=correct,
                    time_spent=data["time_spent"],
                )
            )
        return answers, cases
