"""
api/views.py
============
DRF views for the AIIE REST API.

Contains:
    - ModalityListAPIView: GET the modality catalog.
    - ScoreAPIView: POST one clinical snapshot against one modality.
    - RankAPIView: POST one clinical snapshot against several modalities.
    - AssessmentResultsAPIView: POST a completed attempt for analytics.
"""

from __future__ import annotations

import logging

from rest_framework import generics, status
from rest_framework.response import Response
from rest_framework.views import APIView

from aiie_engine.exceptions import AIIEEngineError
from aiie_engine.services import OptionRanker, RuleBasedScoringStrategy, partial_credit
from assessments.services import AssessmentResultsService
from knowledge_base.modalities import MODALITY_CATALOG

from .serializers import (
    AssessmentResultsRequestSerializer,
    AssessmentResultsSerializer,
    ModalitySerializer,
    RankRequestSerializer,
    ScoreRequestSerializer,
    ScoringResultSerializer,
    build_clinical_input,
)

logger = logging.getLogger(__name__)


def _engine_error(exc: AIIEEngineError) -> Response:
    return Response(
        {"error": exc.message, "details": exc.details},
        status=status.HTTP_400_BAD_REQUEST,
    )


def _unexpected_error() -> Response:
    return Response(
        {"error": "An unexpected error occurred."},
        status=status.HTTP_500_INTERNAL_SERVER_ERROR,
    )


# ─────────────────────────────────────────────────────────────────────
# Modality catalog
# ─────────────────────────────────────────────────────────────────────


class ModalityListAPIView(generics.ListAPIView):
    """List every catalog modality with dose, cost and radiation label."""

    serializer_class = ModalitySerializer

    def get_queryset(self):
        return list(MODALITY_CATALOG.values())


# ─────────────────────────────────────────────────────────────────────
# Scoring endpoints
# ─────────────────────────────────────────────────────────────────────


class ScoreAPIView(APIView):
    """Score a single imaging option.

    **POST** ``/api/v1/aiie/score/``

    Request body::

        {
            "clinical_input": {"age": 55, "sex": "female",
                               "red_flags": ["thunderclap"]},
            "modality": "CT without contrast",
            "sibling_scores": {"MRI without contrast": 3.5}
        }

    Returns the scoring result plus a text ``explanation`` and the
    display-only ``partial_credit``.
    """

    def post(self, request):
        serializer = ScoreRequestSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data

        try:
            clinical_input = build_clinical_input(data["clinical_input"])
            strategy = RuleBasedScoringStrategy()
            result = strategy.score(
                clinical_input,
                data["modality"],
                sibling_scores=data.get("sibling_scores"),
            )
            payload = dict(ScoringResultSerializer(result).data)
            payload["partial_credit"] = partial_credit(result)
            payload["explanation"] = strategy.explain_result(result)
            return Response(payload, status=status.HTTP_200_OK)
        except AIIEEngineError as exc:
            logger.warning("scoring failed: %s", exc.message)
            return _engine_error(exc)
        except Exception:
            logger.exception("unexpected error during api scoring")
            return _unexpected_error()


class RankAPIView(APIView):
    """Rank candidate imaging options for one case.

    **POST** ``/api/v1/aiie/rank/``

    Request body::

        {
            "clinical_input": {...},
            "modalities": ["X-ray", "CT without contrast", "No imaging"]
        }

    Omitting ``modalities`` ranks the whole catalog.
    """

    def post(self, request):
        serializer = RankRequestSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        try:
            clinical_input = build_clinical_input(
                serializer.validated_data["clinical_input"]
            )
            ranked = OptionRanker().rank_options(
                clinical_input, serializer.modality_keys()
            )
            results = [ScoringResultSerializer(result).data for _, result in ranked]
            return Response(
                {
                    "best": results[0]["modality"] if results else None,
                    "results": results,
                },
                status=status.HTTP_200_OK,
            )
        except AIIEEngineError as exc:
            logger.warning("ranking failed: %s", exc.message)
            return _engine_error(exc)
        except Exception:
            logger.exception("unexpected error during api ranking")
            return _unexpected_error()


# ─────────────────────────────────────────────────────────────────────
# Assessment results
# ─────────────────────────────────────────────────────────────────────


class AssessmentResultsAPIView(APIView):
    """Compute results analytics for a completed assessment.

    **POST** ``/api/v1/assessments/results/``

    Request body::

        {
            "answers": [{"case_id": "c1", "selected_options": ["o1"],
                         "time_spent": 42}],
            "cases": [{"id": "c1", "category": "headache",
                       "difficulty": "beginner",
                       "correct_options": ["o1"]}],
            "options": {"o1": "CT without contrast"},
            "passing_score": 70,
            "total_questions": 10
        }
    """

    def post(self, request):
        serializer = AssessmentResultsRequestSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data

        try:
            answers, cases = serializer.to_domain()
            results = AssessmentResultsService().build_results(
                answers,
                cases,
                options=data.get("options"),
                passing_score=data.get("passing_score"),
                total_questions=data.get("total_questions"),
            )
            return Response(
                AssessmentResultsSerializer(results).data,
                status=status.HTTP_200_OK,
            )
        except AIIEEngineError as exc:
            logger.warning("assessment results failed: %s", exc.message)
            return _engine_error(exc)
        except Exception:
            logger.exception("unexpected error computing assessment results")
            return _unexpected_error()
