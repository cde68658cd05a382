"""
api/urls.py
===========
URL configuration for the AIIE REST API.

All endpoints are prefixed with ``/api/v1/`` by the project-level router.
"""

from django.urls import path

from . import views

app_name = "api"

urlpatterns = [
    path(
        "modalities/",
        views.ModalityListAPIView.as_view(),
        name="modality-list",
    ),
    path(
        "aiie/score/",
        views.ScoreAPIView.as_view(),
        name="aiie-score",
    ),
    path(
        "aiie/rank/",
        views.RankAPIView.as_view(),
        name="aiie-rank",
    ),
    path(
        "assessments/results/",
        views.AssessmentResultsAPIView.as_view(),
        name="assessment-results",
    ),
]
