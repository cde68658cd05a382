"""
URL configuration for the arka project.

Routes:
    /api/v1/    → AIIE scoring and assessment analytics (api app)
"""

from django.urls import include, path

urlpatterns = [
    # REST API (DRF)
    path("api/v1/", include("api.urls", namespace="api")),
]
