"""
aiie_engine/apps.py
===================
Django app configuration for the AIIE scoring engine.
"""

from django.apps import AppConfig


class AiieEngineConfig(AppConfig):
    """Configuration for the ``aiie_engine`` application."""

    default_auto_field = "django.db.models.BigAutoField"
    name = "aiie_engine"
    verbose_name = "AIIE Scoring Engine"
