"""
assessments/apps.py
===================
Django app configuration for assessment scoring and analytics.
"""

from django.apps import AppConfig


class AssessmentsConfig(AppConfig):
    """Configuration for the ``assessments`` application."""

    default_auto_field = "django.db.models.BigAutoField"
    name = "assessments"
    verbose_name = "Assessments"
