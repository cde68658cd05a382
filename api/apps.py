"""
api/apps.py
===========
Django app configuration for the AIIE REST API.
"""

from django.apps import AppConfig


class ApiConfig(AppConfig):
    """Configuration for the ``api`` application."""

    name = "api"
    verbose_name = "AIIE REST API"
