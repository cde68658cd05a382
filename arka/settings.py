"""
Django settings for the arka project.

Only what the AIIE engine and its JSON API need: no sessions, no
templates, no persistent storage.  Secrets and debug mode come from
the environment.
"""

import os
from pathlib import Path

BASE_DIR = Path(__file__).resolve().parent.parent

SECRET_KEY = os.environ.get("DJANGO_SECRET_KEY", "insecure-dev-key-change-me")
DEBUG = os.environ.get("DJANGO_DEBUG", "false").lower() in {"1", "true", "yes"}
ALLOWED_HOSTS = os.environ.get("DJANGO_ALLOWED_HOSTS", "localhost,127.0.0.1,testserver").split(",")

INSTALLED_APPS = [
    "django.contrib.contenttypes",
    "django.contrib.auth",
    "rest_framework",
    "knowledge_base",
    "aiie_engine",
    "assessments",
    "api",
]

MIDDLEWARE = [
    "django.middleware.security.SecurityMiddleware",
    "django.middleware.common.CommonMiddleware",
]

ROOT_URLCONF = "arka.urls"
WSGI_APPLICATION = "arka.wsgi.application"

# the engine owns no persisted state; the database only satisfies contrib apps
DATABASES = {
    "default": {
        "ENGINE": "django.db.backends.sqlite3",
        "NAME": ":memory:",
    }
}

DEFAULT_AUTO_FIELD = "django.db.models.BigAutoField"
USE_TZ = True
TIME_ZONE = "UTC"

REST_FRAMEWORK = {
    "DEFAULT_AUTHENTICATION_CLASSES": [],
    "DEFAULT_PERMISSION_CLASSES": ["rest_framework.permissions.AllowAny"],
    "DEFAULT_RENDERER_CLASSES": ["rest_framework.renderers.JSONRenderer"],
    "DEFAULT_PARSER_CLASSES": ["rest_framework.parsers.JSONParser"],
    "UNAUTHENTICATED_USER": None,
}

# ─────────────────────────────────────────────────────────────────────
# AIIE engine tunables (see aiie_engine.conf for defaults)
# ─────────────────────────────────────────────────────────────────────

AIIE = {
    "BASELINE_SCORE": float(os.environ.get("AIIE_BASELINE_SCORE", "5.0")),
    "MODALITY_BASELINES": {},
    "ALTERNATIVE_MARGIN": 1.5,
    "WEAK_AREA_THRESHOLD": 70,
    "PASSING_SCORE": 70,
    "RECOMMENDATIONS_PER_CATEGORY": 3,
}

LOGGING = {
    "version": 1,
    "disable_existing_loggers": False,
    "formatters": {
        "standard": {
            "format": "%(asctime)s %(levelname)s %(name)s: %(message)s",
        },
    },
    "handlers": {
        "console": {
            "class": "logging.StreamHandler",
            "formatter": "standard",
        },
    },
    "root": {
        "handlers": ["console"],
        "level": os.environ.get("DJANGO_LOG_LEVEL", "INFO"),
    },
    "loggers": {
        "aiie_engine": {"level": os.environ.get("AIIE_LOG_LEVEL", "INFO")},
        "assessments": {"level": os.environ.get("AIIE_LOG_LEVEL", "INFO")},
    },
}
