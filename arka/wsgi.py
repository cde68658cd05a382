"""
WSGI config for the arka project.
"""

import os

from django.core.wsgi import get_wsgi_application

os.environ.setdefault("DJANGO_SETTINGS_MODULE", "arka.settings")

application = get_wsgi_application()
