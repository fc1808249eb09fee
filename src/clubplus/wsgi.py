"""WSGI config for the clubplus project."""

import os

from django.core.wsgi import get_wsgi_application

os.environ.setdefault("DJANGO_SETTINGS_MODULE", "clubplus.settings")

application = get_wsgi_application()
