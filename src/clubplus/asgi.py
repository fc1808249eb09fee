"""ASGI config for the clubplus project."""

import os

from django.core.asgi import get_asgi_application

os.environ.setdefault("DJANGO_SETTINGS_MODULE", "clubplus.settings")

application = get_asgi_application()
