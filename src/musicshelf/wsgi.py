"""WSGI config for the musicshelf project."""

import os

from django.core.wsgi import get_wsgi_application

os.environ.setdefault("DJANGO_SETTINGS_MODULE", "musicshelf.settings")

application = get_wsgi_application()
