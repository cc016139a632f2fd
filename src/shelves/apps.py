"""App configuration for the shelves module."""

from django.apps import AppConfig


class ShelvesConfig(AppConfig):
    """Connect the shelves app with Django's app registry."""
    default_auto_field = 'django.db.models.BigAutoField'
    name = 'shelves'
