"""App configuration for the database agent."""

from django.apps import AppConfig


class AgentConfig(AppConfig):
    """Natural-language SQL helper; no models of its own."""
    default_auto_field = 'django.db.models.BigAutoField'
    name = 'agent'
