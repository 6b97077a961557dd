"""Events app configuration."""

from django.apps import AppConfig


class EventsConfig(AppConfig):
    """Configuration for events app."""

    default_auto_field = "django.db.models.BigAutoField"
    name = "apps.events"
