"""Django app configuration for solo_blog."""
from django.apps import AppConfig


class SoloBlogConfig(AppConfig):
    """Configuration for the solo blog app."""

    default_auto_field = "django.db.models.BigAutoField"
    name = "solo_blog"
    verbose_name = "Solo Blog"

    def ready(self):
        """Configure app when ready."""
        # Fail at startup rather than on the first request
        from .conf import validate_settings
        validate_settings()
