"""Django app configuration for menu image storage."""

from django.apps import AppConfig


class MediaConfig(AppConfig):
    """Menu image storage app configuration."""

    default_auto_field = "django.db.models.BigAutoField"
    name = "apps.web.media"
    label = "menu_media"
    verbose_name = "Menu Images"
