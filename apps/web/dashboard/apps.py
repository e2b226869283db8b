"""Django app configuration for the admin dashboard."""

from django.apps import AppConfig


class DashboardConfig(AppConfig):
    """Dashboard app configuration."""

    default_auto_field = "django.db.models.BigAutoField"
    name = "apps.web.dashboard"
    label = "dashboard"
    verbose_name = "Dashboard"
