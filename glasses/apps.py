"""Glasses app configuration."""

from django.apps import AppConfig


class GlassesConfig(AppConfig):
    """Django app config for the glasses catalog."""

    default_auto_field = 'django.db.models.BigAutoField'
    name = 'glasses'
