"""
Core App Configuration
"""

from django.apps import AppConfig


class CoreConfig(AppConfig):
    """Default app configuration for core (users, roles, health units)"""
    default_auto_field = 'django.db.models.BigAutoField'
    name = 'vacina_backend.core'
    verbose_name = 'Core (Users, Roles & Units)'
