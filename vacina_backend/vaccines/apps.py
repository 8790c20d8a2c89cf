"""
Vaccines App Configuration
"""

from django.apps import AppConfig


class VaccinesConfig(AppConfig):
    """Default app configuration for the vaccine catalog"""
    default_auto_field = 'django.db.models.BigAutoField'
    name = 'vacina_backend.vaccines'
    verbose_name = 'Vaccines (Catalog & Regimens)'
