"""
Patients App Configuration
"""

from django.apps import AppConfig


class PatientsConfig(AppConfig):
    """Default app configuration for the patient registry"""
    default_auto_field = 'django.db.models.BigAutoField'
    name = 'vacina_backend.patients'
    verbose_name = 'Patients (Registry)'
