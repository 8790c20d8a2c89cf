"""
Appointments App Configuration
"""

from django.apps import AppConfig


class AppointmentsConfig(AppConfig):
    """App configuration for appointments, doses and the reception workflow"""
    default_auto_field = 'django.db.models.BigAutoField'
    name = 'vacina_backend.appointments'
    verbose_name = 'Appointments (reception)'
