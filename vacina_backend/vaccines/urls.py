"""Vaccines App URLs - catalog.

Prefix: /api/
Routes:
    GET /api/vaccines/ - Vaccine catalog
"""

from django.urls import path

from vacina_backend.vaccines.views import VaccineListView

app_name = 'vaccines'

urlpatterns = [
    path('vaccines/', VaccineListView.as_view(), name='list'),
]
