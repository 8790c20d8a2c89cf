"""Vaccination reception URL configuration.

API routes:
    /api/auth/      - Authentication (core)
    /api/health/    - Health check (core)
    /api/units/     - Health units of the operator (core) and reception (appointments)
    /api/vaccines/  - Vaccine catalog (vaccines)
"""

from django.http import HttpResponse
from django.urls import include, path

from vacina_backend.core.admin import vacina_admin_site


def root(request):
    """Plain-text root endpoint, doubles as a trivial liveness check."""
    return HttpResponse("Vaccination reception backend is running.")


urlpatterns = [
    path("", root, name="root"),
    path("admin/", vacina_admin_site.urls),

    path("api/", include("vacina_backend.core.urls")),
    path("api/", include("vacina_backend.vaccines.urls")),
    path("api/", include("vacina_backend.appointments.urls")),
]
