"""
Appointments Services Module.

This package contains service-layer logic for the appointments app:
- reception: check-in, check-out, suspend and activate transactions
- listing: filter & search engine for the daily roster and the detail view
"""

from vacina_backend.appointments.services.listing import (
    AppointmentDetail,
    AppointmentListing,
    appointment_detail,
    clamp_page_size,
    effective_filter,
    list_appointments,
)
from vacina_backend.appointments.services.reception import (
    activate,
    check_in,
    check_out,
    check_out_notice,
    suspend,
)

__all__ = [
    # Listing
    "AppointmentDetail",
    "AppointmentListing",
    "appointment_detail",
    "clamp_page_size",
    "effective_filter",
    "list_appointments",
    # Reception
    "activate",
    "check_in",
    "check_out",
    "check_out_notice",
    "suspend",
]
