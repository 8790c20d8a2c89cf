"""
Filter & search engine for the reception roster.

The effective filter is computed by a pure function from the requested
filter keyword and the free-text query; it is never stored on a view or
request object.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from django.conf import settings
from django.db.models import QuerySet

from vacina_backend.appointments.exceptions import AppointmentNotFound
from vacina_backend.appointments.models import Appointment, Dose

FILTER_SEARCH = 'search'
FILTER_ALL = 'all'
FILTER_WAITING = 'waiting'
FILTER_CHECKED_IN = 'checked_in'
FILTER_CHECKED_OUT = 'checked_out'

FILTERS = (FILTER_SEARCH, FILTER_ALL, FILTER_WAITING, FILTER_CHECKED_IN, FILTER_CHECKED_OUT)
DEFAULT_FILTER = FILTER_WAITING
MIN_SEARCH_LENGTH = 3


def search_term(query: str | None) -> str | None:
    """The stripped query when it is long enough to trigger search, else None."""
    term = (query or '').strip()
    if len(term) < MIN_SEARCH_LENGTH:
        return None
    return term


def effective_filter(requested: str | None, query: str | None = None) -> str:
    """Resolve the filter actually applied to the roster.

    A query of at least three characters forces ``search``. Otherwise the
    requested keyword wins when it is recognised; anything else falls back
    to ``waiting``.
    """
    if search_term(query) is not None:
        return FILTER_SEARCH
    if requested in FILTERS:
        return requested
    return DEFAULT_FILTER


def apply_filter(qs: QuerySet, filter_name: str, query: str | None = None) -> QuerySet:
    if filter_name == FILTER_WAITING:
        qs = qs.waiting()
    elif filter_name == FILTER_CHECKED_IN:
        qs = qs.checked_in().not_checked_out()
    elif filter_name == FILTER_CHECKED_OUT:
        qs = qs.checked_in().checked_out()
    elif filter_name == FILTER_SEARCH:
        term = search_term(query)
        if term is not None:
            qs = qs.search_for(term)
    # Ordering is applied last so that no filter can change it.
    return qs.reception_order()


def todays_appointments(unit, now=None) -> QuerySet:
    """Today's scheduled appointments of the unit, the candidate set for listing."""
    return (
        Appointment.objects.using('default')
        .filter(unit=unit)
        .today(now)
        .scheduled()
        .select_related('patient', 'unit')
    )


def clamp_page_size(value: Any) -> int:
    """Page size bounded to ``[default, VACINA_MAX_PAGE_SIZE]``."""
    minimum = settings.VACINA_DEFAULT_PAGE_SIZE
    maximum = settings.VACINA_MAX_PAGE_SIZE
    try:
        size = int(value)
    except (TypeError, ValueError):
        return minimum
    return max(minimum, min(size, maximum))


@dataclass
class AppointmentListing:
    filter: str
    search: str | None
    queryset: QuerySet


@dataclass
class AppointmentDetail:
    appointment: Appointment
    other_appointments: list[Appointment] = field(default_factory=list)
    doses: list[Dose] = field(default_factory=list)


def list_appointments(unit, *, filter: str | None = None, query: str | None = None, now=None) -> AppointmentListing:
    effective = effective_filter(filter, query)
    term = search_term(query) if effective == FILTER_SEARCH else None
    qs = apply_filter(todays_appointments(unit, now), effective, term)
    return AppointmentListing(filter=effective, search=term, queryset=qs)


def appointment_detail(unit, appointment_id: Any) -> AppointmentDetail:
    """Appointment with the patient's other appointments and full dose history."""
    try:
        pk = int(appointment_id)
    except (TypeError, ValueError):
        raise AppointmentNotFound() from None

    appointment = (
        Appointment.objects.using('default')
        .filter(unit=unit, pk=pk)
        .scheduled()
        .select_related('patient', 'unit')
        .first()
    )
    if appointment is None:
        raise AppointmentNotFound(appointment_id=pk)

    other_appointments = list(
        Appointment.objects.using('default')
        .filter(patient_id=appointment.patient_id)
        .exclude(pk=appointment.pk)
        .select_related('unit')
        .order_by('start', 'id')
    )
    doses = list(
        Dose.objects.using('default')
        .filter(patient_id=appointment.patient_id)
        .select_related('vaccine', 'appointment__unit', 'follow_up_appointment')
        .order_by('created_at', 'id')
    )
    return AppointmentDetail(appointment=appointment, other_appointments=other_appointments, doses=doses)
