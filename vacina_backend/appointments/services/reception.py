"""
Reception service for vaccination appointments.

Every operation here is a single-appointment transaction:

1. lock the appointment with a lookup scoped by the transition's source
   states (``select_for_update``),
2. check the guard (check-in window, vaccine selection),
3. apply the transition through :mod:`vacina_backend.appointments.states`,
4. for check-out, cascade into the dose record and the follow-up appointment.

Architecture Rules:
- All DB access uses .using('default')
- Guard failures raise the custom types from appointments.exceptions
- Views translate exceptions to appropriate DRF responses
- Audit entries are written after the transaction has committed
"""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Any

from django.db import transaction
from django.utils import formats, timezone

from vacina_backend.appointments import states
from vacina_backend.appointments.exceptions import (
    AppointmentNotApplicable,
    AppointmentNotFound,
    MissingVaccineSelection,
    OutsideCheckInWindow,
    ReceptionError,
)
from vacina_backend.appointments.models import Appointment, Dose
from vacina_backend.appointments.states import ReceptionEvent
from vacina_backend.core.utils import log_patient_action
from vacina_backend.patients.models import Patient
from vacina_backend.vaccines.models import Vaccine

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Helper Functions
# ---------------------------------------------------------------------------

def _unit_appointments(unit):
    return Appointment.objects.using('default').filter(unit=unit).scheduled()


def _locked_appointment(unit, appointment_id: Any, event: ReceptionEvent) -> Appointment:
    """Lock the appointment if it is in a state that accepts ``event``.

    Raises AppointmentNotFound when the unit has no scheduled appointment with
    that id, and AppointmentNotApplicable when it exists in another state.
    """
    try:
        appointment_id = int(appointment_id)
    except (TypeError, ValueError):
        raise AppointmentNotFound() from None

    appointment = (
        _unit_appointments(unit)
        .select_for_update()
        .filter(states.lookup_for(event))
        .filter(pk=appointment_id)
        .first()
    )
    if appointment is not None:
        # The unit is already loaded; reuse it for the window computation.
        appointment.unit = unit
        return appointment

    existing = _unit_appointments(unit).filter(pk=appointment_id).first()
    if existing is None:
        raise AppointmentNotFound(appointment_id=appointment_id)

    state = existing.state
    raise AppointmentNotApplicable(
        f"Cannot {event.value.replace('_', '-')} an appointment that is {state.value.replace('_', ' ')}",
        appointment_id=appointment_id,
        state=state.value,
        event=event.value,
    )


def _resolve_vaccine(vaccine_id: Any, *, appointment_id: int) -> Vaccine:
    if vaccine_id in (None, ''):
        raise MissingVaccineSelection(appointment_id=appointment_id)
    try:
        pk = int(vaccine_id)
    except (TypeError, ValueError):
        raise MissingVaccineSelection(appointment_id=appointment_id, vaccine_id=vaccine_id) from None

    vaccine = Vaccine.objects.using('default').filter(pk=pk).first()
    if vaccine is None:
        raise MissingVaccineSelection(appointment_id=appointment_id, vaccine_id=vaccine_id)
    return vaccine


def _save_transition(appointment: Appointment, update_fields: list[str]) -> None:
    appointment.save(using='default', update_fields=[*update_fields, 'updated_at'])


def _next_sequence_number(patient_id: int, vaccine: Vaccine) -> int:
    """1-based position of the next dose within the vaccine's regimen family."""
    # Serialises concurrent check-outs of the same patient.
    Patient.objects.using('default').select_for_update().filter(pk=patient_id).first()
    prior = (
        Dose.objects.using('default')
        .filter(patient_id=patient_id, vaccine__regimen_family=vaccine.regimen_family)
        .count()
    )
    return prior + 1


def _schedule_follow_up(appointment: Appointment, vaccine: Vaccine, sequence_number: int) -> Appointment | None:
    """Create the appointment for the next dose, or None when the regimen is complete."""
    interval = vaccine.next_dose_interval(sequence_number)
    if interval is None:
        return None
    start = appointment.checked_out_at + interval
    return Appointment.objects.using('default').create(
        unit_id=appointment.unit_id,
        patient_id=appointment.patient_id,
        start=start,
        end=start + (appointment.end - appointment.start),
    )


def _refused(event: ReceptionEvent, unit, appointment_id: Any, error: ReceptionError) -> None:
    logger.info(
        'reception %s refused (unit=%s, appointment=%s): %s [%s]',
        event.value, getattr(unit, 'pk', None), appointment_id, error, error.code,
    )


# ---------------------------------------------------------------------------
# Reception operations
# ---------------------------------------------------------------------------

def check_in(*, unit, appointment_id: Any, user=None, now: datetime | None = None) -> Appointment:
    """Check a waiting appointment in.

    Raises:
        AppointmentNotFound: no scheduled appointment with that id in the unit
        AppointmentNotApplicable: the appointment is not waiting
        OutsideCheckInWindow: ``now`` lies outside the unit's check-in window
    """
    now = now or timezone.now()
    try:
        with transaction.atomic(using='default'):
            appointment = _locked_appointment(unit, appointment_id, ReceptionEvent.CHECK_IN)
            window = appointment.check_in_window
            if not window.contains(now):
                raise OutsideCheckInWindow(
                    appointment_id=appointment.pk,
                    opens_at=window.opens_at,
                    closes_at=window.closes_at,
                )
            _save_transition(appointment, states.check_in(appointment, at=now))
    except ReceptionError as e:
        _refused(ReceptionEvent.CHECK_IN, unit, appointment_id, e)
        raise

    logger.info('appointment %s checked in at %s (unit=%s)', appointment.pk, now.isoformat(), unit.pk)
    log_patient_action(
        user,
        'appointment_check_in',
        appointment.patient_id,
        meta={'appointment_id': appointment.pk, 'unit_id': unit.pk},
    )
    return appointment


def check_out(*, unit, appointment_id: Any, vaccine_id: Any, user=None, now: datetime | None = None) -> Dose:
    """Check a checked-in appointment out and register the administered dose.

    Setting ``checked_out_at``, creating the dose and creating the follow-up
    appointment happen in one transaction; any failure rolls all of it back.

    Returns:
        The created Dose. ``dose.follow_up_appointment`` is None once the
        regimen is complete.

    Raises:
        AppointmentNotFound / AppointmentNotApplicable: as for check_in
        MissingVaccineSelection: ``vaccine_id`` is missing or unknown
    """
    now = now or timezone.now()
    try:
        with transaction.atomic(using='default'):
            appointment = _locked_appointment(unit, appointment_id, ReceptionEvent.CHECK_OUT)
            vaccine = _resolve_vaccine(vaccine_id, appointment_id=appointment.pk)

            _save_transition(appointment, states.check_out(appointment, at=now))

            sequence_number = _next_sequence_number(appointment.patient_id, vaccine)
            follow_up = _schedule_follow_up(appointment, vaccine, sequence_number)
            dose = Dose.objects.using('default').create(
                vaccine=vaccine,
                patient_id=appointment.patient_id,
                appointment=appointment,
                sequence_number=sequence_number,
                follow_up_appointment=follow_up,
                created_at=now,
            )
    except ReceptionError as e:
        _refused(ReceptionEvent.CHECK_OUT, unit, appointment_id, e)
        raise

    logger.info(
        'appointment %s checked out: dose %s of %s (sequence %s, follow-up=%s)',
        appointment.pk, dose.pk, vaccine.name, sequence_number, getattr(follow_up, 'pk', None),
    )
    log_patient_action(
        user,
        'appointment_check_out',
        appointment.patient_id,
        meta={
            'appointment_id': appointment.pk,
            'unit_id': unit.pk,
            'dose_id': dose.pk,
            'vaccine_id': vaccine.pk,
            'sequence_number': sequence_number,
            'follow_up_appointment_id': getattr(follow_up, 'pk', None),
        },
    )
    return dose


def suspend(*, unit, appointment_id: Any, reason: str | None = None, user=None) -> Appointment:
    """Suspend a waiting appointment. Re-suspending replaces the reason."""
    reason = (reason or '').strip() or None
    try:
        with transaction.atomic(using='default'):
            appointment = _locked_appointment(unit, appointment_id, ReceptionEvent.SUSPEND)
            _save_transition(appointment, states.suspend(appointment, reason=reason))
    except ReceptionError as e:
        _refused(ReceptionEvent.SUSPEND, unit, appointment_id, e)
        raise

    logger.info('appointment %s suspended (unit=%s, reason=%r)', appointment.pk, unit.pk, reason)
    log_patient_action(
        user,
        'appointment_suspend',
        appointment.patient_id,
        meta={'appointment_id': appointment.pk, 'unit_id': unit.pk, 'reason': reason},
    )
    return appointment


def activate(*, unit, appointment_id: Any, user=None) -> Appointment:
    """Re-activate a suspended appointment.

    Any other scheduled appointment is returned unchanged.
    """
    try:
        with transaction.atomic(using='default'):
            appointment = _locked_appointment(unit, appointment_id, ReceptionEvent.ACTIVATE)
            update_fields = states.activate(appointment)
            if update_fields:
                _save_transition(appointment, update_fields)
    except ReceptionError as e:
        _refused(ReceptionEvent.ACTIVATE, unit, appointment_id, e)
        raise

    logger.info('appointment %s activated (unit=%s)', appointment.pk, unit.pk)
    log_patient_action(
        user,
        'appointment_activate',
        appointment.patient_id,
        meta={'appointment_id': appointment.pk, 'unit_id': unit.pk},
    )
    return appointment


def check_out_notice(dose: Dose) -> str:
    """User-facing message after check-out."""
    follow_up = dose.follow_up_appointment
    if follow_up is None:
        return f'Dose {dose.sequence_number} registered. Vaccination regimen complete.'
    next_date = formats.date_format(timezone.localtime(follow_up.start).date(), 'DATE_FORMAT')
    return f'Dose {dose.sequence_number} registered. Next dose on {next_date}.'
