"""Reception state machine for vaccination appointments.

An appointment is stored as a handful of nullable columns (``active``,
``suspend_reason``, ``checked_in_at``, ``checked_out_at``). This module maps
those columns to an explicit :class:`ReceptionState` and owns every write to
them: the transition functions below are the only code that move an
appointment between states.

Transitions::

    WAITING    --check_in-->   CHECKED_IN
    CHECKED_IN --check_out-->  CHECKED_OUT   (terminal)
    WAITING    --suspend-->    SUSPENDED
    SUSPENDED  --activate-->   WAITING

``suspend`` on a suspended appointment is accepted as an idempotent
re-application. ``activate`` is accepted on any scheduled appointment and
only changes a suspended one.
"""

from __future__ import annotations

from datetime import datetime
from enum import Enum

from django.db.models import Q

from .exceptions import AppointmentNotApplicable


class ReceptionState(str, Enum):
	WAITING = "waiting"
	CHECKED_IN = "checked_in"
	CHECKED_OUT = "checked_out"
	SUSPENDED = "suspended"


class ReceptionEvent(str, Enum):
	CHECK_IN = "check_in"
	CHECK_OUT = "check_out"
	SUSPEND = "suspend"
	ACTIVATE = "activate"


TRANSITIONS: dict[tuple[ReceptionState, ReceptionEvent], ReceptionState] = {
	(ReceptionState.WAITING, ReceptionEvent.CHECK_IN): ReceptionState.CHECKED_IN,
	(ReceptionState.CHECKED_IN, ReceptionEvent.CHECK_OUT): ReceptionState.CHECKED_OUT,
	(ReceptionState.WAITING, ReceptionEvent.SUSPEND): ReceptionState.SUSPENDED,
	(ReceptionState.SUSPENDED, ReceptionEvent.SUSPEND): ReceptionState.SUSPENDED,
	(ReceptionState.SUSPENDED, ReceptionEvent.ACTIVATE): ReceptionState.WAITING,
	(ReceptionState.WAITING, ReceptionEvent.ACTIVATE): ReceptionState.WAITING,
	(ReceptionState.CHECKED_IN, ReceptionEvent.ACTIVATE): ReceptionState.CHECKED_IN,
	(ReceptionState.CHECKED_OUT, ReceptionEvent.ACTIVATE): ReceptionState.CHECKED_OUT,
}

# Column predicates for each state, used to scope lookups at the storage layer.
STATE_LOOKUPS: dict[ReceptionState, Q] = {
	ReceptionState.WAITING: Q(active=True, checked_in_at__isnull=True, checked_out_at__isnull=True),
	ReceptionState.CHECKED_IN: Q(checked_in_at__isnull=False, checked_out_at__isnull=True),
	ReceptionState.CHECKED_OUT: Q(checked_out_at__isnull=False),
	ReceptionState.SUSPENDED: Q(active=False, checked_in_at__isnull=True, checked_out_at__isnull=True),
}


def state_of(appointment) -> ReceptionState:
	"""Derive the reception state from the stored columns."""
	if appointment.checked_out_at is not None:
		return ReceptionState.CHECKED_OUT
	if appointment.checked_in_at is not None:
		return ReceptionState.CHECKED_IN
	if not appointment.active:
		return ReceptionState.SUSPENDED
	return ReceptionState.WAITING


def source_states(event: ReceptionEvent) -> set[ReceptionState]:
	"""States from which ``event`` is a legal transition."""
	return {state for (state, ev) in TRANSITIONS if ev == event}


def lookup_for(event: ReceptionEvent) -> Q:
	"""Q object matching the appointments on which ``event`` may be applied."""
	states = sorted(source_states(event), key=lambda s: s.value)
	q = STATE_LOOKUPS[states[0]]
	for state in states[1:]:
		q = q | STATE_LOOKUPS[state]
	return q


def next_state(state: ReceptionState, event: ReceptionEvent, *, appointment_id: int | None = None) -> ReceptionState:
	try:
		return TRANSITIONS[(state, event)]
	except KeyError:
		raise AppointmentNotApplicable(
			f"Cannot {event.value.replace('_', '-')} an appointment that is {state.value.replace('_', ' ')}",
			appointment_id=appointment_id,
			state=state.value,
			event=event.value,
		) from None


def _advance(appointment, event: ReceptionEvent) -> ReceptionState:
	return next_state(state_of(appointment), event, appointment_id=appointment.pk)


# ---------------------------------------------------------------------------
# Transition functions
#
# Each one validates the transition, mutates the in-memory appointment and
# returns the list of changed field names for ``save(update_fields=...)``.
# ---------------------------------------------------------------------------

def check_in(appointment, *, at: datetime) -> list[str]:
	_advance(appointment, ReceptionEvent.CHECK_IN)
	appointment.checked_in_at = at
	return ["checked_in_at"]


def check_out(appointment, *, at: datetime) -> list[str]:
	_advance(appointment, ReceptionEvent.CHECK_OUT)
	if at < appointment.checked_in_at:
		raise AppointmentNotApplicable(
			"Check-out cannot precede check-in",
			appointment_id=appointment.pk,
			state=ReceptionState.CHECKED_IN.value,
			event=ReceptionEvent.CHECK_OUT.value,
		)
	appointment.checked_out_at = at
	return ["checked_out_at"]


def suspend(appointment, *, reason: str | None) -> list[str]:
	_advance(appointment, ReceptionEvent.SUSPEND)
	appointment.active = False
	appointment.suspend_reason = reason
	return ["active", "suspend_reason"]


def activate(appointment) -> list[str]:
	source = state_of(appointment)
	next_state(source, ReceptionEvent.ACTIVATE, appointment_id=appointment.pk)
	if source != ReceptionState.SUSPENDED:
		return []
	appointment.active = True
	appointment.suspend_reason = None
	return ["active", "suspend_reason"]
