"""Domain models for vaccination appointments and administered doses.

Reception state is stored as plain columns (``active``, ``suspend_reason``,
``checked_in_at``, ``checked_out_at``) and exposed as an explicit state via
:mod:`vacina_backend.appointments.states`. Only the transition functions of
that module write those columns.

Architectural note:

- All ORM access for these models uses the ``default`` database alias.
- Appointments are never deleted by reception; suspension is the soft delete.
"""

from __future__ import annotations

from django.db import models
from django.db.models import F, Q, Value
from django.db.models.functions import Lower, Replace
from django.utils import timezone

from . import states
from .windows import CheckInWindow


class AppointmentQuerySet(models.QuerySet):
	"""Predicates used by listing and by the state-scoped reception lookups."""

	def today(self, now=None):
		return self.filter(start__date=timezone.localdate(now))

	def scheduled(self):
		# Slots without a patient are open for booking, not scheduled.
		return self.filter(patient__isnull=False)

	def not_checked_in(self):
		return self.filter(checked_in_at__isnull=True)

	def checked_in(self):
		return self.filter(checked_in_at__isnull=False)

	def not_checked_out(self):
		return self.filter(checked_out_at__isnull=True)

	def checked_out(self):
		return self.filter(checked_out_at__isnull=False)

	def waiting(self):
		return self.filter(states.STATE_LOOKUPS[states.ReceptionState.WAITING])

	def suspended(self):
		return self.filter(states.STATE_LOOKUPS[states.ReceptionState.SUSPENDED])

	def in_state(self, state):
		return self.filter(states.STATE_LOOKUPS[states.ReceptionState(state)])

	def search_for(self, query: str):
		"""Case-insensitive match on patient name or CPF."""
		query = (query or "").strip()
		condition = Q(patient__name__icontains=query) | Q(patient__cpf__icontains=query)
		digits = "".join(ch for ch in query if ch.isdigit())
		if not digits:
			return self.filter(condition)
		# CPF is stored formatted (000.000.000-00); also match on bare digits.
		cpf_digits = Replace(Replace("patient__cpf", Value("."), Value("")), Value("-"), Value(""))
		return self.annotate(patient_cpf_digits=cpf_digits).filter(condition | Q(patient_cpf_digits__contains=digits))

	def reception_order(self):
		return self.order_by("start", Lower("patient__name"), "id")


class Appointment(models.Model):
	"""A vaccination appointment at a health unit.

	Medical meaning:
	- Created by the external scheduling process in the waiting state.
	- Checked in when the patient arrives, checked out when the dose is given.
	- Suspended (soft-deleted) by reception, and re-activated the same way.
	"""
	unit = models.ForeignKey(
		"core.HealthUnit",
		on_delete=models.PROTECT,
		related_name="appointments",
	)
	patient = models.ForeignKey(
		"patients.Patient",
		null=True,
		blank=True,
		on_delete=models.PROTECT,
		related_name="appointments",
	)
	start = models.DateTimeField(db_index=True)
	end = models.DateTimeField()
	active = models.BooleanField(default=True)
	suspend_reason = models.CharField(max_length=255, null=True, blank=True)
	checked_in_at = models.DateTimeField(null=True, blank=True)
	checked_out_at = models.DateTimeField(null=True, blank=True)
	created_at = models.DateTimeField(auto_now_add=True)
	updated_at = models.DateTimeField(auto_now=True)

	objects = AppointmentQuerySet.as_manager()

	class Meta:
		ordering = ["start", "id"]
		constraints = [
			models.CheckConstraint(
				condition=Q(checked_out_at__isnull=True)
				| Q(checked_in_at__isnull=False, checked_in_at__lte=F("checked_out_at")),
				name="appointment_checkout_after_checkin",
			),
			models.CheckConstraint(
				condition=Q(suspend_reason__isnull=True) | Q(active=False),
				name="appointment_suspend_reason_inactive",
			),
			models.CheckConstraint(
				condition=Q(end__gte=F("start")),
				name="appointment_end_after_start",
			),
		]
		indexes = [
			models.Index(fields=["unit", "start"], name="appointment_unit_start_idx"),
		]

	def __str__(self) -> str:
		return f"Appointment #{self.id} (patient_id={self.patient_id})"

	@property
	def state(self) -> states.ReceptionState:
		return states.state_of(self)

	@property
	def check_in_window(self) -> CheckInWindow:
		return CheckInWindow.for_appointment(self)

	def in_allowed_check_in_window(self, now=None) -> bool:
		return self.check_in_window.contains(now or timezone.now())


class Dose(models.Model):
	"""A vaccine dose administered at check-out.

	``sequence_number`` is the 1-based position of this dose in the patient's
	regimen for the vaccine's regimen family. ``follow_up_appointment`` is the
	appointment scheduled for the next dose, absent once the regimen is
	complete. Doses are immutable once created.
	"""
	vaccine = models.ForeignKey(
		"vaccines.Vaccine",
		on_delete=models.PROTECT,
		related_name="doses",
	)
	patient = models.ForeignKey(
		"patients.Patient",
		on_delete=models.PROTECT,
		related_name="doses",
	)
	appointment = models.OneToOneField(
		Appointment,
		on_delete=models.PROTECT,
		related_name="dose",
	)
	sequence_number = models.PositiveSmallIntegerField()
	follow_up_appointment = models.OneToOneField(
		Appointment,
		null=True,
		blank=True,
		on_delete=models.SET_NULL,
		related_name="previous_dose",
	)
	created_at = models.DateTimeField(default=timezone.now, db_index=True)

	class Meta:
		ordering = ["created_at", "id"]
		constraints = [
			models.CheckConstraint(
				condition=Q(sequence_number__gte=1),
				name="dose_sequence_number_positive",
			),
		]

	def __str__(self) -> str:
		return f"Dose #{self.id} {self.vaccine_id}/{self.sequence_number} (patient_id={self.patient_id})"
