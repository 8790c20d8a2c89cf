from __future__ import annotations

from datetime import timedelta

from django.test import SimpleTestCase, override_settings

from vacina_backend.appointments.exceptions import AppointmentNotFound
from vacina_backend.appointments.services import listing, reception
from vacina_backend.patients.models import Patient

from .base import DAY, ReceptionTestCase, local_dt


class EffectiveFilterTest(SimpleTestCase):
	def test_long_query_forces_search(self):
		self.assertEqual(listing.effective_filter("checked_in", "mar"), "search")
		self.assertEqual(listing.effective_filter(None, "  maria  "), "search")

	def test_short_query_keeps_requested_filter(self):
		self.assertEqual(listing.effective_filter("checked_in", "ma"), "checked_in")
		self.assertEqual(listing.effective_filter("all", "  m  "), "all")

	def test_unknown_or_missing_filter_defaults_to_waiting(self):
		self.assertEqual(listing.effective_filter(None), "waiting")
		self.assertEqual(listing.effective_filter("cancelled", "ab"), "waiting")
		self.assertEqual(listing.effective_filter(""), "waiting")

	def test_every_recognised_filter(self):
		for name in listing.FILTERS:
			with self.subTest(filter=name):
				self.assertEqual(listing.effective_filter(name), name)

	def test_search_term(self):
		self.assertIsNone(listing.search_term("ab"))
		self.assertIsNone(listing.search_term("  ab  "))
		self.assertEqual(listing.search_term(" abc "), "abc")


@override_settings(VACINA_DEFAULT_PAGE_SIZE=10, VACINA_MAX_PAGE_SIZE=10_000)
class ClampPageSizeTest(SimpleTestCase):
	def test_bounds(self):
		self.assertEqual(listing.clamp_page_size(1), 10)
		self.assertEqual(listing.clamp_page_size("25"), 25)
		self.assertEqual(listing.clamp_page_size(50_000), 10_000)

	def test_garbage_falls_back_to_default(self):
		self.assertEqual(listing.clamp_page_size("lots"), 10)
		self.assertEqual(listing.clamp_page_size(None), 10)


class ListAppointmentsTest(ReceptionTestCase):
	"""Roster for DAY at 08:50.

	alice (09:00, waiting) and Bruno (09:00, waiting) share a start time;
	Carlos is checked in, Daniela checked out, Eduardo suspended.
	"""

	def setUp(self):
		super().setUp()
		self.now = local_dt(8, 50)

		def patient(name, cpf=None):
			return Patient.objects.using("default").create(name=name, cpf=cpf)

		self.bruno = self.make_appointment(hour=9, patient=patient("Bruno Alves"))
		self.alice = self.make_appointment(hour=9, patient=patient("alice pereira", "111.222.333-44"))
		self.carlos = self.make_appointment(
			hour=8,
			minute=30,
			patient=patient("Carlos Ribeiro"),
			checked_in_at=local_dt(8, 25),
		)
		self.daniela = self.make_appointment(
			hour=7,
			minute=45,
			patient=patient("Daniela Farias"),
			checked_in_at=local_dt(7, 40),
			checked_out_at=local_dt(7, 50),
		)
		self.eduardo = self.make_appointment(
			hour=11,
			patient=patient("Eduardo Araujo"),
			active=False,
			suspend_reason="no-show risk",
		)

		# Never listed: another day, another unit, an open slot.
		self.make_appointment(hour=9, day=DAY + timedelta(days=1))
		self.make_appointment(hour=9, unit=self.other_unit)
		self.make_appointment(hour=10, open_slot=True)

	def _ids(self, result):
		return [a.id for a in result.queryset]

	def test_default_filter_is_waiting(self):
		result = listing.list_appointments(self.unit, now=self.now)
		self.assertEqual(result.filter, "waiting")
		self.assertIsNone(result.search)
		self.assertEqual(self._ids(result), [self.alice.id, self.bruno.id])

	def test_waiting_excludes_checked_in_and_suspended(self):
		ids = self._ids(listing.list_appointments(self.unit, filter="waiting", now=self.now))
		self.assertNotIn(self.carlos.id, ids)
		self.assertNotIn(self.eduardo.id, ids)
		self.assertNotIn(self.daniela.id, ids)

	def test_checked_in(self):
		result = listing.list_appointments(self.unit, filter="checked_in", now=self.now)
		self.assertEqual(self._ids(result), [self.carlos.id])

	def test_checked_out(self):
		result = listing.list_appointments(self.unit, filter="checked_out", now=self.now)
		self.assertEqual(self._ids(result), [self.daniela.id])

	def test_all_is_ordered_by_start_then_name_ignoring_case(self):
		result = listing.list_appointments(self.unit, filter="all", now=self.now)
		self.assertEqual(
			self._ids(result),
			[self.daniela.id, self.carlos.id, self.alice.id, self.bruno.id, self.eduardo.id],
		)

	def test_search_overrides_filter_and_keeps_ordering(self):
		result = listing.list_appointments(self.unit, filter="checked_out", query="eir", now=self.now)
		self.assertEqual(result.filter, "search")
		self.assertEqual(result.search, "eir")
		# pereira and Ribeiro
		self.assertEqual(self._ids(result), [self.carlos.id, self.alice.id])

	def test_search_is_case_insensitive(self):
		result = listing.list_appointments(self.unit, query="BRUNO", now=self.now)
		self.assertEqual(self._ids(result), [self.bruno.id])

	def test_search_by_cpf(self):
		result = listing.list_appointments(self.unit, query="11122233344", now=self.now)
		self.assertEqual(self._ids(result), [self.alice.id])
		result = listing.list_appointments(self.unit, query="111.222", now=self.now)
		self.assertEqual(self._ids(result), [self.alice.id])

	def test_short_query_does_not_search(self):
		result = listing.list_appointments(self.unit, filter="checked_in", query="al", now=self.now)
		self.assertEqual(result.filter, "checked_in")
		self.assertIsNone(result.search)
		self.assertEqual(self._ids(result), [self.carlos.id])

	def test_search_still_scoped_to_today_and_unit(self):
		result = listing.list_appointments(self.unit, query="Maria", now=self.now)
		self.assertEqual(self._ids(result), [])


class AppointmentDetailTest(ReceptionTestCase):
	def test_detail_lists_other_appointments_and_dose_history(self):
		later = self.make_appointment(hour=9, day=DAY + timedelta(days=30))
		earlier = self.make_appointment(hour=14, day=DAY - timedelta(days=40), unit=self.other_unit)
		appt = self.make_appointment(hour=9)

		reception.check_in(unit=self.unit, appointment_id=appt.id, now=local_dt(8, 50))
		dose = reception.check_out(unit=self.unit, appointment_id=appt.id, vaccine_id=self.pfizer.id, now=local_dt(9, 10))

		detail = listing.appointment_detail(self.unit, appt.id)
		self.assertEqual(detail.appointment.id, appt.id)
		self.assertEqual(
			[a.id for a in detail.other_appointments],
			[earlier.id, dose.follow_up_appointment_id, later.id],
		)
		self.assertEqual([d.id for d in detail.doses], [dose.id])

	def test_doses_ordered_by_creation(self):
		first = self.make_appointment(hour=9)
		second = self.make_appointment(hour=11)
		reception.check_in(unit=self.unit, appointment_id=second.id, now=local_dt(10, 55))
		later_dose = reception.check_out(
			unit=self.unit, appointment_id=second.id, vaccine_id=self.yellow_fever.id, now=local_dt(11, 5)
		)
		reception.check_in(unit=self.unit, appointment_id=first.id, now=local_dt(8, 55))
		earlier_dose = reception.check_out(
			unit=self.unit, appointment_id=first.id, vaccine_id=self.pfizer.id, now=local_dt(9, 5)
		)

		detail = listing.appointment_detail(self.unit, first.id)
		self.assertEqual([d.id for d in detail.doses], [earlier_dose.id, later_dose.id])

	def test_other_unit_is_not_found(self):
		appt = self.make_appointment(hour=9, unit=self.other_unit)
		with self.assertRaises(AppointmentNotFound):
			listing.appointment_detail(self.unit, appt.id)
