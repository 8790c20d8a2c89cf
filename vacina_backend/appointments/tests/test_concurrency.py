"""Two desks checking in the same appointment at the same time.

Each thread runs on its own database connection, so the row lock taken by
the scoped ``select_for_update`` is what serialises them.
"""

from __future__ import annotations

import threading
from unittest.mock import patch

from django.db import connections
from django.test import skipUnlessDBFeature

from vacina_backend.appointments.exceptions import AppointmentNotApplicable
from vacina_backend.appointments.services import reception
from vacina_backend.appointments.states import ReceptionState
from vacina_backend.core.models import AuditLog

from .base import ReceptionTransactionTestCase, local_dt


# SQLite has no row locks; run with settings_prod (PostgreSQL) to exercise this.
@skipUnlessDBFeature("has_select_for_update")
class ConcurrentCheckInTest(ReceptionTransactionTestCase):
	def _race(self, appointment_id, workers=2):
		barrier = threading.Barrier(workers)
		results = []
		lock = threading.Lock()

		def desk():
			try:
				barrier.wait(timeout=5)
				try:
					appt = reception.check_in(
						unit=self.unit,
						appointment_id=appointment_id,
						user=self.operator,
						now=local_dt(8, 50),
					)
				except AppointmentNotApplicable as e:
					outcome = e
				else:
					outcome = appt
				with lock:
					results.append(outcome)
			finally:
				connections.close_all()

		threads = [threading.Thread(target=desk) for _ in range(workers)]
		for t in threads:
			t.start()
		for t in threads:
			t.join(timeout=10)
		return results

	def test_only_one_check_in_wins(self):
		appt = self.make_appointment(hour=9)

		with patch.object(reception, "_save_transition", wraps=reception._save_transition) as save:
			results = self._race(appt.id)

		self.assertEqual(len(results), 2)
		refused = [r for r in results if isinstance(r, AppointmentNotApplicable)]
		checked_in = [r for r in results if not isinstance(r, AppointmentNotApplicable)]
		self.assertEqual(len(checked_in), 1)
		self.assertEqual(len(refused), 1)
		self.assertEqual(refused[0].state, "checked_in")

		writes = [c for c in save.call_args_list if "checked_in_at" in c.args[1]]
		self.assertEqual(len(writes), 1)

		appt.refresh_from_db()
		self.assertEqual(appt.state, ReceptionState.CHECKED_IN)
		self.assertEqual(appt.checked_in_at, local_dt(8, 50))
		self.assertEqual(
			AuditLog.objects.using("default").filter(action="appointment_check_in", patient_id=self.patient.id).count(),
			1,
		)
