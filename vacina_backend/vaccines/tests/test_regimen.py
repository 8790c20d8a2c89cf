from __future__ import annotations

from datetime import timedelta

from django.core.exceptions import ValidationError
from django.test import TestCase

from rest_framework.test import APIClient

from vacina_backend.core.models import Role, User
from vacina_backend.vaccines.models import Vaccine


class VaccineRegimenTest(TestCase):
	databases = {"default"}

	def test_single_dose_has_no_next_interval(self):
		v = Vaccine.objects.using("default").create(name="Febre Amarela", doses_required=1)
		self.assertIsNone(v.next_dose_interval(1))

	def test_two_dose_regimen(self):
		v = Vaccine.objects.using("default").create(
			name="Pfizer",
			doses_required=2,
			dose_intervals_days=[21],
		)
		self.assertEqual(v.next_dose_interval(1), timedelta(days=21))
		self.assertIsNone(v.next_dose_interval(2))
		self.assertIsNone(v.next_dose_interval(3))

	def test_last_interval_repeats(self):
		v = Vaccine.objects.using("default").create(
			name="Hepatite B",
			doses_required=3,
			dose_intervals_days=[30],
		)
		self.assertEqual(v.next_dose_interval(1), timedelta(days=30))
		self.assertEqual(v.next_dose_interval(2), timedelta(days=30))
		self.assertIsNone(v.next_dose_interval(3))

	def test_per_position_intervals(self):
		v = Vaccine.objects.using("default").create(
			name="HPV",
			doses_required=3,
			dose_intervals_days=[60, 120],
		)
		self.assertEqual(v.next_dose_interval(1), timedelta(days=60))
		self.assertEqual(v.next_dose_interval(2), timedelta(days=120))

	def test_sequence_number_is_one_based(self):
		v = Vaccine.objects.using("default").create(name="BCG")
		with self.assertRaises(ValueError):
			v.next_dose_interval(0)

	def test_regimen_family_defaults_to_name(self):
		v = Vaccine.objects.using("default").create(name="CoronaVac")
		self.assertEqual(v.regimen_family, "CoronaVac")

	def test_clean_rejects_multi_dose_without_intervals(self):
		v = Vaccine(name="Sem intervalo", doses_required=2, dose_intervals_days=[])
		with self.assertRaises(ValidationError):
			v.full_clean()

	def test_clean_rejects_negative_interval(self):
		v = Vaccine(name="Negativa", doses_required=2, dose_intervals_days=[-1])
		with self.assertRaises(ValidationError):
			v.full_clean()


class VaccineCatalogApiTest(TestCase):
	databases = {"default"}

	def setUp(self):
		role_operator, _ = Role.objects.using("default").get_or_create(
			name="operator",
			defaults={"label": "Reception"},
		)
		self.operator = User.objects.db_manager("default").create_user(
			username="operator_vaccines_test",
			email="operator_vaccines@example.com",
			password="DummyPass123!",
			role=role_operator,
		)
		Vaccine.objects.using("default").create(name="Pfizer", doses_required=2, dose_intervals_days=[21])
		Vaccine.objects.using("default").create(name="AstraZeneca", doses_required=2, dose_intervals_days=[84])

		self.client = APIClient()
		self.client.defaults["HTTP_HOST"] = "localhost"

	def test_catalog_ordered_by_name(self):
		self.client.force_authenticate(user=self.operator)
		r = self.client.get("/api/vaccines/")
		self.assertEqual(r.status_code, 200)
		self.assertEqual([v["name"] for v in r.data], ["AstraZeneca", "Pfizer"])
		self.assertEqual(r.data[1]["dose_intervals_days"], [21])

	def test_catalog_requires_authentication(self):
		r = self.client.get("/api/vaccines/")
		self.assertEqual(r.status_code, 401)
