"""Tests for health units and their check-in window settings.

Tests cover:
- Units list (GET /api/units/) scoped by operator assignment
- /api/auth/me/ includes the operator's units
- Window offsets fall back to project settings
"""

from __future__ import annotations

from datetime import timedelta

from django.test import TestCase, override_settings

from rest_framework import status
from rest_framework.test import APIClient

from vacina_backend.core.models import HealthUnit, Role, User


class HealthUnitApiTest(TestCase):
    databases = {"default"}

    def setUp(self):
        role_admin, _ = Role.objects.using("default").get_or_create(
            name="admin",
            defaults={"label": "Administrator"},
        )
        role_operator, _ = Role.objects.using("default").get_or_create(
            name="operator",
            defaults={"label": "Reception"},
        )

        self.unit_a = HealthUnit.objects.using("default").create(name="UBS Centro")
        self.unit_b = HealthUnit.objects.using("default").create(name="UBS Norte")
        self.closed = HealthUnit.objects.using("default").create(name="UBS Antiga", active=False)

        self.admin = User.objects.db_manager("default").create_user(
            username="admin_units_test",
            email="admin_units@example.com",
            password="DummyPass123!",
            role=role_admin,
        )
        self.operator = User.objects.db_manager("default").create_user(
            username="operator_units_test",
            email="operator_units@example.com",
            password="DummyPass123!",
            role=role_operator,
        )
        self.operator.units.add(self.unit_a, self.closed)

        self.no_role = User.objects.db_manager("default").create_user(
            username="norole_units_test",
            email="norole_units@example.com",
            password="DummyPass123!",
        )

    def _client_for(self, user: User) -> APIClient:
        client = APIClient()
        client.defaults["HTTP_HOST"] = "localhost"
        client.force_authenticate(user=user)
        return client

    def test_operator_sees_only_assigned_active_units(self):
        r = self._client_for(self.operator).get("/api/units/")
        self.assertEqual(r.status_code, status.HTTP_200_OK)
        self.assertEqual([u["id"] for u in r.data], [self.unit_a.id])

    def test_admin_sees_every_active_unit(self):
        r = self._client_for(self.admin).get("/api/units/")
        self.assertEqual(r.status_code, status.HTTP_200_OK)
        self.assertEqual({u["id"] for u in r.data}, {self.unit_a.id, self.unit_b.id})

    def test_user_without_role_is_forbidden(self):
        r = self._client_for(self.no_role).get("/api/units/")
        self.assertEqual(r.status_code, status.HTTP_403_FORBIDDEN)

    def test_units_are_read_only(self):
        r = self._client_for(self.admin).post("/api/units/", {"name": "UBS Sul"}, format="json")
        self.assertEqual(r.status_code, status.HTTP_403_FORBIDDEN)

    def test_me_lists_operator_units(self):
        r = self._client_for(self.operator).get("/api/auth/me/")
        self.assertEqual(r.status_code, status.HTTP_200_OK)
        self.assertEqual([u["name"] for u in r.data["units"]], ["UBS Centro"])


@override_settings(
    VACINA_CHECK_IN_OPENS_MINUTES_BEFORE=30,
    VACINA_CHECK_IN_CLOSES_MINUTES_AFTER=20,
)
class HealthUnitWindowTest(TestCase):
    databases = {"default"}

    def test_defaults_come_from_settings(self):
        unit = HealthUnit.objects.using("default").create(name="UBS Default")
        self.assertEqual(unit.check_in_opens_before, timedelta(minutes=30))
        self.assertEqual(unit.check_in_closes_after, timedelta(minutes=20))

    def test_unit_offsets_override_settings(self):
        unit = HealthUnit.objects.using("default").create(
            name="UBS Custom",
            check_in_opens_minutes_before=15,
            check_in_closes_minutes_after=0,
        )
        self.assertEqual(unit.check_in_opens_before, timedelta(minutes=15))
        self.assertEqual(unit.check_in_closes_after, timedelta(0))
