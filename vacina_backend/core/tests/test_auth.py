"""Tests for login, token refresh and bearer access to the reception API.

Tests cover:
- Login (POST /api/auth/login/) returns the user's role and units
- Tokens carry ``role`` and ``units`` claims; refresh re-reads them
- Bearer tokens are scoped by unit assignment and reception role
"""

from __future__ import annotations

from datetime import timedelta

from django.test import TestCase
from django.utils import timezone

from rest_framework import status
from rest_framework.test import APIClient
from rest_framework_simplejwt.tokens import AccessToken, RefreshToken

from vacina_backend.appointments.models import Appointment
from vacina_backend.core.models import HealthUnit, Role, User
from vacina_backend.patients.models import Patient

PASSWORD = "SecurePass123!"


class AuthTestCase(TestCase):
    databases = {"default"}

    def setUp(self):
        roles = {}
        for name, label in (
            ("admin", "Administrator"),
            ("nurse", "Nurse"),
            ("auditor", "Auditor"),
        ):
            roles[name], _ = Role.objects.using("default").get_or_create(name=name, defaults={"label": label})

        self.centro = HealthUnit.objects.using("default").create(
            name="UBS Centro",
            check_in_opens_minutes_before=15,
            check_in_closes_minutes_after=10,
        )
        self.norte = HealthUnit.objects.using("default").create(name="UBS Norte")
        self.closed = HealthUnit.objects.using("default").create(name="UBS Antiga", active=False)

        self.admin = self._user("admin_auth_test", roles["admin"])
        self.nurse = self._user("nurse_auth_test", roles["nurse"], self.centro, self.closed)
        self.auditor = self._user("auditor_auth_test", roles["auditor"], self.centro)
        self.no_role = self._user("norole_auth_test", None, self.centro)
        self.inactive = self._user("inactive_auth_test", roles["nurse"], self.centro, is_active=False)

        self.client = APIClient()
        self.client.defaults["HTTP_HOST"] = "localhost"

    def _user(self, username, role, *units, **extra):
        user = User.objects.db_manager("default").create_user(
            username=username,
            email=f"{username}@example.com",
            password=PASSWORD,
            role=role,
            **extra,
        )
        if units:
            user.units.add(*units)
        return user

    def _login(self, username):
        return self.client.post("/api/auth/login/", {"username": username, "password": PASSWORD}, format="json")

    def _bearer(self, username) -> APIClient:
        response = self._login(username)
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        client = APIClient()
        client.defaults["HTTP_HOST"] = "localhost"
        client.credentials(HTTP_AUTHORIZATION=f"Bearer {response.data['access']}")
        return client


class LoginTest(AuthTestCase):
    def test_login_returns_role_and_active_units(self):
        r = self._login("nurse_auth_test")

        self.assertEqual(r.status_code, status.HTTP_200_OK)
        self.assertIn("access", r.data)
        self.assertIn("refresh", r.data)
        self.assertEqual(r.data["user"]["id"], self.nurse.id)
        self.assertEqual(r.data["user"]["role"]["name"], "nurse")
        self.assertEqual([u["name"] for u in r.data["user"]["units"]], ["UBS Centro"])
        self.assertEqual(r.data["user"]["units"][0]["check_in_opens_minutes_before"], 15)

    def test_admin_login_lists_every_active_unit(self):
        r = self._login("admin_auth_test")
        self.assertEqual([u["name"] for u in r.data["user"]["units"]], ["UBS Centro", "UBS Norte"])

    def test_tokens_carry_role_and_unit_claims(self):
        r = self._login("nurse_auth_test")

        access = AccessToken(r.data["access"])
        self.assertEqual(access["role"], "nurse")
        self.assertEqual(access["units"], [self.centro.id])

        refresh = RefreshToken(r.data["refresh"])
        self.assertEqual(refresh["role"], "nurse")
        self.assertEqual(refresh["units"], [self.centro.id])

    def test_user_without_role_logs_in_with_empty_claims(self):
        r = self._login("norole_auth_test")

        self.assertEqual(r.status_code, status.HTTP_200_OK)
        self.assertIsNone(r.data["user"]["role"])
        access = AccessToken(r.data["access"])
        self.assertIsNone(access["role"])
        self.assertEqual(access["units"], [self.centro.id])

    def test_rejected_logins_return_400(self):
        cases = {
            "wrong password": {"username": "nurse_auth_test", "password": "WrongPassword!"},
            "unknown user": {"username": "nobody", "password": PASSWORD},
            "inactive user": {"username": "inactive_auth_test", "password": PASSWORD},
            "missing password": {"username": "nurse_auth_test"},
        }
        for label, payload in cases.items():
            with self.subTest(label):
                r = self.client.post("/api/auth/login/", payload, format="json")
                self.assertEqual(r.status_code, status.HTTP_400_BAD_REQUEST)
                self.assertNotIn("access", r.data)


class RefreshTest(AuthTestCase):
    def test_refresh_picks_up_new_unit_assignment(self):
        refresh = self._login("nurse_auth_test").data["refresh"]
        self.nurse.units.add(self.norte)

        r = self.client.post("/api/auth/refresh/", {"refresh": refresh}, format="json")
        self.assertEqual(r.status_code, status.HTTP_200_OK)
        self.assertEqual(AccessToken(r.data["access"])["units"], [self.centro.id, self.norte.id])

    def test_refresh_for_deactivated_user_is_refused(self):
        refresh = self._login("nurse_auth_test").data["refresh"]
        User.objects.using("default").filter(pk=self.nurse.pk).update(is_active=False)

        r = self.client.post("/api/auth/refresh/", {"refresh": refresh}, format="json")
        self.assertEqual(r.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertNotIn("access", r.data)

    def test_invalid_or_missing_refresh_returns_400(self):
        for payload in ({"refresh": "invalid_token_here"}, {}):
            with self.subTest(payload=payload):
                r = self.client.post("/api/auth/refresh/", payload, format="json")
                self.assertEqual(r.status_code, status.HTTP_400_BAD_REQUEST)


class BearerAccessTest(AuthTestCase):
    def setUp(self):
        super().setUp()
        patient = Patient.objects.using("default").create(name="Maria Souza")
        start = timezone.now() + timedelta(minutes=5)
        self.appt = Appointment.objects.using("default").create(
            unit=self.centro,
            patient=patient,
            start=start,
            end=start + timedelta(minutes=15),
        )

    def _roster(self, unit):
        return f"/api/units/{unit.id}/appointments/"

    def test_me_lists_units(self):
        r = self._bearer("nurse_auth_test").get("/api/auth/me/")
        self.assertEqual(r.status_code, status.HTTP_200_OK)
        self.assertEqual(r.data["username"], "nurse_auth_test")
        self.assertEqual([u["id"] for u in r.data["units"]], [self.centro.id])

    def test_nurse_can_check_in_at_assigned_unit(self):
        client = self._bearer("nurse_auth_test")

        self.assertEqual(client.get(self._roster(self.centro)).status_code, status.HTTP_200_OK)
        r = client.post(f"{self._roster(self.centro)}{self.appt.id}/check-in/")
        self.assertEqual(r.status_code, status.HTTP_200_OK)
        self.assertEqual(r.data["state"], "checked_in")

    def test_unassigned_unit_is_404(self):
        r = self._bearer("nurse_auth_test").get(self._roster(self.norte))
        self.assertEqual(r.status_code, status.HTTP_404_NOT_FOUND)

    def test_auditor_reads_but_cannot_check_in(self):
        client = self._bearer("auditor_auth_test")

        self.assertEqual(client.get(self._roster(self.centro)).status_code, status.HTTP_200_OK)
        r = client.post(f"{self._roster(self.centro)}{self.appt.id}/check-in/")
        self.assertEqual(r.status_code, status.HTTP_403_FORBIDDEN)

        self.appt.refresh_from_db()
        self.assertIsNone(self.appt.checked_in_at)

    def test_user_without_role_is_refused_by_roster(self):
        r = self._bearer("norole_auth_test").get(self._roster(self.centro))
        self.assertEqual(r.status_code, status.HTTP_403_FORBIDDEN)

    def test_missing_or_invalid_token_is_401(self):
        self.assertEqual(self.client.get("/api/auth/me/").status_code, status.HTTP_401_UNAUTHORIZED)

        self.client.credentials(HTTP_AUTHORIZATION="Bearer invalid_token_here")
        self.assertEqual(self.client.get(self._roster(self.centro)).status_code, status.HTTP_401_UNAUTHORIZED)

    def test_health_needs_no_token(self):
        r = self.client.get("/api/health/")
        self.assertEqual(r.status_code, status.HTTP_200_OK)
        self.assertEqual(r.json()["status"], "ok")
