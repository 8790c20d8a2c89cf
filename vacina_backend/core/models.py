from datetime import timedelta

from django.conf import settings
from django.contrib.auth.models import AbstractUser
from django.db import models


class Role(models.Model):
    """User roles for RBAC (Role-Based Access Control).

    Standard roles: admin, operator, nurse, auditor
    """

    name = models.CharField(max_length=64, unique=True, db_index=True)
    label = models.CharField(max_length=128)

    class Meta:
        db_table = 'core_role'
        ordering = ['name']
        verbose_name = 'Role'
        verbose_name_plural = 'Roles'

    def __str__(self) -> str:
        return self.label


class HealthUnitQuerySet(models.QuerySet):
    def for_user(self, user):
        """Units the given operator may act on.

        Admins see every active unit; everyone else only the units they are
        assigned to.
        """
        if user is None or not getattr(user, 'is_authenticated', False):
            return self.none()
        qs = self.filter(active=True)
        role_name = getattr(getattr(user, 'role', None), 'name', None)
        if role_name == 'admin':
            return qs
        return qs.filter(operators=user)


class HealthUnit(models.Model):
    """A health unit (UBS) where vaccination appointments take place.

    The check-in window offsets are optional; when unset the project-wide
    defaults from settings apply.
    """

    name = models.CharField(max_length=200)
    active = models.BooleanField(default=True)
    check_in_opens_minutes_before = models.PositiveIntegerField(null=True, blank=True)
    check_in_closes_minutes_after = models.PositiveIntegerField(null=True, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    objects = HealthUnitQuerySet.as_manager()

    class Meta:
        db_table = 'core_healthunit'
        ordering = ['name', 'id']
        verbose_name = 'Health unit'
        verbose_name_plural = 'Health units'

    def __str__(self) -> str:
        return self.name

    @property
    def check_in_opens_before(self) -> timedelta:
        minutes = self.check_in_opens_minutes_before
        if minutes is None:
            minutes = settings.VACINA_CHECK_IN_OPENS_MINUTES_BEFORE
        return timedelta(minutes=minutes)

    @property
    def check_in_closes_after(self) -> timedelta:
        minutes = self.check_in_closes_minutes_after
        if minutes is None:
            minutes = settings.VACINA_CHECK_IN_CLOSES_MINUTES_AFTER
        return timedelta(minutes=minutes)


class User(AbstractUser):
    """Custom User model with role-based access control.

    Extends Django's AbstractUser with:
    - role: ForeignKey to Role for RBAC
    - units: health units the operator works at
    - email: Made unique (required for JWT auth)
    """

    email = models.EmailField('email address', blank=True, unique=True)
    role = models.ForeignKey(
        Role,
        null=True,
        blank=True,
        on_delete=models.PROTECT,
        related_name='users',
    )
    units = models.ManyToManyField(
        HealthUnit,
        blank=True,
        related_name='operators',
    )

    class Meta:
        db_table = 'core_user'
        ordering = ['username']
        verbose_name = 'User'
        verbose_name_plural = 'Users'


class AuditLog(models.Model):
    """Audit log for patient-related actions.

    Tracks who accessed/modified patient data and when.
    """

    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='audit_logs',
    )
    role_name = models.CharField(max_length=50, db_index=True)
    action = models.CharField(max_length=50, db_index=True)
    patient_id = models.IntegerField(null=True, blank=True, db_index=True)
    timestamp = models.DateTimeField(auto_now_add=True, db_index=True)
    meta = models.JSONField(null=True, blank=True)

    class Meta:
        db_table = 'core_auditlog'
        ordering = ['-timestamp', '-id']
        verbose_name = 'Audit Log'
        verbose_name_plural = 'Audit Logs'
        indexes = [
            models.Index(fields=['action', 'timestamp'], name='core_audit_action_ts_idx'),
            models.Index(fields=['patient_id', 'timestamp'], name='core_audit_patient_ts_idx'),
        ]

    def __str__(self) -> str:
        return f"{self.timestamp} {self.action} (patient_id={self.patient_id})"
