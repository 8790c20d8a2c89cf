"""Vaccine catalog.

A vaccine carries its own regimen rule: how many doses make up the regimen
and how long to wait after each dose before the next one. Vaccines sharing a
``regimen_family`` count towards the same dose sequence for a patient (e.g.
two brands that are interchangeable within one schedule).
"""

from __future__ import annotations

from datetime import timedelta

from django.core.exceptions import ValidationError
from django.db import models


class Vaccine(models.Model):
	"""A vaccine and its dose regimen.

	``dose_intervals_days[n - 1]`` is the number of days between dose ``n``
	and dose ``n + 1``. When the list is shorter than ``doses_required - 1``
	the last interval repeats.
	"""
	name = models.CharField(max_length=100, unique=True)
	regimen_family = models.CharField(max_length=100, blank=True, db_index=True)
	doses_required = models.PositiveSmallIntegerField(default=1)
	dose_intervals_days = models.JSONField(default=list, blank=True)
	created_at = models.DateTimeField(auto_now_add=True)
	updated_at = models.DateTimeField(auto_now=True)

	class Meta:
		ordering = ["name", "id"]
		constraints = [
			models.CheckConstraint(
				condition=models.Q(doses_required__gte=1),
				name="vaccine_doses_required_positive",
			),
		]

	def __str__(self) -> str:
		return self.name

	def save(self, *args, **kwargs):
		if not self.regimen_family:
			self.regimen_family = self.name
		super().save(*args, **kwargs)

	def clean(self):
		super().clean()
		intervals = self.dose_intervals_days
		if not isinstance(intervals, list) or any(
			isinstance(days, bool) or not isinstance(days, int) or days < 0 for days in intervals
		):
			raise ValidationError({"dose_intervals_days": "Intervals must be a list of non-negative whole days."})
		if self.doses_required > 1 and not intervals:
			raise ValidationError({"dose_intervals_days": "A multi-dose regimen needs at least one interval."})

	def has_next_dose(self, sequence_number: int) -> bool:
		return sequence_number < self.doses_required

	def next_dose_interval(self, sequence_number: int) -> timedelta | None:
		"""Interval between dose ``sequence_number`` and the following dose.

		Returns None once the regimen is complete.
		"""
		if sequence_number < 1:
			raise ValueError("sequence_number is 1-based")
		if not self.has_next_dose(sequence_number):
			return None
		intervals = self.dose_intervals_days or []
		if not intervals:
			raise ValueError(f"Vaccine {self.pk} has no dose intervals configured")
		days = intervals[min(sequence_number, len(intervals)) - 1]
		return timedelta(days=days)
