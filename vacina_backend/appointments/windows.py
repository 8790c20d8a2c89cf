"""Check-in window: when a waiting appointment may be checked in."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime


@dataclass(frozen=True)
class CheckInWindow:
	"""Closed interval ``[opens_at, closes_at]`` around an appointment start."""
	opens_at: datetime
	closes_at: datetime

	@classmethod
	def for_appointment(cls, appointment) -> "CheckInWindow":
		unit = appointment.unit
		return cls(
			opens_at=appointment.start - unit.check_in_opens_before,
			closes_at=appointment.start + unit.check_in_closes_after,
		)

	def contains(self, moment: datetime) -> bool:
		return self.opens_at <= moment <= self.closes_at
