"""
Reception-specific exceptions for the appointments app.

These exceptions are raised by the reception state machine and services and
are translated to DRF responses in the views. Guard failures are expected,
user-recoverable outcomes; storage errors (``IntegrityError``,
``ValidationError``) are not wrapped and propagate unchanged.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any


class ReceptionError(Exception):
    """Base exception for all reception guard failures."""

    code = 'reception_error'
    default_message = 'Reception operation refused'

    def __init__(self, message: str | None = None, *, appointment_id: int | None = None):
        self.appointment_id = appointment_id
        super().__init__(message or self.default_message)

    def to_dict(self) -> dict[str, Any]:
        result = {
            'detail': str(self),
            'code': self.code,
        }
        if self.appointment_id is not None:
            result['appointment_id'] = self.appointment_id
        return result


class AppointmentNotFound(ReceptionError):
    """No scheduled appointment with that id exists in the unit."""

    code = 'not_found'
    default_message = 'Appointment not found'


class AppointmentNotApplicable(ReceptionError):
    """
    The appointment exists but is not in a state that allows the transition.

    Attributes:
        state: The appointment's current reception state
        event: The transition that was requested
    """

    code = 'not_applicable'
    default_message = 'Appointment is not in a state that allows this operation'

    def __init__(
        self,
        message: str | None = None,
        *,
        appointment_id: int | None = None,
        state: str | None = None,
        event: str | None = None,
    ):
        self.state = state
        self.event = event
        super().__init__(message, appointment_id=appointment_id)

    def to_dict(self) -> dict[str, Any]:
        result = super().to_dict()
        if self.state:
            result['state'] = self.state
        if self.event:
            result['event'] = self.event
        return result


class OutsideCheckInWindow(ReceptionError):
    """
    Raised when check-in is attempted outside the allowed window.

    Attributes:
        opens_at: First moment check-in is allowed
        closes_at: Last moment check-in is allowed
    """

    code = 'outside_check_in_window'
    default_message = 'Check-in is not allowed at this time'

    def __init__(
        self,
        message: str | None = None,
        *,
        appointment_id: int | None = None,
        opens_at: datetime | None = None,
        closes_at: datetime | None = None,
    ):
        self.opens_at = opens_at
        self.closes_at = closes_at
        super().__init__(message, appointment_id=appointment_id)

    def to_dict(self) -> dict[str, Any]:
        result = super().to_dict()
        if self.opens_at is not None:
            result['opens_at'] = self.opens_at.isoformat()
        if self.closes_at is not None:
            result['closes_at'] = self.closes_at.isoformat()
        return result


class MissingVaccineSelection(ReceptionError):
    """Check-out requested without a vaccine that resolves in the catalog."""

    code = 'missing_vaccine_selection'
    default_message = 'Select the administered vaccine'

    def __init__(self, message: str | None = None, *, appointment_id: int | None = None, vaccine_id: Any = None):
        self.vaccine_id = vaccine_id
        super().__init__(message, appointment_id=appointment_id)
