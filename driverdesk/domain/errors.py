"""
Typed rejections raised by domain operations.

Every error carries a stable machine ``code``; the API layer maps error
types to HTTP statuses and never inspects messages.
"""

from __future__ import annotations


class DomainError(Exception):
    code = "domain_error"


class NotVerified(DomainError):
    """Raised when a gated action is attempted before verification."""

    code = "not_verified"


class DriverOffline(DomainError):
    """Raised when a driver acts on trip offers without being online."""

    code = "driver_offline"


class MissingField(DomainError):
    code = "missing_field"

    def __init__(self, fields: list[str]):
        self.fields = list(fields)
        super().__init__(f"Missing required fields: {', '.join(self.fields)}")


class ProfileLocked(DomainError):
    code = "profile_locked"


class AlreadyHasActiveTrip(DomainError):
    code = "already_has_active_trip"

    def __init__(self, active_trip_id: str):
        self.active_trip_id = active_trip_id
        super().__init__(f"Trip {active_trip_id} is already active")


class InsufficientBalance(DomainError):
    code = "insufficient_balance"


class InvalidDepositAmount(DomainError):
    code = "invalid_deposit_amount"


class DepositAlreadySettled(DomainError):
    code = "deposit_already_settled"


class InvalidRating(DomainError):
    code = "invalid_rating"


class InvalidStateTransition(DomainError):
    """Raised when a trip status change violates the state machine."""

    code = "invalid_state_transition"


class TripNotFound(DomainError):
    code = "trip_not_found"


class DriverNotFound(DomainError):
    code = "driver_not_found"


class DepositNotFound(DomainError):
    code = "deposit_not_found"


class PersistenceUnavailable(DomainError):
    """The optional notification store could not be reached."""

    code = "persistence_unavailable"
