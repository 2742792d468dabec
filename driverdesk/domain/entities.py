"""
Domain entities with business logic.

Patterns used
-------------
- **State Pattern** on ``TripRequest``: enforces valid lifecycle transitions
  (pending -> accepted -> completed, pending -> cancelled).
- ``DriverProfile.missing_fields`` encapsulates the verification invariant.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Optional

from .enums import (
    TRIP_TRANSITIONS,
    DocumentKind,
    LedgerEntryKind,
    PaymentMethod,
    PaymentStatus,
    TripStatus,
    VehicleType,
    VerificationState,
)
from .errors import InvalidStateTransition


# Order in which missing onboarding fields are reported
ONBOARDING_FIELDS = (
    "vehicle_type",
    DocumentKind.ID_CARD.value,
    DocumentKind.DRIVING_LICENSE.value,
    DocumentKind.VEHICLE_REGISTRATION.value,
    "plate_number",
)


# ── Value Objects ─────────────────────────────────────────────────────


@dataclass(frozen=True)
class Passenger:
    name: str
    rating: float = 5.0

    def __post_init__(self) -> None:
        if not 0 <= self.rating <= 5:
            raise ValueError(f"Passenger rating out of range: {self.rating}")


@dataclass(frozen=True)
class LedgerEntry:
    kind: LedgerEntryKind
    amount: int
    balance_after: int
    shortfall: int = 0
    reference: Optional[str] = None


@dataclass(frozen=True)
class PassengerRating:
    trip_id: str
    stars: int
    comment: str = ""


# ── Entities ──────────────────────────────────────────────────────────


@dataclass
class DriverProfile:
    vehicle_type: VehicleType = VehicleType.UNSET
    documents: dict[DocumentKind, str] = field(default_factory=dict)
    plate_number: str = ""
    vehicle_brand: str = ""
    vehicle_model: str = ""
    verification_state: VerificationState = VerificationState.UNVERIFIED

    @property
    def is_verified(self) -> bool:
        return self.verification_state == VerificationState.VERIFIED

    def missing_fields(self) -> list[str]:
        present = {kind.value for kind in self.documents}
        if self.vehicle_type != VehicleType.UNSET:
            present.add("vehicle_type")
        if self.plate_number.strip():
            present.add("plate_number")
        return [name for name in ONBOARDING_FIELDS if name not in present]


@dataclass
class TripRequest:
    id: str
    passenger: Passenger
    pickup: str
    destination: str
    estimated_distance: str = ""
    estimated_duration: str = ""
    proposed_fare: str = ""
    status: TripStatus = TripStatus.PENDING
    completed_at: Optional[datetime] = None

    def transition_to(self, new_status: TripStatus) -> None:
        """Move to *new_status* if the transition is legal, else raise."""
        allowed = TRIP_TRANSITIONS.get(self.status, set())
        if new_status not in allowed:
            raise InvalidStateTransition(
                f"Cannot transition trip {self.id} from {self.status.value} "
                f"to {new_status.value}"
            )
        self.status = new_status
        if new_status == TripStatus.COMPLETED:
            self.completed_at = datetime.now(timezone.utc)


@dataclass
class Deposit:
    transaction_id: str
    amount: int
    payment_method: PaymentMethod
    status: PaymentStatus = PaymentStatus.PENDING

    @property
    def is_pending(self) -> bool:
        return self.status == PaymentStatus.PENDING
