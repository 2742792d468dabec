"""Pydantic request / response schemas for the REST API."""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field

from driverdesk.domain.entities import Deposit, LedgerEntry, TripRequest
from driverdesk.domain.enums import (
    Notice,
    PaymentMethod,
    PaymentStatus,
    TripStatus,
    VehicleType,
    VerificationState,
)
from driverdesk.domain.session import DriverSession


# ── Requests ──────────────────────────────────────────────────────────


class DriverCreateRequest(BaseModel):
    name: str = Field("", max_length=120)


class VehicleRequest(BaseModel):
    vehicle_type: VehicleType


class VehicleDetailsRequest(BaseModel):
    plate_number: str = Field(..., max_length=20, examples=["B 1234 CD"])
    vehicle_brand: str = Field("", max_length=60)
    vehicle_model: str = Field("", max_length=60)


class RatingRequest(BaseModel):
    # Range is enforced by the domain so the error code stays consistent
    stars: int
    comment: str = Field("", max_length=500)


class DepositRequest(BaseModel):
    amount: int = Field(..., description="Amount in IDR; minimum applies.")
    payment_method: PaymentMethod = PaymentMethod.BANK


class DepositVerifyRequest(BaseModel):
    verified: bool


# ── Responses ─────────────────────────────────────────────────────────


class PassengerResponse(BaseModel):
    name: str
    rating: float


class TripResponse(BaseModel):
    id: str
    passenger: PassengerResponse
    pickup: str
    destination: str
    estimated_distance: str
    estimated_duration: str
    proposed_fare: str
    status: TripStatus
    completed_at: Optional[datetime] = None

    @classmethod
    def from_trip(cls, trip: TripRequest) -> "TripResponse":
        return cls(
            id=trip.id,
            passenger=PassengerResponse(
                name=trip.passenger.name, rating=trip.passenger.rating
            ),
            pickup=trip.pickup,
            destination=trip.destination,
            estimated_distance=trip.estimated_distance,
            estimated_duration=trip.estimated_duration,
            proposed_fare=trip.proposed_fare,
            status=trip.status,
            completed_at=trip.completed_at,
        )


class TripActionResponse(BaseModel):
    trip: TripResponse
    notices: list[Notice] = []


class CompletionResponse(BaseModel):
    trip: TripResponse
    platform_fee: int
    shortfall: int
    balance: int
    notices: list[Notice] = [Notice.PLATFORM_FEE_CHARGED]


class RatingResponse(BaseModel):
    trip_id: str
    stars: int
    comment: str


class ProfileResponse(BaseModel):
    vehicle_type: VehicleType
    documents: list[str]
    plate_number: str
    vehicle_brand: str
    vehicle_model: str
    verification_state: VerificationState
    missing_fields: list[str]


class DriverResponse(BaseModel):
    id: str
    name: str
    online: bool
    balance: int
    profile: ProfileResponse
    active_trip: Optional[TripResponse] = None
    awaiting_rating: list[str] = []
    notices: list[Notice] = []

    @classmethod
    def from_session(
        cls, session: DriverSession, notices: list[Notice] | None = None
    ) -> "DriverResponse":
        profile = session.gate.profile
        active = session.active_trip
        merged = list(dict.fromkeys([*(notices or []), *session.notices()]))
        return cls(
            id=session.driver_id,
            name=session.name,
            online=session.online,
            balance=session.ledger.amount,
            profile=ProfileResponse(
                vehicle_type=profile.vehicle_type,
                documents=[k.value for k in profile.documents],
                plate_number=profile.plate_number,
                vehicle_brand=profile.vehicle_brand,
                vehicle_model=profile.vehicle_model,
                verification_state=profile.verification_state,
                missing_fields=profile.missing_fields(),
            ),
            active_trip=TripResponse.from_trip(active) if active else None,
            awaiting_rating=[t.id for t in session.trips.awaiting_rating()],
            notices=merged,
        )


class LedgerEntryResponse(BaseModel):
    kind: str
    amount: int
    balance_after: int
    shortfall: int
    reference: Optional[str] = None

    @classmethod
    def from_entry(cls, entry: LedgerEntry) -> "LedgerEntryResponse":
        return cls(
            kind=entry.kind.value,
            amount=entry.amount,
            balance_after=entry.balance_after,
            shortfall=entry.shortfall,
            reference=entry.reference,
        )


class DepositResponse(BaseModel):
    transaction_id: str
    amount: int
    payment_method: PaymentMethod
    status: PaymentStatus
    balance: int
    notices: list[Notice] = []

    @classmethod
    def from_deposit(
        cls, deposit: Deposit, balance: int, notices: list[Notice]
    ) -> "DepositResponse":
        return cls(
            transaction_id=deposit.transaction_id,
            amount=deposit.amount,
            payment_method=deposit.payment_method,
            status=deposit.status,
            balance=balance,
            notices=notices,
        )


class PaymentMethodInfo(BaseModel):
    method: PaymentMethod
    minimum_deposit: int
    enabled: bool = True
    wallets: dict[str, str] = {}
    sandbox: Optional[bool] = None


class DriverSummary(BaseModel):
    id: str
    name: str
    online: bool
    balance: int
    verification_state: VerificationState


class HealthResponse(BaseModel):
    status: str = "ok"


class ErrorResponse(BaseModel):
    detail: str
    code: str
