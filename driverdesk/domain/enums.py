"""Domain enumerations and state-transition rules."""

import enum


class TripStatus(str, enum.Enum):
    PENDING = "pending"
    ACCEPTED = "accepted"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


# State machine: maps current status -> set of valid next statuses.
# An accepted trip can only be completed; decline is pre-accept only.
TRIP_TRANSITIONS: dict[TripStatus, set[TripStatus]] = {
    TripStatus.PENDING: {TripStatus.ACCEPTED, TripStatus.CANCELLED},
    TripStatus.ACCEPTED: {TripStatus.COMPLETED},
    TripStatus.COMPLETED: set(),
    TripStatus.CANCELLED: set(),
}


class VehicleType(str, enum.Enum):
    MOTORCYCLE = "motorcycle"
    CAR = "car"
    UNSET = "unset"


class DocumentKind(str, enum.Enum):
    ID_CARD = "id_card"
    DRIVING_LICENSE = "driving_license"
    VEHICLE_REGISTRATION = "vehicle_registration"


class VerificationState(str, enum.Enum):
    UNVERIFIED = "unverified"
    PENDING = "pending"
    VERIFIED = "verified"


class BalancePolicy(str, enum.Enum):
    WARN = "warn"
    BLOCK = "block"


class PaymentMethod(str, enum.Enum):
    BANK = "bank"
    CREDIT_CARD = "credit_card"
    CRYPTO = "crypto"
    PI = "pi"


class PaymentStatus(str, enum.Enum):
    PENDING = "pending"
    VERIFIED = "verified"
    REJECTED = "rejected"


class LedgerEntryKind(str, enum.Enum):
    CREDIT = "credit"
    DEBIT = "debit"


class Notice(str, enum.Enum):
    """Non-blocking advisories surfaced to the driver (toast equivalents)."""

    LOW_BALANCE = "low_balance"
    VERIFICATION_REQUIRED = "verification_required"
    DOCUMENT_UPLOADED = "document_uploaded"
    VERIFICATION_SUBMITTED = "verification_submitted"
    VERIFICATION_APPROVED = "verification_approved"
    PLATFORM_FEE_CHARGED = "platform_fee_charged"
    PERSISTENCE_UNAVAILABLE = "persistence_unavailable"
