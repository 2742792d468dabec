"""
Verification Gate
=================

Decides whether a driver may go online or accept trips.

State machine
-------------
  unverified --(vehicle + 3 documents + plate, submit)--> pending
  pending    --(approve)--------------------------------> verified
  verified   --(vehicle type changed)-------------------> unverified

Uploads are not inspected: any non-empty file counts as present.  A
verified profile is locked; the only way back is changing vehicle type,
which re-opens the gate and forces the driver offline.
"""

from __future__ import annotations

from .entities import DriverProfile
from .enums import DocumentKind, Notice, VehicleType, VerificationState
from .errors import InvalidStateTransition, MissingField, NotVerified, ProfileLocked


class VerificationGate:
    def __init__(
        self,
        profile: DriverProfile | None = None,
        instant_verification: bool = True,
    ):
        self.profile = profile or DriverProfile()
        self.instant_verification = instant_verification
        self.online = False

    @property
    def is_verified(self) -> bool:
        return self.profile.is_verified

    # ── Onboarding ────────────────────────────────────────────────

    def choose_vehicle(self, vehicle_type: VehicleType) -> list[Notice]:
        """Set the vehicle type; a change after verification re-opens the gate."""
        if vehicle_type == self.profile.vehicle_type:
            return []
        self.profile.vehicle_type = vehicle_type
        if self.profile.verification_state == VerificationState.UNVERIFIED:
            return []
        self.profile.verification_state = VerificationState.UNVERIFIED
        self.online = False
        return [Notice.VERIFICATION_REQUIRED]

    def submit_document(
        self, kind: DocumentKind, filename: str, content: bytes
    ) -> list[Notice]:
        self._ensure_editable()
        if not content:
            raise MissingField([kind.value])
        self.profile.documents[kind] = filename
        return [Notice.DOCUMENT_UPLOADED]

    def set_vehicle_details(
        self, plate_number: str, brand: str = "", model: str = ""
    ) -> None:
        self._ensure_editable()
        self.profile.plate_number = plate_number.strip()
        self.profile.vehicle_brand = brand.strip()
        self.profile.vehicle_model = model.strip()

    def complete_onboarding(self) -> list[Notice]:
        """
        Validate the whole profile and submit it for review.

        Raises ``MissingField`` listing every absent field; nothing is
        applied on failure.  With instant verification the review is
        approved on the spot.  A profile already under review or verified
        is left as is.
        """
        if self.profile.verification_state != VerificationState.UNVERIFIED:
            return []
        missing = self.profile.missing_fields()
        if missing:
            raise MissingField(missing)
        self.profile.verification_state = VerificationState.PENDING
        notices = [Notice.VERIFICATION_SUBMITTED]
        if self.instant_verification:
            notices += self.approve()
        return notices

    def approve(self) -> list[Notice]:
        """Approve a pending review.  Re-checks the verification invariant."""
        if self.profile.verification_state != VerificationState.PENDING:
            raise InvalidStateTransition("No verification review is pending")
        missing = self.profile.missing_fields()
        if missing:
            raise MissingField(missing)
        self.profile.verification_state = VerificationState.VERIFIED
        return [Notice.VERIFICATION_APPROVED]

    # ── Online toggle ─────────────────────────────────────────────

    def require_verified(self) -> None:
        if not self.is_verified:
            raise NotVerified(
                f"Driver verification is {self.profile.verification_state.value}"
            )

    def go_online(self) -> None:
        self.require_verified()
        self.online = True

    def go_offline(self) -> None:
        self.online = False

    def _ensure_editable(self) -> None:
        if self.is_verified:
            raise ProfileLocked("Verified profiles cannot be edited")
