"""
Driver session controller.

One ``DriverSession`` owns the verification gate, the balance ledger and
the trip state machine of a single driver.  Handlers receive the session
explicitly; nothing in the domain is a module-level singleton.

Offers are only visible to, and accepted by, an online driver.

Balance policy
--------------
A zero balance is checked the same way when going online and when
accepting a trip:

* ``BalancePolicy.WARN``  -- proceed and return ``Notice.LOW_BALANCE``.
* ``BalancePolicy.BLOCK`` -- refuse with ``InsufficientBalance``.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional

from .entities import TripRequest
from .enums import BalancePolicy, Notice
from .errors import DriverOffline, InsufficientBalance
from .ledger import BalanceLedger
from .trip_queue import TripRequestQueue
from .trips import CompletionReceipt, TripStateMachine
from .verification import VerificationGate


@dataclass
class DriverSession:
    driver_id: str
    name: str = ""
    gate: VerificationGate = field(default_factory=VerificationGate)
    ledger: BalanceLedger = field(default_factory=BalanceLedger)
    queue: TripRequestQueue = field(default_factory=TripRequestQueue)
    policy: BalancePolicy = BalancePolicy.WARN
    trips: TripStateMachine = field(init=False)

    def __post_init__(self) -> None:
        self.trips = TripStateMachine(self.queue, self.ledger)

    @property
    def online(self) -> bool:
        return self.gate.online

    @property
    def active_trip(self) -> Optional[TripRequest]:
        return self.queue.active

    def notices(self) -> list[Notice]:
        return [] if self.ledger.can_go_online() else [Notice.LOW_BALANCE]

    def go_online(self) -> list[Notice]:
        self.gate.require_verified()
        notices = self._check_balance()
        self.gate.go_online()
        return notices

    def go_offline(self) -> None:
        self.gate.go_offline()

    def pending_offers(self) -> tuple[TripRequest, ...]:
        """Pending offers; an offline driver sees none."""
        return self.queue.list_pending() if self.online else ()

    def accept(self, trip_id: str) -> tuple[TripRequest, list[Notice]]:
        self.gate.require_verified()
        if not self.online:
            raise DriverOffline("Go online before accepting trips")
        notices = self._check_balance()
        return self.trips.accept(trip_id), notices

    def decline(self, trip_id: str) -> TripRequest:
        return self.trips.decline(trip_id)

    def complete(self, trip_id: str) -> CompletionReceipt:
        return self.trips.complete(trip_id)

    def _check_balance(self) -> list[Notice]:
        if self.ledger.can_go_online():
            return []
        if self.policy == BalancePolicy.BLOCK:
            raise InsufficientBalance(
                "Add balance before accepting trips; a platform fee of "
                f"{self.ledger.platform_fee} is deducted per completed trip"
            )
        return [Notice.LOW_BALANCE]
