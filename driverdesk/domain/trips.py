"""
Trip State Machine
==================

Drives a single trip through its lifecycle and applies the side effects
of each transition::

    pending --accept--> accepted --complete--> completed
    pending --decline-> cancelled (removed from the queue)

``complete`` applies, in order:

1. debit the platform fee from the ledger,
2. clear the active-trip pointer,
3. hand the trip to the passenger rating step.

There is no transition out of ``accepted`` other than ``complete``.
"""

from __future__ import annotations

from dataclasses import dataclass

from .entities import LedgerEntry, PassengerRating, TripRequest
from .enums import TripStatus
from .errors import InvalidRating, InvalidStateTransition, TripNotFound
from .ledger import BalanceLedger
from .trip_queue import TripRequestQueue


@dataclass(frozen=True)
class CompletionReceipt:
    trip: TripRequest
    fee: LedgerEntry

    @property
    def balance_after(self) -> int:
        return self.fee.balance_after


class TripStateMachine:
    def __init__(self, queue: TripRequestQueue, ledger: BalanceLedger):
        self.queue = queue
        self.ledger = ledger
        self._history: list[TripRequest] = []
        self._awaiting_rating: dict[str, TripRequest] = {}
        self.ratings: list[PassengerRating] = []

    def accept(self, trip_id: str) -> TripRequest:
        return self.queue.accept(trip_id)

    def decline(self, trip_id: str) -> TripRequest:
        return self.queue.decline(trip_id)

    def complete(self, trip_id: str) -> CompletionReceipt:
        trip = self._lookup(trip_id)
        if trip.status != TripStatus.ACCEPTED:
            raise InvalidStateTransition(
                f"Trip {trip_id} is {trip.status.value}, not accepted"
            )
        fee = self.ledger.charge_platform_fee(trip.id)
        trip.transition_to(TripStatus.COMPLETED)
        self.queue.release(trip.id)
        self._history.append(trip)
        self._awaiting_rating[trip.id] = trip
        return CompletionReceipt(trip=trip, fee=fee)

    def rate_passenger(
        self, trip_id: str, stars: int, comment: str = ""
    ) -> PassengerRating:
        if trip_id not in self._awaiting_rating:
            self._lookup(trip_id)
            raise InvalidStateTransition(f"Trip {trip_id} is not awaiting a rating")
        if isinstance(stars, bool) or not isinstance(stars, int) or not 1 <= stars <= 5:
            raise InvalidRating("Rating must be between 1 and 5 stars")
        del self._awaiting_rating[trip_id]
        rating = PassengerRating(trip_id=trip_id, stars=stars, comment=comment.strip())
        self.ratings.append(rating)
        return rating

    def awaiting_rating(self) -> list[TripRequest]:
        return list(self._awaiting_rating.values())

    def history(self) -> list[TripRequest]:
        """Completed trips, most recent first."""
        return list(reversed(self._history))

    def _lookup(self, trip_id: str) -> TripRequest:
        if trip_id in self.queue:
            return self.queue.get(trip_id)
        for trip in self._history:
            if trip.id == trip_id:
                return trip
        raise TripNotFound(f"Trip {trip_id} not found")
