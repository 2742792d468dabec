"""
Trip Request Queue
==================

Holds the trip offers delivered by the dispatch feed, in arrival order.

Invariant: at most one trip is ``accepted`` at a time.  Declined trips are
dropped outright; no record of them is kept.
"""

from __future__ import annotations

from typing import Optional

from .entities import TripRequest
from .enums import TripStatus
from .errors import AlreadyHasActiveTrip, TripNotFound


class TripRequestQueue:
    def __init__(self, trips: list[TripRequest] | None = None):
        # dicts preserve insertion order, which is arrival order here
        self._trips: dict[str, TripRequest] = {}
        for trip in trips or []:
            self.offer(trip)

    def __len__(self) -> int:
        return len(self._trips)

    def __contains__(self, trip_id: str) -> bool:
        return trip_id in self._trips

    def offer(self, trip: TripRequest) -> bool:
        """Append a pending offer.  Returns False for a duplicate id."""
        if trip.id in self._trips or trip.status != TripStatus.PENDING:
            return False
        self._trips[trip.id] = trip
        return True

    def list_pending(self) -> tuple[TripRequest, ...]:
        """Snapshot of pending trips, re-derived on every call."""
        return tuple(
            t for t in self._trips.values() if t.status == TripStatus.PENDING
        )

    @property
    def active(self) -> Optional[TripRequest]:
        for trip in self._trips.values():
            if trip.status == TripStatus.ACCEPTED:
                return trip
        return None

    def get(self, trip_id: str) -> TripRequest:
        try:
            return self._trips[trip_id]
        except KeyError:
            raise TripNotFound(f"Trip {trip_id} not found") from None

    def accept(self, trip_id: str) -> TripRequest:
        trip = self.get(trip_id)
        active = self.active
        if active is not None:
            raise AlreadyHasActiveTrip(active.id)
        trip.transition_to(TripStatus.ACCEPTED)
        return trip

    def decline(self, trip_id: str) -> TripRequest:
        trip = self.get(trip_id)
        trip.transition_to(TripStatus.CANCELLED)
        del self._trips[trip_id]
        return trip

    def release(self, trip_id: str) -> TripRequest:
        """Drop a finished trip from the queue, clearing the active pointer."""
        return self._trips.pop(trip_id)
