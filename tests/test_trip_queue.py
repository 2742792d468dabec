"""Unit tests for the trip request queue."""

import pytest

from driverdesk.domain.entities import Passenger, TripRequest
from driverdesk.domain.enums import TripStatus
from driverdesk.domain.errors import (
    AlreadyHasActiveTrip,
    InvalidStateTransition,
    TripNotFound,
)
from driverdesk.domain.trip_queue import TripRequestQueue

from conftest import seed_trips


def _trip(trip_id: str) -> TripRequest:
    return TripRequest(
        id=trip_id,
        passenger=Passenger("Dewi Lestari", 4.9),
        pickup="Blok M Square",
        destination="Senayan City",
        estimated_distance="4.1 km",
        estimated_duration="15 min",
        proposed_fare="Rp 25,000",
    )


class TestOffer:
    def test_arrival_order_is_preserved(self):
        queue = TripRequestQueue(seed_trips())
        queue.offer(_trip("TR-2000"))
        assert [t.id for t in queue.list_pending()] == ["TR-1001", "TR-1002", "TR-2000"]

    def test_duplicate_offer_is_ignored(self):
        queue = TripRequestQueue(seed_trips())
        assert queue.offer(_trip("TR-1001")) is False
        assert len(queue) == 2

    def test_non_pending_offer_is_ignored(self):
        trip = _trip("TR-2001")
        trip.status = TripStatus.CANCELLED
        assert TripRequestQueue().offer(trip) is False

    def test_list_pending_is_a_snapshot(self):
        queue = TripRequestQueue(seed_trips())
        before = queue.list_pending()
        queue.decline("TR-1002")
        assert len(before) == 2
        assert [t.id for t in queue.list_pending()] == ["TR-1001"]


class TestAcceptDecline:
    def test_accept_marks_active(self):
        queue = TripRequestQueue(seed_trips())
        trip = queue.accept("TR-1001")
        assert trip.status == TripStatus.ACCEPTED
        assert queue.active is trip
        assert [t.id for t in queue.list_pending()] == ["TR-1002"]

    def test_only_one_active_trip(self):
        queue = TripRequestQueue(seed_trips())
        queue.accept("TR-1001")
        with pytest.raises(AlreadyHasActiveTrip) as exc:
            queue.accept("TR-1002")
        assert exc.value.active_trip_id == "TR-1001"
        assert queue.get("TR-1002").status == TripStatus.PENDING

    def test_accept_unknown_trip(self):
        with pytest.raises(TripNotFound):
            TripRequestQueue().accept("TR-404")

    def test_decline_removes_trip(self):
        queue = TripRequestQueue(seed_trips())
        trip = queue.decline("TR-1002")
        assert trip.status == TripStatus.CANCELLED
        assert "TR-1002" not in queue
        with pytest.raises(TripNotFound):
            queue.get("TR-1002")

    def test_decline_after_accept_is_rejected(self):
        queue = TripRequestQueue(seed_trips())
        queue.accept("TR-1001")
        with pytest.raises(InvalidStateTransition):
            queue.decline("TR-1001")
        assert queue.active.id == "TR-1001"

    def test_release_clears_active(self):
        queue = TripRequestQueue(seed_trips())
        queue.accept("TR-1001")
        queue.release("TR-1001")
        assert queue.active is None
        assert len(queue) == 1
