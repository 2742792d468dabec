"""
Dispatch feed adapters.

The core never matches riders to drivers; it only consumes offers that an
external dispatcher has already addressed to a driver.

* ``SeedDispatchFeed``  -- the static demo offers, delivered once per driver.
* ``RedisDispatchFeed`` -- pops JSON offers from ``dispatch:offers:{driver_id}``
  (an ``RPUSH``-ed list written by the dispatcher).
"""

from __future__ import annotations

import json
import logging
from abc import ABC, abstractmethod
from typing import Any

import redis.asyncio as aioredis

from driverdesk.domain.entities import Passenger, TripRequest

logger = logging.getLogger(__name__)

SEED_OFFERS: list[dict[str, Any]] = [
    {
        "id": "TR-1001",
        "passenger": {"name": "Budi Santoso", "rating": 4.8},
        "pickup": "Grand Indonesia Mall, Jakarta",
        "destination": "Soekarno-Hatta Airport Terminal 3",
        "estimated_distance": "28.4 km",
        "estimated_duration": "45 min",
        "proposed_fare": "Rp 185,000",
    },
    {
        "id": "TR-1002",
        "passenger": {"name": "Siti Rahayu", "rating": 4.6},
        "pickup": "Stasiun Gambir",
        "destination": "Kota Tua, Jakarta Barat",
        "estimated_distance": "6.2 km",
        "estimated_duration": "18 min",
        "proposed_fare": "Rp 32,000",
    },
]


def trip_from_payload(payload: dict[str, Any]) -> TripRequest:
    """Build a pending ``TripRequest`` from a dispatcher payload."""
    passenger = payload.get("passenger") or {}
    return TripRequest(
        id=str(payload["id"]),
        passenger=Passenger(
            name=passenger.get("name", ""),
            rating=float(passenger.get("rating", 5.0)),
        ),
        pickup=payload.get("pickup", ""),
        destination=payload.get("destination", ""),
        estimated_distance=payload.get("estimated_distance", ""),
        estimated_duration=payload.get("estimated_duration", ""),
        proposed_fare=payload.get("proposed_fare", ""),
    )


class DispatchFeed(ABC):
    @abstractmethod
    async def pull(self, driver_id: str) -> list[TripRequest]:
        """Return offers addressed to *driver_id* that were not delivered yet."""

    def forget(self, driver_id: str) -> None:
        """Drop any per-driver delivery state when a session is torn down."""


class SeedDispatchFeed(DispatchFeed):
    def __init__(self, offers: list[dict[str, Any]] | None = None):
        self.offers = SEED_OFFERS if offers is None else offers
        self._delivered: set[str] = set()

    async def pull(self, driver_id: str) -> list[TripRequest]:
        if driver_id in self._delivered:
            return []
        self._delivered.add(driver_id)
        return [trip_from_payload(o) for o in self.offers]

    def forget(self, driver_id: str) -> None:
        self._delivered.discard(driver_id)


class RedisDispatchFeed(DispatchFeed):
    def __init__(self, client: aioredis.Redis, batch_size: int = 20):
        self.redis = client
        self.batch_size = batch_size

    @staticmethod
    def key_for(driver_id: str) -> str:
        return f"dispatch:offers:{driver_id}"

    async def pull(self, driver_id: str) -> list[TripRequest]:
        raw = await self.redis.lpop(self.key_for(driver_id), self.batch_size)
        trips: list[TripRequest] = []
        for item in raw or []:
            try:
                trips.append(trip_from_payload(json.loads(item)))
            except (ValueError, KeyError, TypeError):
                logger.warning("Dropping malformed offer for %s: %r", driver_id, item)
        return trips

    async def push(self, driver_id: str, payload: dict[str, Any]) -> None:
        await self.redis.rpush(self.key_for(driver_id), json.dumps(payload))
