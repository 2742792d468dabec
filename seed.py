"""
Seed script -- pushes sample trip offers onto the Redis dispatch feed.

Run against a driver session created through the API:
    python seed.py <driver_id>

Creates:
  - the two demo offers (TR-1001, TR-1002)
  - 4 extra offers around Jakarta with generated ids

The API must run with ``DISPATCH_BACKEND=redis`` for the offers to reach
the driver's queue; they are delivered on the next dispatch cycle or when
the driver goes online.
"""

import asyncio
import sys

from driverdesk.config import settings
from driverdesk.infrastructure.dispatch_feed import SEED_OFFERS, RedisDispatchFeed
from driverdesk.infrastructure.redis_client import get_redis

EXTRA_OFFERS = [
    {"passenger": {"name": "Andi Wijaya", "rating": 4.9},
     "pickup": "Blok M Square", "destination": "Senayan City",
     "estimated_distance": "3.1 km", "estimated_duration": "12 min",
     "proposed_fare": "Rp 18,000"},
    {"passenger": {"name": "Dewi Lestari", "rating": 4.7},
     "pickup": "Kemang Village", "destination": "Pondok Indah Mall",
     "estimated_distance": "7.8 km", "estimated_duration": "25 min",
     "proposed_fare": "Rp 41,000"},
    {"passenger": {"name": "Rizky Pratama", "rating": 4.2},
     "pickup": "Stasiun Manggarai", "destination": "Universitas Indonesia, Depok",
     "estimated_distance": "21.5 km", "estimated_duration": "50 min",
     "proposed_fare": "Rp 96,000"},
    {"passenger": {"name": "Putri Maharani", "rating": 5.0},
     "pickup": "Ancol Dreamland", "destination": "Mangga Dua Square",
     "estimated_distance": "5.4 km", "estimated_duration": "17 min",
     "proposed_fare": "Rp 27,000"},
]


async def seed(driver_id: str) -> None:
    if settings.dispatch_backend != "redis":
        print("WARNING: DISPATCH_BACKEND is not 'redis'; the API will not read these offers.")

    feed = RedisDispatchFeed(await get_redis())
    offers = list(SEED_OFFERS)
    for i, extra in enumerate(EXTRA_OFFERS, start=1003):
        offers.append({"id": f"TR-{i}", **extra})

    for offer in offers:
        await feed.push(driver_id, offer)
    print(f"Pushed {len(offers)} offers to {feed.key_for(driver_id)}")


if __name__ == "__main__":
    if len(sys.argv) != 2:
        sys.exit("usage: python seed.py <driver_id>")
    asyncio.run(seed(sys.argv[1]))
