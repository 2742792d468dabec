"""
Background Dispatch Worker
==========================

Runs every ``DISPATCH_INTERVAL_SECONDS`` (default 5 s).

Each cycle pulls new offers from the configured dispatch feed for every
online driver and appends them to that driver's trip queue.  Offline
drivers are skipped; their offers stay in the feed until they go online.
Duplicate offer ids are ignored by the queue.
"""

from __future__ import annotations

import asyncio
import logging

from driverdesk.config import settings
from driverdesk.domain.session import DriverSession
from driverdesk.infrastructure.dispatch_feed import DispatchFeed
from driverdesk.infrastructure.repositories import DriverSessionRepository

logger = logging.getLogger(__name__)

_task: asyncio.Task | None = None
_stop_event: asyncio.Event | None = None


# ── Public API ────────────────────────────────────────────────────────


async def start_dispatch_loop(
    registry: DriverSessionRepository, feed: DispatchFeed
) -> None:
    global _task, _stop_event
    _stop_event = asyncio.Event()
    _task = asyncio.create_task(_loop(registry, feed))
    logger.info(
        "Dispatch worker started (interval=%ds)", settings.dispatch_interval_seconds
    )


async def stop_dispatch_loop() -> None:
    if _stop_event:
        _stop_event.set()
    if _task:
        _task.cancel()
        try:
            await _task
        except asyncio.CancelledError:
            pass
    logger.info("Dispatch worker stopped")


async def deliver_offers(session: DriverSession, feed: DispatchFeed) -> int:
    """Pull offers for one driver into its queue.  Returns how many were new."""
    offers = await feed.pull(session.driver_id)
    return sum(session.queue.offer(trip) for trip in offers)


async def run_dispatch_cycle(
    registry: DriverSessionRepository, feed: DispatchFeed
) -> int:
    """Execute one dispatch cycle.  Returns the number of offers delivered."""
    delivered = 0
    for session in registry.online():
        try:
            delivered += await deliver_offers(session, feed)
        except Exception:
            logger.exception("Dispatch pull failed for driver=%s", session.driver_id)
    if delivered:
        logger.info("Dispatch cycle: %d offers delivered", delivered)
    return delivered


# ── Internals ─────────────────────────────────────────────────────────


async def _loop(registry: DriverSessionRepository, feed: DispatchFeed) -> None:
    """Periodic loop: run a dispatch cycle then sleep."""
    assert _stop_event is not None
    while not _stop_event.is_set():
        try:
            await run_dispatch_cycle(registry, feed)
        except Exception:
            logger.exception("Unhandled error in dispatch cycle")
        # Wait for the interval or until stop is signalled
        try:
            await asyncio.wait_for(
                _stop_event.wait(), timeout=settings.dispatch_interval_seconds
            )
            break
        except asyncio.TimeoutError:
            pass  # next cycle
