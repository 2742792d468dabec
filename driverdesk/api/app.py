"""
FastAPI application factory.

* Registers routes for drivers, trips, payments and admin.
* Owns the per-process state: driver sessions, the task scheduler, the
  payment notifier and the dispatch feed (``app.state``).
* Starts / stops the background dispatch worker via lifespan events and
  cancels every scheduled task on shutdown.
* Configures logging once per app instance.
* Applies rate-limiting middleware and maps domain errors to responses.
* Swagger / OpenAPI UI available at ``/docs``.
"""

from contextlib import asynccontextmanager
import logging

from fastapi import FastAPI
from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded

from driverdesk.api.errors import domain_error_handler
from driverdesk.api.middleware import limiter
from driverdesk.api.routes import admin, drivers, payments, trips
from driverdesk.config import settings
from driverdesk.domain.enums import BalancePolicy
from driverdesk.domain.errors import DomainError
from driverdesk.infrastructure.database import async_session_factory
from driverdesk.infrastructure.dispatch_feed import (
    DispatchFeed,
    RedisDispatchFeed,
    SeedDispatchFeed,
)
from driverdesk.infrastructure.notifications import PaymentNotifier
from driverdesk.infrastructure.redis_client import get_client
from driverdesk.infrastructure.repositories import DriverSessionRepository
from driverdesk.infrastructure.tasks import TaskScheduler
from driverdesk.workers import dispatcher as _dispatcher


def _build_feed() -> DispatchFeed:
    if settings.dispatch_backend == "redis":
        return RedisDispatchFeed(get_client())
    return SeedDispatchFeed()


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Start the dispatch worker on startup; stop it and pending tasks on shutdown."""
    await _dispatcher.start_dispatch_loop(app.state.registry, app.state.feed)
    yield
    await _dispatcher.stop_dispatch_loop()
    await app.state.scheduler.shutdown()


def create_app() -> FastAPI:
    logging.basicConfig(level=settings.log_level.upper())

    app = FastAPI(
        title="DriverDesk API",
        description=(
            "Driver trip and balance lifecycle: verification gating, "
            "trip offers, platform fee deduction and deposits."
        ),
        version="1.0.0",
        lifespan=lifespan,
    )

    app.state.registry = DriverSessionRepository(
        minimum_deposit=settings.minimum_deposit,
        platform_fee=settings.platform_fee,
        policy=BalancePolicy(settings.balance_policy),
        instant_verification=settings.instant_verification,
    )
    app.state.scheduler = TaskScheduler()
    app.state.notifier = PaymentNotifier(
        async_session_factory, enabled=settings.notifications_enabled
    )
    app.state.feed = _build_feed()

    # Rate limiter
    app.state.limiter = limiter
    app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)
    app.add_exception_handler(DomainError, domain_error_handler)

    # Routers
    app.include_router(drivers.router, prefix="/api/v1")
    app.include_router(trips.router, prefix="/api/v1")
    app.include_router(payments.router, prefix="/api/v1")
    app.include_router(admin.router, prefix="/api/v1")

    return app
