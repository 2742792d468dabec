"""FastAPI dependency injection helpers."""

from fastapi import Request

from driverdesk.domain.session import DriverSession
from driverdesk.infrastructure.dispatch_feed import DispatchFeed
from driverdesk.infrastructure.notifications import PaymentNotifier
from driverdesk.infrastructure.repositories import DriverSessionRepository
from driverdesk.infrastructure.tasks import TaskScheduler


def get_registry(request: Request) -> DriverSessionRepository:
    return request.app.state.registry


def get_scheduler(request: Request) -> TaskScheduler:
    return request.app.state.scheduler


def get_notifier(request: Request) -> PaymentNotifier:
    return request.app.state.notifier


def get_feed(request: Request) -> DispatchFeed:
    return request.app.state.feed


def get_session(driver_id: str, request: Request) -> DriverSession:
    """Resolve the ``{driver_id}`` path parameter to its live session."""
    return get_registry(request).get(driver_id)
