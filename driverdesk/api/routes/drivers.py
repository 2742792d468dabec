"""
Driver endpoints
================

POST   /api/v1/drivers                              -- open a driver session
GET    /api/v1/drivers/{driver_id}                  -- dashboard status
DELETE /api/v1/drivers/{driver_id}                  -- tear down the session
PUT    /api/v1/drivers/{driver_id}/vehicle          -- choose vehicle type
PUT    /api/v1/drivers/{driver_id}/vehicle-details  -- plate, brand, model
POST   /api/v1/drivers/{driver_id}/documents/{kind} -- upload a document
POST   /api/v1/drivers/{driver_id}/onboarding/complete
POST   /api/v1/drivers/{driver_id}/online
POST   /api/v1/drivers/{driver_id}/offline
POST   /api/v1/drivers/{driver_id}/deposits         -- open a deposit (202)
GET    /api/v1/drivers/{driver_id}/ledger           -- balance history
"""

import logging

from fastapi import APIRouter, Depends, File, Request, UploadFile
from redis.exceptions import RedisError

from driverdesk.api.dependencies import (
    get_feed,
    get_notifier,
    get_registry,
    get_scheduler,
    get_session,
)
from driverdesk.api.middleware import limiter
from driverdesk.api.schemas import (
    DepositRequest,
    DepositResponse,
    DriverCreateRequest,
    DriverResponse,
    LedgerEntryResponse,
    VehicleDetailsRequest,
    VehicleRequest,
)
from driverdesk.config import settings
from driverdesk.domain.enums import DocumentKind
from driverdesk.domain.session import DriverSession
from driverdesk.infrastructure.dispatch_feed import DispatchFeed
from driverdesk.infrastructure.notifications import PaymentNotifier
from driverdesk.infrastructure.repositories import DriverSessionRepository
from driverdesk.infrastructure.tasks import TaskScheduler
from driverdesk.services import deposits
from driverdesk.workers.dispatcher import deliver_offers

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/drivers", tags=["drivers"])


@router.post(
    "",
    status_code=201,
    response_model=DriverResponse,
    summary="Open a driver session",
)
@limiter.limit("100/minute")
async def create_driver(
    request: Request,
    body: DriverCreateRequest,
    registry: DriverSessionRepository = Depends(get_registry),
):
    session = registry.create(name=body.name)
    logger.info("Driver session %s opened", session.driver_id)
    return DriverResponse.from_session(session)


@router.get("/{driver_id}", response_model=DriverResponse, summary="Dashboard status")
@limiter.limit("100/minute")
async def get_driver(request: Request, session: DriverSession = Depends(get_session)):
    return DriverResponse.from_session(session)


@router.delete(
    "/{driver_id}",
    status_code=204,
    summary="Tear down a driver session",
    description="Cancels every task the session scheduled before dropping it.",
)
@limiter.limit("100/minute")
async def delete_driver(
    request: Request,
    driver_id: str,
    registry: DriverSessionRepository = Depends(get_registry),
    scheduler: TaskScheduler = Depends(get_scheduler),
    feed: DispatchFeed = Depends(get_feed),
):
    registry.remove(driver_id)
    cancelled = scheduler.cancel_prefix(f"{driver_id}:")
    feed.forget(driver_id)
    logger.info("Driver session %s closed (%d tasks cancelled)", driver_id, cancelled)


# ── Onboarding ────────────────────────────────────────────────────────


@router.put("/{driver_id}/vehicle", response_model=DriverResponse, summary="Choose vehicle type")
@limiter.limit("100/minute")
async def choose_vehicle(
    request: Request,
    body: VehicleRequest,
    session: DriverSession = Depends(get_session),
):
    notices = session.gate.choose_vehicle(body.vehicle_type)
    return DriverResponse.from_session(session, notices)


@router.put(
    "/{driver_id}/vehicle-details",
    response_model=DriverResponse,
    summary="Set plate number and vehicle details",
)
@limiter.limit("100/minute")
async def set_vehicle_details(
    request: Request,
    body: VehicleDetailsRequest,
    session: DriverSession = Depends(get_session),
):
    session.gate.set_vehicle_details(
        body.plate_number, body.vehicle_brand, body.vehicle_model
    )
    return DriverResponse.from_session(session)


@router.post(
    "/{driver_id}/documents/{kind}",
    response_model=DriverResponse,
    summary="Upload a verification document",
    description="File contents are not inspected; any non-empty upload is accepted.",
)
@limiter.limit("100/minute")
async def submit_document(
    request: Request,
    kind: DocumentKind,
    file: UploadFile = File(...),
    session: DriverSession = Depends(get_session),
):
    content = await file.read()
    notices = session.gate.submit_document(kind, file.filename or kind.value, content)
    return DriverResponse.from_session(session, notices)


@router.post(
    "/{driver_id}/onboarding/complete",
    response_model=DriverResponse,
    summary="Submit the profile for verification",
    responses={422: {"description": "Lists every missing field."}},
)
@limiter.limit("100/minute")
async def complete_onboarding(
    request: Request, session: DriverSession = Depends(get_session)
):
    notices = session.gate.complete_onboarding()
    logger.info(
        "Driver %s onboarding submitted (%s)",
        session.driver_id, session.gate.profile.verification_state.value,
    )
    return DriverResponse.from_session(session, notices)


# ── Online toggle ─────────────────────────────────────────────────────


@router.post("/{driver_id}/online", response_model=DriverResponse, summary="Go online")
@limiter.limit("100/minute")
async def go_online(
    request: Request,
    session: DriverSession = Depends(get_session),
    feed: DispatchFeed = Depends(get_feed),
):
    notices = session.go_online()
    try:
        await deliver_offers(session, feed)
    except (RedisError, OSError):
        logger.warning("Dispatch feed unavailable for driver=%s", session.driver_id)
    return DriverResponse.from_session(session, notices)


@router.post("/{driver_id}/offline", response_model=DriverResponse, summary="Go offline")
@limiter.limit("100/minute")
async def go_offline(request: Request, session: DriverSession = Depends(get_session)):
    session.go_offline()
    return DriverResponse.from_session(session)


# ── Balance ───────────────────────────────────────────────────────────


@router.post(
    "/{driver_id}/deposits",
    status_code=202,
    response_model=DepositResponse,
    summary="Open a deposit",
    responses={202: {"description": "Deposit pending gateway confirmation."}},
)
@limiter.limit("100/minute")
async def open_deposit(
    request: Request,
    body: DepositRequest,
    session: DriverSession = Depends(get_session),
    notifier: PaymentNotifier = Depends(get_notifier),
    scheduler: TaskScheduler = Depends(get_scheduler),
):
    deposit, notices = await deposits.open_deposit(
        session,
        body.amount,
        body.payment_method,
        notifier,
        scheduler=scheduler if settings.auto_confirm_deposits else None,
        confirm_after=settings.payment_confirmation_seconds,
    )
    return DepositResponse.from_deposit(deposit, session.ledger.amount, notices)


@router.get(
    "/{driver_id}/ledger",
    response_model=list[LedgerEntryResponse],
    summary="Balance history",
)
@limiter.limit("100/minute")
async def get_ledger(request: Request, session: DriverSession = Depends(get_session)):
    return [LedgerEntryResponse.from_entry(e) for e in session.ledger.entries]
