"""
Trip endpoints
==============

GET  /api/v1/drivers/{driver_id}/trips/pending             -- pending offers (none while offline)
GET  /api/v1/drivers/{driver_id}/trips/history             -- completed trips
POST /api/v1/drivers/{driver_id}/trips/{trip_id}/accept
POST /api/v1/drivers/{driver_id}/trips/{trip_id}/decline   -- drops the offer
POST /api/v1/drivers/{driver_id}/trips/{trip_id}/complete  -- charges the fee
POST /api/v1/drivers/{driver_id}/trips/{trip_id}/rating    -- rate passenger
"""

import logging

from fastapi import APIRouter, Depends, Request

from driverdesk.api.dependencies import get_session
from driverdesk.api.middleware import limiter
from driverdesk.api.schemas import (
    CompletionResponse,
    RatingRequest,
    RatingResponse,
    TripActionResponse,
    TripResponse,
)
from driverdesk.domain.session import DriverSession

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/drivers/{driver_id}/trips", tags=["trips"])


@router.get("/pending", response_model=list[TripResponse], summary="List pending offers")
@limiter.limit("100/minute")
async def list_pending(request: Request, session: DriverSession = Depends(get_session)):
    return [TripResponse.from_trip(t) for t in session.pending_offers()]


@router.get("/history", response_model=list[TripResponse], summary="Completed trips")
@limiter.limit("100/minute")
async def trip_history(request: Request, session: DriverSession = Depends(get_session)):
    return [TripResponse.from_trip(t) for t in session.trips.history()]


@router.post(
    "/{trip_id}/accept",
    response_model=TripActionResponse,
    summary="Accept a pending offer",
    responses={409: {"description": "Another trip is already active."}},
)
@limiter.limit("100/minute")
async def accept_trip(
    request: Request, trip_id: str, session: DriverSession = Depends(get_session)
):
    trip, notices = session.accept(trip_id)
    logger.info("Driver %s accepted trip %s", session.driver_id, trip_id)
    return TripActionResponse(trip=TripResponse.from_trip(trip), notices=notices)


@router.post(
    "/{trip_id}/decline",
    response_model=TripActionResponse,
    summary="Decline a pending offer",
)
@limiter.limit("100/minute")
async def decline_trip(
    request: Request, trip_id: str, session: DriverSession = Depends(get_session)
):
    trip = session.decline(trip_id)
    return TripActionResponse(trip=TripResponse.from_trip(trip))


@router.post(
    "/{trip_id}/complete",
    response_model=CompletionResponse,
    summary="Complete the active trip",
    description="Deducts the platform fee and hands off to passenger rating.",
)
@limiter.limit("100/minute")
async def complete_trip(
    request: Request, trip_id: str, session: DriverSession = Depends(get_session)
):
    receipt = session.complete(trip_id)
    if receipt.fee.shortfall:
        logger.warning(
            "Driver %s short %d on platform fee for trip %s",
            session.driver_id, receipt.fee.shortfall, trip_id,
        )
    return CompletionResponse(
        trip=TripResponse.from_trip(receipt.trip),
        platform_fee=receipt.fee.amount,
        shortfall=receipt.fee.shortfall,
        balance=receipt.balance_after,
    )


@router.post(
    "/{trip_id}/rating",
    status_code=201,
    response_model=RatingResponse,
    summary="Rate the passenger of a completed trip",
)
@limiter.limit("100/minute")
async def rate_passenger(
    request: Request,
    trip_id: str,
    body: RatingRequest,
    session: DriverSession = Depends(get_session),
):
    rating = session.trips.rate_passenger(trip_id, body.stars, body.comment)
    return RatingResponse(trip_id=rating.trip_id, stars=rating.stars, comment=rating.comment)
