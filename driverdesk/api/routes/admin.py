"""
Admin / observability endpoints
===============================

GET  /api/v1/admin/drivers                    -- list live driver sessions
POST /api/v1/admin/drivers/{driver_id}/verify -- approve a pending review
GET  /api/v1/admin/health                     -- simple health check
"""

from fastapi import APIRouter, Depends, Request

from driverdesk.api.dependencies import get_registry, get_session
from driverdesk.api.middleware import limiter
from driverdesk.api.schemas import DriverResponse, DriverSummary, HealthResponse
from driverdesk.domain.session import DriverSession
from driverdesk.infrastructure.repositories import DriverSessionRepository

router = APIRouter(prefix="/admin", tags=["admin"])


@router.get(
    "/drivers",
    response_model=list[DriverSummary],
    summary="List all live driver sessions",
)
@limiter.limit("100/minute")
async def list_drivers(
    request: Request,
    registry: DriverSessionRepository = Depends(get_registry),
):
    return [
        DriverSummary(
            id=s.driver_id,
            name=s.name,
            online=s.online,
            balance=s.ledger.amount,
            verification_state=s.gate.profile.verification_state,
        )
        for s in registry.all()
    ]


@router.post(
    "/drivers/{driver_id}/verify",
    response_model=DriverResponse,
    summary="Approve a driver's pending verification",
)
@limiter.limit("100/minute")
async def verify_driver(request: Request, session: DriverSession = Depends(get_session)):
    notices = session.gate.approve()
    return DriverResponse.from_session(session, notices)


@router.get("/health", response_model=HealthResponse, summary="Health check")
async def health():
    return HealthResponse()
