"""
Payment endpoints
=================

GET  /api/v1/payments/methods                  -- deposit instructions
POST /api/v1/payments/{transaction_id}/verify  -- gateway / admin callback
"""

from fastapi import APIRouter, Depends, Request

from driverdesk.api.dependencies import get_notifier, get_registry, get_scheduler
from driverdesk.api.middleware import limiter
from driverdesk.api.schemas import (
    DepositResponse,
    DepositVerifyRequest,
    PaymentMethodInfo,
)
from driverdesk.config import settings
from driverdesk.domain.enums import PaymentMethod
from driverdesk.infrastructure.notifications import PaymentNotifier
from driverdesk.infrastructure.repositories import DriverSessionRepository
from driverdesk.infrastructure.tasks import TaskScheduler
from driverdesk.services import deposits

router = APIRouter(prefix="/payments", tags=["payments"])


@router.get(
    "/methods",
    response_model=list[PaymentMethodInfo],
    summary="Deposit methods and instructions",
    description="Wallet addresses come from configuration; API keys are never returned.",
)
async def payment_methods():
    minimum = settings.minimum_deposit
    return [
        PaymentMethodInfo(method=PaymentMethod.BANK, minimum_deposit=minimum),
        PaymentMethodInfo(method=PaymentMethod.CREDIT_CARD, minimum_deposit=minimum),
        PaymentMethodInfo(
            method=PaymentMethod.CRYPTO,
            minimum_deposit=minimum,
            enabled=bool(settings.crypto_wallets),
            wallets=settings.crypto_wallets,
        ),
        PaymentMethodInfo(
            method=PaymentMethod.PI,
            minimum_deposit=minimum,
            enabled=bool(settings.pi_network_api_key),
            sandbox=settings.pi_network_sandbox,
        ),
    ]


@router.post(
    "/{transaction_id}/verify",
    response_model=DepositResponse,
    summary="Verify or reject a pending deposit",
    responses={409: {"description": "Deposit already settled."}},
)
@limiter.limit("100/minute")
async def verify_deposit(
    request: Request,
    transaction_id: str,
    body: DepositVerifyRequest,
    registry: DriverSessionRepository = Depends(get_registry),
    notifier: PaymentNotifier = Depends(get_notifier),
    scheduler: TaskScheduler = Depends(get_scheduler),
):
    session, _ = registry.find_deposit(transaction_id)
    deposit, notices = await deposits.settle_deposit(
        session, transaction_id, body.verified, notifier, scheduler
    )
    return DepositResponse.from_deposit(deposit, session.ledger.amount, notices)
