"""
Deposit flow.

1. ``open_deposit`` validates the amount, records a pending deposit on the
   driver's ledger and writes a ``pending`` payment notification.
2. The gateway confirmation is simulated by a cancellable task that calls
   ``settle_deposit`` after ``payment_confirmation_seconds``.  A real
   gateway callback hits ``POST /payments/{transaction_id}/verify`` instead.
3. ``settle_deposit`` credits the ledger (verified) or closes the deposit
   (rejected) and flips the stored notification.

Notification writes are best effort: failures are logged and reported as
``Notice.PERSISTENCE_UNAVAILABLE`` without rolling back the ledger.
"""

from __future__ import annotations

import logging

from driverdesk.domain.entities import Deposit
from driverdesk.domain.enums import Notice, PaymentMethod, PaymentStatus
from driverdesk.domain.errors import DepositAlreadySettled, PersistenceUnavailable
from driverdesk.domain.session import DriverSession
from driverdesk.infrastructure.notifications import PaymentNotifier
from driverdesk.infrastructure.tasks import TaskScheduler

logger = logging.getLogger(__name__)


def confirmation_key(driver_id: str, transaction_id: str) -> str:
    return f"{driver_id}:deposit:{transaction_id}"


async def open_deposit(
    session: DriverSession,
    amount: int,
    method: PaymentMethod,
    notifier: PaymentNotifier,
    scheduler: TaskScheduler | None = None,
    confirm_after: float | None = None,
) -> tuple[Deposit, list[Notice]]:
    """
    Open a pending deposit.  When *scheduler* and *confirm_after* are given
    the simulated gateway confirms it after *confirm_after* seconds.
    """
    deposit = session.ledger.open_deposit(amount, method)
    logger.info(
        "Deposit %s opened: driver=%s amount=%d method=%s",
        deposit.transaction_id, session.driver_id, amount, method.value,
    )

    notices: list[Notice] = []
    try:
        await notifier.create_payment_notification(
            payment_type=method.value,
            amount=amount,
            status=PaymentStatus.PENDING,
            transaction_id=deposit.transaction_id,
            user_id=session.driver_id,
            details={"source": "driver_deposit"},
        )
    except PersistenceUnavailable as exc:
        logger.warning("%s: %s", exc, exc.__cause__)
        notices.append(Notice.PERSISTENCE_UNAVAILABLE)

    if scheduler is not None and confirm_after is not None:

        async def _confirm() -> None:
            try:
                await settle_deposit(session, deposit.transaction_id, True, notifier)
            except DepositAlreadySettled:
                logger.debug("Deposit %s settled before gateway confirmation",
                             deposit.transaction_id)

        scheduler.schedule(
            confirmation_key(session.driver_id, deposit.transaction_id),
            confirm_after,
            _confirm,
        )
    return deposit, notices


async def settle_deposit(
    session: DriverSession,
    transaction_id: str,
    verified: bool,
    notifier: PaymentNotifier,
    scheduler: TaskScheduler | None = None,
) -> tuple[Deposit, list[Notice]]:
    deposit = session.ledger.settle_deposit(transaction_id, verified)
    if scheduler is not None:
        scheduler.cancel(confirmation_key(session.driver_id, transaction_id))
    logger.info(
        "Deposit %s %s: driver=%s balance=%d",
        transaction_id, deposit.status.value, session.driver_id, session.ledger.amount,
    )

    notices: list[Notice] = []
    try:
        await notifier.verify_deposit(transaction_id, verified)
    except PersistenceUnavailable as exc:
        logger.warning("%s: %s", exc, exc.__cause__)
        notices.append(Notice.PERSISTENCE_UNAVAILABLE)
    return deposit, notices
