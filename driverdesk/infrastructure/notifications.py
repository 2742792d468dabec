"""
Best-effort payment notification store.

Wraps ``PaymentNotificationRepository`` in its own unit-of-work per call.
Any storage failure is converted to ``PersistenceUnavailable``; callers
log it and carry on, since the in-memory ledger change has already
happened.
"""

from __future__ import annotations

import logging

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from .repositories import PaymentNotificationRepository
from driverdesk.domain.enums import PaymentStatus
from driverdesk.domain.errors import PersistenceUnavailable

logger = logging.getLogger(__name__)


class PaymentNotifier:
    def __init__(
        self,
        session_factory: async_sessionmaker[AsyncSession],
        enabled: bool = True,
    ):
        self.session_factory = session_factory
        self.enabled = enabled

    async def create_payment_notification(
        self,
        *,
        payment_type: str,
        amount: int,
        status: PaymentStatus,
        transaction_id: str,
        user_id: str | None = None,
        details: dict | None = None,
    ) -> None:
        if not self.enabled:
            return
        try:
            async with self.session_factory() as session:
                await PaymentNotificationRepository(session).create(
                    payment_type=payment_type,
                    amount=amount,
                    status=status,
                    transaction_id=transaction_id,
                    user_id=user_id,
                    details=details,
                )
                await session.commit()
        except (SQLAlchemyError, OSError) as exc:
            raise PersistenceUnavailable(
                f"Could not record payment notification {transaction_id}"
            ) from exc

    async def verify_deposit(self, transaction_id: str, verified: bool) -> bool:
        """Flip the stored status; returns False if no row was recorded."""
        if not self.enabled:
            return False
        try:
            async with self.session_factory() as session:
                row = await PaymentNotificationRepository(session).mark_verified(
                    transaction_id, verified
                )
                await session.commit()
        except (SQLAlchemyError, OSError) as exc:
            raise PersistenceUnavailable(
                f"Could not verify payment notification {transaction_id}"
            ) from exc
        if row is None:
            logger.warning("No payment notification stored for %s", transaction_id)
            return False
        return True
