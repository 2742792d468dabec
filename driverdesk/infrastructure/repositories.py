"""
Repository Pattern -- abstracts storage so domain logic stays storage-agnostic.

* ``PaymentNotificationRepository`` receives an ``AsyncSession``
  (unit-of-work) and exposes the notification queries only.
* ``DriverSessionRepository`` keeps driver sessions in process memory.
  Sessions are volatile: a restart forgets every balance, profile and
  queue.
"""

from __future__ import annotations

import uuid
from datetime import datetime, timezone
from typing import Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from .models import PaymentNotificationModel
from driverdesk.domain.entities import Deposit
from driverdesk.domain.enums import BalancePolicy, PaymentStatus
from driverdesk.domain.errors import DepositNotFound, DriverNotFound
from driverdesk.domain.ledger import BalanceLedger
from driverdesk.domain.session import DriverSession
from driverdesk.domain.verification import VerificationGate


class PaymentNotificationRepository:
    def __init__(self, session: AsyncSession):
        self.session = session

    async def create(
        self,
        *,
        payment_type: str,
        amount: int,
        status: PaymentStatus,
        transaction_id: str,
        user_id: str | None = None,
        details: dict | None = None,
    ) -> PaymentNotificationModel:
        row = PaymentNotificationModel(
            payment_type=payment_type,
            amount=amount,
            status=status.value,
            transaction_id=transaction_id,
            user_id=user_id,
            details=details,
            timestamp=datetime.now(timezone.utc),
        )
        self.session.add(row)
        await self.session.flush()
        return row

    async def get_by_transaction_id(
        self, transaction_id: str
    ) -> Optional[PaymentNotificationModel]:
        result = await self.session.execute(
            select(PaymentNotificationModel).where(
                PaymentNotificationModel.transaction_id == transaction_id
            )
        )
        return result.scalar_one_or_none()

    async def mark_verified(
        self, transaction_id: str, verified: bool
    ) -> Optional[PaymentNotificationModel]:
        row = await self.get_by_transaction_id(transaction_id)
        if row is None:
            return None
        row.status = (
            PaymentStatus.VERIFIED.value if verified else PaymentStatus.REJECTED.value
        )
        row.verified_at = datetime.now(timezone.utc)
        await self.session.flush()
        return row

    async def list_by_status(
        self, status: PaymentStatus
    ) -> list[PaymentNotificationModel]:
        result = await self.session.execute(
            select(PaymentNotificationModel)
            .where(PaymentNotificationModel.status == status.value)
            .order_by(PaymentNotificationModel.timestamp)
        )
        return list(result.scalars().all())


class DriverSessionRepository:
    def __init__(
        self,
        *,
        minimum_deposit: int,
        platform_fee: int,
        policy: BalancePolicy = BalancePolicy.WARN,
        instant_verification: bool = True,
    ):
        self.minimum_deposit = minimum_deposit
        self.platform_fee = platform_fee
        self.policy = policy
        self.instant_verification = instant_verification
        self._sessions: dict[str, DriverSession] = {}

    def create(self, name: str = "", driver_id: str | None = None) -> DriverSession:
        driver_id = driver_id or str(uuid.uuid4())
        session = DriverSession(
            driver_id=driver_id,
            name=name,
            gate=VerificationGate(instant_verification=self.instant_verification),
            ledger=BalanceLedger(
                minimum_deposit=self.minimum_deposit,
                platform_fee=self.platform_fee,
            ),
            policy=self.policy,
        )
        self._sessions[driver_id] = session
        return session

    def get(self, driver_id: str) -> DriverSession:
        try:
            return self._sessions[driver_id]
        except KeyError:
            raise DriverNotFound(f"Driver {driver_id} not found") from None

    def remove(self, driver_id: str) -> DriverSession:
        session = self.get(driver_id)
        del self._sessions[driver_id]
        return session

    def all(self) -> list[DriverSession]:
        return list(self._sessions.values())

    def online(self) -> list[DriverSession]:
        return [s for s in self._sessions.values() if s.online]

    def find_deposit(self, transaction_id: str) -> tuple[DriverSession, Deposit]:
        for session in self._sessions.values():
            if session.ledger.has_deposit(transaction_id):
                return session, session.ledger.get_deposit(transaction_id)
        raise DepositNotFound(f"Deposit {transaction_id} not found")
