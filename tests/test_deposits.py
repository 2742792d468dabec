"""
Deposit flow tests.

Covers the ledger side (credit only on confirmation, once), the
best-effort payment notification store (SQLite in-memory) and the
simulated gateway confirmation task.
"""

from __future__ import annotations

import asyncio
from unittest.mock import MagicMock

import pytest
from sqlalchemy.exc import OperationalError

from driverdesk.domain.enums import Notice, PaymentMethod, PaymentStatus
from driverdesk.domain.errors import DepositAlreadySettled, PersistenceUnavailable
from driverdesk.domain.session import DriverSession
from driverdesk.infrastructure.notifications import PaymentNotifier
from driverdesk.infrastructure.repositories import PaymentNotificationRepository
from driverdesk.infrastructure.tasks import TaskScheduler
from driverdesk.services import deposits

from conftest import verify


async def _stored(session_factory, transaction_id):
    async with session_factory() as db:
        return await PaymentNotificationRepository(db).get_by_transaction_id(
            transaction_id
        )


async def _drain(scheduler: TaskScheduler, timeout: float = 2.0) -> None:
    loop = asyncio.get_running_loop()
    deadline = loop.time() + timeout
    while scheduler.pending() and loop.time() < deadline:
        await asyncio.sleep(0.01)


def _failing_notifier() -> PaymentNotifier:
    return PaymentNotifier(MagicMock(side_effect=OSError("database is down")))


@pytest.fixture
def fresh_driver() -> DriverSession:
    return verify(DriverSession(driver_id="driver-7"))


class TestNotificationStore:
    @pytest.mark.asyncio
    async def test_pending_row_is_written(self, notifier, session_factory, fresh_driver):
        deposit, notices = await deposits.open_deposit(
            fresh_driver, 75_000, PaymentMethod.CRYPTO, notifier
        )
        assert notices == []

        row = await _stored(session_factory, deposit.transaction_id)
        assert row is not None
        assert row.status == "pending"
        assert row.amount == 75_000
        assert row.payment_type == "crypto"
        assert row.user_id == "driver-7"

    @pytest.mark.asyncio
    async def test_settle_flips_stored_status(self, notifier, session_factory, fresh_driver):
        deposit, _ = await deposits.open_deposit(
            fresh_driver, 50_000, PaymentMethod.BANK, notifier
        )
        await deposits.settle_deposit(fresh_driver, deposit.transaction_id, False, notifier)

        row = await _stored(session_factory, deposit.transaction_id)
        assert row.status == "rejected"
        assert row.verified_at is not None
        assert fresh_driver.ledger.amount == 0

    @pytest.mark.asyncio
    async def test_list_by_status(self, notifier, session_factory, fresh_driver):
        first, _ = await deposits.open_deposit(
            fresh_driver, 50_000, PaymentMethod.BANK, notifier
        )
        await deposits.open_deposit(fresh_driver, 60_000, PaymentMethod.PI, notifier)
        await deposits.settle_deposit(fresh_driver, first.transaction_id, True, notifier)

        async with session_factory() as db:
            pending = await PaymentNotificationRepository(db).list_by_status(
                PaymentStatus.PENDING
            )
        assert [r.amount for r in pending] == [60_000]

    @pytest.mark.asyncio
    async def test_verify_without_row_returns_false(self, notifier):
        assert await notifier.verify_deposit("DEP-UNKNOWN", True) is False

    @pytest.mark.asyncio
    async def test_disabled_notifier_is_silent(self):
        disabled = PaymentNotifier(MagicMock(side_effect=AssertionError), enabled=False)
        await disabled.create_payment_notification(
            payment_type="bank",
            amount=50_000,
            status=PaymentStatus.PENDING,
            transaction_id="DEP-X",
        )
        assert await disabled.verify_deposit("DEP-X", True) is False

    @pytest.mark.asyncio
    async def test_storage_errors_are_wrapped(self):
        notifier = PaymentNotifier(
            MagicMock(side_effect=OperationalError("INSERT", {}, Exception("locked")))
        )
        with pytest.raises(PersistenceUnavailable) as exc:
            await notifier.verify_deposit("DEP-X", True)
        assert isinstance(exc.value.__cause__, OperationalError)


class TestPersistenceFailure:
    @pytest.mark.asyncio
    async def test_open_continues_with_notice(self, fresh_driver):
        deposit, notices = await deposits.open_deposit(
            fresh_driver, 50_000, PaymentMethod.BANK, _failing_notifier()
        )
        assert notices == [Notice.PERSISTENCE_UNAVAILABLE]
        assert deposit.status == PaymentStatus.PENDING

    @pytest.mark.asyncio
    async def test_credit_is_kept_when_store_fails(self, fresh_driver):
        notifier = _failing_notifier()
        deposit, _ = await deposits.open_deposit(
            fresh_driver, 50_000, PaymentMethod.BANK, notifier
        )
        settled, notices = await deposits.settle_deposit(
            fresh_driver, deposit.transaction_id, True, notifier
        )
        assert notices == [Notice.PERSISTENCE_UNAVAILABLE]
        assert settled.status == PaymentStatus.VERIFIED
        assert fresh_driver.ledger.amount == 50_000


class TestGatewayConfirmation:
    @pytest.mark.asyncio
    async def test_auto_confirm_credits_balance(self, notifier, session_factory, fresh_driver):
        scheduler = TaskScheduler()
        deposit, _ = await deposits.open_deposit(
            fresh_driver, 50_000, PaymentMethod.BANK, notifier,
            scheduler=scheduler, confirm_after=0,
        )
        await _drain(scheduler)

        assert deposit.status == PaymentStatus.VERIFIED
        assert fresh_driver.ledger.amount == 50_000
        row = await _stored(session_factory, deposit.transaction_id)
        assert row.status == "verified"

    @pytest.mark.asyncio
    async def test_manual_settle_cancels_confirmation(self, notifier, fresh_driver):
        scheduler = TaskScheduler()
        deposit, _ = await deposits.open_deposit(
            fresh_driver, 50_000, PaymentMethod.BANK, notifier,
            scheduler=scheduler, confirm_after=60,
        )
        assert scheduler.pending() == [
            deposits.confirmation_key("driver-7", deposit.transaction_id)
        ]

        await deposits.settle_deposit(
            fresh_driver, deposit.transaction_id, True, notifier, scheduler
        )
        assert scheduler.pending() == []
        assert fresh_driver.ledger.amount == 50_000

        with pytest.raises(DepositAlreadySettled):
            await deposits.settle_deposit(
                fresh_driver, deposit.transaction_id, True, notifier, scheduler
            )
        assert fresh_driver.ledger.amount == 50_000

    @pytest.mark.asyncio
    async def test_session_teardown_cancels_confirmation(self, notifier, fresh_driver):
        scheduler = TaskScheduler()
        deposit, _ = await deposits.open_deposit(
            fresh_driver, 50_000, PaymentMethod.BANK, notifier,
            scheduler=scheduler, confirm_after=0.05,
        )
        assert scheduler.cancel_prefix("driver-7:") == 1
        await asyncio.sleep(0.1)

        assert deposit.status == PaymentStatus.PENDING
        assert fresh_driver.ledger.amount == 0
