"""
Balance Ledger
==============

Single source of truth for a driver's spendable balance, in IDR minor
units.

* Credits come from confirmed deposits and must meet the minimum deposit.
* Debits are the per-trip platform fee.  A debit never drives the balance
  below zero: it floors at zero and the uncollected part is recorded as the
  entry's ``shortfall``.
"""

from __future__ import annotations

import uuid
from typing import Optional

from .entities import Deposit, LedgerEntry
from .enums import LedgerEntryKind, PaymentMethod, PaymentStatus
from .errors import DepositAlreadySettled, DepositNotFound, InvalidDepositAmount

MINIMUM_DEPOSIT = 50_000
PLATFORM_FEE = 1_000


def _is_int(value) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


class BalanceLedger:
    def __init__(
        self,
        amount: int = 0,
        minimum_deposit: int = MINIMUM_DEPOSIT,
        platform_fee: int = PLATFORM_FEE,
    ):
        if not _is_int(amount) or amount < 0:
            raise ValueError(f"Opening balance must be a non-negative int: {amount!r}")
        if not _is_int(platform_fee) or platform_fee <= 0:
            raise ValueError(f"Platform fee must be a positive int: {platform_fee!r}")
        self._amount = amount
        self.minimum_deposit = minimum_deposit
        self.platform_fee = platform_fee
        self.entries: list[LedgerEntry] = []
        self._deposits: dict[str, Deposit] = {}

    @property
    def amount(self) -> int:
        return self._amount

    def credit(self, amount: int, reference: Optional[str] = None) -> int:
        """Add *amount*; returns the new balance.  No upper bound."""
        self.validate_deposit_amount(amount)
        self._amount += amount
        self.entries.append(
            LedgerEntry(LedgerEntryKind.CREDIT, amount, self._amount, reference=reference)
        )
        return self._amount

    def debit(self, amount: int, reference: Optional[str] = None) -> int:
        """Subtract *amount*, flooring at zero; returns the new balance."""
        if not _is_int(amount) or amount <= 0:
            raise ValueError(f"Debit amount must be a positive int: {amount!r}")
        taken = min(amount, self._amount)
        self._amount -= taken
        self.entries.append(
            LedgerEntry(
                LedgerEntryKind.DEBIT,
                amount,
                self._amount,
                shortfall=amount - taken,
                reference=reference,
            )
        )
        return self._amount

    def charge_platform_fee(self, trip_id: Optional[str] = None) -> LedgerEntry:
        self.debit(self.platform_fee, reference=trip_id)
        return self.entries[-1]

    def can_go_online(self) -> bool:
        return self._amount > 0

    # ── Deposits ──────────────────────────────────────────────────

    def validate_deposit_amount(self, amount: int) -> None:
        if not _is_int(amount) or amount < self.minimum_deposit:
            raise InvalidDepositAmount(
                f"Minimum deposit amount is {self.minimum_deposit}, got {amount!r}"
            )

    def open_deposit(self, amount: int, method: PaymentMethod) -> Deposit:
        self.validate_deposit_amount(amount)
        deposit = Deposit(
            transaction_id=f"DEP-{uuid.uuid4().hex[:12].upper()}",
            amount=amount,
            payment_method=method,
        )
        self._deposits[deposit.transaction_id] = deposit
        return deposit

    def get_deposit(self, transaction_id: str) -> Deposit:
        try:
            return self._deposits[transaction_id]
        except KeyError:
            raise DepositNotFound(f"Deposit {transaction_id} not found") from None

    def has_deposit(self, transaction_id: str) -> bool:
        return transaction_id in self._deposits

    def settle_deposit(self, transaction_id: str, verified: bool) -> Deposit:
        deposit = self.get_deposit(transaction_id)
        if not deposit.is_pending:
            raise DepositAlreadySettled(
                f"Deposit {transaction_id} is already {deposit.status.value}"
            )
        if verified:
            self.credit(deposit.amount, reference=transaction_id)
            deposit.status = PaymentStatus.VERIFIED
        else:
            deposit.status = PaymentStatus.REJECTED
        return deposit

    def deposits(self) -> list[Deposit]:
        return list(self._deposits.values())
