"""Tests for the driver session: verification and balance gating."""

import pytest

from driverdesk.domain.enums import BalancePolicy, Notice, TripStatus, VehicleType
from driverdesk.domain.errors import DriverOffline, InsufficientBalance, NotVerified
from driverdesk.domain.ledger import BalanceLedger
from driverdesk.domain.session import DriverSession

from conftest import seed_trips, verify


def _session(balance: int = 0, policy: BalancePolicy = BalancePolicy.WARN) -> DriverSession:
    session = DriverSession(
        driver_id="driver-9", ledger=BalanceLedger(balance), policy=policy
    )
    for trip in seed_trips():
        session.queue.offer(trip)
    return session


class TestGoOnline:
    def test_unverified_driver_cannot_go_online(self):
        session = _session(100_000)
        with pytest.raises(NotVerified):
            session.go_online()
        assert session.online is False

    def test_verified_driver_with_balance(self):
        session = verify(_session(100_000))
        assert session.go_online() == []
        assert session.online is True

    def test_zero_balance_warns(self):
        session = verify(_session())
        assert session.go_online() == [Notice.LOW_BALANCE]
        assert session.online is True

    def test_zero_balance_blocks(self):
        session = verify(_session(policy=BalancePolicy.BLOCK))
        with pytest.raises(InsufficientBalance):
            session.go_online()
        assert session.online is False

    def test_verification_checked_before_balance(self):
        session = _session(policy=BalancePolicy.BLOCK)
        with pytest.raises(NotVerified):
            session.go_online()

    def test_go_offline(self):
        session = verify(_session(100_000))
        session.go_online()
        session.go_offline()
        assert session.online is False


class TestAcceptGating:
    def test_unverified_driver_cannot_accept(self):
        session = _session(100_000)
        with pytest.raises(NotVerified):
            session.accept("TR-1001")
        assert session.active_trip is None

    def test_offline_driver_cannot_accept(self):
        session = verify(_session(100_000))
        with pytest.raises(DriverOffline):
            session.accept("TR-1001")
        assert session.active_trip is None
        assert session.queue.get("TR-1001").status == TripStatus.PENDING

    def test_offline_driver_sees_no_offers(self):
        session = verify(_session(100_000))
        assert session.pending_offers() == ()
        session.go_online()
        assert [t.id for t in session.pending_offers()] == ["TR-1001", "TR-1002"]
        session.go_offline()
        assert session.pending_offers() == ()

    def test_going_offline_blocks_accept(self):
        session = verify(_session(100_000))
        session.go_online()
        session.go_offline()
        with pytest.raises(DriverOffline):
            session.accept("TR-1001")

    def test_zero_balance_accept_warns(self):
        session = verify(_session())
        session.go_online()
        trip, notices = session.accept("TR-1001")
        assert trip.id == "TR-1001"
        assert notices == [Notice.LOW_BALANCE]

    def test_zero_balance_accept_blocks(self):
        session = verify(_session(50_000, policy=BalancePolicy.BLOCK))
        session.go_online()
        session.ledger.debit(50_000)
        with pytest.raises(InsufficientBalance):
            session.accept("TR-1001")
        assert session.active_trip is None

    def test_vehicle_change_blocks_accept(self):
        session = verify(_session(100_000))
        session.go_online()
        session.gate.choose_vehicle(VehicleType.MOTORCYCLE)
        with pytest.raises(NotVerified):
            session.accept("TR-1001")


class TestNotices:
    def test_low_balance_notice_tracks_ledger(self):
        session = verify(_session())
        assert session.notices() == [Notice.LOW_BALANCE]
        session.ledger.credit(50_000)
        assert session.notices() == []

    def test_fee_draining_balance_raises_notice(self):
        session = verify(_session())
        session.ledger.credit(50_000)
        session.ledger.debit(49_000)
        session.go_online()
        session.accept("TR-1001")
        session.complete("TR-1001")
        assert session.ledger.amount == 0
        assert session.notices() == [Notice.LOW_BALANCE]
