"""Tests for the SQL billing ledger against a mocked async session."""

from datetime import UTC, date, datetime
from types import SimpleNamespace
from unittest.mock import AsyncMock, MagicMock

import pytest
from sqlalchemy.exc import IntegrityError, OperationalError, SQLAlchemyError

from src.domains.billing.calculator import compute_wallet_balance
from src.domains.billing.models import TransactionType, WalletTransaction
from src.domains.billing.repository import DuplicateBillingPeriodError, SqlBillingLedger
from src.shared.errors import CollaboratorError
from tests.conftest import BILLING_DAY_NOW, GYM_ID


def _mock_session(result: MagicMock | None = None) -> AsyncMock:
    session = AsyncMock()
    session.add = MagicMock()
    session.commit = AsyncMock()
    session.rollback = AsyncMock()
    session.execute = AsyncMock(return_value=result or MagicMock())
    return session


def _monthly_billing() -> WalletTransaction:
    return WalletTransaction(
        gym_id=GYM_ID,
        transaction_type=TransactionType.MONTHLY_BILLING,
        amount=30.0,
        balance_before=100.0,
        balance_after=70.0,
        description="Monthly subscription billing: 3 members",
        created_at=BILLING_DAY_NOW,
        billing_period="2026-03",
    )


def _recharge() -> WalletTransaction:
    return WalletTransaction(
        gym_id=GYM_ID,
        transaction_type=TransactionType.RECHARGE,
        amount=50.0,
        balance_before=0.0,
        balance_after=50.0,
        description="Wallet recharge of ₹50.00",
        created_at=BILLING_DAY_NOW,
    )


class TestListTransactions:
    @pytest.mark.asyncio
    async def test_unknown_type_is_read_as_a_debit(self):
        created = datetime(2026, 1, 1, tzinfo=UTC)
        result = MagicMock()
        result.all.return_value = [(100.0, "recharge", created), (20.0, "late_fee", created)]
        ledger = SqlBillingLedger(_mock_session(result))

        entries = await ledger.list_transactions(GYM_ID)

        assert entries[1].transaction_type == TransactionType.ADJUSTMENT
        assert compute_wallet_balance(entries) == 80.0

    @pytest.mark.asyncio
    async def test_read_failure_is_a_collaborator_error(self):
        session = _mock_session()
        session.execute.side_effect = SQLAlchemyError("connection refused")
        ledger = SqlBillingLedger(session)

        with pytest.raises(CollaboratorError) as exc_info:
            await ledger.list_transactions(GYM_ID)
        assert exc_info.value.operation == "list_transactions"


class TestListMemberships:
    @pytest.mark.asyncio
    async def test_rows_become_membership_records(self):
        row = SimpleNamespace(id="m-1", user_id="user-1", start_date=date(2025, 1, 1), is_active=True)
        result = MagicMock()
        result.scalars.return_value = MagicMock(all=MagicMock(return_value=[row]))
        ledger = SqlBillingLedger(_mock_session(result))

        memberships = await ledger.list_memberships(GYM_ID)

        assert memberships[0].membership_id == "m-1"
        assert memberships[0].user_id == "user-1"

    @pytest.mark.asyncio
    async def test_read_failure_is_a_collaborator_error(self):
        session = _mock_session()
        session.execute.side_effect = OperationalError("SELECT", {}, Exception("timeout"))

        with pytest.raises(CollaboratorError):
            await SqlBillingLedger(session).list_memberships(GYM_ID)


class TestHasBillingForPeriod:
    @pytest.mark.asyncio
    async def test_existing_row(self):
        result = MagicMock()
        result.scalar_one_or_none.return_value = 17
        assert await SqlBillingLedger(_mock_session(result)).has_billing_for_period(
            GYM_ID, "2026-03"
        )

    @pytest.mark.asyncio
    async def test_no_row(self):
        result = MagicMock()
        result.scalar_one_or_none.return_value = None
        assert not await SqlBillingLedger(_mock_session(result)).has_billing_for_period(
            GYM_ID, "2026-03"
        )


class TestInsertTransaction:
    @pytest.mark.asyncio
    async def test_commits_one_row(self):
        session = _mock_session()
        await SqlBillingLedger(session).insert_transaction(_monthly_billing())

        session.add.assert_called_once()
        row = session.add.call_args.args[0]
        assert row.billing_period == "2026-03"
        assert row.transaction_type == "monthly_billing"
        session.commit.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_unique_violation_on_billing_period_is_a_duplicate(self):
        session = _mock_session()
        session.commit.side_effect = IntegrityError("INSERT", {}, Exception("uq_wallet_tx_gym_period"))

        with pytest.raises(DuplicateBillingPeriodError) as exc_info:
            await SqlBillingLedger(session).insert_transaction(_monthly_billing())

        assert exc_info.value.billing_period == "2026-03"
        session.rollback.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_integrity_error_without_period_is_a_collaborator_error(self):
        session = _mock_session()
        session.commit.side_effect = IntegrityError("INSERT", {}, Exception("not null"))

        with pytest.raises(CollaboratorError):
            await SqlBillingLedger(session).insert_transaction(_recharge())
        session.rollback.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_operational_error_is_a_collaborator_error(self):
        session = _mock_session()
        session.commit.side_effect = OperationalError("INSERT", {}, Exception("reset"))

        with pytest.raises(CollaboratorError) as exc_info:
            await SqlBillingLedger(session).insert_transaction(_monthly_billing())
        assert exc_info.value.operation == "insert_transaction"
        session.rollback.assert_awaited_once()


class TestListActiveGymIds:
    @pytest.mark.asyncio
    async def test_returns_ids(self):
        result = MagicMock()
        result.scalars.return_value = MagicMock(all=MagicMock(return_value=["gym-001", "gym-002"]))
        assert await SqlBillingLedger(_mock_session(result)).list_active_gym_ids() == [
            "gym-001",
            "gym-002",
        ]
