"""Datastore access for gym wallet billing."""

from typing import Protocol

import structlog
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from src.db.models import Gym, Membership, WalletTransactionDB
from src.shared.errors import CollaboratorError

from .models import LedgerEntry, MembershipRecord, TransactionType, WalletTransaction

logger = structlog.get_logger()


class DuplicateBillingPeriodError(Exception):
    """A monthly billing record already exists for the gym and period."""

    def __init__(self, gym_id: str, billing_period: str) -> None:
        self.gym_id = gym_id
        self.billing_period = billing_period
        super().__init__(f"Gym {gym_id} already billed for {billing_period}")


class BillingLedger(Protocol):
    """Reads and the single ledger write the billing service needs."""

    async def list_transactions(self, gym_id: str) -> list[LedgerEntry]: ...

    async def list_memberships(self, gym_id: str) -> list[MembershipRecord]: ...

    async def has_billing_for_period(self, gym_id: str, billing_period: str) -> bool: ...

    async def insert_transaction(self, transaction: WalletTransaction) -> None: ...

    async def list_active_gym_ids(self) -> list[str]: ...


class SqlBillingLedger:
    """BillingLedger backed by the async SQLAlchemy session."""

    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def list_transactions(self, gym_id: str) -> list[LedgerEntry]:
        stmt = (
            select(
                WalletTransactionDB.amount_inr,
                WalletTransactionDB.transaction_type,
                WalletTransactionDB.created_at,
            )
            .where(WalletTransactionDB.gym_id == gym_id)
            .order_by(WalletTransactionDB.created_at)
        )
        try:
            result = await self._session.execute(stmt)
        except SQLAlchemyError as exc:
            raise CollaboratorError("list_transactions", str(exc)) from exc

        entries = []
        for amount, tx_type, created_at in result.all():
            try:
                transaction_type = TransactionType(tx_type)
            except ValueError:
                # Unknown types are debits like every other non-recharge row
                logger.warning("unknown_transaction_type", gym_id=gym_id, transaction_type=tx_type)
                transaction_type = TransactionType.ADJUSTMENT
            entries.append(
                LedgerEntry(amount=amount, transaction_type=transaction_type, created_at=created_at)
            )
        return entries

    async def list_memberships(self, gym_id: str) -> list[MembershipRecord]:
        stmt = (
            select(Membership)
            .where(Membership.gym_id == gym_id)
            .order_by(Membership.start_date, Membership.id)
        )
        try:
            result = await self._session.execute(stmt)
        except SQLAlchemyError as exc:
            raise CollaboratorError("list_memberships", str(exc)) from exc

        return [
            MembershipRecord(
                membership_id=row.id,
                user_id=row.user_id,
                start_date=row.start_date,
                is_active=row.is_active,
            )
            for row in result.scalars().all()
        ]

    async def has_billing_for_period(self, gym_id: str, billing_period: str) -> bool:
        stmt = (
            select(WalletTransactionDB.id)
            .where(
                WalletTransactionDB.gym_id == gym_id,
                WalletTransactionDB.billing_period == billing_period,
            )
            .limit(1)
        )
        try:
            result = await self._session.execute(stmt)
        except SQLAlchemyError as exc:
            raise CollaboratorError("has_billing_for_period", str(exc)) from exc
        return result.scalar_one_or_none() is not None

    async def insert_transaction(self, transaction: WalletTransaction) -> None:
        row = WalletTransactionDB(
            gym_id=transaction.gym_id,
            transaction_type=transaction.transaction_type.value,
            amount_inr=transaction.amount,
            balance_before_inr=transaction.balance_before,
            balance_after_inr=transaction.balance_after,
            description=transaction.description,
            payment_reference=transaction.payment_reference,
            billing_period=transaction.billing_period,
            created_at=transaction.created_at,
        )
        self._session.add(row)
        try:
            await self._session.commit()
        except IntegrityError as exc:
            await self._session.rollback()
            if transaction.billing_period is not None:
                raise DuplicateBillingPeriodError(
                    transaction.gym_id, transaction.billing_period
                ) from exc
            raise CollaboratorError("insert_transaction", str(exc)) from exc
        except SQLAlchemyError as exc:
            await self._session.rollback()
            raise CollaboratorError("insert_transaction", str(exc)) from exc

    async def list_active_gym_ids(self) -> list[str]:
        stmt = select(Gym.id).where(Gym.subscription_status == "active").order_by(Gym.id)
        try:
            result = await self._session.execute(stmt)
        except SQLAlchemyError as exc:
            raise CollaboratorError("list_active_gym_ids", str(exc)) from exc
        return list(result.scalars().all())
