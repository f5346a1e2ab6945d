"""Gym subscription billing calculator.

Pure functions over a snapshot of a gym's wallet ledger and membership list.
Nothing here reads from or writes to the datastore; the service layer fetches
the inputs and persists whatever transaction the calculator prepares.
"""

import math
from collections.abc import Iterable, Sequence
from datetime import date, datetime

from .config import BillingConfig, default_config
from .models import (
    LedgerEntry,
    MemberAccessResult,
    MembershipRecord,
    MemberTier,
    SubscriptionSnapshot,
    TaggedMember,
    TransactionType,
    WalletTransaction,
)


def signed_amount(transaction_type: TransactionType, amount: float) -> float:
    """Recharges credit the wallet; every other type debits it.

    The stored sign is ignored so that rows written with inconsistent signs
    still add up to the right balance.
    """
    if transaction_type == TransactionType.RECHARGE:
        return abs(amount)
    return -abs(amount)


def compute_wallet_balance(entries: Iterable[LedgerEntry]) -> float:
    balance = sum(signed_amount(e.transaction_type, e.amount) for e in entries)
    return round(balance, 2)


def next_billing_date(today: date, billing_day: int) -> date:
    if today.day < billing_day:
        return today.replace(day=billing_day)
    if today.month == 12:
        return date(today.year + 1, 1, billing_day)
    return date(today.year, today.month + 1, billing_day)


def billing_period(moment: date | datetime) -> str:
    """Idempotency key for monthly billing: one charge per gym per month."""
    return f"{moment.year:04d}-{moment.month:02d}"


def order_by_enrollment(memberships: Iterable[MembershipRecord]) -> list[MembershipRecord]:
    # sorted() is stable, so equal start dates keep their fetch order
    return sorted(memberships, key=lambda m: m.start_date)


class BillingCalculator:
    """Derives subscription figures and prepares ledger records for a gym."""

    def __init__(self, config: BillingConfig | None = None) -> None:
        self._config = config or default_config

    @property
    def config(self) -> BillingConfig:
        return self._config

    def format_money(self, amount: float) -> str:
        return f"{self._config.currency_symbol}{amount:.2f}"

    def snapshot(
        self,
        gym_id: str,
        entries: Sequence[LedgerEntry],
        memberships: Sequence[MembershipRecord],
        today: date,
    ) -> SubscriptionSnapshot:
        """Compute the subscription snapshot for a gym.

        Args:
            gym_id: The gym identifier.
            entries: Every wallet transaction recorded for the gym.
            memberships: The gym's memberships, in any order.
            today: Reference date for the next billing date.

        Returns:
            SubscriptionSnapshot with the free/paid split, wallet balance and
            the amount the next monthly billing will charge.
        """
        cfg = self._config

        wallet_balance = compute_wallet_balance(entries)

        total = len(memberships)
        free = min(total, cfg.free_limit)
        paid = max(0, total - cfg.free_limit)
        required = round(paid * cfg.unit_price, 2)

        # Paid members whose monthly fee the wallet can currently cover
        affordable = max(0, math.floor(wallet_balance / cfg.unit_price))
        visible = free + min(paid, affordable)

        billed_dates = [
            e.created_at.date()
            for e in entries
            if e.transaction_type == TransactionType.MONTHLY_BILLING and e.created_at is not None
        ]

        return SubscriptionSnapshot(
            gym_id=gym_id,
            total_members=total,
            free_members=free,
            paid_members=paid,
            wallet_balance=wallet_balance,
            required_amount=required,
            visible_members=visible,
            hidden_members=total - visible,
            next_billing_date=next_billing_date(today, cfg.billing_day),
            last_billing_date=max(billed_dates) if billed_dates else None,
        )

    def tag_members(
        self, memberships: Sequence[MembershipRecord], limit: int | None = None
    ) -> list[TaggedMember]:
        """Tag members free or paid by enrollment order.

        Only the listing uses this; billing charges the aggregate paid count.
        """
        ordered = order_by_enrollment(memberships)
        if limit is not None:
            ordered = ordered[:limit]
        return [
            TaggedMember(
                membership_id=m.membership_id,
                user_id=m.user_id,
                start_date=m.start_date,
                position=index + 1,
                member_type=MemberTier.FREE if index < self._config.free_limit else MemberTier.PAID,
            )
            for index, m in enumerate(ordered)
        ]

    def member_access(
        self,
        user_id: str,
        memberships: Sequence[MembershipRecord],
        wallet_balance: float,
    ) -> MemberAccessResult:
        cfg = self._config
        ordered = order_by_enrollment(memberships)
        index = next((i for i, m in enumerate(ordered) if m.user_id == user_id), -1)

        if index == -1:
            return MemberAccessResult(
                has_access=False,
                member_type=MemberTier.PAID,
                member_position=-1,
                reason="Member not found in this gym",
            )

        position = index + 1
        if index < cfg.free_limit:
            return MemberAccessResult(
                has_access=True, member_type=MemberTier.FREE, member_position=position
            )

        # The wallet must cover every paid member enrolled up to and including this one
        required = round((index - cfg.free_limit + 1) * cfg.unit_price, 2)
        if wallet_balance >= required:
            return MemberAccessResult(
                has_access=True, member_type=MemberTier.PAID, member_position=position
            )

        return MemberAccessResult(
            has_access=False,
            member_type=MemberTier.PAID,
            member_position=position,
            reason=(
                f"Insufficient wallet balance. Required: {self.format_money(required)}, "
                f"Available: {self.format_money(wallet_balance)}"
            ),
        )

    def monthly_billing_transaction(
        self, snapshot: SubscriptionSnapshot, now: datetime
    ) -> WalletTransaction:
        amount = snapshot.required_amount
        return WalletTransaction(
            gym_id=snapshot.gym_id,
            transaction_type=TransactionType.MONTHLY_BILLING,
            amount=amount,
            balance_before=snapshot.wallet_balance,
            balance_after=round(
                snapshot.wallet_balance + signed_amount(TransactionType.MONTHLY_BILLING, amount), 2
            ),
            description=f"Monthly subscription billing: {snapshot.paid_members} members",
            created_at=now,
            billing_period=billing_period(now),
        )

    def recharge_transaction(
        self,
        gym_id: str,
        amount: float,
        balance_before: float,
        now: datetime,
        payment_reference: str | None = None,
    ) -> WalletTransaction:
        return WalletTransaction(
            gym_id=gym_id,
            transaction_type=TransactionType.RECHARGE,
            amount=amount,
            balance_before=balance_before,
            balance_after=round(
                balance_before + signed_amount(TransactionType.RECHARGE, amount), 2
            ),
            description=f"Wallet recharge of {self.format_money(amount)}",
            created_at=now,
            payment_reference=payment_reference,
        )
