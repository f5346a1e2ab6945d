"""Gym wallet billing service.

Fetches a consistent snapshot through the injected ledger, lets the
calculator decide, and hands at most one transaction back to the ledger.
Nothing is retried and no step is wrapped in a database transaction beyond
the single insert; the unique billing period on the ledger table is what
stops a second charge in the same month.
"""

from collections.abc import Callable, Sequence
from datetime import UTC, date, datetime

import structlog

from src.shared.errors import CollaboratorError

from .calculator import BillingCalculator, billing_period, compute_wallet_balance
from .config import BillingConfig
from .models import (
    BillingOutcome,
    BillingResultCode,
    MemberAccessResult,
    SubscriptionSnapshot,
    TaggedMember,
)
from .repository import BillingLedger, DuplicateBillingPeriodError

logger = structlog.get_logger()


def _utcnow() -> datetime:
    return datetime.now(UTC)


class BillingService:
    def __init__(
        self,
        ledger: BillingLedger,
        config: BillingConfig | None = None,
        clock: Callable[[], datetime] = _utcnow,
    ) -> None:
        self._ledger = ledger
        self._calculator = BillingCalculator(config)
        self._clock = clock

    @property
    def calculator(self) -> BillingCalculator:
        return self._calculator

    async def compute_snapshot(self, gym_id: str) -> SubscriptionSnapshot:
        """Read the ledger and memberships and derive the subscription figures.

        Raises:
            CollaboratorError: if either read fails.
        """
        entries = await self._ledger.list_transactions(gym_id)
        memberships = await self._ledger.list_memberships(gym_id)
        return self._calculator.snapshot(gym_id, entries, memberships, self._clock().date())

    async def process_monthly_billing(self, gym_id: str) -> BillingOutcome:
        now = self._clock()
        snapshot = await self.compute_snapshot(gym_id)
        money = self._calculator.format_money

        if snapshot.paid_members == 0:
            logger.info("billing_skipped_no_paid_members", gym_id=gym_id)
            return BillingOutcome(
                gym_id=gym_id,
                code=BillingResultCode.NO_PAID_MEMBERS,
                message="No paid members to bill",
                required_amount=0.0,
                wallet_balance=snapshot.wallet_balance,
                snapshot=snapshot,
            )

        period = billing_period(now)
        if await self._ledger.has_billing_for_period(gym_id, period):
            logger.info("billing_skipped_already_billed", gym_id=gym_id, billing_period=period)
            return self._already_billed(snapshot, period)

        if snapshot.wallet_balance < snapshot.required_amount:
            logger.warning(
                "billing_insufficient_balance",
                gym_id=gym_id,
                required_amount=snapshot.required_amount,
                wallet_balance=snapshot.wallet_balance,
            )
            return BillingOutcome(
                gym_id=gym_id,
                code=BillingResultCode.INSUFFICIENT_BALANCE,
                message=(
                    f"Insufficient balance. Required: {money(snapshot.required_amount)}, "
                    f"Available: {money(snapshot.wallet_balance)}"
                ),
                required_amount=snapshot.required_amount,
                wallet_balance=snapshot.wallet_balance,
                snapshot=snapshot,
            )

        transaction = self._calculator.monthly_billing_transaction(snapshot, now)
        try:
            await self._ledger.insert_transaction(transaction)
        except DuplicateBillingPeriodError:
            logger.info("billing_race_lost", gym_id=gym_id, billing_period=period)
            return self._already_billed(snapshot, period)
        except CollaboratorError as exc:
            logger.error("billing_write_failed", gym_id=gym_id, error=str(exc))
            return BillingOutcome(
                gym_id=gym_id,
                code=BillingResultCode.COLLABORATOR_ERROR,
                message="Failed to process billing",
                required_amount=snapshot.required_amount,
                wallet_balance=snapshot.wallet_balance,
                snapshot=snapshot,
            )

        logger.info(
            "gym_billed",
            gym_id=gym_id,
            billing_period=period,
            paid_members=snapshot.paid_members,
            amount=transaction.amount,
            balance_after=transaction.balance_after,
        )
        return BillingOutcome(
            gym_id=gym_id,
            code=BillingResultCode.BILLED,
            message=(
                f"Successfully billed {money(transaction.amount)} "
                f"for {snapshot.paid_members} paid members"
            ),
            required_amount=snapshot.required_amount,
            wallet_balance=transaction.balance_after,
            transaction=transaction,
            snapshot=snapshot,
        )

    async def recharge_wallet(
        self, gym_id: str, amount: float, payment_reference: str | None = None
    ) -> BillingOutcome:
        # `not amount > 0` also rejects NaN
        if not amount > 0:
            return BillingOutcome(
                gym_id=gym_id,
                code=BillingResultCode.INVALID_AMOUNT,
                message="Amount must be greater than 0",
            )

        balance_before = (await self.compute_snapshot(gym_id)).wallet_balance
        transaction = self._calculator.recharge_transaction(
            gym_id, amount, balance_before, self._clock(), payment_reference
        )
        try:
            await self._ledger.insert_transaction(transaction)
        except CollaboratorError as exc:
            logger.error("recharge_write_failed", gym_id=gym_id, error=str(exc))
            return BillingOutcome(
                gym_id=gym_id,
                code=BillingResultCode.COLLABORATOR_ERROR,
                message="Failed to recharge wallet",
            )

        snapshot = await self.compute_snapshot(gym_id)
        logger.info(
            "wallet_recharged",
            gym_id=gym_id,
            amount=amount,
            payment_reference=payment_reference,
            wallet_balance=snapshot.wallet_balance,
        )
        return BillingOutcome(
            gym_id=gym_id,
            code=BillingResultCode.RECHARGED,
            message=f"Wallet recharged with {self._calculator.format_money(amount)}",
            wallet_balance=snapshot.wallet_balance,
            transaction=transaction,
            snapshot=snapshot,
        )

    async def list_members(self, gym_id: str) -> list[TaggedMember]:
        """Members the gym owner can see, tagged free or paid."""
        entries = await self._ledger.list_transactions(gym_id)
        memberships = await self._ledger.list_memberships(gym_id)
        snapshot = self._calculator.snapshot(gym_id, entries, memberships, self._clock().date())
        return self._calculator.tag_members(memberships, limit=snapshot.visible_members)

    async def check_member_access(self, gym_id: str, user_id: str) -> MemberAccessResult:
        entries = await self._ledger.list_transactions(gym_id)
        memberships = await self._ledger.list_memberships(gym_id)
        return self._calculator.member_access(
            user_id, memberships, compute_wallet_balance(entries)
        )

    async def run_billing_cycle(
        self, gym_ids: Sequence[str] | None = None, today: date | None = None
    ) -> list[BillingOutcome]:
        """Bill every gym when today is the billing day.

        A read failure for one gym is reported in its outcome and the sweep
        moves on to the next gym.
        """
        today = today or self._clock().date()
        if today.day != self._calculator.config.billing_day:
            logger.info("billing_cycle_not_due", day=today.day)
            return []

        if gym_ids is None:
            gym_ids = await self._ledger.list_active_gym_ids()

        outcomes: list[BillingOutcome] = []
        for gym_id in gym_ids:
            try:
                outcomes.append(await self.process_monthly_billing(gym_id))
            except CollaboratorError as exc:
                logger.error("billing_cycle_gym_failed", gym_id=gym_id, error=str(exc))
                outcomes.append(
                    BillingOutcome(
                        gym_id=gym_id,
                        code=BillingResultCode.COLLABORATOR_ERROR,
                        message="Failed to process billing",
                    )
                )

        logger.info(
            "billing_cycle_completed",
            gyms=len(outcomes),
            billed=sum(1 for o in outcomes if o.code == BillingResultCode.BILLED),
        )
        return outcomes

    def _already_billed(self, snapshot: SubscriptionSnapshot, period: str) -> BillingOutcome:
        return BillingOutcome(
            gym_id=snapshot.gym_id,
            code=BillingResultCode.ALREADY_BILLED,
            message=f"Monthly billing for {period} has already been processed",
            required_amount=snapshot.required_amount,
            wallet_balance=snapshot.wallet_balance,
            snapshot=snapshot,
        )
