"""Pydantic models for the gym wallet billing domain."""

from datetime import date, datetime
from enum import StrEnum

from pydantic import BaseModel, Field

# --- Enums ---


class TransactionType(StrEnum):
    RECHARGE = "recharge"
    DEDUCTION = "deduction"
    MONTHLY_BILLING = "monthly_billing"
    REFUND = "refund"
    ADJUSTMENT = "adjustment"


class MemberTier(StrEnum):
    FREE = "free"
    PAID = "paid"


class BillingResultCode(StrEnum):
    BILLED = "billed"
    RECHARGED = "recharged"
    NO_PAID_MEMBERS = "no_paid_members"
    ALREADY_BILLED = "already_billed"
    INSUFFICIENT_BALANCE = "insufficient_balance"
    INVALID_AMOUNT = "invalid_amount"
    COLLABORATOR_ERROR = "collaborator_error"


SUCCESS_CODES = frozenset(
    {BillingResultCode.BILLED, BillingResultCode.RECHARGED, BillingResultCode.NO_PAID_MEMBERS}
)


# --- Ledger Models ---


class LedgerEntry(BaseModel):
    """A wallet transaction as read back from the ledger."""

    amount: float
    transaction_type: TransactionType
    created_at: datetime | None = None


class WalletTransaction(BaseModel):
    """A wallet transaction to be appended to the ledger."""

    gym_id: str
    transaction_type: TransactionType
    amount: float
    balance_before: float
    balance_after: float
    description: str
    created_at: datetime
    payment_reference: str | None = None
    billing_period: str | None = None


class MembershipRecord(BaseModel):
    membership_id: str
    user_id: str
    start_date: date
    is_active: bool = True


# --- Derived Models ---


class SubscriptionSnapshot(BaseModel):
    gym_id: str
    total_members: int = Field(ge=0)
    free_members: int = Field(ge=0)
    paid_members: int = Field(ge=0)
    wallet_balance: float
    required_amount: float = Field(ge=0)
    visible_members: int = Field(ge=0)
    hidden_members: int = Field(ge=0)
    next_billing_date: date
    last_billing_date: date | None = None


class TaggedMember(BaseModel):
    membership_id: str
    user_id: str
    start_date: date
    position: int
    member_type: MemberTier


class MemberAccessResult(BaseModel):
    has_access: bool
    member_type: MemberTier
    member_position: int
    reason: str | None = None


class BillingOutcome(BaseModel):
    """Result of a billing or recharge attempt.

    Business-rule failures are reported here with ``success=False``; they are
    never raised.
    """

    gym_id: str
    code: BillingResultCode
    message: str
    required_amount: float | None = None
    wallet_balance: float | None = None
    transaction: WalletTransaction | None = None
    snapshot: SubscriptionSnapshot | None = None

    @property
    def success(self) -> bool:
        return self.code in SUCCESS_CODES

    def to_response(self) -> dict:
        body = self.model_dump(mode="json")
        body["success"] = self.success
        return body


# --- Request Models ---


class RechargeRequest(BaseModel):
    amount: float
    payment_reference: str | None = None


class BillingCycleRequest(BaseModel):
    # Bill a single gym regardless of the calendar; omit to sweep all active gyms.
    gym_id: str | None = None
