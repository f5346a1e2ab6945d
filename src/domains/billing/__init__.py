"""Gym wallet billing domain."""

from .calculator import BillingCalculator, compute_wallet_balance, signed_amount
from .config import BillingConfig
from .models import (
    BillingOutcome,
    BillingResultCode,
    SubscriptionSnapshot,
    TransactionType,
    WalletTransaction,
)
from .service import BillingService

__all__ = [
    "BillingCalculator",
    "BillingConfig",
    "BillingOutcome",
    "BillingResultCode",
    "BillingService",
    "SubscriptionSnapshot",
    "TransactionType",
    "WalletTransaction",
    "compute_wallet_balance",
    "signed_amount",
]
