"""Gym subscription billing configuration with sensible defaults."""

import os
from dataclasses import dataclass


@dataclass
class BillingConfig:
    """Pricing and scheduling constants for gym wallet billing.

    Every gym gets ``free_limit`` members at no charge; each member beyond
    that costs ``unit_price`` per month, deducted from the prepaid wallet on
    ``billing_day`` of the month.
    """

    unit_price: float = 10.0
    free_limit: int = 5
    billing_day: int = 10  # day of month the sweep bills active gyms
    currency_symbol: str = "₹"

    def __post_init__(self) -> None:
        if self.unit_price <= 0:
            raise ValueError(f"unit_price must be positive, got {self.unit_price}")
        if self.free_limit < 0:
            raise ValueError(f"free_limit must be non-negative, got {self.free_limit}")
        if not 1 <= self.billing_day <= 28:
            raise ValueError(f"billing_day must be within 1..28, got {self.billing_day}")

    @classmethod
    def from_env(cls) -> "BillingConfig":
        """Load config with environment variable overrides (BILLING_ prefix)."""
        config = cls()

        if v := os.getenv("BILLING_UNIT_PRICE"):
            config.unit_price = float(v)
        if v := os.getenv("BILLING_FREE_LIMIT"):
            config.free_limit = int(v)
        if v := os.getenv("BILLING_DAY"):
            config.billing_day = int(v)
        if v := os.getenv("BILLING_CURRENCY_SYMBOL"):
            config.currency_symbol = v

        config.__post_init__()
        return config


default_config = BillingConfig()
