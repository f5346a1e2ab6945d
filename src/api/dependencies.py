"""Request-scoped service construction.

Domain configs are built once from the environment; services and their
repositories are built per request around the request's database session.
Tests swap these providers through ``app.dependency_overrides``.
"""

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from src.db.database import get_session
from src.domains.billing.config import BillingConfig
from src.domains.billing.repository import SqlBillingLedger
from src.domains.billing.service import BillingService
from src.domains.presence.config import GeofenceConfig
from src.domains.presence.repository import SqlLocationLog
from src.domains.rewards.config import RewardsConfig
from src.domains.rewards.repository import SqlRewardStore

billing_config = BillingConfig.from_env()
geofence_config = GeofenceConfig.from_env()
rewards_config = RewardsConfig.from_env()


def get_billing_service(
    session: AsyncSession = Depends(get_session),  # noqa: B008
) -> BillingService:
    return BillingService(SqlBillingLedger(session), billing_config)


def get_reward_store(
    session: AsyncSession = Depends(get_session),  # noqa: B008
) -> SqlRewardStore:
    return SqlRewardStore(session)


def get_location_log(
    session: AsyncSession = Depends(get_session),  # noqa: B008
) -> SqlLocationLog:
    return SqlLocationLog(session)
