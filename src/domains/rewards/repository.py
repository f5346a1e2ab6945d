"""Datastore access for streak rewards."""

from datetime import datetime

import structlog
from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from src.db.models import CheckIn, GymSetting
from src.shared.errors import CollaboratorError

from .config import SETTING_TYPE, StreakRewardSettings
from .models import CheckInRecord

logger = structlog.get_logger()


class SqlRewardStore:
    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def load_reward_settings(self, gym_id: str) -> StreakRewardSettings:
        """Gym-specific reward settings, or defaults when none can be read.

        A failed or empty lookup never fails the caller.
        """
        stmt = select(GymSetting.setting_data).where(
            GymSetting.gym_id == gym_id, GymSetting.setting_type == SETTING_TYPE
        )
        try:
            result = await self._session.execute(stmt)
            data = result.scalar_one_or_none()
        except SQLAlchemyError as exc:
            logger.warning("reward_settings_lookup_failed", gym_id=gym_id, error=str(exc))
            return StreakRewardSettings()

        if not isinstance(data, dict):
            logger.info("reward_settings_defaulted", gym_id=gym_id)
            return StreakRewardSettings()
        return StreakRewardSettings.from_mapping(data)

    async def list_check_in_times(
        self, gym_id: str, user_id: str, limit: int = 60
    ) -> list[datetime]:
        stmt = (
            select(CheckIn.check_in_time)
            .where(CheckIn.gym_id == gym_id, CheckIn.user_id == user_id)
            .order_by(CheckIn.check_in_time.desc())
            .limit(limit)
        )
        try:
            result = await self._session.execute(stmt)
        except SQLAlchemyError as exc:
            raise CollaboratorError("list_check_in_times", str(exc)) from exc
        return list(result.scalars().all())

    async def list_check_ins_between(
        self, gym_id: str, start: datetime, end: datetime
    ) -> list[CheckInRecord]:
        stmt = (
            select(CheckIn.user_id, CheckIn.check_in_time, CheckIn.user_name)
            .where(
                CheckIn.gym_id == gym_id,
                CheckIn.check_in_time >= start,
                CheckIn.check_in_time < end,
            )
            .order_by(CheckIn.check_in_time)
        )
        try:
            result = await self._session.execute(stmt)
        except SQLAlchemyError as exc:
            raise CollaboratorError("list_check_ins_between", str(exc)) from exc
        return [
            CheckInRecord(user_id=user_id, check_in_time=ts, user_name=name or "")
            for user_id, ts, name in result.all()
        ]
