"""Streak reward and leaderboard endpoints."""

from datetime import UTC, datetime

import structlog
from fastapi import APIRouter, Depends, Query

from src.api.dependencies import get_reward_store, rewards_config
from src.domains.rewards.calculator import RewardCalculator, format_reward_message
from src.domains.rewards.config import StreakRewardSettings
from src.domains.rewards.leaderboard import rank_monthly_check_ins
from src.domains.rewards.models import RewardCalculationRequest, StreakStatus
from src.domains.rewards.repository import SqlRewardStore
from src.domains.rewards.streak import current_streak

logger = structlog.get_logger()
router = APIRouter(prefix="/api/v1/rewards", tags=["rewards"])

_calculator = RewardCalculator(rewards_config)


def _month_bounds(now: datetime) -> tuple[datetime, datetime]:
    start = now.replace(day=1, hour=0, minute=0, second=0, microsecond=0)
    if start.month == 12:
        return start, start.replace(year=start.year + 1, month=1)
    return start, start.replace(month=start.month + 1)


@router.get("/{gym_id}/settings")
async def get_reward_settings(
    gym_id: str,
    store: SqlRewardStore = Depends(get_reward_store),  # noqa: B008
) -> dict:
    reward_settings = await store.load_reward_settings(gym_id)
    return {"gym_id": gym_id, "settings": reward_settings.to_mapping()}


@router.post("/{gym_id}/calculate")
async def calculate_reward(
    gym_id: str,
    request: RewardCalculationRequest,
    store: SqlRewardStore = Depends(get_reward_store),  # noqa: B008
) -> dict:
    """Coins for the given streak day under the gym's reward settings."""
    if request.settings is not None:
        reward_settings = StreakRewardSettings.from_mapping(request.settings)
    else:
        reward_settings = await store.load_reward_settings(gym_id)

    result = _calculator.calculate_reward(request.streak_day, reward_settings)
    logger.info(
        "reward_calculated",
        gym_id=gym_id,
        streak_day=result.streak_day,
        coins_earned=result.coins_earned,
    )
    return {
        **result.model_dump(),
        "message": format_reward_message(result),
    }


@router.get("/{gym_id}/users/{user_id}/streak")
async def get_streak(
    gym_id: str,
    user_id: str,
    store: SqlRewardStore = Depends(get_reward_store),  # noqa: B008
) -> dict:
    today = datetime.now(UTC).date()
    reward_settings = await store.load_reward_settings(gym_id)
    times = await store.list_check_in_times(gym_id, user_id)

    streak = current_streak(times, today, reward_settings.sunday_auto_streak)
    last_check_in = max((t.date() for t in times), default=None)

    status = StreakStatus(
        user_id=user_id,
        gym_id=gym_id,
        current_streak=streak,
        last_check_in=last_check_in,
        today_reward=(
            _calculator.calculate_reward(streak, reward_settings)
            if last_check_in == today
            else None
        ),
        next_day_preview=_calculator.next_day_preview(streak, reward_settings),
    )
    return status.model_dump(mode="json")


@router.get("/{gym_id}/leaderboard")
async def get_leaderboard(
    gym_id: str,
    current_user_id: str | None = Query(default=None),
    limit: int = Query(default=rewards_config.leaderboard_limit, ge=1, le=100),
    store: SqlRewardStore = Depends(get_reward_store),  # noqa: B008
) -> dict:
    """Members ranked by check-ins in the current calendar month."""
    start, end = _month_bounds(datetime.now(UTC))
    check_ins = await store.list_check_ins_between(gym_id, start, end)
    ranking = rank_monthly_check_ins(check_ins, current_user_id, limit)
    return {
        "gym_id": gym_id,
        "month": start.strftime("%Y-%m"),
        "items": [m.model_dump() for m in ranking],
        "total": len(ranking),
    }
