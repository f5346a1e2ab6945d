"""Pydantic models for the streak rewards domain."""

from datetime import date, datetime

from pydantic import BaseModel, Field


class StreakRewardResult(BaseModel):
    coins_earned: int
    streak_day: int = Field(ge=1)
    bonus_multiplier: float = Field(ge=1.0)
    description: str


class CheckInRecord(BaseModel):
    user_id: str
    check_in_time: datetime
    user_name: str = ""


class StreakStatus(BaseModel):
    user_id: str
    gym_id: str
    current_streak: int = Field(ge=0)
    last_check_in: date | None = None
    today_reward: StreakRewardResult | None = None
    next_day_preview: StreakRewardResult


class LeaderboardMember(BaseModel):
    rank: int
    user_id: str
    name: str
    monthly_check_ins: int
    is_current_user: bool = False


# --- Request Models ---


class RewardCalculationRequest(BaseModel):
    streak_day: int
    # Optional: pass settings directly instead of loading the gym's stored ones
    settings: dict | None = None
