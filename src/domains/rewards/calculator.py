"""Streak reward calculator.

Turns a member's streak day into the coins awarded for completing the daily
workout timer. The streak day itself is derived elsewhere (see ``streak.py``);
this module is a pure lookup over the gym's reward settings.
"""

from .config import RewardsConfig, StreakRewardSettings, default_config, default_settings
from .models import StreakRewardResult

# Multiplier paid on each tier of the traditional reward table
TIER_MULTIPLIERS: dict[int, float] = {1: 1.0, 2: 1.5, 3: 2.0, 4: 2.5, 5: 3.0}
CHAMPION_MULTIPLIER = 3.5


class RewardCalculator:
    def __init__(self, config: RewardsConfig | None = None) -> None:
        self._config = config or default_config

    def calculate_reward(
        self, streak_day: int, settings: StreakRewardSettings | None = None
    ) -> StreakRewardResult:
        """Coins, multiplier and description for the given streak day.

        Streak days below 1 are treated as day 1.
        """
        settings = settings or default_settings
        day = max(streak_day, 1)

        if settings.unified_mode and settings.unified_value:
            multiplier = min(1 + (day - 1) * self._config.unified_step, self._config.unified_cap)
            return StreakRewardResult(
                coins_earned=settings.unified_value,
                streak_day=day,
                bonus_multiplier=round(multiplier, 2),
                description=f"Daily workout reward ({day}-day streak)",
            )

        if day == 1:
            description = "First day streak reward"
        elif day <= 5:
            description = f"{day}-day streak bonus"
        else:
            description = f"{day}-day streak champion bonus"

        return StreakRewardResult(
            coins_earned=settings.coins_for_day(day),
            streak_day=day,
            bonus_multiplier=TIER_MULTIPLIERS.get(day, CHAMPION_MULTIPLIER),
            description=description,
        )

    def next_day_preview(
        self, current_streak: int, settings: StreakRewardSettings | None = None
    ) -> StreakRewardResult:
        return self.calculate_reward(current_streak + 1, settings)


def format_reward_message(result: StreakRewardResult) -> str:
    return f"Timer Complete! Earned {result.coins_earned} coins ({result.description})"
