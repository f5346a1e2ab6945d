"""Streak reward settings with typed defaults.

Gyms may store their own reward table in ``gym_settings`` under the
``streak_rewards`` type. Stored documents are partial and use camelCase keys;
``StreakRewardSettings.from_mapping`` lays them over the defaults one field at
a time.
"""

import os
from dataclasses import dataclass, fields, replace
from typing import Any

import structlog

logger = structlog.get_logger()

SETTING_TYPE = "streak_rewards"

# Stored key -> dataclass field, for the camelCase keys the gym dashboard writes
_ALIASES: dict[str, str] = {
    "day6Plus": "day6_plus",
    "sundayAutoStreak": "sunday_auto_streak",
    "unifiedMode": "unified_mode",
    "unifiedValue": "unified_value",
}

_ALIAS_OF: dict[str, str] = {v: k for k, v in _ALIASES.items()}


@dataclass(frozen=True)
class StreakRewardSettings:
    """Coins awarded per streak day, plus the two gym-level switches."""

    day1: int = 100
    day2: int = 150
    day3: int = 200
    day4: int = 250
    day5: int = 300
    day6_plus: int = 350

    # Saturday -> Monday keeps the streak alive when Sunday is skipped
    sunday_auto_streak: bool = True

    # Flat reward every day with a progressive multiplier instead of tiers
    unified_mode: bool = False
    unified_value: int = 0

    @classmethod
    def from_mapping(cls, data: dict[str, Any] | None) -> "StreakRewardSettings":
        """Override defaults field by field from a stored settings document.

        Unknown keys and values of the wrong type are dropped so a malformed
        document degrades to defaults instead of failing the caller.
        """
        if not data:
            return cls()

        overrides: dict[str, Any] = {}
        for f in fields(cls):
            key = f.name if f.name in data else _ALIAS_OF.get(f.name)
            if key is None or key not in data:
                continue
            value = _coerce(data[key], f.type)
            if value is None:
                logger.warning("reward_setting_ignored", field=f.name, value=repr(data[key]))
                continue
            overrides[f.name] = value

        return replace(cls(), **overrides)

    def to_mapping(self) -> dict[str, Any]:
        return {_ALIAS_OF.get(f.name, f.name): getattr(self, f.name) for f in fields(self)}

    def coins_for_day(self, streak_day: int) -> int:
        if streak_day >= 6:
            return self.day6_plus
        return getattr(self, f"day{max(streak_day, 1)}")


def _coerce(value: Any, annotation: Any) -> Any:
    """Return value as the field's type, or None when it does not fit."""
    if annotation in (bool, "bool"):
        return value if isinstance(value, bool) else None
    if annotation in (int, "int"):
        if isinstance(value, bool):
            return None
        if isinstance(value, int):
            return value
        if isinstance(value, float) and value.is_integer():
            return int(value)
        # ASCII only; int() would also accept other scripts' digits
        if isinstance(value, str) and value.isascii():
            try:
                return int(value)
            except ValueError:
                return None
    return None


@dataclass
class RewardsConfig:
    """Multiplier curve for unified mode and the leaderboard size."""

    unified_step: float = 0.1
    unified_cap: float = 3.0
    leaderboard_limit: int = 5

    @classmethod
    def from_env(cls) -> "RewardsConfig":
        """Load config with environment variable overrides (REWARDS_ prefix)."""
        config = cls()

        if v := os.getenv("REWARDS_UNIFIED_STEP"):
            config.unified_step = float(v)
        if v := os.getenv("REWARDS_UNIFIED_CAP"):
            config.unified_cap = float(v)
        if v := os.getenv("REWARDS_LEADERBOARD_LIMIT"):
            config.leaderboard_limit = int(v)
        return config


default_settings = StreakRewardSettings()
default_config = RewardsConfig()
