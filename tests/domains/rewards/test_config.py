"""Tests for streak reward settings merging."""

import pytest

from src.domains.rewards.config import RewardsConfig, StreakRewardSettings


class TestStreakRewardSettings:
    def test_defaults(self):
        settings = StreakRewardSettings()
        assert (settings.day1, settings.day3, settings.day6_plus) == (100, 200, 350)
        assert settings.sunday_auto_streak is True
        assert settings.unified_mode is False

    def test_empty_or_missing_document(self):
        assert StreakRewardSettings.from_mapping(None) == StreakRewardSettings()
        assert StreakRewardSettings.from_mapping({}) == StreakRewardSettings()

    def test_camel_case_document_overrides_fields(self):
        settings = StreakRewardSettings.from_mapping(
            {"day1": 10, "day6Plus": 60, "sundayAutoStreak": False, "unifiedMode": True,
             "unifiedValue": 25}
        )
        assert settings.day1 == 10
        assert settings.day2 == 150
        assert settings.day6_plus == 60
        assert settings.sunday_auto_streak is False
        assert settings.unified_mode is True
        assert settings.unified_value == 25

    def test_snake_case_keys_are_accepted(self):
        settings = StreakRewardSettings.from_mapping({"day6_plus": 70, "unified_mode": True})
        assert settings.day6_plus == 70
        assert settings.unified_mode is True

    def test_malformed_values_keep_defaults(self):
        settings = StreakRewardSettings.from_mapping(
            {"day1": "lots", "day2": None, "day3": True, "sundayAutoStreak": "yes", "bogus": 1}
        )
        assert settings == StreakRewardSettings()

    @pytest.mark.parametrize("value", ["--5", "\u00b2", "-", "12a", "1.5"])
    def test_unparseable_numeric_strings_keep_defaults(self, value):
        assert StreakRewardSettings.from_mapping({"day1": value}) == StreakRewardSettings()

    def test_numeric_strings_and_whole_floats_are_coerced(self):
        settings = StreakRewardSettings.from_mapping({"day1": "120", "day2": 175.0})
        assert settings.day1 == 120
        assert settings.day2 == 175

    def test_round_trip_uses_stored_key_names(self):
        mapping = StreakRewardSettings(day6_plus=80).to_mapping()
        assert mapping["day6Plus"] == 80
        assert "sundayAutoStreak" in mapping
        assert StreakRewardSettings.from_mapping(mapping).day6_plus == 80


class TestRewardsConfig:
    def test_env_overrides(self, monkeypatch):
        monkeypatch.setenv("REWARDS_UNIFIED_CAP", "2.5")
        monkeypatch.setenv("REWARDS_LEADERBOARD_LIMIT", "10")
        config = RewardsConfig.from_env()
        assert config.unified_cap == 2.5
        assert config.leaderboard_limit == 10
        assert config.unified_step == 0.1
