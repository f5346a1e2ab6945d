"""Consecutive-day streak rules."""

from collections.abc import Iterable
from datetime import date, datetime

MONDAY = 0
SATURDAY = 5


def _as_date(value: date | datetime) -> date:
    return value.date() if isinstance(value, datetime) else value


def should_maintain_streak_over_sunday(
    last_check_in: date | datetime,
    now: date | datetime,
    sunday_auto_streak: bool = True,
) -> bool:
    """True only for a Saturday check-in followed by a Monday one.

    The gap must be one or two calendar days; any other pattern breaks the
    streak.
    """
    if not sunday_auto_streak:
        return False

    last_day = _as_date(last_check_in)
    today = _as_date(now)
    gap = (today - last_day).days
    if gap not in (1, 2):
        return False
    return today.weekday() == MONDAY and last_day.weekday() == SATURDAY


def _continues(earlier: date, later: date, sunday_auto_streak: bool) -> bool:
    return (later - earlier).days == 1 or should_maintain_streak_over_sunday(
        earlier, later, sunday_auto_streak
    )


def current_streak(
    check_in_times: Iterable[date | datetime],
    today: date,
    sunday_auto_streak: bool = True,
) -> int:
    """Number of consecutive check-in days ending today or yesterday.

    Multiple check-ins on the same day count once. A streak whose newest day is
    older than yesterday (outside the Sunday rule) is already broken and
    counts as 0.
    """
    days = sorted({_as_date(t) for t in check_in_times if _as_date(t) <= today}, reverse=True)
    if not days:
        return 0

    newest = days[0]
    if newest != today and not _continues(newest, today, sunday_auto_streak):
        return 0

    streak = 1
    for later, earlier in zip(days, days[1:]):
        if not _continues(earlier, later, sunday_auto_streak):
            break
        streak += 1
    return streak
