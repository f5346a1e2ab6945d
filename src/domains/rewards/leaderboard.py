"""Monthly check-in leaderboard."""

from collections.abc import Iterable

from .models import CheckInRecord, LeaderboardMember


def rank_monthly_check_ins(
    check_ins: Iterable[CheckInRecord], current_user_id: str | None = None, limit: int = 5
) -> list[LeaderboardMember]:
    """Rank users by how many check-ins they have in the supplied window.

    Ties keep the order in which users first appear in ``check_ins``.
    """
    counts: dict[str, int] = {}
    names: dict[str, str] = {}
    for record in check_ins:
        counts[record.user_id] = counts.get(record.user_id, 0) + 1
        if record.user_name:
            names[record.user_id] = record.user_name

    ranked = sorted(counts.items(), key=lambda item: item[1], reverse=True)[:limit]
    return [
        LeaderboardMember(
            rank=index + 1,
            user_id=user_id,
            name=names.get(user_id, ""),
            monthly_check_ins=count,
            is_current_user=user_id == current_user_id,
        )
        for index, (user_id, count) in enumerate(ranked)
    ]
