"""
Leaderboard Query Service

Read side over the leaderboard snapshot table. No caching; every call
re-queries.
"""

from enum import Enum
from typing import Optional

from peewee import fn

from db.models import LeaderboardEntry


class LeaderboardMetric(str, Enum):
    """Columns the leaderboard can be ranked by."""

    KD_RATIO = "kd_ratio"
    SCORE = "score"
    WINS = "wins"
    LEVEL = "level"

    @classmethod
    def parse(cls, value: Optional[str]) -> "LeaderboardMetric":
        """Resolve a query-string value, falling back to K/D for anything unknown."""
        try:
            return cls(value)
        except ValueError:
            return cls.KD_RATIO

    @property
    def field(self):
        return getattr(LeaderboardEntry, self.value)


DEFAULT_PAGE_SIZE = 100
MAX_PAGE_SIZE = 500


def get_leaderboard(
    order_by: LeaderboardMetric = LeaderboardMetric.KD_RATIO,
    limit: int = DEFAULT_PAGE_SIZE,
    offset: int = 0,
) -> list[LeaderboardEntry]:
    """
    One page of the leaderboard, best first.

    Rows with a null metric sort last; ties keep insertion order so pages
    are stable. An offset past the end yields an empty list.
    """
    limit = max(0, min(limit, MAX_PAGE_SIZE))
    offset = max(0, offset)

    return list(
        LeaderboardEntry.select()
        .order_by(order_by.field.desc(nulls="LAST"), LeaderboardEntry.id.asc())
        .limit(limit)
        .offset(offset)
    )


def get_player_rank(
    player_id: str,
    order_by: LeaderboardMetric = LeaderboardMetric.KD_RATIO,
) -> Optional[int]:
    """
    1 + the number of players strictly ahead on the metric.

    Tied players share a rank (two players tied for first are both 1).
    A player with a null metric is behind everyone who has a value.

    Returns:
        The rank, or None if the player has no leaderboard row
    """
    entry = LeaderboardEntry.get_or_none(LeaderboardEntry.player_id == player_id)
    if entry is None:
        return None

    field = order_by.field
    value = getattr(entry, order_by.value)

    if value is None:
        ahead = LeaderboardEntry.select().where(field.is_null(False))
    else:
        ahead = LeaderboardEntry.select().where(field > value)

    return ahead.count() + 1


def get_leaderboard_stats() -> dict:
    """Aggregate summary over every leaderboard row."""
    row = (
        LeaderboardEntry.select(
            fn.COUNT(LeaderboardEntry.id).alias("total_players"),
            fn.AVG(LeaderboardEntry.kd_ratio).alias("avg_kd"),
            fn.MAX(LeaderboardEntry.kd_ratio).alias("max_kd"),
            fn.AVG(LeaderboardEntry.win_rate).alias("avg_win_rate"),
            fn.SUM(LeaderboardEntry.kills).alias("total_kills"),
            fn.SUM(LeaderboardEntry.deaths).alias("total_deaths"),
        )
        .dicts()
        .get()
    )

    return {
        "total_players": int(row["total_players"] or 0),
        "avg_kd": _as_float(row["avg_kd"]),
        "max_kd": _as_float(row["max_kd"]),
        "avg_win_rate": _as_float(row["avg_win_rate"]),
        "total_kills": int(row["total_kills"] or 0),
        "total_deaths": int(row["total_deaths"] or 0),
    }


def _as_float(value) -> Optional[float]:
    # Postgres hands back Decimal for AVG over some column types
    return float(value) if value is not None else None
