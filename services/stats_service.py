"""
Stats history queries: raw history, daily trends and player comparison.
"""

from datetime import datetime, timedelta
from typing import Sequence

from peewee import fn

from db.models import PlayerStatsHistory, TrackedPlayer


def _window_start(days: int) -> datetime:
    return datetime.utcnow() - timedelta(days=days)


def get_history(player_id: str, days: int = 30) -> list[PlayerStatsHistory]:
    """History rows from the last `days` days, oldest first."""
    return list(
        PlayerStatsHistory.select()
        .where(
            (PlayerStatsHistory.player_id == player_id)
            & (PlayerStatsHistory.recorded_at >= _window_start(days))
        )
        .order_by(PlayerStatsHistory.recorded_at.asc(), PlayerStatsHistory.id.asc())
    )


def _daily_trend(player_id: str, days: int, column, prefix: str) -> list[dict]:
    day = fn.DATE(PlayerStatsHistory.recorded_at)
    query = (
        PlayerStatsHistory.select(
            day.alias("date"),
            fn.AVG(column).alias(f"avg_{prefix}"),
            fn.MAX(column).alias(f"max_{prefix}"),
            fn.MIN(column).alias(f"min_{prefix}"),
        )
        .where(
            (PlayerStatsHistory.player_id == player_id)
            & (PlayerStatsHistory.recorded_at >= _window_start(days))
        )
        .group_by(day)
        .order_by(day.asc())
        .dicts()
    )
    return [
        {key: (float(value) if key != "date" and value is not None else value) for key, value in row.items()}
        for row in query
    ]


def get_kd_trend(player_id: str, days: int = 30) -> list[dict]:
    """Per-day avg/max/min K/D ratio."""
    return _daily_trend(player_id, days, PlayerStatsHistory.kd_ratio, "kd")


def get_win_rate_trend(player_id: str, days: int = 30) -> list[dict]:
    """Per-day avg/max/min win rate."""
    return _daily_trend(player_id, days, PlayerStatsHistory.win_rate, "win_rate")


def latest_rows_query(player_ids: Sequence[str]):
    """
    History rows recorded at each player's most recent timestamp.

    Two rows sharing that timestamp both come back, highest id first.
    """
    latest = (
        PlayerStatsHistory.select(
            PlayerStatsHistory.player_id,
            fn.MAX(PlayerStatsHistory.recorded_at).alias("latest_at"),
        )
        .where(PlayerStatsHistory.player_id.in_(list(player_ids)))
        .group_by(PlayerStatsHistory.player_id)
        .alias("latest")
    )
    return (
        PlayerStatsHistory.select()
        .join(
            latest,
            on=(
                (PlayerStatsHistory.player_id == latest.c.player_id)
                & (PlayerStatsHistory.recorded_at == latest.c.latest_at)
            ),
        )
        .order_by(PlayerStatsHistory.player_id, PlayerStatsHistory.id.desc())
    )


def compare_players(player_ids: Sequence[str]) -> list[PlayerStatsHistory]:
    """
    Latest history row for each requested player.

    Players with no history are simply absent from the result.
    """
    latest: dict[str, PlayerStatsHistory] = {}
    for row in latest_rows_query(player_ids):
        latest.setdefault(row.player_id, row)
    return list(latest.values())


def list_tracked_players() -> list[TrackedPlayer]:
    return TrackedPlayer.list_by_name()
