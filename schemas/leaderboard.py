import datetime as dt
from typing import Optional

from .common import CamelModel, RowModel
from .stats import PlayerStatsOut


class LeaderboardRow(RowModel):
    """One leaderboard row"""

    player_id: str
    player_name: str
    kills: Optional[int] = None
    deaths: Optional[int] = None
    kd_ratio: Optional[float] = None
    wins: Optional[int] = None
    losses: Optional[int] = None
    win_rate: Optional[float] = None
    score: Optional[int] = None
    level: Optional[int] = None
    rank: Optional[str] = None
    platform: Optional[str] = None
    last_updated: dt.datetime


class LeaderboardResponse(CamelModel):
    leaderboard: list[LeaderboardRow]
    order_by: str
    limit: int
    offset: int


class PlayerRankResponse(CamelModel):
    player_id: str
    rank: int
    order_by: str


class LeaderboardSummary(RowModel):
    total_players: int
    avg_kd: Optional[float] = None
    max_kd: Optional[float] = None
    avg_win_rate: Optional[float] = None
    total_kills: int
    total_deaths: int


class LeaderboardStatsResponse(CamelModel):
    stats: LeaderboardSummary


class PlayerIdsRequest(CamelModel):
    player_ids: list[str]


class BatchUpdateResponse(CamelModel):
    success: bool = True
    players_updated: int
    players: list[PlayerStatsOut]


class FetchMultipleResponse(CamelModel):
    players: list[PlayerStatsOut]
    count: int
