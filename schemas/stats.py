import datetime as dt
from typing import Optional

from pydantic import Field

from .common import CamelModel, RowModel

# ------------------------------- Rows ------------------------------- #

class StatsHistoryRow(RowModel):
    """One player_stats_history row"""
    id: int
    player_id: str
    player_name: str
    kills: int
    deaths: int
    kd_ratio: float
    wins: int
    losses: int
    win_rate: float
    score: int
    time_played: int
    headshots: int
    headshot_percentage: float
    accuracy: float
    level: int
    rank: str
    recorded_at: dt.datetime

class KdTrendPoint(RowModel):
    date: dt.date
    avg_kd: Optional[float] = None
    max_kd: Optional[float] = None
    min_kd: Optional[float] = None

class WinRateTrendPoint(RowModel):
    date: dt.date
    avg_win_rate: Optional[float] = None
    max_win_rate: Optional[float] = None
    min_win_rate: Optional[float] = None

class TrackedPlayerRow(RowModel):
    id: int
    player_id: str
    player_name: str
    platform: str
    last_fetched: Optional[dt.datetime] = None
    created_at: dt.datetime
    updated_at: dt.datetime

class PlayerStatsOut(CamelModel):
    """Normalized provider stats as returned to the client"""
    player_id: str
    player_name: str
    kills: int | float = 0
    deaths: int | float = 0
    kd_ratio: float = 0
    wins: int | float = 0
    losses: int | float = 0
    win_rate: float = 0
    score: int | float = 0
    time_played: int | float = 0
    headshots: int | float = 0
    headshot_percentage: float = 0
    accuracy: float = 0
    level: int | float = 0
    rank: str = "Unknown"

# ------------------------------- Requests ------------------------------- #

class TrackRequest(CamelModel):
    player_id: str = Field(min_length=1)
    player_name: str = Field(min_length=1)
    platform: str = "pc"

class CompareRequest(CamelModel):
    player_ids: list[str]

# ------------------------------- Responses ------------------------------- #

class HistoryResponse(CamelModel):
    player_id: str
    history: list[StatsHistoryRow]

class KdTrendResponse(CamelModel):
    player_id: str
    trend: list[KdTrendPoint]

class WinRateTrendResponse(CamelModel):
    player_id: str
    trend: list[WinRateTrendPoint]

class CompareResponse(CamelModel):
    players: list[StatsHistoryRow]

class TrackResponse(CamelModel):
    success: bool = True
    message: str
    stats: Optional[PlayerStatsOut] = None

class TrackedPlayersResponse(CamelModel):
    tracked_players: list[TrackedPlayerRow]

class RecentPlayerOut(CamelModel):
    name: str
    platform: Optional[str] = None
    last_searched: float

class PlayerSearchResponse(CamelModel):
    query: str
    players: list[RecentPlayerOut]
