# Import all models to ensure they are registered with the database
from .users import User
from .tracked_player import TrackedPlayer
from .player_stats_history import PlayerStatsHistory, ImmutableRowError
from .leaderboard import LeaderboardEntry

__all__ = [
    'User', 'TrackedPlayer', 'PlayerStatsHistory', 'ImmutableRowError', 'LeaderboardEntry'
]
