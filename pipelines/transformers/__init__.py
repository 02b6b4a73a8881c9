"""
Data Transformers

Pure functions for transforming extracted data.
"""

from pipelines.transformers.stats import (
    PlayerStats,
    first_present,
    normalize_player_stats,
    normalize_batch_player,
    normalize_batch_response,
    to_number,
)

__all__ = [
    "PlayerStats",
    "first_present",
    "normalize_player_stats",
    "normalize_batch_player",
    "normalize_batch_response",
    "to_number",
]
