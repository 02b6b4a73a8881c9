"""
Player Stats History Fact Table

Append-only time series with one row per (player, collection time).
Source for the history, trend and comparison endpoints.
"""

from datetime import datetime

from peewee import (
    AutoField,
    BigIntegerField,
    CharField,
    DateTimeField,
    FloatField,
    IntegerField,
)

from db.base import BaseModel


class ImmutableRowError(Exception):
    """Raised when code tries to modify a stats history row after insert."""


class PlayerStatsHistory(BaseModel):
    """
    A snapshot of a player's lifetime stats at collection time.

    Attributes:
        player_id: Provider player ID (indexed, not unique)
        player_name: Name at collection time
        kills, deaths, wins, losses, score, headshots: Counting stats
        kd_ratio, win_rate, headshot_percentage, accuracy: Ratios as reported
        time_played: Seconds played
        level, rank: Progression number and rank name
        recorded_at: When the snapshot was taken
    """

    id = AutoField(primary_key=True)
    player_id = CharField(max_length=100, index=True)
    player_name = CharField(max_length=100)

    kills = IntegerField(default=0)
    deaths = IntegerField(default=0)
    kd_ratio = FloatField(default=0)
    wins = IntegerField(default=0)
    losses = IntegerField(default=0)
    win_rate = FloatField(default=0)
    score = BigIntegerField(default=0)
    time_played = BigIntegerField(default=0)
    headshots = IntegerField(default=0)
    headshot_percentage = FloatField(default=0)
    accuracy = FloatField(default=0)
    level = IntegerField(default=0)
    rank = CharField(max_length=100, default="Unknown")

    recorded_at = DateTimeField(default=datetime.utcnow)

    class Meta:
        table_name = "player_stats_history"
        indexes = (
            # Trend queries filter by player and time window
            (("player_id", "recorded_at"), False),
        )

    def __repr__(self) -> str:
        return (
            f"<PlayerStatsHistory("
            f"player_id={self.player_id}, "
            f"recorded_at={self.recorded_at}, "
            f"kd={self.kd_ratio})>"
        )

    def save(self, *args, **kwargs):
        """Only the first save (the insert) is allowed."""
        if self.get_id() is not None and not kwargs.get("force_insert"):
            raise ImmutableRowError(
                f"player_stats_history row {self.get_id()} is append-only"
            )
        return super().save(*args, **kwargs)

    @classmethod
    def append(cls, stats: dict, recorded_at: datetime | None = None) -> "PlayerStatsHistory":
        """
        Record a new snapshot.

        Args:
            stats: Normalized stat record (keys match the column names)
            recorded_at: Override the collection time (defaults to now)
        """
        fields = {name: stats[name] for name in cls._meta.fields if name in stats and name != "id"}
        fields["recorded_at"] = recorded_at or datetime.utcnow()
        return cls.create(**fields)
