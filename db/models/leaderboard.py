"""
Leaderboard Snapshot Table

Current-value stats with exactly one row per player, overwritten in place on
every update. No history is kept here; see PlayerStatsHistory for that.
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


class LeaderboardEntry(BaseModel):
    """
    Latest known stats for a player, used for global rankings.

    Stat columns are nullable so rows inserted outside the collector (or
    partially migrated) sort after every ranked player.
    """

    id = AutoField(primary_key=True)
    player_id = CharField(max_length=100, unique=True)
    player_name = CharField(max_length=100)
    platform = CharField(max_length=20, null=True)

    kills = IntegerField(null=True, default=0)
    deaths = IntegerField(null=True, default=0)
    kd_ratio = FloatField(null=True, default=0, index=True)
    wins = IntegerField(null=True, default=0, index=True)
    losses = IntegerField(null=True, default=0)
    win_rate = FloatField(null=True, default=0)
    score = BigIntegerField(null=True, default=0, index=True)
    time_played = BigIntegerField(null=True, default=0)
    headshots = IntegerField(null=True, default=0)
    headshot_percentage = FloatField(null=True, default=0)
    accuracy = FloatField(null=True, default=0)
    level = IntegerField(null=True, default=0, index=True)
    rank = CharField(max_length=100, null=True, default="Unknown")

    last_updated = DateTimeField(default=datetime.utcnow)

    class Meta:
        table_name = "leaderboard"

    def __repr__(self) -> str:
        return f"<LeaderboardEntry(player_id='{self.player_id}', kd={self.kd_ratio})>"

    @classmethod
    def upsert_entry(cls, stats: dict) -> None:
        """
        Insert or overwrite the snapshot row for stats["player_id"].

        Every stat column (and last_updated) takes the new value on conflict;
        platform is only written when provided.
        """
        values = {
            name: stats[name]
            for name in cls._meta.fields
            if name in stats and name not in ("id", "last_updated")
        }
        values["last_updated"] = datetime.utcnow()

        preserve = [
            cls._meta.fields[name]
            for name in values
            if name != "player_id"
        ]

        (
            cls.insert(**values)
            .on_conflict(conflict_target=[cls.player_id], preserve=preserve)
            .execute()
        )
