"""
Tracked Player Table

Players registered for recurring historical collection. The scheduler
sweeps this table least-recently-fetched first.
"""

from datetime import datetime

from peewee import (
    AutoField,
    CharField,
    DateTimeField,
)

from db.base import BaseModel


class TrackedPlayer(BaseModel):
    """
    A player whose stats are collected on every sweep.

    Attributes:
        player_id: Provider player ID (unique)
        player_name: Display name, refreshed on repeat tracking
        platform: Platform the player was tracked on (pc, psn, xbox)
        last_fetched: When the last sweep visited this player (null = never)
    """

    id = AutoField(primary_key=True)
    player_id = CharField(max_length=100, unique=True)
    player_name = CharField(max_length=100)
    platform = CharField(max_length=20, default="pc")
    last_fetched = DateTimeField(null=True, index=True)
    created_at = DateTimeField(default=datetime.utcnow)
    updated_at = DateTimeField(default=datetime.utcnow)

    class Meta:
        table_name = "tracked_players"

    def __repr__(self) -> str:
        return f"<TrackedPlayer(player_id='{self.player_id}', name='{self.player_name}')>"

    @classmethod
    def upsert_player(
        cls,
        player_id: str,
        player_name: str,
        platform: str = "pc",
    ) -> None:
        """
        Start tracking a player, or refresh name/platform if already tracked.

        last_fetched is left untouched on conflict so a re-tracked player
        keeps its place in the sweep order.
        """
        now = datetime.utcnow()
        (
            cls.insert(
                player_id=player_id,
                player_name=player_name,
                platform=platform,
                created_at=now,
                updated_at=now,
            )
            .on_conflict(
                conflict_target=[cls.player_id],
                preserve=[cls.player_name, cls.platform, cls.updated_at],
            )
            .execute()
        )

    @classmethod
    def get_sweep_order(cls) -> list["TrackedPlayer"]:
        """All tracked players, never-fetched first, then oldest fetch first."""
        return list(
            cls.select()
            .order_by(cls.last_fetched.asc(nulls="FIRST"), cls.id.asc())
        )

    @classmethod
    def list_by_name(cls) -> list["TrackedPlayer"]:
        return list(cls.select().order_by(cls.player_name.asc()))

    @classmethod
    def mark_fetched(cls, player_id: str) -> int:
        """Stamp last_fetched for a player. Returns rows updated."""
        now = datetime.utcnow()
        return (
            cls.update(last_fetched=now, updated_at=now)
            .where(cls.player_id == player_id)
            .execute()
        )
