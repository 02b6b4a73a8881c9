"""
Stats Collector

Fetch -> normalize -> persist for one or many players.

The two paths deliberately write to different tables:
- single-player collection appends to player_stats_history (trend charts)
- batch collection upserts into leaderboard (current snapshot)

All methods are synchronous and expect the caller to hold a database
connection (see db.base.run_in_db_thread and BasePipeline._run_sync).
"""

from typing import Optional, Sequence

from peewee import DatabaseError

from core.logging import get_logger
from core.resilience import PROVIDER_ERRORS
from db.models import LeaderboardEntry, PlayerStatsHistory, TrackedPlayer
from pipelines.extractors import GametoolsExtractor, MAX_BATCH_SIZE
from pipelines.transformers import (
    PlayerStats,
    normalize_batch_response,
    normalize_player_stats,
)


class BatchTooLargeError(ValueError):
    """Raised when a batch request exceeds the provider's per-call cap."""

    def __init__(self, count: int, limit: int = MAX_BATCH_SIZE):
        super().__init__(f"Maximum {limit} players can be fetched at once (got {count})")
        self.count = count
        self.limit = limit


class StatsCollector:
    """
    Orchestrates provider calls and persistence.

    Provider failures (error envelopes, transport errors, undecodable bodies)
    and per-row database errors are logged and turned into "no data"; they
    never propagate to the caller.
    """

    def __init__(self, extractor: GametoolsExtractor):
        self.extractor = extractor
        self.log = get_logger("collector")

    # ------------------------------------------------------------------ #
    # Single player -> history
    # ------------------------------------------------------------------ #

    def fetch_and_store_player_stats(
        self,
        player_id: str,
        player_name: str,
    ) -> Optional[PlayerStats]:
        """
        Fetch one player's stats and append a history row.

        Returns:
            The normalized stats, or None if the provider had no data or the
            row could not be written
        """
        log = self.log.bind(player_id=player_id, player_name=player_name)
        log.info("player_stats_fetch_started")

        try:
            raw = self.extractor.get_player_stats(player_id)
        except PROVIDER_ERRORS as e:
            log.error("player_stats_fetch_failed", error=str(e), error_type=type(e).__name__)
            return None

        stats = normalize_player_stats(raw, player_id, player_name)
        if stats is None:
            log.warning("player_stats_unavailable")
            return None

        try:
            PlayerStatsHistory.append(stats.to_dict())
        except DatabaseError as e:
            log.error("player_stats_store_failed", error=str(e))
            return None

        log.info("player_stats_stored", kd_ratio=stats.kd_ratio, level=stats.level)
        return stats

    def track_player(
        self,
        player_id: str,
        player_name: str,
        platform: str = "pc",
    ) -> Optional[PlayerStats]:
        """
        Add (or refresh) a tracked player and collect its stats right away.

        Raises:
            DatabaseError: if the tracked_players write fails
        """
        TrackedPlayer.upsert_player(player_id, player_name, platform)
        self.log.info("player_tracked", player_id=player_id, player_name=player_name, platform=platform)
        return self.fetch_and_store_player_stats(player_id, player_name)

    # ------------------------------------------------------------------ #
    # Batch -> leaderboard
    # ------------------------------------------------------------------ #

    def fetch_multiple_players(self, player_ids: Sequence[str]) -> list[PlayerStats]:
        """
        Fetch summary stats for up to MAX_BATCH_SIZE players in one call.

        Raises:
            BatchTooLargeError: more than MAX_BATCH_SIZE ids; the provider is
                not contacted
        """
        if len(player_ids) > MAX_BATCH_SIZE:
            raise BatchTooLargeError(len(player_ids))

        if not player_ids:
            return []

        self.log.info("batch_fetch_started", player_count=len(player_ids))

        try:
            body = self.extractor.get_multiple_players(player_ids)
        except PROVIDER_ERRORS as e:
            self.log.error("batch_fetch_failed", error=str(e), error_type=type(e).__name__)
            return []

        players = normalize_batch_response(body)
        if not isinstance(body, list):
            self.log.warning("batch_response_not_a_list", body_type=type(body).__name__)

        self.log.info("batch_fetch_completed", requested=len(player_ids), received=len(players))
        return players

    def batch_update_leaderboard(self, players: Sequence[PlayerStats]) -> int:
        """
        Upsert each player into the leaderboard snapshot.

        Returns:
            Number of rows written (failed or id-less rows are logged and skipped)
        """
        written = 0
        for player in players:
            if not player.player_id:
                self.log.warning("leaderboard_entry_without_id", player_name=player.player_name)
                continue
            try:
                LeaderboardEntry.upsert_entry(player.to_dict())
                written += 1
            except DatabaseError as e:
                self.log.error(
                    "leaderboard_upsert_failed",
                    player_id=player.player_id,
                    error=str(e),
                )

        self.log.info("leaderboard_updated", players=len(players), written=written)
        return written

    def update_leaderboard(self, player_ids: Sequence[str]) -> list[PlayerStats]:
        """Fetch a batch and write it to the leaderboard. Returns what was fetched."""
        players = self.fetch_multiple_players(player_ids)
        if players:
            self.batch_update_leaderboard(players)
        return players
