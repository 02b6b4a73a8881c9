"""
Tracked Players Sweep Pipeline

One full pass over every tracked player, least-recently-fetched first,
appending a stats history row per player.
"""

import time
from typing import Callable

from peewee import Database

from core.settings import settings
from db.models import TrackedPlayer
from pipelines.base import BasePipeline
from pipelines.collector import StatsCollector
from pipelines.config import PipelineConfig
from pipelines.context import PipelineContext


class TrackedPlayersSweepPipeline(BasePipeline):
    """
    Collect stats for all tracked players, one at a time.

    This pipeline:
    1. Reads tracked players ordered by last_fetched (never-fetched first)
    2. For each player: fetch-and-store into history, stamp last_fetched
    3. Waits a fixed delay before moving on to the next player

    The delay is a self-imposed rate limit against the provider. A failure
    on one player is logged and the sweep moves on; the player is retried
    on the next sweep, not within this one.
    """

    config = PipelineConfig(
        name="tracked_players_sweep",
        display_name="Tracked Players Sweep",
        description="Fetches stats for every tracked player and appends them to history",
        target_table="player_stats_history",
    )

    def __init__(
        self,
        database: Database,
        collector: StatsCollector,
        delay_seconds: float | None = None,
        sleep: Callable[[float], None] = time.sleep,
    ):
        super().__init__(database)
        self.collector = collector
        self.delay_seconds = settings.sweep_delay_seconds if delay_seconds is None else delay_seconds
        self._sleep = sleep

    def execute(self, ctx: PipelineContext) -> None:
        players = TrackedPlayer.get_sweep_order()

        if not players:
            ctx.log.info("no_tracked_players")
            return

        ctx.log.info("sweep_started", player_count=len(players))

        for index, player in enumerate(players):
            try:
                stats = self.collector.fetch_and_store_player_stats(
                    player.player_id, player.player_name
                )
                TrackedPlayer.mark_fetched(player.player_id)
                if stats is not None:
                    ctx.increment_records()
            except Exception as e:
                ctx.log.error(
                    "sweep_player_failed",
                    player_id=player.player_id,
                    error=f"{type(e).__name__}: {e}",
                )

            if index < len(players) - 1 and self.delay_seconds > 0:
                self._sleep(self.delay_seconds)

        ctx.log.info(
            "sweep_finished",
            player_count=len(players),
            stored=ctx.records_processed,
        )
