"""
Pipelines

Extract (gametools API) -> transform (normalizer) -> load (history and
leaderboard tables), plus the sweep that drives scheduled collection.
"""

from pipelines.base import BasePipeline
from pipelines.collector import BatchTooLargeError, StatsCollector
from pipelines.config import PipelineConfig
from pipelines.context import PipelineContext
from pipelines.tracked_players_sweep import TrackedPlayersSweepPipeline

__all__ = [
    "BasePipeline",
    "BatchTooLargeError",
    "PipelineConfig",
    "PipelineContext",
    "StatsCollector",
    "TrackedPlayersSweepPipeline",
]
