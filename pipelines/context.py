"""
Pipeline Context

Per-run logging, timing and record counting.
"""

from __future__ import annotations

import traceback
import uuid
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any

import pytz

from core.logging import get_logger
from schemas.common import ApiStatus
from schemas.pipeline import PipelineResult


@dataclass
class PipelineContext:
    """
    Manages pipeline execution context including:
    - Run ID bound to every log line of the run
    - Timing information
    - Records processed counter

    Usage:
        ctx = PipelineContext("tracked_players_sweep")
        ctx.start()
        try:
            ctx.increment_records()
            return ctx.mark_success()
        except Exception as e:
            return ctx.mark_failed(e)
    """

    pipeline_name: str
    run_id: uuid.UUID = field(default_factory=uuid.uuid4)
    started_at: datetime = field(default_factory=lambda: datetime.now(pytz.utc))
    records_processed: int = 0

    _log: Any = field(default=None, repr=False)

    def __post_init__(self):
        self._log = get_logger("pipeline").bind(
            pipeline=self.pipeline_name,
            run_id=str(self.run_id),
        )

    @property
    def log(self):
        """Get the bound logger for this context."""
        return self._log

    def start(self) -> None:
        self._log.info("pipeline_started")

    def increment_records(self, count: int = 1) -> None:
        """Increment the records processed counter."""
        self.records_processed += count

    def _finish(self) -> tuple[datetime, float]:
        completed_at = datetime.now(pytz.utc)
        return completed_at, (completed_at - self.started_at).total_seconds()

    def mark_success(self, message: str | None = None) -> PipelineResult:
        """Log completion and return a success result."""
        completed_at, duration = self._finish()

        self._log.info(
            "pipeline_completed",
            records_processed=self.records_processed,
            duration_seconds=duration,
        )

        return PipelineResult(
            status=ApiStatus.SUCCESS,
            message=message or f"{self.pipeline_name} completed successfully",
            started_at=self.started_at.isoformat(),
            completed_at=completed_at.isoformat(),
            duration_seconds=duration,
            records_processed=self.records_processed,
        )

    def mark_failed(self, error: Exception) -> PipelineResult:
        """Log the failure and return an error result."""
        completed_at, duration = self._finish()
        error_msg = f"{type(error).__name__}: {str(error)}"
        tb = traceback.format_exc()

        self._log.error(
            "pipeline_failed",
            error=error_msg,
            traceback=tb,
        )

        return PipelineResult(
            status=ApiStatus.ERROR,
            message=f"{self.pipeline_name} failed",
            started_at=self.started_at.isoformat(),
            completed_at=completed_at.isoformat(),
            duration_seconds=duration,
            records_processed=self.records_processed,
            error=f"{error_msg}\n{tb}",
        )
