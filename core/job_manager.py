"""
Collection Job Manager

Tracks background stats-collection sweeps so an on-demand trigger can
return immediately and be polled later. Uses in-memory storage (suitable
for single-instance deployments); jobs are lost on restart.
"""

import asyncio
from datetime import datetime, timezone
from typing import Awaitable, Callable, Optional
from uuid import uuid4

from core.logging import get_logger
from schemas.common import ApiStatus
from schemas.pipeline import CollectionJob, JobStatus, PipelineResult


class JobManager:
    """
    Manages collection jobs with in-memory storage.

    Safe for concurrent use from coroutines within a single process.
    """

    # Maximum number of jobs to keep in memory (prevents unbounded growth)
    MAX_JOBS = 100

    def __init__(self):
        self._jobs: dict[str, CollectionJob] = {}
        self._tasks: set[asyncio.Task] = set()
        self._lock = asyncio.Lock()
        self._log = get_logger("job_manager")

    async def create_job(self, trigger: str) -> CollectionJob:
        """
        Register a new pending job.

        Args:
            trigger: What started the sweep ("manual", "daily", "six_hourly")
        """
        job = CollectionJob(
            job_id=str(uuid4()),
            status=JobStatus.PENDING,
            trigger=trigger,
            created_at=datetime.now(timezone.utc).isoformat(),
        )

        async with self._lock:
            if len(self._jobs) >= self.MAX_JOBS:
                self._prune_finished_jobs()
            self._jobs[job.job_id] = job

        self._log.info("job_created", job_id=job.job_id, trigger=trigger)
        return job

    async def get_job(self, job_id: str) -> Optional[CollectionJob]:
        async with self._lock:
            job = self._jobs.get(job_id)
            return job.model_copy() if job else None

    async def list_jobs(self, limit: int = 10) -> list[CollectionJob]:
        """List recent jobs, most recent first."""
        async with self._lock:
            jobs = sorted(self._jobs.values(), key=lambda j: j.created_at, reverse=True)
            return [job.model_copy() for job in jobs[:limit]]

    async def run_job(
        self,
        job: CollectionJob,
        sweep: Callable[[], Awaitable[PipelineResult]],
    ) -> PipelineResult:
        """Run a sweep to completion, recording its progress on the job."""
        async with self._lock:
            job = self._jobs[job.job_id]
            job.status = JobStatus.RUNNING
            job.started_at = datetime.now(timezone.utc).isoformat()

        result = await sweep()

        async with self._lock:
            job = self._jobs[job.job_id]
            job.status = (
                JobStatus.COMPLETED if result.status == ApiStatus.SUCCESS.value else JobStatus.FAILED
            )
            job.completed_at = datetime.now(timezone.utc).isoformat()
            job.duration_seconds = result.duration_seconds
            job.players_processed = result.records_processed or 0
            job.message = result.message
            job.error = result.error

        self._log.info(
            "job_finished",
            job_id=job.job_id,
            status=job.status,
            players_processed=job.players_processed,
        )
        return result

    def start_in_background(
        self,
        job: CollectionJob,
        sweep: Callable[[], Awaitable[PipelineResult]],
    ) -> asyncio.Task:
        """Fire-and-forget variant of run_job; keeps a reference until done."""
        task = asyncio.create_task(self.run_job(job, sweep))
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)
        return task

    def _prune_finished_jobs(self) -> None:
        """Remove the oldest half of finished jobs. Caller holds the lock."""
        finished = [
            job for job in self._jobs.values()
            if job.status in (JobStatus.COMPLETED, JobStatus.FAILED)
        ]
        finished.sort(key=lambda j: j.created_at)

        to_remove = len(finished) // 2
        for job in finished[:to_remove]:
            del self._jobs[job.job_id]

        self._log.debug("jobs_pruned", removed=to_remove)
