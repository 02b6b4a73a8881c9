from enum import Enum
from typing import Optional

from pydantic import BaseModel

from .common import ApiStatus, CamelModel


class PipelineResult(BaseModel):
    """Result of a single pipeline execution"""

    status: ApiStatus
    message: str
    started_at: str
    completed_at: Optional[str] = None
    duration_seconds: Optional[float] = None
    records_processed: Optional[int] = None
    error: Optional[str] = None

    class Config:
        use_enum_values = True


# ---------------------- Job-based Collection Responses ---------------------- #


class JobStatus(str, Enum):
    """Status of a collection job."""

    PENDING = "pending"
    RUNNING = "running"
    COMPLETED = "completed"
    FAILED = "failed"


class CollectionJob(CamelModel):
    """A background sweep over all tracked players."""

    job_id: str
    status: JobStatus
    trigger: str
    created_at: str
    started_at: Optional[str] = None
    completed_at: Optional[str] = None
    duration_seconds: Optional[float] = None
    players_processed: int = 0
    message: Optional[str] = None
    error: Optional[str] = None


class CollectStartedResponse(CamelModel):
    """Response when a manual collection is started (fire-and-forget)."""

    success: bool = True
    message: str
    job_id: str


class CollectJobResponse(CamelModel):
    job: CollectionJob


class CollectJobsResponse(CamelModel):
    jobs: list[CollectionJob]
