"""
Base Pipeline

Abstract base class for all data pipelines.
"""

import asyncio
from abc import ABC, abstractmethod
from typing import ClassVar

from peewee import Database

from pipelines.config import PipelineConfig
from pipelines.context import PipelineContext
from schemas.pipeline import PipelineResult


class BasePipeline(ABC):
    """
    Abstract base class for all data pipelines.

    Provides:
    - Structured logging with a per-run ID
    - Standardized error handling (exceptions become a failed result)
    - Template method pattern for run lifecycle
    - Thread-based execution to avoid blocking the async event loop

    Subclasses must implement:
    - config: PipelineConfig class attribute
    - execute(): The actual pipeline logic (synchronous)
    """

    config: ClassVar[PipelineConfig]

    def __init__(self, database: Database):
        """
        Args:
            database: Handle the pipeline opens its own connection on
        """
        self._validate_config()
        self.database = database

    def _validate_config(self) -> None:
        if getattr(self.__class__, "config", None) is None:
            raise ValueError(
                f"{self.__class__.__name__} must define a 'config' class attribute"
            )

    @abstractmethod
    def execute(self, ctx: PipelineContext) -> None:
        """
        Execute the pipeline logic.

        Runs in a worker thread with an open database connection, so
        blocking HTTP and peewee calls are safe here. Any exception is
        caught and converted to a failed result.
        """
        pass

    def _run_sync(self) -> PipelineResult:
        """
        Run the full pipeline lifecycle synchronously.

        Manages its own DB connection since it runs in a separate thread
        from the event loop (peewee connections are thread-local).
        """
        ctx = PipelineContext(self.config.name)
        ctx.start()

        try:
            with self.database.connection_context():
                self.execute(ctx)
            return ctx.mark_success()
        except Exception as e:
            return ctx.mark_failed(e)

    async def run(self) -> PipelineResult:
        """
        Run the pipeline with full lifecycle management.

        The entire execution (including DB and HTTP I/O) runs in a thread
        pool worker via asyncio.to_thread().
        """
        return await asyncio.to_thread(self._run_sync)

    def __repr__(self) -> str:
        return f"<{self.__class__.__name__}(name={self.config.name})>"
