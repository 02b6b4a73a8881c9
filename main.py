"""
BF6 Stats Platform API Server

REST API for Battlefield 6 player stats: accounts, stats history and
trends, player tracking and the global leaderboard. Tracked players are
swept on a cron schedule (02:00 daily and every six hours) and on demand.

Usage:
    uvicorn main:app --host 0.0.0.0 --port 5000

Environment Variables:
    DATABASE_URL (or DB_HOST/DB_PORT/DB_NAME/DB_USER/DB_PASSWORD)
    JWT_SECRET, JWT_EXPIRES_IN, BCRYPT_ROUNDS
    FRONTEND_URL - Allowed CORS origin(s), comma separated
    SCHEDULER_ENABLED - Set to false to disable the cron sweeps
"""

from contextlib import asynccontextmanager
from typing import Optional

import uvicorn
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from api.routes import auth, leaderboard, stats
from core.correlation_middleware import CorrelationMiddleware
from core.job_manager import JobManager
from core.logging import get_logger, setup_logging
from core.middleware import setup_middleware
from core.settings import Settings, settings
from db.base import close_db, create_database, init_db, run_in_db_thread
from pipelines import StatsCollector, TrackedPlayersSweepPipeline
from pipelines.extractors import GametoolsExtractor
from schemas.common import ApiStatus, error_response
from services.player_search import RecentPlayerCache
from services.scheduler import StatsScheduler


def create_app(
    app_settings: Optional[Settings] = None,
    extractor: Optional[GametoolsExtractor] = None,
) -> FastAPI:
    """
    Build the application.

    Args:
        app_settings: Configuration (defaults to the environment)
        extractor: Provider client (defaults to the live gametools API)
    """
    app_settings = app_settings or settings

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        setup_logging(
            log_level=app_settings.log_level,
            json_format=app_settings.log_format == "json",
            service_name=app_settings.service_name,
        )
        log = get_logger()
        log.info("api_starting", service=app_settings.service_name)

        database = create_database(
            app_settings.database_dsn,
            max_connections=app_settings.db_max_connections,
        )
        init_db(database)
        log.info("database_initialized")

        collector = StatsCollector(
            extractor or GametoolsExtractor(base_url=app_settings.provider_base_url)
        )
        sweep = TrackedPlayersSweepPipeline(
            database,
            collector,
            delay_seconds=app_settings.sweep_delay_seconds,
        )
        job_manager = JobManager()

        app.state.settings = app_settings
        app.state.database = database
        app.state.collector = collector
        app.state.sweep = sweep
        app.state.job_manager = job_manager
        app.state.player_cache = RecentPlayerCache()

        async def run_scheduled_sweep(schedule_name: str):
            job = await job_manager.create_job(trigger=schedule_name)
            return await job_manager.run_job(job, sweep.run)

        scheduler = None
        if app_settings.scheduler_enabled:
            scheduler = StatsScheduler(run_scheduled_sweep, timezone=app_settings.scheduler_timezone)
            scheduler.start()
        app.state.scheduler = scheduler

        yield

        if scheduler is not None:
            scheduler.shutdown()
        close_db(database)
        log.info("api_stopped")

    app = FastAPI(
        title="BF6 Stats Platform",
        description="Battlefield 6 player stats, trends and leaderboard",
        version="1.0.0",
        lifespan=lifespan,
    )

    app.add_middleware(CorrelationMiddleware)
    setup_middleware(app, app_settings.frontend_url)

    app.include_router(auth.router, prefix="/api")
    app.include_router(stats.router, prefix="/api")
    app.include_router(leaderboard.router, prefix="/api")

    @app.get("/")
    async def root():
        return {"message": "BF6 Stats Platform API"}

    @app.get("/health")
    async def health(request: Request):
        """Report whether the database answers a trivial query."""
        database = request.app.state.database
        try:
            await run_in_db_thread(database, database.execute_sql, "SELECT 1")
        except Exception as e:
            get_logger("health").error("health_check_failed", error=str(e))
            return JSONResponse(
                status_code=500,
                content=error_response(
                    message="Database connection failed",
                    status=ApiStatus.SERVER_ERROR,
                    data={"database": "disconnected"},
                ),
            )
        return {"status": "ok", "database": "connected"}

    return app


app = create_app()


if __name__ == "__main__":
    uvicorn.run("main:app", host="0.0.0.0", port=settings.port)
