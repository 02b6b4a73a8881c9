"""
Stats API Routes

Historical stats, trends, comparison and player tracking.

The /collect endpoint uses a fire-and-forget pattern:
- Returns immediately with a job ID
- The tracked-players sweep runs in the background
- Use /collect/{job_id} to check status, or /collect for recent jobs
"""

from fastapi import APIRouter, HTTPException, Query, Request

from core.logging import get_logger
from db.base import run_in_db_thread
from schemas.pipeline import CollectJobResponse, CollectJobsResponse, CollectStartedResponse
from schemas.stats import (
    CompareRequest,
    CompareResponse,
    HistoryResponse,
    KdTrendResponse,
    PlayerSearchResponse,
    PlayerStatsOut,
    RecentPlayerOut,
    StatsHistoryRow,
    TrackedPlayerRow,
    TrackedPlayersResponse,
    TrackRequest,
    TrackResponse,
    WinRateTrendResponse,
)
from services import stats_service

router = APIRouter(prefix="/stats", tags=["stats"])
log = get_logger("stats_api")

DEFAULT_DAYS = 30


@router.get("/history/{player_id}", response_model=HistoryResponse)
async def get_history(
    request: Request,
    player_id: str,
    days: int = Query(DEFAULT_DAYS, ge=1, description="Look-back window in days"),
) -> HistoryResponse:
    """Every stored snapshot for a player in the window, oldest first."""
    rows = await run_in_db_thread(
        request.app.state.database, stats_service.get_history, player_id, days
    )
    return HistoryResponse(
        player_id=player_id,
        history=[StatsHistoryRow.model_validate(row) for row in rows],
    )


@router.get("/trends/kd/{player_id}", response_model=KdTrendResponse)
async def get_kd_trend(
    request: Request,
    player_id: str,
    days: int = Query(DEFAULT_DAYS, ge=1),
) -> KdTrendResponse:
    """Daily average/max/min K/D ratio."""
    trend = await run_in_db_thread(
        request.app.state.database, stats_service.get_kd_trend, player_id, days
    )
    return KdTrendResponse(player_id=player_id, trend=trend)


@router.get("/trends/winrate/{player_id}", response_model=WinRateTrendResponse)
async def get_win_rate_trend(
    request: Request,
    player_id: str,
    days: int = Query(DEFAULT_DAYS, ge=1),
) -> WinRateTrendResponse:
    """Daily average/max/min win rate."""
    trend = await run_in_db_thread(
        request.app.state.database, stats_service.get_win_rate_trend, player_id, days
    )
    return WinRateTrendResponse(player_id=player_id, trend=trend)


@router.post("/compare", response_model=CompareResponse)
async def compare_players(request: Request, body: CompareRequest) -> CompareResponse:
    """Latest snapshot for each of two or more players."""
    if len(body.player_ids) < 2:
        raise HTTPException(status_code=400, detail="Please provide at least 2 player IDs")

    rows = await run_in_db_thread(
        request.app.state.database, stats_service.compare_players, body.player_ids
    )
    return CompareResponse(players=[StatsHistoryRow.model_validate(row) for row in rows])


@router.post("/track", response_model=TrackResponse)
async def track_player(request: Request, body: TrackRequest) -> TrackResponse:
    """
    Start tracking a player and collect their stats immediately.

    Tracking succeeds even when the provider has no data for the player;
    the stats field is then null and the next sweep tries again.
    """
    state = request.app.state
    stats = await run_in_db_thread(
        state.database,
        state.collector.track_player,
        body.player_id,
        body.player_name,
        body.platform,
    )
    state.player_cache.add_player(body.player_name, body.platform)

    return TrackResponse(
        message=f"{body.player_name} is now being tracked",
        stats=PlayerStatsOut(**stats.to_dict()) if stats else None,
    )


@router.get("/tracked", response_model=TrackedPlayersResponse)
async def get_tracked_players(request: Request) -> TrackedPlayersResponse:
    players = await run_in_db_thread(request.app.state.database, stats_service.list_tracked_players)
    return TrackedPlayersResponse(
        tracked_players=[TrackedPlayerRow.model_validate(player) for player in players],
    )


@router.post("/collect", response_model=CollectStartedResponse)
async def trigger_collection(request: Request) -> CollectStartedResponse:
    """
    Sweep every tracked player in the background.

    Returns immediately with a job ID. Poll /collect/{job_id} for progress.
    """
    state = request.app.state
    job = await state.job_manager.create_job(trigger="manual")
    state.job_manager.start_in_background(job, state.sweep.run)

    log.info("collection_triggered", job_id=job.job_id)
    return CollectStartedResponse(message="Stats collection started", job_id=job.job_id)


@router.get("/collect", response_model=CollectJobsResponse)
async def list_collection_jobs(
    request: Request,
    limit: int = Query(10, ge=1, le=100),
) -> CollectJobsResponse:
    """Recent collection jobs, newest first."""
    jobs = await request.app.state.job_manager.list_jobs(limit=limit)
    return CollectJobsResponse(jobs=jobs)


@router.get("/collect/{job_id}", response_model=CollectJobResponse)
async def get_collection_job(request: Request, job_id: str) -> CollectJobResponse:
    job = await request.app.state.job_manager.get_job(job_id)
    if job is None:
        raise HTTPException(status_code=404, detail=f"Job '{job_id}' not found")
    return CollectJobResponse(job=job)


@router.get("/search", response_model=PlayerSearchResponse)
async def search_players(
    request: Request,
    q: str = Query("", description="Player name fragment"),
    limit: int = Query(10, ge=1, le=100),
) -> PlayerSearchResponse:
    """Fuzzy match against recently searched and tracked player names."""
    players = request.app.state.player_cache.search(q, limit=limit)
    return PlayerSearchResponse(
        query=q,
        players=[RecentPlayerOut(**vars(player)) for player in players],
    )


@router.get("/recent", response_model=PlayerSearchResponse)
async def recent_players(
    request: Request,
    limit: int = Query(5, ge=1, le=100),
) -> PlayerSearchResponse:
    players = request.app.state.player_cache.recent(limit=limit)
    return PlayerSearchResponse(
        query="",
        players=[RecentPlayerOut(**vars(player)) for player in players],
    )
