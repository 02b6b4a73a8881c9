"""
Leaderboard API Routes

Reads from the leaderboard snapshot table, plus two batch endpoints that
pull up to 128 players from the provider in a single call.
"""

import asyncio
from typing import Optional

from fastapi import APIRouter, HTTPException, Query, Request

from core.logging import get_logger
from db.base import run_in_db_thread
from pipelines.extractors import MAX_BATCH_SIZE
from schemas.leaderboard import (
    BatchUpdateResponse,
    FetchMultipleResponse,
    LeaderboardResponse,
    LeaderboardRow,
    LeaderboardStatsResponse,
    PlayerIdsRequest,
    PlayerRankResponse,
)
from schemas.stats import PlayerStatsOut
from services import leaderboard_service
from services.leaderboard_service import DEFAULT_PAGE_SIZE, MAX_PAGE_SIZE, LeaderboardMetric

router = APIRouter(prefix="/leaderboard", tags=["leaderboard"])
log = get_logger("leaderboard_api")


def _check_batch(player_ids: list[str]) -> None:
    if not player_ids:
        raise HTTPException(status_code=400, detail="playerIds array cannot be empty")
    if len(player_ids) > MAX_BATCH_SIZE:
        raise HTTPException(
            status_code=400,
            detail=f"Maximum {MAX_BATCH_SIZE} players can be fetched at once",
        )


@router.get("/", response_model=LeaderboardResponse)
async def get_leaderboard(
    request: Request,
    order_by: Optional[str] = Query(None, alias="orderBy"),
    limit: int = Query(DEFAULT_PAGE_SIZE, ge=1),
    offset: int = Query(0, ge=0),
) -> LeaderboardResponse:
    """
    One page of the leaderboard.

    Unknown orderBy values fall back to kd_ratio; limit is capped at 500.
    """
    metric = LeaderboardMetric.parse(order_by)
    limit = min(limit, MAX_PAGE_SIZE)

    rows = await run_in_db_thread(
        request.app.state.database, leaderboard_service.get_leaderboard, metric, limit, offset
    )
    return LeaderboardResponse(
        leaderboard=[LeaderboardRow.model_validate(row) for row in rows],
        order_by=metric.value,
        limit=limit,
        offset=offset,
    )


@router.get("/rank/{player_id}", response_model=PlayerRankResponse)
async def get_player_rank(
    request: Request,
    player_id: str,
    order_by: Optional[str] = Query(None, alias="orderBy"),
) -> PlayerRankResponse:
    metric = LeaderboardMetric.parse(order_by)
    rank = await run_in_db_thread(
        request.app.state.database, leaderboard_service.get_player_rank, player_id, metric
    )
    if rank is None:
        raise HTTPException(status_code=404, detail="Player not found on leaderboard")

    return PlayerRankResponse(player_id=player_id, rank=rank, order_by=metric.value)


@router.get("/stats", response_model=LeaderboardStatsResponse)
async def get_leaderboard_stats(request: Request) -> LeaderboardStatsResponse:
    stats = await run_in_db_thread(request.app.state.database, leaderboard_service.get_leaderboard_stats)
    return LeaderboardStatsResponse(stats=stats)


@router.post("/batch-update", response_model=BatchUpdateResponse)
async def batch_update(request: Request, body: PlayerIdsRequest) -> BatchUpdateResponse:
    """Fetch up to 128 players and upsert them into the leaderboard."""
    _check_batch(body.player_ids)

    players = await run_in_db_thread(
        request.app.state.database, request.app.state.collector.update_leaderboard, body.player_ids
    )
    if not players:
        raise HTTPException(status_code=404, detail="No player data found")

    log.info("leaderboard_batch_updated", requested=len(body.player_ids), received=len(players))
    return BatchUpdateResponse(
        players_updated=len(players),
        players=[PlayerStatsOut(**player.to_dict()) for player in players],
    )


@router.post("/fetch-multiple", response_model=FetchMultipleResponse)
async def fetch_multiple(request: Request, body: PlayerIdsRequest) -> FetchMultipleResponse:
    """Fetch up to 128 players without writing anything."""
    _check_batch(body.player_ids)

    players = await asyncio.to_thread(request.app.state.collector.fetch_multiple_players, body.player_ids)
    return FetchMultipleResponse(
        players=[PlayerStatsOut(**player.to_dict()) for player in players],
        count=len(players),
    )
