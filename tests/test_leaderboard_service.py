import pytest

from db.models import LeaderboardEntry
from services.leaderboard_service import (
    LeaderboardMetric,
    get_leaderboard,
    get_leaderboard_stats,
    get_player_rank,
)


@pytest.fixture
def board(database):
    LeaderboardEntry.create(player_id="low", player_name="Low", kd_ratio=0.5, score=900, wins=3)
    LeaderboardEntry.create(player_id="null", player_name="Null", kd_ratio=None, score=None, wins=None)
    LeaderboardEntry.create(player_id="top", player_name="Top", kd_ratio=3.0, score=100, wins=9)
    LeaderboardEntry.create(player_id="mid", player_name="Mid", kd_ratio=1.5, score=500, wins=5)
    return database


def test_metric_parse_falls_back_to_kd():
    assert LeaderboardMetric.parse("score") is LeaderboardMetric.SCORE
    assert LeaderboardMetric.parse("deaths") is LeaderboardMetric.KD_RATIO
    assert LeaderboardMetric.parse(None) is LeaderboardMetric.KD_RATIO


def test_listing_is_descending_with_nulls_last(board):
    rows = get_leaderboard()
    assert [r.player_id for r in rows] == ["top", "mid", "low", "null"]


def test_listing_by_other_metric(board):
    rows = get_leaderboard(LeaderboardMetric.SCORE)
    assert [r.player_id for r in rows] == ["low", "mid", "top", "null"]


def test_limit_and_offset(board):
    assert [r.player_id for r in get_leaderboard(limit=2)] == ["top", "mid"]
    assert [r.player_id for r in get_leaderboard(limit=2, offset=2)] == ["low", "null"]


def test_offset_past_end_is_empty(board):
    assert get_leaderboard(offset=10) == []


def test_rank_of_leader_is_one(board):
    assert get_player_rank("top") == 1
    assert get_player_rank("mid") == 2
    assert get_player_rank("low") == 3


def test_null_metric_ranks_after_everyone_with_a_value(board):
    assert get_player_rank("null") == 4


def test_tied_players_share_a_rank(board):
    LeaderboardEntry.create(player_id="also_top", player_name="AlsoTop", kd_ratio=3.0)

    assert get_player_rank("top") == 1
    assert get_player_rank("also_top") == 1
    assert get_player_rank("mid") == 3


def test_unknown_player_has_no_rank(board):
    assert get_player_rank("nobody") is None


def test_summary(board):
    stats = get_leaderboard_stats()

    assert stats["total_players"] == 4
    assert stats["max_kd"] == 3.0
    assert stats["avg_kd"] == pytest.approx(5.0 / 3)


def test_summary_of_empty_board(database):
    stats = get_leaderboard_stats()

    assert stats["total_players"] == 0
    assert stats["avg_kd"] is None
    assert stats["total_kills"] == 0
