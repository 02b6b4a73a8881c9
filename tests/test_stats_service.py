from datetime import datetime, timedelta

from db.models import PlayerStatsHistory
from pipelines import StatsCollector
from pipelines.transformers import normalize_player_stats
from services import stats_service

from helpers import ALICE_STATS


def _append(player_id, kd, when, win_rate=50.0):
    stats = normalize_player_stats(dict(ALICE_STATS, killDeath=kd, winPercent=win_rate), player_id, player_id)
    PlayerStatsHistory.append(stats.to_dict(), recorded_at=when)


def test_tracking_a_player_gives_a_single_trend_point(database, fake_extractor):
    StatsCollector(fake_extractor).track_player("123", "Alice")

    assert len(stats_service.get_history("123")) == 1

    trend = stats_service.get_kd_trend("123", days=30)
    assert len(trend) == 1
    assert trend[0]["avg_kd"] == 1.5
    assert trend[0]["max_kd"] == 1.5
    assert trend[0]["min_kd"] == 1.5


def test_history_window_and_order(database):
    now = datetime.utcnow()
    _append("p", 1.0, now - timedelta(days=40))
    _append("p", 2.0, now - timedelta(days=1))
    _append("p", 3.0, now - timedelta(hours=1))

    history = stats_service.get_history("p", days=30)
    assert [row.kd_ratio for row in history] == [2.0, 3.0]


def test_trend_groups_by_day(database):
    day = datetime.utcnow().replace(hour=12, minute=0, second=0, microsecond=0) - timedelta(days=1)
    _append("p", 1.0, day)
    _append("p", 3.0, day + timedelta(hours=1))
    _append("p", 2.0, day - timedelta(days=1))

    trend = stats_service.get_kd_trend("p", days=30)
    assert len(trend) == 2
    assert trend[1]["avg_kd"] == 2.0
    assert trend[1]["max_kd"] == 3.0
    assert trend[1]["min_kd"] == 1.0


def test_win_rate_trend_keys(database):
    _append("p", 1.0, datetime.utcnow(), win_rate=55.0)

    (point,) = stats_service.get_win_rate_trend("p")
    assert set(point) == {"date", "avg_win_rate", "max_win_rate", "min_win_rate"}
    assert point["avg_win_rate"] == 55.0


def test_compare_returns_latest_row_per_player(database):
    now = datetime.utcnow()
    _append("a", 1.0, now - timedelta(days=2))
    _append("a", 2.0, now)
    _append("b", 0.5, now)

    rows = {row.player_id: row for row in stats_service.compare_players(["a", "b", "missing"])}
    assert set(rows) == {"a", "b"}
    assert rows["a"].kd_ratio == 2.0


def test_compare_reads_only_the_latest_rows(database):
    now = datetime.utcnow()
    for hours in range(60, 0, -1):
        _append("a", hours / 10, now - timedelta(hours=hours))
        _append("b", hours / 20, now - timedelta(hours=hours))
    _append("a", 9.9, now)

    assert stats_service.latest_rows_query(["a", "b"]).count() == 2

    rows = {row.player_id: row for row in stats_service.compare_players(["a", "b"])}
    assert rows["a"].kd_ratio == 9.9
    assert rows["b"].kd_ratio == 0.05


def test_compare_with_a_shared_timestamp_keeps_the_newest_insert(database):
    now = datetime.utcnow()
    _append("a", 1.0, now)
    _append("a", 3.0, now)

    [row] = stats_service.compare_players(["a"])
    assert row.kd_ratio == 3.0
