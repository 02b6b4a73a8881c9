from datetime import datetime, timedelta

from db.models import PlayerStatsHistory, TrackedPlayer
from pipelines import StatsCollector, TrackedPlayersSweepPipeline
from schemas.common import ApiStatus

from helpers import ALICE_STATS, FakeExtractor


def _sweep(database, extractor, sleeps):
    return TrackedPlayersSweepPipeline(
        database,
        StatsCollector(extractor),
        delay_seconds=0.5,
        sleep=sleeps.append,
    )


def test_sweep_visits_least_recently_fetched_first(database):
    now = datetime.utcnow()
    TrackedPlayer.create(player_id="b", player_name="B", last_fetched=now)
    TrackedPlayer.create(player_id="a", player_name="A", last_fetched=now - timedelta(days=2))
    TrackedPlayer.create(player_id="c", player_name="C")

    extractor = FakeExtractor(stats={pid: dict(ALICE_STATS) for pid in "abc"})
    sleeps = []
    result = _sweep(database, extractor, sleeps)._run_sync()

    assert result.status == ApiStatus.SUCCESS.value
    assert result.records_processed == 3
    assert extractor.stats_calls == ["c", "a", "b"]
    # Delay between players, none after the last
    assert sleeps == [0.5, 0.5]
    assert PlayerStatsHistory.select().count() == 3


def test_sweep_continues_after_a_failing_player(database):
    TrackedPlayer.create(player_id="bad", player_name="Bad")
    TrackedPlayer.create(player_id="good", player_name="Good")

    extractor = FakeExtractor(
        stats={"good": dict(ALICE_STATS)},
        failures={"bad": RuntimeError("boom")},
    )
    result = _sweep(database, extractor, [])._run_sync()

    assert result.status == ApiStatus.SUCCESS.value
    assert result.records_processed == 1
    assert extractor.stats_calls == ["bad", "good"]
    assert TrackedPlayer.get(TrackedPlayer.player_id == "good").last_fetched is not None


def test_sweep_stamps_players_without_data(database):
    TrackedPlayer.create(player_id="ghost", player_name="Ghost")

    result = _sweep(database, FakeExtractor(), [])._run_sync()

    assert result.records_processed == 0
    assert TrackedPlayer.get().last_fetched is not None


def test_empty_sweep_succeeds(database):
    sleeps = []
    result = _sweep(database, FakeExtractor(), sleeps)._run_sync()

    assert result.status == ApiStatus.SUCCESS.value
    assert result.records_processed == 0
    assert sleeps == []
