import pytest

from core.resilience import NetworkError
from db.models import LeaderboardEntry, PlayerStatsHistory, TrackedPlayer
from pipelines import BatchTooLargeError, StatsCollector
from pipelines.transformers import PlayerStats

from helpers import FakeExtractor, batch_item


@pytest.fixture
def collector(database, fake_extractor):
    return StatsCollector(fake_extractor)


def test_fetch_and_store_appends_history(collector):
    stats = collector.fetch_and_store_player_stats("123", "Alice")

    assert stats.kd_ratio == 1.5
    assert PlayerStatsHistory.select().where(PlayerStatsHistory.player_id == "123").count() == 1


def test_no_data_stores_nothing(collector):
    assert collector.fetch_and_store_player_stats("missing", "Ghost") is None
    assert PlayerStatsHistory.select().count() == 0


def test_provider_errors_become_no_data(database):
    collector = StatsCollector(FakeExtractor(failures={"123": NetworkError("down")}))

    assert collector.fetch_and_store_player_stats("123", "Alice") is None
    assert PlayerStatsHistory.select().count() == 0


def test_track_player_registers_and_collects(collector):
    stats = collector.track_player("123", "Alice")

    assert stats is not None
    assert TrackedPlayer.select().count() == 1
    assert PlayerStatsHistory.select().count() == 1


def test_track_player_without_stats_still_tracks(collector):
    assert collector.track_player("missing", "Ghost") is None
    assert TrackedPlayer.select().count() == 1


def test_batch_over_limit_is_rejected_before_provider_call(database, fake_extractor):
    collector = StatsCollector(fake_extractor)

    with pytest.raises(BatchTooLargeError):
        collector.fetch_multiple_players([str(i) for i in range(129)])
    assert fake_extractor.batch_calls == []


def test_batch_at_limit_is_allowed(collector, fake_extractor):
    collector.fetch_multiple_players([str(i) for i in range(128)])
    assert len(fake_extractor.batch_calls) == 1


def test_empty_batch_skips_provider(collector, fake_extractor):
    assert collector.fetch_multiple_players([]) == []
    assert fake_extractor.batch_calls == []


def test_update_leaderboard_upserts_fetched_players(collector):
    players = collector.update_leaderboard(["1", "2", "unknown"])

    assert [p.player_id for p in players] == ["1", "2"]
    assert LeaderboardEntry.select().count() == 2


def test_batch_update_skips_rows_without_id(collector):
    written = collector.batch_update_leaderboard([
        PlayerStats(player_id="", player_name="Nameless"),
        PlayerStats(player_id="5", player_name="Five", kd_ratio=1.0),
    ])

    assert written == 1
    assert LeaderboardEntry.get(LeaderboardEntry.player_id == "5").player_name == "Five"


def test_batch_update_overwrites_existing_rows(database):
    collector = StatsCollector(FakeExtractor(batch={"1": batch_item("1", "One", 0.5)}))
    collector.update_leaderboard(["1"])
    collector.extractor.batch["1"] = batch_item("1", "One", 4.0)
    collector.update_leaderboard(["1"])

    assert LeaderboardEntry.select().count() == 1
    assert LeaderboardEntry.get().kd_ratio == 4.0


def test_track_player_with_overflowing_value_stores_zero(database):
    collector = StatsCollector(FakeExtractor(stats={"9": {"kills": "1e999", "killDeath": "nan"}}))

    stats = collector.track_player("9", "Inf")

    assert stats.kills == 0
    assert stats.kd_ratio == 0
    assert PlayerStatsHistory.get(PlayerStatsHistory.player_id == "9").kills == 0
