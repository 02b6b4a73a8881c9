"""Shared provider payloads and a fake extractor for the test suite."""

# Shape of a gametools /stats/ response (trimmed to what the normalizer reads)
ALICE_STATS = {
    "userName": "Alice",
    "kills": 1200,
    "deaths": 800,
    "killDeath": 1.5,
    "wins": 60,
    "losses": 40,
    "winPercent": 60.0,
    "score": 345000,
    "timePlayed": "12:00:00",
    "headshots": 300,
    "headshotPercent": 25.0,
    "accuracy": 18.5,
    "rank": {"number": 42, "name": "Sergeant"},
}


def batch_item(player_id, name, kd, score=1000, wins=10, level=5):
    return {
        "playerId": player_id,
        "playerName": name,
        "kills": 100,
        "deaths": 50,
        "killDeath": kd,
        "wins": wins,
        "losses": 5,
        "winPercent": 66.7,
        "score": score,
        "timePlayed": 3600,
        "rank": {"number": level, "name": "Private"},
    }


class FakeExtractor:
    """Stands in for GametoolsExtractor; records every call."""

    def __init__(self, stats=None, batch=None, failures=None):
        self.stats = stats or {}
        self.batch = batch or {}
        self.failures = failures or {}
        self.stats_calls = []
        self.batch_calls = []

    def get_player_stats(self, player_id):
        self.stats_calls.append(player_id)
        if player_id in self.failures:
            raise self.failures[player_id]
        return self.stats.get(player_id)

    def get_multiple_players(self, player_ids):
        self.batch_calls.append(list(player_ids))
        return [self.batch[pid] for pid in player_ids if pid in self.batch]
