"""
Recent player search.

A small in-memory list of recently searched or tracked player names with
scored fuzzy lookup, used for search-box suggestions.
"""

import threading
import time
from dataclasses import dataclass
from typing import Callable, Optional

MAX_CACHE_SIZE = 100

EXACT_SCORE = 100
PREFIX_SCORE = 80
SUBSTRING_SCORE = 60
SUBSEQUENCE_CHAR_SCORE = 5

SECONDS_PER_DAY = 60 * 60 * 24

# (max age in days, boost), checked in order
RECENCY_BOOSTS = ((1, 15), (7, 8), (30, 3))


@dataclass
class RecentPlayer:
    name: str
    platform: Optional[str]
    last_searched: float  # unix seconds


def match_score(name: str, query: str) -> int:
    """
    Score how well a name matches a query, ignoring case.

    Exact beats prefix beats substring. Otherwise every query character
    found in order scores 5, and a query that can't be fully matched
    scores 0.
    """
    name = name.lower()
    query = query.lower()

    if name == query:
        return EXACT_SCORE
    if name.startswith(query):
        return PREFIX_SCORE
    if query in name:
        return SUBSTRING_SCORE

    matched = 0
    for char in name:
        if matched == len(query):
            break
        if char == query[matched]:
            matched += 1

    if matched < len(query):
        return 0
    return matched * SUBSEQUENCE_CHAR_SCORE


def recency_boost(age_seconds: float) -> int:
    days = age_seconds / SECONDS_PER_DAY
    for max_days, boost in RECENCY_BOOSTS:
        if days < max_days:
            return boost
    return 0


class RecentPlayerCache:
    """
    Most-recent-first list of player names, capped at MAX_CACHE_SIZE.

    Names are unique case-insensitively; re-adding a name moves it to the
    front with a fresh timestamp.
    """

    def __init__(self, max_size: int = MAX_CACHE_SIZE, clock: Callable[[], float] = time.time):
        self.max_size = max_size
        self._clock = clock
        self._players: list[RecentPlayer] = []
        self._lock = threading.Lock()

    def add_player(self, name: str, platform: Optional[str] = None) -> None:
        name = name.strip()
        if not name:
            return

        with self._lock:
            lowered = name.lower()
            self._players = [p for p in self._players if p.name.lower() != lowered]
            self._players.insert(0, RecentPlayer(name, platform, self._clock()))
            del self._players[self.max_size:]

    def search(self, query: str, limit: int = 10) -> list[RecentPlayer]:
        """
        Best matches for query, highest score first.

        Recently seen players get a boost on top of their match score;
        players that don't match at all are never returned.
        """
        if not query:
            return []

        now = self._clock()
        with self._lock:
            players = list(self._players)

        scored = []
        for player in players:
            score = match_score(player.name, query)
            if score <= 0:
                continue
            scored.append((score + recency_boost(now - player.last_searched), player))

        # sorted() is stable, so equal scores keep most-recent-first order
        scored = sorted(scored, key=lambda item: item[0], reverse=True)
        return [player for _, player in scored[:limit]]

    def recent(self, limit: int = 5) -> list[RecentPlayer]:
        with self._lock:
            return list(self._players[:limit])

    def __len__(self) -> int:
        return len(self._players)

    def clear(self) -> None:
        with self._lock:
            self._players.clear()
