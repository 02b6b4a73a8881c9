"""
Stats Transformers

Map raw gametools.network payloads onto the fixed internal stat record.
The provider is inconsistent about field names between its single-player
and batch endpoints, so each field is read through an ordered fallback
chain: the first key that is present (and not null) wins.
"""

import math
from dataclasses import dataclass, asdict
from typing import Any, Optional

UNKNOWN = "Unknown"


@dataclass
class PlayerStats:
    """Normalized stats for one player. No field is ever None."""

    player_id: str
    player_name: str
    kills: int = 0
    deaths: int = 0
    kd_ratio: float = 0
    wins: int = 0
    losses: int = 0
    win_rate: float = 0
    score: int = 0
    time_played: int = 0
    headshots: int = 0
    headshot_percentage: float = 0
    accuracy: float = 0
    level: int = 0
    rank: str = UNKNOWN

    def to_dict(self) -> dict:
        return asdict(self)


def first_present(raw: dict, *keys: str, default: Any = 0) -> Any:
    """
    Return the value of the first key present in raw with a non-null value.

    Examples:
        >>> first_present({"killDeath": 1.5, "kdRatio": 2.0}, "killDeath", "kdRatio")
        1.5
        >>> first_present({"kdRatio": 2.0}, "killDeath", "kdRatio")
        2.0
        >>> first_present({}, "killDeath", "kdRatio")
        0
    """
    for key in keys:
        value = raw.get(key)
        if value is not None:
            return value
    return default


def to_number(value: Any, integer: bool = False) -> int | float:
    """
    Coerce a provider value to a number; anything unusable becomes 0.

    Accepts numbers, numeric strings ("12", "1.5", "45%") and clock
    durations ("12:34:56" -> seconds). Infinite and NaN values become 0.

    Examples:
        >>> to_number("1.25")
        1.25
        >>> to_number("01:02:03", integer=True)
        3723
        >>> to_number({"nested": 1})
        0
    """
    if isinstance(value, bool):
        number: int | float = 0
    elif isinstance(value, (int, float)):
        number = value
    elif isinstance(value, str):
        number = _parse_numeric_string(value.strip().rstrip("%"))
    else:
        number = 0

    if not math.isfinite(number):
        number = 0

    return int(number) if integer else float(number)


def _parse_numeric_string(text: str) -> float:
    try:
        if ":" in text:
            seconds = 0.0
            for part in text.split(":"):
                seconds = seconds * 60 + float(part)
            return seconds
        return float(text.replace(",", ""))
    except ValueError:
        return 0


def _rank_info(raw: dict) -> dict:
    rank = raw.get("rank")
    return rank if isinstance(rank, dict) else {}


def _build(
    player_id: str,
    player_name: str,
    values: dict[str, Any],
    rank: Any,
) -> PlayerStats:
    counts = ("kills", "deaths", "wins", "losses", "score", "time_played", "headshots", "level")
    return PlayerStats(
        player_id=player_id,
        player_name=player_name,
        rank=str(rank),
        **{
            name: to_number(value, integer=name in counts)
            for name, value in values.items()
        },
    )


def normalize_player_stats(raw: Any, player_id: str, player_name: str) -> Optional[PlayerStats]:
    """
    Normalize a single-player /stats/ response.

    The player's id and name come from the caller, not the payload.
    Returns None when the payload is not a JSON object.
    """
    if not isinstance(raw, dict):
        return None

    rank = _rank_info(raw)
    return _build(
        player_id,
        player_name or UNKNOWN,
        {
            "kills": first_present(raw, "kills"),
            "deaths": first_present(raw, "deaths"),
            "kd_ratio": first_present(raw, "killDeath"),
            "wins": first_present(raw, "wins"),
            "losses": first_present(raw, "losses"),
            "win_rate": first_present(raw, "winPercent"),
            "score": first_present(raw, "score"),
            "time_played": first_present(raw, "timePlayed"),
            "headshots": first_present(raw, "headshots"),
            "headshot_percentage": first_present(raw, "headshotPercent"),
            "accuracy": first_present(raw, "accuracy"),
            "level": first_present(rank, "number"),
        },
        rank=first_present(rank, "name", default=UNKNOWN),
    )


def normalize_batch_player(raw: dict) -> PlayerStats:
    """
    Normalize one item of a /multiple/ response.

    Headshots, headshot percentage and accuracy are not part of the batch
    payload and stay at zero.
    """
    rank = _rank_info(raw)

    rank_name = first_present(rank, "name", default=None)
    if rank_name is None:
        rank_name = first_present(raw, "rankName", default=None)
    if rank_name is None and isinstance(raw.get("rank"), str):
        rank_name = raw["rank"]

    level = first_present(rank, "number", default=None)
    if level is None:
        level = first_present(raw, "level")

    return _build(
        str(first_present(raw, "playerId", "id", default="")),
        str(first_present(raw, "playerName", "name", default=UNKNOWN)),
        {
            "kills": first_present(raw, "kills"),
            "deaths": first_present(raw, "deaths"),
            "kd_ratio": first_present(raw, "killDeath", "kdRatio"),
            "wins": first_present(raw, "wins"),
            "losses": first_present(raw, "losses"),
            "win_rate": first_present(raw, "winPercent", "winRate"),
            "score": first_present(raw, "score"),
            "time_played": first_present(raw, "timePlayed"),
            "level": level,
        },
        rank=rank_name if rank_name is not None else UNKNOWN,
    )


def normalize_batch_response(body: Any) -> list[PlayerStats]:
    """Normalize a /multiple/ body; anything but a list of objects yields []."""
    if not isinstance(body, list):
        return []
    return [normalize_batch_player(item) for item in body if isinstance(item, dict)]
