from __future__ import annotations

import math
from dataclasses import asdict, dataclass
from typing import Any, Dict

from questline.components.player_progress import PlayerProgress


def sanitize_integer(value: Any) -> int:
    """Coerce to a rounded int; missing, NaN and infinite values become 0."""

    if value is None or isinstance(value, bool):
        return 0
    try:
        numeric = float(value)
    except (TypeError, ValueError):
        return 0
    if not math.isfinite(numeric):
        return 0
    return int(round(numeric))


def sanitize_decimal(value: Any) -> float | None:
    """Round to two places; missing, NaN and infinite values become None."""

    if value is None or isinstance(value, bool):
        return None
    try:
        numeric = float(value)
    except (TypeError, ValueError):
        return None
    if not math.isfinite(numeric):
        return None
    return round(numeric, 2)


@dataclass(frozen=True, slots=True)
class RankingEntry:
    """Read-only projection of a player's progress for the ranking board."""

    player_name: str
    level: int
    total_score: int
    badges: int
    coins: int
    completed_missions: int
    accuracy: float
    playtime: int
    fastest_quiz_time: float | None
    excellent_answers: int
    great_answers: int
    good_answers: int
    total_collectibles: int

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


def build_ranking_entry(progress: PlayerProgress) -> RankingEntry:
    return RankingEntry(
        player_name=progress.player_name,
        level=sanitize_integer(progress.level),
        total_score=sanitize_integer(progress.total_score),
        badges=sanitize_integer(len(progress.badges)),
        coins=sanitize_integer(progress.coins),
        completed_missions=sanitize_integer(len(progress.completed_missions)),
        accuracy=sanitize_decimal(progress.accuracy) or 0.0,
        playtime=sanitize_integer(progress.playtime),
        fastest_quiz_time=sanitize_decimal(progress.fastest_quiz_time),
        excellent_answers=sanitize_integer(progress.speed_challenges.excellent),
        great_answers=sanitize_integer(progress.speed_challenges.great),
        good_answers=sanitize_integer(progress.speed_challenges.good),
        total_collectibles=sanitize_integer(progress.total_items_collected),
    )
