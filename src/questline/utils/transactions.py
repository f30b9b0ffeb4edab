"""Pure progress transactions.

Every function takes a ``PlayerProgress`` and returns a new one (or raises
with the input untouched). Nothing here performs I/O; persistence and
notification belong to ``ProgressStoreSystem``.
"""
from __future__ import annotations

import math
from dataclasses import replace
from datetime import datetime, timezone
from typing import Any, Dict

from questline.components.player_progress import PlayerProgress
from questline.components.quiz import QuizResult
from questline.constants import DEFAULT_TITLE, SPEED_EXCELLENT_MAX, SPEED_GOOD_MAX, SPEED_GREAT_MAX
from questline.errors import (
    InsufficientCoinsError,
    ItemUnavailableError,
    MissionLockedError,
    TitleLockedError,
)
from questline.factories.achievements import all_achievements
from questline.factories.missions import (
    badges_required_for,
    get_level_requirement,
    get_mission,
    mission_ids,
)
from questline.factories.shop import ShopItem
from questline.utils.dependency import is_accessible


def _timestamp(now: datetime | None = None) -> str:
    return (now or datetime.now(timezone.utc)).isoformat()


def _require_non_negative(name: str, value: int) -> int:
    if value < 0:
        raise ValueError(f"{name} must be non-negative, got {value}")
    return value


def new_progress(player_name: str, *, now: datetime | None = None) -> PlayerProgress:
    return PlayerProgress(player_name=player_name, last_played=_timestamp(now))


def can_progress_to_next_level(progress: PlayerProgress) -> bool:
    requirement = get_level_requirement(progress.level)
    if requirement is None:
        return False
    if len(progress.badges) < badges_required_for(progress.level):
        return False
    return progress.total_questions > 0 and progress.accuracy >= requirement.min_accuracy


def complete_mission(
    mission_id: int,
    quiz_result: QuizResult,
    progress: PlayerProgress,
    *,
    now: datetime | None = None,
) -> PlayerProgress:
    if not is_accessible(mission_id, progress.completed_missions):
        raise MissionLockedError(mission_id)
    if progress.has_completed(mission_id):
        return progress
    mission = get_mission(mission_id)
    if mission is None:
        raise MissionLockedError(mission_id)

    if not quiz_result.is_correct:
        return replace(
            progress,
            total_questions=progress.total_questions + 1,
            last_played=_timestamp(now),
        )

    updated = replace(
        progress,
        coins=progress.coins + mission.coin_reward,
        total_coins_earned=progress.total_coins_earned + mission.coin_reward,
        badges=progress.badges + (mission.badge_name,),
        completed_missions=progress.completed_missions + (mission_id,),
        completed_quizzes=progress.completed_quizzes | {mission_id},
        total_score=progress.total_score + mission.point_reward + quiz_result.points,
        correct_answers=progress.correct_answers + 1,
        total_questions=progress.total_questions + 1,
        last_played=_timestamp(now),
    )
    if can_progress_to_next_level(updated):
        updated = replace(updated, level=updated.level + 1)
    return updated


def grant_coins(amount: int, progress: PlayerProgress, *, now: datetime | None = None) -> PlayerProgress:
    _require_non_negative("amount", amount)
    return replace(
        progress,
        coins=progress.coins + amount,
        total_coins_earned=progress.total_coins_earned + amount,
        last_played=_timestamp(now),
    )


def spend_coins(amount: int, progress: PlayerProgress, *, now: datetime | None = None) -> PlayerProgress:
    _require_non_negative("amount", amount)
    if amount > progress.coins:
        raise InsufficientCoinsError(amount, progress.coins)
    return replace(progress, coins=progress.coins - amount, last_played=_timestamp(now))


def collect_item(
    item_id: str,
    coin_value: int,
    point_value: int,
    progress: PlayerProgress,
    *,
    now: datetime | None = None,
) -> tuple[PlayerProgress, bool]:
    if item_id in progress.collected_items:
        return progress, False
    _require_non_negative("coin_value", coin_value)
    _require_non_negative("point_value", point_value)
    updated = replace(
        progress,
        collected_items=progress.collected_items | {item_id},
        coins=progress.coins + coin_value,
        total_coins_earned=progress.total_coins_earned + coin_value,
        total_score=progress.total_score + point_value,
        last_played=_timestamp(now),
    )
    return updated, True


def record_speed_challenge(elapsed: float, progress: PlayerProgress) -> PlayerProgress:
    if not math.isfinite(elapsed) or elapsed < 0:
        raise ValueError(f"Invalid quiz time: {elapsed}")
    counts = progress.speed_challenges
    if elapsed <= SPEED_EXCELLENT_MAX:
        counts = replace(counts, excellent=counts.excellent + 1)
    elif elapsed <= SPEED_GREAT_MAX:
        counts = replace(counts, great=counts.great + 1)
    elif elapsed <= SPEED_GOOD_MAX:
        counts = replace(counts, good=counts.good + 1)
    else:
        return progress
    return replace(
        progress,
        speed_challenges=counts,
        fastest_quiz_time=min(progress.fastest_quiz_time, elapsed),
    )


def check_achievements(progress: PlayerProgress) -> frozenset[str]:
    """Every achievement whose condition currently holds, claimed or not."""
    return frozenset(a.name for a in all_achievements() if a.predicate(progress))


def claim_achievements(progress: PlayerProgress) -> tuple[PlayerProgress, tuple[str, ...]]:
    """Mark newly earned achievements as claimed and return their names."""

    earned = check_achievements(progress)
    newly = tuple(
        a.name for a in all_achievements()
        if a.name in earned and a.name not in progress.claimed_achievements
    )
    if not newly:
        return progress, ()
    return replace(progress, claimed_achievements=progress.claimed_achievements | set(newly)), newly


def tick_playtime(minutes: int, progress: PlayerProgress, *, now: datetime | None = None) -> PlayerProgress:
    _require_non_negative("minutes", minutes)
    return replace(progress, playtime=progress.playtime + minutes, last_played=_timestamp(now))


def record_steps(steps: int, progress: PlayerProgress) -> PlayerProgress:
    _require_non_negative("steps", steps)
    return replace(progress, total_steps_taken=progress.total_steps_taken + steps)


def claim_npc_reward(
    npc_id: str,
    coins: int,
    progress: PlayerProgress,
    *,
    now: datetime | None = None,
) -> tuple[PlayerProgress, bool]:
    if npc_id in progress.npc_rewards_claimed:
        return progress, False
    granted = grant_coins(coins, progress, now=now)
    return replace(granted, npc_rewards_claimed=progress.npc_rewards_claimed | {npc_id}), True


def purchase_count(item_id: str, progress: PlayerProgress) -> int:
    return progress.purchased_items.count(item_id)


def purchase_item(item: ShopItem, progress: PlayerProgress, *, now: datetime | None = None) -> PlayerProgress:
    """Buy one catalog item at its catalog price."""

    if progress.level < item.unlock_level:
        raise ItemUnavailableError(item.id, f"requires level {item.unlock_level}")
    if item.max_purchases is not None and purchase_count(item.id, progress) >= item.max_purchases:
        raise ItemUnavailableError(item.id, f"maximum {item.max_purchases} purchases reached")
    paid = spend_coins(item.price, progress, now=now)
    return replace(paid, purchased_items=progress.purchased_items + (item.id,))


def unlocked_titles(progress: PlayerProgress) -> frozenset[str]:
    """Titles a player may wear: the default, every earned badge and every claimed achievement."""
    return frozenset((DEFAULT_TITLE, *progress.badges, *progress.claimed_achievements))


def equip_title(title: str, progress: PlayerProgress) -> PlayerProgress:
    if title not in unlocked_titles(progress):
        raise TitleLockedError(title)
    return replace(progress, current_title=title)


def player_stats(progress: PlayerProgress) -> Dict[str, Any]:
    total_missions = len(mission_ids())
    completion = round(len(progress.completed_missions) / total_missions * 100) if total_missions else 0
    return {
        "level": progress.level,
        "coins": progress.coins,
        "badge_count": len(progress.badges),
        "total_score": progress.total_score,
        "accuracy": round(progress.accuracy),
        "completion_percentage": completion,
        "correct_answers": progress.correct_answers,
        "total_questions": progress.total_questions,
        "playtime": progress.playtime,
        "items_collected": progress.total_items_collected,
    }
