"""Tamper detection and structural validation for persisted progress.

The checksum only catches casual edits of a save blob. It is not keyed and
must not be treated as a security boundary.
"""
from __future__ import annotations

import hashlib
import json
import logging
import math
from datetime import datetime, timezone
from typing import Any, Dict, Mapping

from questline.components.player_progress import PlayerProgress, SpeedChallenges
from questline.constants import DEFAULT_TITLE, FORMAT_VERSION
from questline.factories.missions import badges_required_for, get_level_requirement, get_mission
from questline.utils.dependency import is_accessible
from questline.utils.transactions import unlocked_titles

logger = logging.getLogger(__name__)


def compute_checksum(progress: PlayerProgress) -> str:
    data = f"{progress.player_name}-{progress.coins}-{len(progress.badges)}-{progress.total_score}"
    return hashlib.blake2b(data.encode("utf-8"), digest_size=8).hexdigest()


def _supported_level(badge_count: int) -> int:
    """Highest level the level-up rule can reach with ``badge_count`` badges."""

    level = 1
    while get_level_requirement(level) is not None and badge_count >= badges_required_for(level):
        level += 1
    return level


def structural_problems(progress: PlayerProgress) -> list[str]:
    """List every invariant the snapshot breaks. Empty means valid."""

    problems: list[str] = []
    completed = progress.completed_missions
    if len(set(completed)) != len(completed):
        problems.append("duplicate completed missions")

    expected_badges: list[str] = []
    coin_floor = 0
    done: set[int] = set()
    for mission_id in completed:
        mission = get_mission(mission_id)
        if mission is None:
            problems.append(f"unknown mission {mission_id}")
            continue
        if not is_accessible(mission_id, done):
            problems.append(f"mission {mission_id} completed before its prerequisites")
        done.add(mission_id)
        expected_badges.append(mission.badge_name)
        coin_floor += mission.coin_reward
    if tuple(expected_badges) != progress.badges:
        problems.append("badges do not match completed missions")
    if not set(completed) <= progress.completed_quizzes:
        problems.append("completed missions missing from completed quizzes")

    if progress.coins < 0:
        problems.append("negative coin balance")
    if progress.total_coins_earned < coin_floor:
        problems.append("lifetime coins below mission rewards")
    if progress.total_score < 0:
        problems.append("negative score")
    if progress.correct_answers < 0 or progress.correct_answers > progress.total_questions:
        problems.append("correct answers exceed total questions")
    if progress.level < 1:
        problems.append("level below 1")
    elif progress.level > _supported_level(len(progress.badges)):
        problems.append("level above what completed missions allow")
    if progress.current_title not in unlocked_titles(progress):
        problems.append("equipped title not unlocked")
    speed = progress.speed_challenges
    if min(speed.excellent, speed.great, speed.good) < 0:
        problems.append("negative speed challenge count")
    if progress.playtime < 0 or progress.total_steps_taken < 0:
        problems.append("negative playtime or steps")
    if math.isnan(progress.fastest_quiz_time) or progress.fastest_quiz_time < 0:
        problems.append("invalid fastest quiz time")
    return problems


def validate_structure(progress: PlayerProgress) -> bool:
    return not structural_problems(progress)


def progress_to_dict(progress: PlayerProgress) -> Dict[str, Any]:
    fastest = progress.fastest_quiz_time
    return {
        "player_name": progress.player_name,
        "level": progress.level,
        "coins": progress.coins,
        "total_coins_earned": progress.total_coins_earned,
        "badges": list(progress.badges),
        "completed_missions": list(progress.completed_missions),
        "completed_quizzes": sorted(progress.completed_quizzes),
        "total_score": progress.total_score,
        "correct_answers": progress.correct_answers,
        "total_questions": progress.total_questions,
        "last_played": progress.last_played,
        "playtime": progress.playtime,
        "collected_items": sorted(progress.collected_items),
        "total_items_collected": progress.total_items_collected,
        "speed_challenges": {
            "excellent": progress.speed_challenges.excellent,
            "great": progress.speed_challenges.great,
            "good": progress.speed_challenges.good,
        },
        "fastest_quiz_time": fastest if math.isfinite(fastest) else None,
        "purchased_items": list(progress.purchased_items),
        "npc_rewards_claimed": sorted(progress.npc_rewards_claimed),
        "current_title": progress.current_title,
        "total_steps_taken": progress.total_steps_taken,
        "claimed_achievements": sorted(progress.claimed_achievements),
    }


def _int(payload: Mapping[str, Any], key: str, default: int = 0) -> int:
    value = payload.get(key, default)
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValueError(f"Field '{key}' must be an integer")
    return value


def _strings(payload: Mapping[str, Any], key: str) -> list[str]:
    values = payload.get(key, [])
    if not isinstance(values, list) or not all(isinstance(v, str) for v in values):
        raise ValueError(f"Field '{key}' must be a list of strings")
    return values


def _ints(payload: Mapping[str, Any], key: str) -> list[int]:
    values = payload.get(key, [])
    if not isinstance(values, list) or not all(
        isinstance(v, int) and not isinstance(v, bool) for v in values
    ):
        raise ValueError(f"Field '{key}' must be a list of integers")
    return values


def progress_from_dict(payload: Mapping[str, Any]) -> PlayerProgress:
    """Rebuild a snapshot from decoded JSON, raising ``ValueError`` on bad shape."""

    if not isinstance(payload, Mapping):
        raise ValueError("Progress payload must be an object")
    name = payload.get("player_name")
    if not isinstance(name, str) or not name:
        raise ValueError("Missing player name")
    speed = payload.get("speed_challenges") or {}
    if not isinstance(speed, Mapping):
        raise ValueError("Field 'speed_challenges' must be an object")
    fastest = payload.get("fastest_quiz_time")
    if fastest is None:
        fastest = math.inf
    elif isinstance(fastest, bool) or not isinstance(fastest, (int, float)):
        raise ValueError("Field 'fastest_quiz_time' must be a number")
    else:
        try:
            fastest = float(fastest)
        except OverflowError as exc:
            raise ValueError("Field 'fastest_quiz_time' is out of range") from exc
        if not math.isfinite(fastest):
            raise ValueError("Field 'fastest_quiz_time' must be finite or null")
    collected = _strings(payload, "collected_items")
    stored_count = payload.get("total_items_collected")
    if stored_count is not None and stored_count != len(set(collected)):
        raise ValueError("Collected item count does not match collected items")
    title = payload.get("current_title", DEFAULT_TITLE)
    if not isinstance(title, str):
        raise ValueError("Field 'current_title' must be a string")
    last_played = payload.get("last_played", "")
    if not isinstance(last_played, str):
        raise ValueError("Field 'last_played' must be a string")

    return PlayerProgress(
        player_name=name,
        level=_int(payload, "level", 1),
        coins=_int(payload, "coins"),
        total_coins_earned=_int(payload, "total_coins_earned"),
        badges=tuple(_strings(payload, "badges")),
        completed_missions=tuple(_ints(payload, "completed_missions")),
        completed_quizzes=frozenset(_ints(payload, "completed_quizzes")),
        total_score=_int(payload, "total_score"),
        correct_answers=_int(payload, "correct_answers"),
        total_questions=_int(payload, "total_questions"),
        last_played=last_played,
        playtime=_int(payload, "playtime"),
        collected_items=frozenset(collected),
        speed_challenges=SpeedChallenges(
            excellent=_int(speed, "excellent"),
            great=_int(speed, "great"),
            good=_int(speed, "good"),
        ),
        fastest_quiz_time=float(fastest),
        purchased_items=tuple(_strings(payload, "purchased_items")),
        npc_rewards_claimed=frozenset(_strings(payload, "npc_rewards_claimed")),
        current_title=title,
        total_steps_taken=_int(payload, "total_steps_taken"),
        claimed_achievements=frozenset(_strings(payload, "claimed_achievements")),
    )


def serialize(progress: PlayerProgress) -> bytes:
    payload = progress_to_dict(progress)
    payload["checksum"] = compute_checksum(progress)
    payload["format_version"] = FORMAT_VERSION
    return json.dumps(payload, allow_nan=False).encode("utf-8")


def load_and_validate(raw: bytes | str | None) -> PlayerProgress | None:
    """Decode a stored blob, returning None for anything corrupt or edited."""

    if not raw:
        return None
    try:
        payload = json.loads(raw)
        if not isinstance(payload, dict):
            raise ValueError("Progress blob is not an object")
        checksum = payload.pop("checksum", None)
        payload.pop("format_version", None)
        progress = progress_from_dict(payload)
    except (ValueError, TypeError, OverflowError, RecursionError) as exc:
        logger.warning("Discarding unreadable progress blob: %s", exc)
        return None
    if checksum != compute_checksum(progress):
        logger.warning("Progress checksum mismatch for %s - possible tampering", progress.player_name)
        return None
    problems = structural_problems(progress)
    if problems:
        logger.warning("Progress validation failed for %s: %s", progress.player_name, "; ".join(problems))
        return None
    return progress


def export_progress(progress: PlayerProgress, *, now: datetime | None = None) -> str:
    payload = progress_to_dict(progress)
    payload["checksum"] = compute_checksum(progress)
    payload["format_version"] = FORMAT_VERSION
    payload["export_date"] = (now or datetime.now(timezone.utc)).isoformat()
    return json.dumps(payload, indent=2, allow_nan=False)


def import_progress(text: str) -> PlayerProgress | None:
    """Parse an exported backup. The checksum is verified only when present."""

    try:
        payload = json.loads(text)
        if not isinstance(payload, dict):
            raise ValueError("Backup is not an object")
        if not isinstance(payload.get("badges"), list):
            raise ValueError("Invalid progress data format")
        checksum = payload.pop("checksum", None)
        payload.pop("format_version", None)
        payload.pop("export_date", None)
        progress = progress_from_dict(payload)
    except (ValueError, TypeError, OverflowError, RecursionError) as exc:
        logger.warning("Rejected progress import: %s", exc)
        return None
    if checksum is not None and checksum != compute_checksum(progress):
        logger.warning("Rejected progress import: checksum mismatch")
        return None
    problems = structural_problems(progress)
    if problems:
        logger.warning("Rejected progress import: %s", "; ".join(problems))
        return None
    return progress
