from __future__ import annotations

from dataclasses import dataclass
from typing import FrozenSet, Iterable, Mapping


@dataclass(frozen=True, slots=True)
class MissionDefinition:
    """Static reward and gating data for one mission.

    ``prerequisites`` is the complete accessibility gate: a mission lists every
    mission that must be finished first, not only its direct parents.
    """

    id: int
    badge_name: str
    coin_reward: int
    point_reward: int
    prerequisites: FrozenSet[int] = frozenset()
    level: int = 1


@dataclass(frozen=True, slots=True)
class LevelRequirement:
    """Gate for leaving ``level``: every mission up to it plus an accuracy floor."""

    level: int
    min_accuracy: float


def _mission(
    mission_id: int,
    badge: str,
    coins: int,
    points: int,
    prerequisites: Iterable[int] = (),
    *,
    level: int,
) -> MissionDefinition:
    return MissionDefinition(
        id=mission_id,
        badge_name=badge,
        coin_reward=coins,
        point_reward=points,
        prerequisites=frozenset(prerequisites),
        level=level,
    )


_LEVEL_ONE = tuple(range(1, 11))

_MISSIONS: Mapping[int, MissionDefinition] = {
    m.id: m
    for m in (
        # Level 1: barangay missions
        _mission(1, "Eco-Kabataan", 20, 100, level=1),
        _mission(2, "Registered Voter", 15, 100, [1], level=1),
        _mission(3, "Community Explorer", 25, 150, [1, 2], level=1),
        _mission(4, "Law Reader", 30, 150, [1, 2, 3], level=1),
        _mission(5, "Digital Defender", 35, 200, [1, 2, 3, 4], level=1),
        _mission(6, "Public Service Aide", 25, 150, [1, 2, 3], level=1),
        _mission(7, "Peacekeeper", 40, 200, [4, 5, 6], level=1),
        _mission(8, "Historian", 45, 250, [1, 2, 3, 4, 5], level=1),
        _mission(9, "Health Advocate", 35, 200, [3, 6], level=1),
        _mission(10, "Youth Leader", 50, 300, [7, 8, 9], level=1),
        # Level 2: city missions, all gated on the whole of level 1
        _mission(11, "Municipal Councilor", 40, 300, _LEVEL_ONE, level=2),
        _mission(12, "Financial Steward", 45, 350, [11], level=2),
        _mission(13, "Infrastructure Expert", 50, 400, [11, 12], level=2),
        _mission(14, "Commerce Facilitator", 55, 450, [11, 12, 13], level=2),
        _mission(15, "Urban Planner", 60, 500, [11, 12, 13, 14], level=2),
        _mission(16, "Green Champion", 50, 400, [11, 12, 13], level=2),
        _mission(17, "Safety Coordinator", 65, 550, [14, 15, 16], level=2),
        _mission(18, "Cultural Guardian", 70, 600, [11, 12, 13, 14, 15], level=2),
        _mission(19, "Health Administrator", 60, 500, [13, 16], level=2),
        _mission(20, "City Leader", 80, 750, [17, 18, 19], level=2),
    )
}

# Keyed by the level being left. No entry means the level is terminal.
_LEVEL_REQUIREMENTS: Mapping[int, LevelRequirement] = {
    1: LevelRequirement(level=1, min_accuracy=70.0),
}


def all_missions() -> Iterable[MissionDefinition]:
    return _MISSIONS.values()


def mission_ids() -> tuple[int, ...]:
    return tuple(sorted(_MISSIONS))


def get_mission(mission_id: int) -> MissionDefinition | None:
    return _MISSIONS.get(mission_id)


def get_level_requirement(level: int) -> LevelRequirement | None:
    return _LEVEL_REQUIREMENTS.get(level)


def badges_required_for(level: int) -> int:
    """Number of missions gated at or below ``level``."""
    return sum(1 for mission in _MISSIONS.values() if mission.level <= level)


def max_level() -> int:
    return max(mission.level for mission in _MISSIONS.values())
