from __future__ import annotations

from typing import Iterable

from questline.components.mission_marker import MissionStatus
from questline.factories.missions import get_mission, mission_ids


def is_accessible(mission_id: int, completed: Iterable[int]) -> bool:
    """Return True when every listed prerequisite of ``mission_id`` is done.

    Unknown missions are never accessible. Prerequisite lists are taken as the
    whole gate, so no graph traversal happens and cycles just stay locked.
    """

    mission = get_mission(mission_id)
    if mission is None:
        return False
    if not mission.prerequisites:
        return True
    return mission.prerequisites.issubset(completed)


def list_available(completed: Iterable[int]) -> frozenset[int]:
    """Catalog missions not yet completed whose prerequisites are satisfied."""

    done = frozenset(completed)
    return frozenset(
        mission_id
        for mission_id in mission_ids()
        if mission_id not in done and is_accessible(mission_id, done)
    )


def newly_available(before: Iterable[int], after: Iterable[int]) -> frozenset[int]:
    return list_available(after) - list_available(before)


def mission_status(mission_id: int, completed: Iterable[int]) -> MissionStatus:
    done = frozenset(completed)
    if mission_id in done:
        return MissionStatus.COMPLETED
    if is_accessible(mission_id, done):
        return MissionStatus.ACCESSIBLE
    return MissionStatus.LOCKED
