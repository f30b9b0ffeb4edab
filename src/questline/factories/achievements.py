from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Iterable

from questline.components.player_progress import PlayerProgress


@dataclass(frozen=True, slots=True)
class AchievementDefinition:
    name: str
    description: str
    predicate: Callable[[PlayerProgress], bool]


_ACHIEVEMENTS: tuple[AchievementDefinition, ...] = (
    AchievementDefinition(
        name="Quick Starter",
        description="Finish any quiz within the excellent time tier",
        predicate=lambda p: p.speed_challenges.excellent >= 1,
    ),
    AchievementDefinition(
        name="Speed Demon",
        description="Finish 3 quizzes within the excellent time tier",
        predicate=lambda p: p.speed_challenges.excellent >= 3,
    ),
    AchievementDefinition(
        name="Steady Scholar",
        description="Finish 10 quizzes within 30 seconds",
        predicate=lambda p: p.speed_challenges.total >= 10,
    ),
    AchievementDefinition(
        name="Lightning Reflexes",
        description="Finish a quiz in under 5 seconds",
        predicate=lambda p: p.fastest_quiz_time < 5,
    ),
)


def all_achievements() -> Iterable[AchievementDefinition]:
    return _ACHIEVEMENTS


def get_achievement(name: str) -> AchievementDefinition | None:
    for definition in _ACHIEVEMENTS:
        if definition.name == name:
            return definition
    return None
