from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import FrozenSet, Tuple

from questline.constants import DEFAULT_TITLE


@dataclass(frozen=True, slots=True)
class SpeedChallenges:
    """Counts of quiz completions per elapsed-time tier."""

    excellent: int = 0
    great: int = 0
    good: int = 0

    @property
    def total(self) -> int:
        return self.excellent + self.great + self.good


@dataclass(frozen=True, slots=True)
class PlayerProgress:
    """Immutable snapshot of a single player's long-term progress.

    Snapshots are never edited in place. Every change goes through
    ``questline.utils.transactions`` which returns a fresh instance, so an
    observer holding a reference always sees a complete, consistent state.
    ``completed_missions`` keeps completion order; ``badges`` mirrors it.
    """

    player_name: str
    level: int = 1
    coins: int = 0
    total_coins_earned: int = 0
    badges: Tuple[str, ...] = ()
    completed_missions: Tuple[int, ...] = ()
    completed_quizzes: FrozenSet[int] = frozenset()
    total_score: int = 0
    correct_answers: int = 0
    total_questions: int = 0
    last_played: str = ""
    playtime: int = 0

    # World pickups and speed tracking
    collected_items: FrozenSet[str] = frozenset()
    speed_challenges: SpeedChallenges = field(default_factory=SpeedChallenges)
    fastest_quiz_time: float = math.inf

    # Shop, NPCs and cosmetics
    purchased_items: Tuple[str, ...] = ()
    npc_rewards_claimed: FrozenSet[str] = frozenset()
    current_title: str = DEFAULT_TITLE
    total_steps_taken: int = 0
    claimed_achievements: FrozenSet[str] = frozenset()

    @property
    def total_items_collected(self) -> int:
        return len(self.collected_items)

    @property
    def accuracy(self) -> float:
        """Correct answers as a percentage of all questions answered."""
        if self.total_questions <= 0:
            return 0.0
        return self.correct_answers / self.total_questions * 100

    def has_completed(self, mission_id: int) -> bool:
        return mission_id in self.completed_missions
