from __future__ import annotations

from datetime import datetime, timezone
from typing import Iterable

from questline.components.player_progress import PlayerProgress
from questline.components.quiz import QuizQuestion, QuizResult
from questline.utils.transactions import complete_mission, new_progress

FIXED_NOW = datetime(2024, 1, 1, tzinfo=timezone.utc)


class FakeClock:
    """Manually advanced stand-in for ``time.monotonic``."""

    def __init__(self, start: float = 100.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


def make_questions(count: int, correct_index: int = 0) -> tuple[QuizQuestion, ...]:
    return tuple(
        QuizQuestion(
            prompt=f"Question {n + 1}",
            options=("A", "B", "C", "D"),
            correct_index=correct_index,
        )
        for n in range(count)
    )


def correct_result(mission_id: int, points: int = 50) -> QuizResult:
    return QuizResult(
        mission_id=mission_id,
        question_index=0,
        selected_index=0,
        correct_index=0,
        is_correct=True,
        time_spent=5.0,
        points=points,
    )


def wrong_result(mission_id: int) -> QuizResult:
    return QuizResult(
        mission_id=mission_id,
        question_index=0,
        selected_index=1,
        correct_index=0,
        is_correct=False,
        time_spent=5.0,
        points=0,
    )


def progress_with_missions(mission_ids: Iterable[int], player_name: str = "Ana") -> PlayerProgress:
    """Fresh progress with the given missions completed in order."""
    progress = new_progress(player_name, now=FIXED_NOW)
    for mission_id in mission_ids:
        progress = complete_mission(mission_id, correct_result(mission_id), progress, now=FIXED_NOW)
    return progress
