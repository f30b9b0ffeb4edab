from __future__ import annotations

from dataclasses import dataclass
from typing import Tuple


@dataclass(frozen=True, slots=True)
class QuizQuestion:
    prompt: str
    options: Tuple[str, ...]
    correct_index: int
    explanation: str = ""


@dataclass(frozen=True, slots=True)
class QuizResult:
    """Validated answer with the points it is worth (zero when incorrect)."""

    mission_id: int
    question_index: int
    selected_index: int
    correct_index: int
    is_correct: bool
    time_spent: float
    points: int


@dataclass(frozen=True, slots=True)
class QuestionOutcome:
    """Per-question feedback for the presentation layer.

    ``feedback_points`` and ``feedback_bonus`` are display values only; the
    persisted score comes from the mission-level ``QuizResult``.
    """

    mission_id: int
    question_index: int
    attempt: int
    selected_index: int | None
    is_correct: bool
    timed_out: bool
    time_remaining: float
    feedback_bonus: int
    feedback_points: int
    retries_left: int
