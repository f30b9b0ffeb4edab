"""Quiz scoring rules.

``score_answer`` is the authoritative computation: it runs once per mission,
from the time elapsed since the quiz started, and its points are what gets
persisted. ``remaining_time_bonus`` and ``feedback_points`` only drive the
per-question feedback shown while the quiz is in progress. With the default
60 second limit the two tier tables line up (>= 50 s remaining is <= 10 s
elapsed), they differ only in what clock they read.
"""
from __future__ import annotations

import math

from questline.components.quiz import QuizResult
from questline.constants import (
    ATTEMPT_CREDIT,
    CORRECT_ANSWER_POINTS,
    ELAPSED_TIME_BONUS_TIERS,
    QUESTION_TIME_LIMIT,
    REMAINING_TIME_BONUS_TIERS,
)


def elapsed_time_bonus(elapsed: float) -> int:
    for max_elapsed, bonus in ELAPSED_TIME_BONUS_TIERS:
        if elapsed <= max_elapsed:
            return bonus
    return 0


def remaining_time_bonus(remaining: float, time_limit: float = QUESTION_TIME_LIMIT) -> int:
    if time_limit <= 0 or remaining <= 0:
        return 0
    fraction = remaining / time_limit
    for min_fraction, bonus in REMAINING_TIME_BONUS_TIERS:
        if fraction >= min_fraction:
            return bonus
    return 0


def attempt_credit(attempt: int) -> float:
    """Share of the points kept on the given 1-based attempt."""
    if attempt < 1 or attempt > len(ATTEMPT_CREDIT):
        return 0.0
    return ATTEMPT_CREDIT[attempt - 1]


def feedback_points(remaining: float, attempt: int, time_limit: float = QUESTION_TIME_LIMIT) -> int:
    raw = CORRECT_ANSWER_POINTS + remaining_time_bonus(remaining, time_limit)
    return int(raw * attempt_credit(attempt))


def score_answer(
    mission_id: int,
    selected_index: int,
    correct_index: int,
    elapsed: float,
    *,
    question_index: int = 0,
) -> QuizResult:
    """Validate an answer and compute its persisted point value."""

    if not math.isfinite(elapsed) or elapsed < 0:
        elapsed = 0.0
    is_correct = selected_index == correct_index
    points = 0
    if is_correct:
        points = CORRECT_ANSWER_POINTS + elapsed_time_bonus(elapsed)
    return QuizResult(
        mission_id=mission_id,
        question_index=question_index,
        selected_index=selected_index,
        correct_index=correct_index,
        is_correct=is_correct,
        time_spent=elapsed,
        points=points,
    )
