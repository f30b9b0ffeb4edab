import math

from questline.utils.scoring import (
    attempt_credit,
    elapsed_time_bonus,
    feedback_points,
    remaining_time_bonus,
    score_answer,
)


def test_elapsed_bonus_tiers_resolve_ties_upward():
    assert elapsed_time_bonus(0) == 30
    assert elapsed_time_bonus(10) == 30
    assert elapsed_time_bonus(10.01) == 20
    assert elapsed_time_bonus(20) == 20
    assert elapsed_time_bonus(30) == 10
    assert elapsed_time_bonus(30.5) == 0


def test_remaining_bonus_tiers():
    assert remaining_time_bonus(60, 60) == 30
    assert remaining_time_bonus(50, 60) == 30
    assert remaining_time_bonus(49.9, 60) == 20
    assert remaining_time_bonus(40, 60) == 20
    assert remaining_time_bonus(30, 60) == 10
    assert remaining_time_bonus(29.9, 60) == 0
    assert remaining_time_bonus(0, 60) == 0


def test_attempt_credit_discounts_retries():
    assert attempt_credit(1) == 1.0
    assert attempt_credit(2) < attempt_credit(1)
    assert attempt_credit(3) < attempt_credit(2)
    assert attempt_credit(4) == 0.0


def test_feedback_points_apply_bonus_and_attempt_credit():
    assert feedback_points(55, 1, 60) == 80
    assert feedback_points(55, 2, 60) == 40
    assert feedback_points(10, 3, 60) == 12


def test_score_answer_correct_with_bonus():
    result = score_answer(3, 2, 2, 8.0)
    assert result.is_correct
    assert result.points == 80
    assert result.mission_id == 3
    assert result.time_spent == 8.0


def test_score_answer_incorrect_scores_zero():
    result = score_answer(3, 1, 2, 1.0)
    assert not result.is_correct
    assert result.points == 0


def test_score_answer_sanitizes_bad_elapsed():
    result = score_answer(1, 0, 0, math.nan)
    assert result.time_spent == 0.0
    assert result.points == 80
