import math

import pytest

from questline.errors import (
    InsufficientCoinsError,
    ItemUnavailableError,
    MissionLockedError,
    TitleLockedError,
)
from questline.factories.collectibles import Rarity
from questline.factories.shop import ShopCategory, ShopItem
from questline.utils import transactions
from tests.helpers import FIXED_NOW, correct_result, progress_with_missions, wrong_result


def _fresh(name: str = "Ana"):
    return transactions.new_progress(name, now=FIXED_NOW)


def test_new_progress_defaults():
    progress = _fresh()
    assert progress.player_name == "Ana"
    assert progress.level == 1
    assert progress.coins == 0
    assert progress.badges == ()
    assert progress.completed_missions == ()
    assert math.isinf(progress.fastest_quiz_time)
    assert progress.last_played == FIXED_NOW.isoformat()


def test_first_mission_awards_badge_coins_and_score():
    progress = transactions.complete_mission(1, correct_result(1, points=50), _fresh(), now=FIXED_NOW)

    assert progress.coins == 20
    assert progress.total_coins_earned == 20
    assert progress.badges == ("Eco-Kabataan",)
    assert progress.completed_missions == (1,)
    assert 1 in progress.completed_quizzes
    assert progress.total_score == 150
    assert progress.correct_answers == 1
    assert progress.total_questions == 1
    assert progress.level == 1


def test_locked_mission_raises_and_leaves_input_untouched():
    progress = _fresh()
    with pytest.raises(MissionLockedError):
        transactions.complete_mission(2, correct_result(2), progress)
    assert progress.completed_missions == ()


def test_unknown_mission_is_locked():
    with pytest.raises(MissionLockedError):
        transactions.complete_mission(99, correct_result(99), _fresh())


def test_failed_quiz_only_counts_the_question():
    before = _fresh()
    after = transactions.complete_mission(1, wrong_result(1), before, now=FIXED_NOW)

    assert after.total_questions == 1
    assert after.correct_answers == 0
    assert after.coins == 0
    assert after.badges == ()
    assert not after.has_completed(1)


def test_completing_twice_is_a_no_op():
    progress = progress_with_missions([1])
    again = transactions.complete_mission(1, correct_result(1), progress)
    assert again is progress


def test_level_two_reached_on_tenth_level_one_mission():
    nine = progress_with_missions([1, 2, 3, 4, 5, 6, 7, 8, 9])
    assert nine.level == 1

    ten = transactions.complete_mission(10, correct_result(10), nine, now=FIXED_NOW)
    assert ten.level == 2
    assert len(ten.badges) == 10


def test_level_up_requires_accuracy_floor():
    progress = _fresh()
    # Enough failed answers to sink accuracy below 70 percent.
    for _ in range(5):
        progress = transactions.complete_mission(1, wrong_result(1), progress, now=FIXED_NOW)
    for mission_id in range(1, 11):
        progress = transactions.complete_mission(mission_id, correct_result(mission_id), progress, now=FIXED_NOW)

    assert progress.accuracy < 70
    assert progress.level == 1


def test_level_two_is_terminal():
    progress = progress_with_missions(range(1, 21))
    assert progress.level == 2
    assert not transactions.can_progress_to_next_level(progress)


def test_grant_and_spend_coins():
    progress = transactions.grant_coins(30, _fresh(), now=FIXED_NOW)
    assert progress.coins == 30
    assert progress.total_coins_earned == 30

    progress = transactions.spend_coins(10, progress, now=FIXED_NOW)
    assert progress.coins == 20
    assert progress.total_coins_earned == 30


def test_spending_more_than_balance_is_rejected():
    progress = progress_with_missions([1])
    with pytest.raises(InsufficientCoinsError) as excinfo:
        transactions.spend_coins(1000, progress)
    assert excinfo.value.requested == 1000
    assert excinfo.value.available == 20
    assert progress.coins == 20


def test_negative_amounts_are_rejected():
    with pytest.raises(ValueError):
        transactions.grant_coins(-5, _fresh())
    with pytest.raises(ValueError):
        transactions.spend_coins(-5, _fresh())


def test_collect_item_counts_distinct_ids_once():
    progress, granted = transactions.collect_item("city-coin-1", 10, 10, _fresh(), now=FIXED_NOW)
    assert granted
    assert progress.coins == 10
    assert progress.total_score == 10
    assert progress.total_items_collected == 1

    again, granted = transactions.collect_item("city-coin-1", 10, 10, progress, now=FIXED_NOW)
    assert not granted
    assert again is progress


def test_speed_samples_fill_tiers_and_track_fastest():
    progress = _fresh()
    for elapsed in (5.0, 15.0, 35.0):
        progress = transactions.record_speed_challenge(elapsed, progress)

    assert progress.speed_challenges.excellent == 1
    assert progress.speed_challenges.great == 1
    assert progress.speed_challenges.good == 0
    assert progress.fastest_quiz_time == 5.0


def test_slow_speed_sample_records_nothing():
    progress = _fresh()
    assert transactions.record_speed_challenge(31.0, progress) is progress


def test_invalid_speed_sample_raises():
    with pytest.raises(ValueError):
        transactions.record_speed_challenge(math.nan, _fresh())
    with pytest.raises(ValueError):
        transactions.record_speed_challenge(-1.0, _fresh())


def test_achievements_are_claimed_once():
    progress = transactions.record_speed_challenge(4.0, _fresh())
    assert transactions.check_achievements(progress) == {"Quick Starter", "Lightning Reflexes"}

    claimed, newly = transactions.claim_achievements(progress)
    assert newly == ("Quick Starter", "Lightning Reflexes")
    assert claimed.claimed_achievements == {"Quick Starter", "Lightning Reflexes"}

    again, newly = transactions.claim_achievements(claimed)
    assert newly == ()
    assert again is claimed


def test_npc_reward_is_granted_once():
    progress, granted = transactions.claim_npc_reward("kapitan", 15, _fresh(), now=FIXED_NOW)
    assert granted
    assert progress.coins == 15
    assert "kapitan" in progress.npc_rewards_claimed

    again, granted = transactions.claim_npc_reward("kapitan", 15, progress, now=FIXED_NOW)
    assert not granted
    assert again.coins == 15


HAT = ShopItem("hat", "Hat", ShopCategory.COSMETICS, 15)


def test_purchase_item_spends_catalog_price_and_records():
    progress = progress_with_missions([1])
    bought = transactions.purchase_item(HAT, progress, now=FIXED_NOW)
    assert bought.coins == 5
    assert bought.purchased_items == ("hat",)

    with pytest.raises(InsufficientCoinsError):
        transactions.purchase_item(HAT, bought)


def test_purchase_item_enforces_unlock_level():
    crown = ShopItem("crown", "Crown", ShopCategory.COSMETICS, 10, Rarity.RARE, unlock_level=2)
    progress = progress_with_missions([1])

    with pytest.raises(ItemUnavailableError) as excinfo:
        transactions.purchase_item(crown, progress)
    assert excinfo.value.item_id == "crown"
    assert progress.coins == 20


def test_purchase_item_enforces_purchase_cap():
    token = ShopItem("token", "Token", ShopCategory.POWERUPS, 5, max_purchases=2)
    progress = progress_with_missions([1])
    progress = transactions.purchase_item(token, progress, now=FIXED_NOW)
    progress = transactions.purchase_item(token, progress, now=FIXED_NOW)
    assert transactions.purchase_count("token", progress) == 2

    with pytest.raises(ItemUnavailableError):
        transactions.purchase_item(token, progress)
    assert progress.coins == 10


def test_playtime_and_steps():
    progress = transactions.tick_playtime(3, _fresh(), now=FIXED_NOW)
    progress = transactions.record_steps(120, progress)

    assert progress.playtime == 3
    assert progress.total_steps_taken == 120
    with pytest.raises(ValueError):
        transactions.record_steps(-1, progress)


def test_only_unlocked_titles_can_be_equipped():
    progress = progress_with_missions([1])
    assert transactions.unlocked_titles(progress) == {"Citizen", "Eco-Kabataan"}

    equipped = transactions.equip_title("Eco-Kabataan", progress)
    assert equipped.current_title == "Eco-Kabataan"

    with pytest.raises(TitleLockedError):
        transactions.equip_title("Youth Leader", progress)
    with pytest.raises(TitleLockedError):
        transactions.equip_title("", progress)


def test_claimed_achievements_unlock_titles():
    progress, _ = transactions.claim_achievements(transactions.record_speed_challenge(4.0, _fresh()))
    assert transactions.equip_title("Quick Starter", progress).current_title == "Quick Starter"



def test_player_stats_summary():
    stats = transactions.player_stats(progress_with_missions([1]))
    assert stats["level"] == 1
    assert stats["coins"] == 20
    assert stats["badge_count"] == 1
    assert stats["total_score"] == 150
    assert stats["accuracy"] == 100
    assert stats["completion_percentage"] == 5
