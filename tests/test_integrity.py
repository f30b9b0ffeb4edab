import json
import math
from dataclasses import replace

from questline.constants import FORMAT_VERSION
from questline.utils import integrity, transactions
from tests.helpers import FIXED_NOW, progress_with_missions


def test_checksum_changes_with_guarded_fields():
    progress = progress_with_missions([1])
    base = integrity.compute_checksum(progress)

    assert integrity.compute_checksum(progress) == base
    assert integrity.compute_checksum(replace(progress, coins=21)) != base
    assert integrity.compute_checksum(replace(progress, total_score=1)) != base
    assert integrity.compute_checksum(replace(progress, player_name="Ben")) != base


def test_serialized_blob_round_trips():
    progress = transactions.record_speed_challenge(7.5, progress_with_missions([1, 2, 3]))
    progress, _ = transactions.collect_item("city-coin-2", 10, 10, progress, now=FIXED_NOW)

    loaded = integrity.load_and_validate(integrity.serialize(progress))

    assert loaded == progress


def test_serialized_blob_carries_checksum_and_version():
    payload = json.loads(integrity.serialize(progress_with_missions([1])))
    assert payload["format_version"] == FORMAT_VERSION
    assert payload["checksum"] == integrity.compute_checksum(progress_with_missions([1]))
    assert payload["total_items_collected"] == 0


def test_infinite_fastest_time_is_stored_as_null():
    progress = progress_with_missions([])
    payload = json.loads(integrity.serialize(progress))
    assert payload["fastest_quiz_time"] is None

    loaded = integrity.load_and_validate(integrity.serialize(progress))
    assert math.isinf(loaded.fastest_quiz_time)


def test_edited_coins_fail_checksum():
    payload = json.loads(integrity.serialize(progress_with_missions([1])))
    payload["coins"] = 9999

    assert integrity.load_and_validate(json.dumps(payload)) is None


def test_missing_or_garbage_blob_loads_as_none():
    assert integrity.load_and_validate(None) is None
    assert integrity.load_and_validate(b"") is None
    assert integrity.load_and_validate(b"{not json") is None
    assert integrity.load_and_validate(b"[1, 2]") is None


def test_wrongly_typed_field_is_rejected():
    payload = json.loads(integrity.serialize(progress_with_missions([1])))
    payload["badges"] = "Eco-Kabataan"
    assert integrity.load_and_validate(json.dumps(payload)) is None


def test_structure_accepts_real_progress():
    assert integrity.validate_structure(progress_with_missions([1, 2, 3, 6]))


def test_structure_flags_negative_coins():
    progress = replace(progress_with_missions([1]), coins=-1)
    assert "negative coin balance" in integrity.structural_problems(progress)


def test_structure_flags_missing_prerequisites():
    progress = replace(
        progress_with_missions([]),
        completed_missions=(2,),
        completed_quizzes=frozenset({2}),
        badges=("Registered Voter",),
        total_coins_earned=15,
    )
    problems = integrity.structural_problems(progress)
    assert "mission 2 completed before its prerequisites" in problems


def test_structure_flags_badge_mismatch_and_coin_floor():
    progress = replace(progress_with_missions([1]), badges=(), total_coins_earned=0, coins=0)
    problems = integrity.structural_problems(progress)
    assert "badges do not match completed missions" in problems
    assert "lifetime coins below mission rewards" in problems


def test_structure_flags_more_correct_than_asked():
    progress = replace(progress_with_missions([1]), correct_answers=5)
    assert not integrity.validate_structure(progress)


def test_structurally_invalid_blob_is_rejected_even_with_good_checksum():
    progress = replace(progress_with_missions([1]), completed_quizzes=frozenset())
    assert integrity.load_and_validate(integrity.serialize(progress)) is None


def test_export_import_round_trip():
    progress = progress_with_missions([1, 2])
    text = integrity.export_progress(progress, now=FIXED_NOW)

    assert json.loads(text)["export_date"] == FIXED_NOW.isoformat()
    assert integrity.import_progress(text) == progress


def test_import_without_checksum_is_accepted():
    payload = json.loads(integrity.export_progress(progress_with_missions([1])))
    del payload["checksum"]

    imported = integrity.import_progress(json.dumps(payload))
    assert imported is not None
    assert imported.coins == 20


def test_import_with_wrong_checksum_is_rejected():
    payload = json.loads(integrity.export_progress(progress_with_missions([1])))
    payload["total_score"] = 5000
    assert integrity.import_progress(json.dumps(payload)) is None


def test_import_requires_badge_list():
    payload = json.loads(integrity.export_progress(progress_with_missions([1])))
    del payload["badges"]
    assert integrity.import_progress(json.dumps(payload)) is None
    assert integrity.import_progress("not json") is None


def test_flipped_checksum_character_fails_load():
    payload = json.loads(integrity.serialize(progress_with_missions([1])))
    checksum = payload["checksum"]
    payload["checksum"] = ("1" if checksum[0] != "1" else "2") + checksum[1:]

    assert integrity.load_and_validate(json.dumps(payload)) is None


def test_out_of_range_fastest_time_loads_as_none():
    payload = json.loads(integrity.serialize(progress_with_missions([1])))
    payload["fastest_quiz_time"] = 10 ** 400
    raw = json.dumps(payload)

    assert integrity.load_and_validate(raw) is None
    assert integrity.import_progress(raw) is None


def test_non_finite_fastest_time_is_rejected():
    payload = json.loads(integrity.serialize(progress_with_missions([1])))
    raw = json.dumps(payload).replace('"fastest_quiz_time": null', '"fastest_quiz_time": Infinity')

    assert "Infinity" in raw
    assert integrity.load_and_validate(raw) is None


def test_deeply_nested_blob_loads_as_none():
    raw = "[" * 100000 + "]" * 100000
    assert integrity.load_and_validate(raw) is None
    assert integrity.import_progress(raw) is None


def test_edited_level_without_badges_is_rejected():
    payload = json.loads(integrity.serialize(progress_with_missions([])))
    payload["level"] = 2

    assert integrity.load_and_validate(json.dumps(payload)) is None


def test_structure_flags_level_above_completed_missions():
    assert "level above what completed missions allow" in integrity.structural_problems(
        replace(progress_with_missions(range(1, 10)), level=2)
    )
    assert "level above what completed missions allow" in integrity.structural_problems(
        replace(progress_with_missions(range(1, 21)), level=3)
    )
    assert integrity.validate_structure(progress_with_missions(range(1, 11)))


def test_structure_flags_locked_title():
    progress = replace(progress_with_missions([1]), current_title="City Leader")
    assert "equipped title not unlocked" in integrity.structural_problems(progress)
