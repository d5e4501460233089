from __future__ import annotations

import pytest
from conftest import make_result

from flowscroll.tasks.models import Outcome, TaskType, UserStats
from flowscroll.tasks.profile import INITIAL_LEVELS, migrate_user_stats, new_user_stats, summarize


def test_new_profile_levels() -> None:
    stats = new_user_stats("abc")
    assert stats.user_id == "abc"
    assert stats.levels["MATH_ADDITION"] == 2
    assert stats.levels["MATH_MULTIPLICATION"] == 2
    assert stats.levels["LANG_CONNECT"] == 1
    assert stats.history == []
    assert stats.total_time_ms == 0


def test_new_profile_generates_id() -> None:
    assert new_user_stats().user_id != new_user_stats().user_id


def test_migrate_fills_missing_fields() -> None:
    stats = migrate_user_stats({"userId": "old", "levels": {"MATH_ADDITION": 4}})
    assert stats.user_id == "old"
    assert stats.levels["MATH_ADDITION"] == 4
    assert stats.levels["LANG_FLAG"] == 1
    assert stats.levels["MATH_SUBTRACTION"] == 1
    assert stats.confidence == {}
    assert stats.streaks == {}


def test_migrate_without_levels_uses_initial_table() -> None:
    stats = migrate_user_stats({"user_id": "snake"})
    assert stats.user_id == "snake"
    assert stats.levels == {t.value: level for t, level in INITIAL_LEVELS.items()}


def test_migrate_none_and_garbage() -> None:
    assert migrate_user_stats(None).user_id
    stats = migrate_user_stats({"levels": "broken", "history": 5, "confidence": [1], "totalTimeMs": "x"})
    assert stats.levels["MATH_ADDITION"] == 2
    assert stats.history == []
    assert stats.confidence == {}
    assert stats.total_time_ms == 0


def test_migrate_normalizes_levels_by_regime() -> None:
    stats = migrate_user_stats({
        "userId": "u",
        "levels": {"MATH_ADDITION": 7.9, "MATH_SUDOKU": 99, "LANG_CONNECT": 2.3456, "REACTION_COLOR": -4},
        "confidence": {"LANG_CONNECT": 1.7},
    })
    assert stats.levels["MATH_ADDITION"] == 7
    assert stats.levels["MATH_SUDOKU"] == 10
    assert stats.levels["LANG_CONNECT"] == pytest.approx(2.35)
    assert stats.levels["REACTION_COLOR"] == 1.0
    assert stats.confidence["LANG_CONNECT"] == 1.0


def test_migrate_keeps_valid_history_and_drops_junk() -> None:
    stats = migrate_user_stats({
        "userId": "u",
        "history": [
            {"taskId": "a", "type": "MATH_ADDITION", "success": True, "timeSpentMs": 1200},
            {"success": True},
            "not a result",
        ],
        "streaks": {"MATH_ADDITION": {"correct": 3, "wrong": 1}, "BAD": "x"},
    })
    assert [h.task_id for h in stats.history] == ["a"]
    assert stats.history[0].type is TaskType.MATH_ADDITION
    assert stats.streaks["MATH_ADDITION"].correct == 3
    assert "BAD" not in stats.streaks


@pytest.mark.parametrize(
    "raw",
    [
        None,
        {},
        {"userId": "x", "levels": {"MATH_ADDITION": 3.7, "UNKNOWN": 0}},
        {"userId": "y", "history": [{"type": "LANG_FLAG", "success": False, "wasSkipped": True}], "totalTimeMs": 5000},
        {"user_id": "z", "confidence": {"LANG_MAP": 0.33}, "streaks": {"LANG_MAP": {"correct": 1}}},
    ],
)
def test_migrate_is_idempotent(raw) -> None:
    once = migrate_user_stats(raw)
    twice = migrate_user_stats(once)
    assert twice == once


def test_migrate_round_trips_through_json() -> None:
    stats = new_user_stats("json")
    stats.history.append(make_result(TaskType.MATH_SUDOKU, time_spent_ms=12000))
    stats.total_time_ms = 12000
    restored = migrate_user_stats(UserStats.model_validate_json(stats.model_dump_json(by_alias=True)))
    assert restored == migrate_user_stats(stats)


def test_summary_numbers() -> None:
    stats = new_user_stats("sum")
    stats.levels = {"MATH_ADDITION": 3, "LANG_CONNECT": 2.55, "LANG_RHYME": 1, "MUSIC_RHYTHM": 1}
    stats.total_time_ms = 185_000
    stats.history = [make_result(TaskType.MATH_ADDITION, time_spent_ms=1500 * (i + 1)) for i in range(25)]

    summary = summarize(stats, history_limit=20)
    assert summary.brain_level == 7.5
    assert summary.tasks_solved == 25
    assert summary.flow_minutes == 3
    assert summary.skill_profile == {"MATH_ADDITION": 3, "LANG_CONNECT": 2.55}
    assert len(summary.recent) == 20
    assert summary.recent[0].index == 1
    assert summary.recent[0].seconds == 9.0
    assert summary.recent[-1].type == "MATH_ADDITION"


@pytest.mark.parametrize(
    "entry, expected",
    [
        ({"type": "MATH_ADDITION", "success": True, "timeSpentMs": 1800}, Outcome.SUCCESS),
        ({"type": "LANG_FLAG", "success": False, "wasSkipped": True}, Outcome.SKIPPED),
        ({"type": "LANG_MAP", "success": False}, Outcome.FAILED),
        ({"type": "LANG_MAP", "success": True, "outcome": "success"}, Outcome.SUCCESS),
    ],
)
def test_migrated_history_without_outcome_derives_it(entry, expected) -> None:
    stats = migrate_user_stats({"userId": "old", "history": [entry]})
    assert stats.history[0].outcome is expected
    assert stats.history[0].was_skipped == (expected is Outcome.SKIPPED)
