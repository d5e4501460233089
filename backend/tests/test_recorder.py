from __future__ import annotations

import random

from conftest import RecordingSink

from flowscroll.tasks.factory import create_task
from flowscroll.tasks.models import Outcome, TaskResult, TaskType, UserStats, derive_outcome
from flowscroll.tasks.recorder import record_result


def test_derive_outcome() -> None:
    assert derive_outcome(True, False) is Outcome.SUCCESS
    assert derive_outcome(True, True) is Outcome.SUCCESS
    assert derive_outcome(False, True) is Outcome.SKIPPED
    assert derive_outcome(False, False) is Outcome.FAILED


def test_record_appends_history_and_time(profile: UserStats, rng: random.Random) -> None:
    task = create_task(profile, rng, task_type=TaskType.MATH_SEQUENCE)
    result = record_result(profile, task, True, 2500, session_id="sess_1", session_started_at=0, started_at=10)

    assert profile.history == [result]
    assert profile.total_time_ms == 2500
    assert result.task_id == task.id
    assert result.type is TaskType.MATH_SEQUENCE
    assert result.outcome is Outcome.SUCCESS
    assert result.difficulty_level == task.difficulty_level
    assert result.session_id == "sess_1"
    assert result.start_time == 10
    assert result.session_duration_ms == result.timestamp


def test_record_uses_the_given_clock(profile: UserStats, rng: random.Random) -> None:
    task = create_task(profile, rng, task_type=TaskType.LANG_FLAG)
    result = record_result(profile, task, True, 400, session_started_at=1_000, started_at=4_600, now=5_000)
    assert result.timestamp == 5_000
    assert result.start_time == 4_600
    assert result.session_duration_ms == 4_000


def test_skip_sets_flag_and_outcome(profile: UserStats, rng: random.Random) -> None:
    task = create_task(profile, rng, task_type=TaskType.REACTION_COLOR)
    result = record_result(profile, task, False, 800, was_skipped=True)
    assert result.was_skipped
    assert result.outcome is Outcome.SKIPPED


def test_negative_time_is_clamped(profile: UserStats, rng: random.Random) -> None:
    task = create_task(profile, rng, task_type=TaskType.MATH_ADDITION)
    result = record_result(profile, task, False, -50)
    assert result.time_spent_ms == 0
    assert profile.total_time_ms == 0


def test_sink_receives_result(profile: UserStats, rng: random.Random, sink: RecordingSink) -> None:
    task = create_task(profile, rng, task_type=TaskType.LANG_MAP)
    result = record_result(profile, task, True, 1000, sink=sink)
    assert sink.calls == [("tester", result)]


def test_failing_sink_does_not_break_recording(profile: UserStats, rng: random.Random) -> None:
    class BrokenSink:
        def record_task_result(self, user_id: str, result: TaskResult) -> None:
            raise RuntimeError("offline")

    task = create_task(profile, rng, task_type=TaskType.LANG_MAP)
    record_result(profile, task, True, 1000, sink=BrokenSink())
    assert len(profile.history) == 1
