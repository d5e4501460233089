from __future__ import annotations

import random
import re

from conftest import ManualClock, RecordingSink

from flowscroll.storage.profile_store import ProfileStore
from flowscroll.tasks.factory import create_task_batch
from flowscroll.tasks.models import Outcome, TaskType, UserStats
from flowscroll.tasks.session import FeedSession, generate_session_id, to_base36


def _session(profile, store, sink, rng, clock, **kwargs) -> FeedSession:
    return FeedSession(profile, store=store, sink=sink, rng=rng, clock=clock, **kwargs)


def test_session_id_format(rng: random.Random, clock: ManualClock) -> None:
    session_id = generate_session_id(rng, clock)
    assert re.fullmatch(r"sess_[0-9a-f]{8}_[0-9a-z]+", session_id)
    assert session_id.endswith(to_base36(clock()))
    assert to_base36(35) == "z"
    assert to_base36(36) == "10"


def test_initial_buffer(profile: UserStats, store: ProfileStore, sink: RecordingSink, rng: random.Random, clock: ManualClock) -> None:
    session = _session(profile, store, sink, rng, clock)
    assert len(session.tasks) == 3
    assert session.current_task is session.tasks[0]
    assert session.remaining == 2


def test_complete_records_regulates_and_saves(
    profile: UserStats, store: ProfileStore, sink: RecordingSink, rng: random.Random, clock: ManualClock
) -> None:
    session = _session(profile, store, sink, rng, clock)
    task = session.current_task
    clock.advance(1800)

    result, update = session.complete(task.id, True, 1800)

    assert result.outcome is Outcome.SUCCESS
    assert result.session_id == session.session_id
    assert result.start_time == session.started_at
    assert result.session_duration_ms == 1800
    assert update is not None
    assert update.task_type == task.type.value
    assert profile.history[-1] == result
    assert sink.calls == [("tester", result)]
    assert store.load("tester").history[-1].task_id == task.id


def test_repeated_and_unknown_results_are_ignored(
    profile: UserStats, store: ProfileStore, sink: RecordingSink, rng: random.Random, clock: ManualClock
) -> None:
    session = _session(profile, store, sink, rng, clock)
    task = session.current_task
    assert session.complete(task.id, False, 900) is not None
    assert session.complete(task.id, True, 900) is None
    assert session.complete("missing", True, 900) is None
    assert len(profile.history) == 1


def test_only_the_active_task_can_be_completed(
    profile: UserStats, store: ProfileStore, sink: RecordingSink, rng: random.Random, clock: ManualClock
) -> None:
    session = _session(profile, store, sink, rng, clock)
    queued = session.tasks[1]
    assert session.complete(queued.id, True, 700) is None
    assert profile.history == []

    clock.advance(300)
    session.advance()
    clock.advance(700)
    result, _ = session.complete(queued.id, True, 700)
    assert result.start_time == clock() - 700


def test_advance_skips_unfinished_task(
    profile: UserStats, store: ProfileStore, sink: RecordingSink, rng: random.Random, clock: ManualClock
) -> None:
    session = _session(profile, store, sink, rng, clock)
    first = session.current_task
    clock.advance(1200)

    skipped = session.advance()

    assert skipped is not None
    result, _ = skipped
    assert result.task_id == first.id
    assert result.was_skipped
    assert result.outcome is Outcome.SKIPPED
    assert result.time_spent_ms == 1200
    assert session.current_task is session.tasks[1]
    assert session.remaining == 3


def test_advance_after_completion_records_nothing(
    profile: UserStats, store: ProfileStore, sink: RecordingSink, rng: random.Random, clock: ManualClock
) -> None:
    session = _session(profile, store, sink, rng, clock)
    session.complete(session.current_task.id, True, 1000)
    assert session.advance() is None
    assert len(profile.history) == 1


def test_pause_is_excluded_from_skip_time(
    profile: UserStats, store: ProfileStore, sink: RecordingSink, rng: random.Random, clock: ManualClock
) -> None:
    session = _session(profile, store, sink, rng, clock)
    clock.advance(1000)
    session.pause()
    clock.advance(60_000)
    session.resume()
    clock.advance(500)
    result, _ = session.advance()
    assert result.time_spent_ms == 1500


def test_breathing_break_after_long_session(
    profile: UserStats, store: ProfileStore, sink: RecordingSink, rng: random.Random, clock: ManualClock
) -> None:
    session = _session(profile, store, sink, rng, clock, free_mind_after_ms=10_000, free_mind_cooldown_ms=50_000)
    session.advance()
    assert not any(t.type is TaskType.FREE_MIND_BREATHE for t in session.tasks)

    clock.advance(10_000)
    session.advance()
    assert session.tasks[-1].type is TaskType.FREE_MIND_BREATHE
    assert len([t for t in session.tasks if t.type is TaskType.FREE_MIND_BREATHE]) == 1

    clock.advance(10_000)
    session.advance()
    assert len([t for t in session.tasks if t.type is TaskType.FREE_MIND_BREATHE]) == 1

    clock.advance(50_000)
    session.advance()
    assert len([t for t in session.tasks if t.type is TaskType.FREE_MIND_BREATHE]) == 2


def test_duel_leaves_profile_untouched(
    profile: UserStats, store: ProfileStore, sink: RecordingSink, rng: random.Random, clock: ManualClock
) -> None:
    tasks = create_task_batch(profile, 4, rng)
    before = profile.model_dump()
    session = _session(profile, store, sink, rng, clock, duel_tasks=tasks)

    assert session.is_duel
    assert session.tasks == tasks
    result, update = session.complete(tasks[0].id, True, 2000)
    assert update is None
    session.advance()
    session.advance()
    session.advance()
    session.advance()

    assert session.finished
    assert session.advance() is None
    assert len(session.tasks) == 4
    assert profile.model_dump() == before
    assert not store.exists("tester")
    assert [c[1].outcome for c in sink.calls] == [Outcome.SUCCESS, Outcome.SKIPPED, Outcome.SKIPPED, Outcome.SKIPPED]


def test_end_saves_profile(
    profile: UserStats, store: ProfileStore, sink: RecordingSink, rng: random.Random, clock: ManualClock
) -> None:
    session = _session(profile, store, sink, rng, clock)
    session.end()
    assert store.exists("tester")
