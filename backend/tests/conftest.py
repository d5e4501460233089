from __future__ import annotations

import random
from pathlib import Path

import pytest

from flowscroll.storage.profile_store import ProfileStore
from flowscroll.tasks.models import TaskResult, TaskType, UserStats, derive_outcome
from flowscroll.tasks.profile import new_user_stats


class RecordingSink:
    """Stands in for the analytics client."""

    def __init__(self) -> None:
        self.calls: list[tuple[str, TaskResult]] = []

    def record_task_result(self, user_id: str, result: TaskResult) -> None:
        self.calls.append((user_id, result))


class ManualClock:
    def __init__(self, start_ms: int = 1_700_000_000_000) -> None:
        self.now = start_ms

    def __call__(self) -> int:
        return self.now

    def advance(self, ms: int) -> None:
        self.now += ms


def make_result(
    task_type: TaskType,
    success: bool = True,
    time_spent_ms: float = 2000,
    was_skipped: bool = False,
    difficulty_level: float = 1,
) -> TaskResult:
    return TaskResult(
        task_id="t",
        type=task_type,
        success=success,
        outcome=derive_outcome(success, was_skipped),
        time_spent_ms=time_spent_ms,
        difficulty_level=difficulty_level,
        was_skipped=was_skipped,
    )


@pytest.fixture
def rng() -> random.Random:
    return random.Random(1234)


@pytest.fixture
def profile() -> UserStats:
    return new_user_stats("tester")


@pytest.fixture
def store(tmp_path: Path) -> ProfileStore:
    return ProfileStore(tmp_path / "profiles")


@pytest.fixture
def sink() -> RecordingSink:
    return RecordingSink()


@pytest.fixture
def clock() -> ManualClock:
    return ManualClock()
