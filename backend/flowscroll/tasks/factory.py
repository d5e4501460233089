"""Assemble complete Task records from the selector, generators and levels."""

import logging
import random
import time
import uuid
from collections.abc import Mapping
from typing import Any

from flowscroll.tasks.generation import generate
from flowscroll.tasks.models import CATEGORY_BY_TYPE, Task, TaskType, UserStats, read_level
from flowscroll.tasks.selector import select_task

logger = logging.getLogger(__name__)


def now_ms() -> int:
    return int(time.time() * 1000)


def build_task(
    levels: Mapping[str, Any],
    task_type: TaskType | None = None,
    rng: random.Random | None = None,
) -> Task:
    """Build one task from a levels mapping; draws the type when not given."""
    if task_type is None:
        category, task_type = select_task(rng)
    else:
        category = CATEGORY_BY_TYPE[task_type]

    level = read_level(levels, task_type)
    generated = generate(task_type, level, rng)

    task = Task(
        id=str(uuid.uuid4()),
        category=category,
        type=task_type,
        difficulty_level=level,
        question=generated.question or "Task",
        content=generated.content,
        solution=generated.solution,
        generated_at=now_ms(),
    )
    logger.debug(f"Generated {task.type.value} at level {level}: {task.question}")
    return task


def create_task(
    profile: UserStats,
    rng: random.Random | None = None,
    task_type: TaskType | None = None,
) -> Task:
    """
    Create the next task for a profile. Never mutates the profile.

    Args:
        profile: Current user stats (only `levels` is read)
        rng: Random source for selection and generation
        task_type: Force a type instead of drawing one

    Returns:
        A new Task with its level frozen
    """
    return build_task(profile.levels, task_type=task_type, rng=rng)


def create_task_batch(profile: UserStats, count: int, rng: random.Random | None = None) -> list[Task]:
    """Fixed task list against a snapshot of the levels (duel rooms)."""
    snapshot = dict(profile.levels)
    return [build_task(snapshot, rng=rng) for _ in range(max(0, count))]
