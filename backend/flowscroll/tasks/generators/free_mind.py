"""Relaxation tasks, inserted by the feed rather than drawn by the selector."""

import random

from flowscroll.tasks.models import GeneratedContent, TaskType

MAX_CYCLES = 6
MAX_PHASE_MS = 6000


def generate_free_mind(task_type: TaskType, level: float, rng: random.Random) -> GeneratedContent:
    if task_type != TaskType.FREE_MIND_BREATHE:
        return GeneratedContent(question="Task")

    # Higher levels mean longer, slower breathing.
    cycles = min(MAX_CYCLES, 3 + int(level // 3))
    phase_ms = min(MAX_PHASE_MS, 4000 + int((level - 1) * 200))
    return GeneratedContent(
        question="Breathe with the circle",
        content={"cycles": cycles, "inhale_time": phase_ms, "exhale_time": phase_ms},
        solution=None,
    )
