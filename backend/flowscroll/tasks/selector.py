"""Weighted category draw followed by a uniform type draw."""

import random

from flowscroll.tasks.models import TaskCategory, TaskType

# FREE_MIND is left out on purpose: the feed inserts it after long sessions.
CATEGORY_WEIGHTS: dict[TaskCategory, float] = {
    TaskCategory.MATH: 0.40,
    TaskCategory.REACTION: 0.30,
    TaskCategory.LANGUAGE: 0.20,
    TaskCategory.MUSIC: 0.10,
}

ROTATION: dict[TaskCategory, tuple[TaskType, ...]] = {
    TaskCategory.MATH: (
        TaskType.MATH_ADDITION,
        TaskType.MATH_SUBTRACTION,
        TaskType.MATH_MULTIPLICATION,
        TaskType.MATH_SEQUENCE,
        TaskType.MATH_SUDOKU,
    ),
    TaskCategory.REACTION: (
        TaskType.REACTION_COLOR,
        TaskType.REACTION_SHAPE,
        TaskType.REACTION_STREAM,
        TaskType.REACTION_COLOR_SWITCH,
    ),
    TaskCategory.LANGUAGE: (
        TaskType.LANG_ODD_ONE_OUT,
        TaskType.LANG_CONNECT,
        TaskType.LANG_FLAG,
        TaskType.LANG_MAP,
    ),
    TaskCategory.MUSIC: (
        TaskType.MUSIC_RHYTHM,
        TaskType.MUSIC_MEMORY,
    ),
}


def select_category(rng: random.Random) -> TaskCategory:
    categories = list(CATEGORY_WEIGHTS)
    return rng.choices(categories, weights=[CATEGORY_WEIGHTS[c] for c in categories])[0]


def select_task(rng: random.Random | None = None) -> tuple[TaskCategory, TaskType]:
    """Pick the next (category, type). Repeats are allowed."""
    rng = rng or random
    category = select_category(rng)
    return category, rng.choice(ROTATION[category])
