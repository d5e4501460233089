"""
Reaction-family generators.

Every parameter moves toward faster, denser and less forgiving as the level
rises, but never past the floors below, which keep the tasks humanly playable.
"""

import random
from dataclasses import asdict, dataclass

from flowscroll.content.emoji import ODD_PAIRS, TARGET_SETS
from flowscroll.tasks.models import GeneratedContent, TaskType

MIN_WAIT_MS = 1000
MIN_WAIT_SPREAD_MS = 2000
MAX_ODD_GRID = 5


def reaction_tier(level: float) -> str:
    if level >= 8:
        return "hard"
    if level >= 4:
        return "medium"
    return "easy"


@dataclass(frozen=True)
class ColorSwitchParams:
    num_trials: int
    distractor_step_min: int
    distractor_step_max: int
    color_change_speed: int
    target_window: int
    distractors: tuple[str, ...]
    target_color: str = "green"


@dataclass(frozen=True)
class StreamParams:
    num_target_events: int
    distractor_ratio: int
    min_interval: int
    max_interval: int
    display_duration: int


COLOR_SWITCH_TIERS: dict[str, ColorSwitchParams] = {
    "easy": ColorSwitchParams(5, 2, 4, 800, 1200, ("red", "blue", "yellow", "purple", "orange")),
    "medium": ColorSwitchParams(8, 3, 6, 600, 900, ("red", "dark-blue", "yellow", "dark-purple", "orange", "pink")),
    "hard": ColorSwitchParams(10, 4, 8, 400, 600, ("teal", "lime", "emerald", "cyan", "light-yellow")),
}

STREAM_TIERS: dict[str, StreamParams] = {
    "easy": StreamParams(3, 2, 800, 1400, 800),
    "medium": StreamParams(4, 3, 600, 1100, 600),
    "hard": StreamParams(5, 4, 400, 900, 450),
}


def _color(level: float, rng: random.Random) -> GeneratedContent:
    decay = 0.9 ** level
    wait_min = max(MIN_WAIT_MS, 3500 * decay)
    wait_max = max(MIN_WAIT_SPREAD_MS, 5000 * decay)
    return GeneratedContent(
        question="Tap on green",
        content={"wait_min": round(wait_min), "wait_max": round(wait_max)},
        solution=None,
    )


def _shape(level: float, rng: random.Random) -> GeneratedContent:
    grid_size = min(MAX_ODD_GRID, 2 + int(level // 3))
    odd_index = rng.randrange(grid_size * grid_size)
    mode = rng.choice(("EMOJI", "ROTATION"))
    items = {"base": "A", "odd": "B"}
    if mode == "EMOJI":
        pair = rng.choice(ODD_PAIRS)
        items = {"base": pair.base, "odd": pair.odd}
    return GeneratedContent(
        question="Find the odd one out",
        content={"grid_size": grid_size, "odd_index": odd_index, "mode": mode, "items": items},
        solution=odd_index,
    )


def _color_switch(level: float, rng: random.Random) -> GeneratedContent:
    tier = reaction_tier(level)
    params = COLOR_SWITCH_TIERS[tier]
    content = asdict(params)
    content["distractors"] = list(params.distractors)
    return GeneratedContent(
        question=f"Tap only on {params.target_color}",
        content={"tier": tier, **content},
        solution=None,
    )


def _stream(level: float, rng: random.Random) -> GeneratedContent:
    tier = reaction_tier(level)
    target_set = rng.choice(TARGET_SETS)
    return GeneratedContent(
        question="Target focus",
        content={
            "tier": tier,
            "target_emoji": target_set.target,
            "distractors": list(target_set.distractors),
            **asdict(STREAM_TIERS[tier]),
        },
        solution=None,
    )


_BUILDERS = {
    TaskType.REACTION_COLOR: _color,
    TaskType.REACTION_SHAPE: _shape,
    TaskType.REACTION_COLOR_SWITCH: _color_switch,
    TaskType.REACTION_STREAM: _stream,
}


def generate_reaction(task_type: TaskType, level: float, rng: random.Random) -> GeneratedContent:
    builder = _BUILDERS.get(task_type)
    if builder is None:
        return GeneratedContent(question="Task")
    return builder(level, rng)
