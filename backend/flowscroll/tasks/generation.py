"""
Dispatch from task type to generator.

Every generator is a pure function of (type, level, rng). Types without an
entry produce an empty-but-valid task so new content types never crash the
feed.
"""

import logging
import random
from typing import Callable

from flowscroll.tasks.generators.arithmetic import generate_arithmetic, generate_math_stream
from flowscroll.tasks.generators.free_mind import generate_free_mind
from flowscroll.tasks.generators.grid import generate_grid
from flowscroll.tasks.generators.language import generate_language
from flowscroll.tasks.generators.music import generate_music
from flowscroll.tasks.generators.reaction import generate_reaction
from flowscroll.tasks.generators.sequence import generate_sequence
from flowscroll.tasks.models import GeneratedContent, TaskType, parse_task_type

logger = logging.getLogger(__name__)

Generator = Callable[[TaskType, float, random.Random], GeneratedContent]

GENERATORS: dict[TaskType, Generator] = {
    TaskType.MATH_ADDITION: generate_arithmetic,
    TaskType.MATH_SUBTRACTION: generate_arithmetic,
    TaskType.MATH_MULTIPLICATION: generate_arithmetic,
    TaskType.MATH_STREAM: generate_math_stream,
    TaskType.MATH_SEQUENCE: generate_sequence,
    TaskType.MATH_SUDOKU: generate_grid,
    TaskType.LANG_SYNONYM: generate_language,
    TaskType.LANG_RHYME: generate_language,
    TaskType.LANG_SENTENCE: generate_language,
    TaskType.LANG_ODD_ONE_OUT: generate_language,
    TaskType.LANG_CONNECT: generate_language,
    TaskType.LANG_FLAG: generate_language,
    TaskType.LANG_MAP: generate_language,
    TaskType.REACTION_COLOR: generate_reaction,
    TaskType.REACTION_SHAPE: generate_reaction,
    TaskType.REACTION_STREAM: generate_reaction,
    TaskType.REACTION_COLOR_SWITCH: generate_reaction,
    TaskType.MUSIC_RHYTHM: generate_music,
    TaskType.MUSIC_MEMORY: generate_music,
    TaskType.FREE_MIND_BREATHE: generate_free_mind,
}

_default_rng = random.Random()


def generate(task_type: TaskType | str, level: float, rng: random.Random | None = None) -> GeneratedContent:
    """
    Generate content for a task type at a level.

    Args:
        task_type: Type to generate
        level: Difficulty level, anything below 1 is treated as 1
        rng: Random source (a shared module-level one if omitted)

    Returns:
        Question, renderer payload and canonical solution
    """
    rng = rng or _default_rng
    resolved = parse_task_type(task_type)
    generator = GENERATORS.get(resolved) if resolved is not None else None
    if generator is None:
        logger.warning(f"Unknown task type: {task_type}")
        return GeneratedContent(question="Task")

    return generator(resolved, max(1.0, float(level)), rng)
