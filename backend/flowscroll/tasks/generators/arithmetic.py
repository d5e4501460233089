"""
Arithmetic generator using a total digit budget.

The level sets how many digits the two operands carry in total:

    budget = floor(level) + 1

Level 1 is "3 + 4", level 3 is "12 + 34" or "123 × 4", and so on.
"""

import logging
import math
import random

from flowscroll.tasks.models import DiscreteLevel, GeneratedContent, TaskType

logger = logging.getLogger(__name__)

OPERATORS: dict[TaskType, str] = {
    TaskType.MATH_ADDITION: "+",
    TaskType.MATH_SUBTRACTION: "-",
    TaskType.MATH_MULTIPLICATION: "×",
}


def digit_budget(level: float) -> int:
    """Total digits across both operands for a level."""
    return DiscreteLevel.of(level).value + 1


def number_with_digits(digits: int, rng: random.Random) -> int:
    """Uniform random integer with exactly `digits` digits (0 for none)."""
    if digits <= 0:
        return 0
    return rng.randint(10 ** (digits - 1), 10 ** digits - 1)


def split_budget(total: int, rng: random.Random) -> tuple[int, int]:
    digits_a = math.ceil(total / 2)
    digits_b = total // 2
    if total >= 4 and rng.random() > 0.5:
        digits_a, digits_b = digits_b, digits_a
    return digits_a, digits_b


def generate_arithmetic(task_type: TaskType, level: float, rng: random.Random) -> GeneratedContent:
    """
    Generate an addition, subtraction or multiplication problem.

    Args:
        task_type: One of MATH_ADDITION, MATH_SUBTRACTION, MATH_MULTIPLICATION
        level: Current level for the type (clamped to 1-10)
        rng: Random source

    Returns:
        GeneratedContent with the operands in `content` and the result as solution
    """
    operator = OPERATORS.get(task_type)
    if operator is None:
        logger.debug(f"No arithmetic operator for {task_type}")
        return GeneratedContent(question="Task")

    level = DiscreteLevel.of(level).value
    total = digit_budget(level)
    digits_a, digits_b = split_budget(total, rng)

    if task_type == TaskType.MATH_MULTIPLICATION:
        # Long multiplication stays at most two digits on the right.
        if total == 4:
            digits_a, digits_b = (3, 1) if rng.random() > 0.5 else (2, 2)
        elif total >= 5:
            digits_b = min(2, digits_b)
            digits_a = total - digits_b

    a = number_with_digits(digits_a, rng)
    b = number_with_digits(digits_b, rng)

    if task_type == TaskType.MATH_MULTIPLICATION:
        if level > 1 and digits_b == 1:
            b = rng.randint(2, 9)
        if level > 1 and digits_a == 1:
            a = rng.randint(2, 9)
        solution = a * b
    elif task_type == TaskType.MATH_SUBTRACTION:
        # Swapping keeps the digit split, so difficulty is unchanged.
        if a < b:
            a, b = b, a
        solution = a - b
    else:
        solution = a + b

    return GeneratedContent(
        question=f"{a} {operator} {b}",
        content={"a": a, "b": b, "operator": task_type.value},
        solution=solution,
    )


def generate_math_stream(task_type: TaskType, level: float, rng: random.Random) -> GeneratedContent:
    """Running-total stream; speed and operators are chosen in the renderer."""
    return GeneratedContent(
        question="Math Stream",
        content={"start_value": 10, "default_speed": 2000, "default_ops": ["+"]},
        solution=None,
    )
