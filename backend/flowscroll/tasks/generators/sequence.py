"""Number sequence completion: five terms, the last one withheld."""

import random

from flowscroll.tasks.models import GeneratedContent, TaskType

SEQUENCE_LENGTH = 5
OPTION_COUNT = 4


def _pattern_family(level: float, rng: random.Random) -> str:
    if level >= 8:
        r = rng.random()
        if r > 0.6:
            return "fibonacci"
        if r > 0.3:
            return "geometric"
        return "alternating"
    if level >= 4:
        return "progressive" if rng.random() > 0.5 else "alternating"
    return "linear"


def build_sequence(family: str, level: float, rng: random.Random) -> list[int]:
    steps = SEQUENCE_LENGTH - 1
    current = rng.randint(5, 24) if level > 5 else rng.randint(1, 10)
    sequence = [current]

    if family == "linear":
        step = rng.randint(1, 5) + int(level // 3)
        descending = rng.random() > 0.8 and current > 20
        for _ in range(steps):
            current = current - step if descending else current + step
            sequence.append(current)
    elif family == "progressive":
        start_step = rng.randint(1, 2)
        increment = rng.randint(1, 2)
        for i in range(steps):
            current += start_step + i * increment
            sequence.append(current)
    elif family == "geometric":
        factor = 3 if rng.random() > 0.7 else 2
        current = rng.randint(1, 3)
        sequence = [current]
        for _ in range(steps):
            current *= factor
            sequence.append(current)
    elif family == "fibonacci":
        a = rng.randint(1, 5)
        b = rng.randint(1, 5)
        sequence = [a, b]
        while len(sequence) < SEQUENCE_LENGTH:
            a, b = b, a + b
            sequence.append(b)
    else:  # alternating
        up = rng.randint(2, 4)
        down = rng.randint(1, 2)
        for i in range(steps):
            current = current + up if i % 2 == 0 else current - down
            sequence.append(current)

    return sequence


def distractors_for(solution: int, rng: random.Random, count: int = OPTION_COUNT - 1) -> list[int]:
    """Plausible wrong answers: small offsets or +-10, never the solution."""
    fakes: list[int] = []
    while len(fakes) < count:
        offset = rng.randint(1, 5)
        r = rng.random()
        if r < 0.3:
            fake = solution + offset
        elif r < 0.6:
            fake = solution - offset
        elif r < 0.8:
            fake = solution + 10
        else:
            fake = solution - 10
        if fake != solution and fake not in fakes:
            fakes.append(fake)
    return fakes


def generate_sequence(task_type: TaskType, level: float, rng: random.Random) -> GeneratedContent:
    family = _pattern_family(level, rng)
    sequence = build_sequence(family, level, rng)
    solution = sequence.pop()

    options = [solution, *distractors_for(solution, rng)]
    rng.shuffle(options)

    return GeneratedContent(
        question="Continue the sequence",
        content={
            "sequence": sequence,
            "options": options,
            "correct_index": options.index(solution),
            "correct_value": solution,
            "pattern": family,
        },
        solution=solution,
    )
