"""Rhythm repetition and pad-sequence memory tasks."""

import random

from flowscroll.tasks.models import GeneratedContent, TaskType

BEAT_MS = 500
MAX_RHYTHM_STEPS = 16
INSTRUMENTS = ("kick", "snare", "hihat", "tom")

MAX_MEMORY_LENGTH = 12
MAX_PADS = 4
MIN_PLAYBACK_MS = 300


def _rhythm(level: float, rng: random.Random) -> GeneratedContent:
    steps = min(MAX_RHYTHM_STEPS, 4 + int(level // 2))
    density = min(0.8, 0.2 + level * 0.05)
    pattern = []
    for i in range(steps):
        # The first beat is always a kick so the loop has an anchor.
        if i == 0:
            pattern.append({"time_offset": 0, "type": "kick"})
        elif rng.random() < density:
            pattern.append({"time_offset": i * BEAT_MS, "type": rng.choice(INSTRUMENTS)})
    return GeneratedContent(
        question="Repeat the beat",
        content={"pattern": pattern, "total_duration": steps * BEAT_MS},
        solution=[dict(beat) for beat in pattern],
    )


def _memory(level: float, rng: random.Random) -> GeneratedContent:
    length = min(MAX_MEMORY_LENGTH, 3 + int(level // 2))
    speed = max(MIN_PLAYBACK_MS, round(800 - level * 50))
    active_pads = min(MAX_PADS, 2 + int(level // 3))
    sequence = [rng.randrange(active_pads) for _ in range(length)]
    return GeneratedContent(
        question="Remember the sound",
        content={"sequence": sequence, "playback_speed": speed, "active_pads": active_pads},
        solution=list(sequence),
    )


def generate_music(task_type: TaskType, level: float, rng: random.Random) -> GeneratedContent:
    if task_type == TaskType.MUSIC_RHYTHM:
        return _rhythm(level, rng)
    if task_type == TaskType.MUSIC_MEMORY:
        return _memory(level, rng)
    return GeneratedContent(question="Task")
