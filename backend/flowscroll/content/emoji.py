"""Emoji sets for the reaction tasks."""

from dataclasses import dataclass


@dataclass(frozen=True)
class OddPair:
    base: str
    odd: str


@dataclass(frozen=True)
class TargetSet:
    target: str
    distractors: tuple[str, ...]


ODD_PAIRS: tuple[OddPair, ...] = (
    OddPair("😐", "😶"),
    OddPair("😀", "😃"),
    OddPair("⚪", "⚫"),
    OddPair("⬛", "⬜"),
    OddPair("🍎", "🍅"),
    OddPair("🕒", "🕓"),
)

TARGET_SETS: tuple[TargetSet, ...] = (
    TargetSet("🦊", ("🐶", "🐱", "🦁", "🐯", "🐻", "🐨", "🐼")),
    TargetSet("⚽", ("🏀", "🏈", "⚾", "🎾", "🏐", "🏉", "🎱")),
    TargetSet("🍎", ("🍐", "🍊", "🍋", "🍌", "🍉", "🍇", "🍓")),
    TargetSet("🚀", ("✈️", "🚁", "🚂", "🚗", "🚌", "🚲", "🛵")),
    TargetSet("⭐", ("🌟", "✨", "💫", "☀️", "🌙", "⚡", "❄️")),
)
