"""
Profile creation, migration of stored profiles, and summary statistics.

Migration accepts anything a storage layer might hand back (a current
UserStats, an older dict shape with camelCase or snake_case keys, partial
data, or None) and fills every gap with safe defaults.
"""

import logging
import math
from collections.abc import Mapping
from typing import Any

from pydantic import BaseModel, Field, ValidationError

from flowscroll.tasks.models import (
    StreakData,
    TaskResult,
    TaskType,
    UserStats,
    generate_uuid,
    level_for,
)

logger = logging.getLogger(__name__)

INITIAL_LEVELS: dict[TaskType, int] = {
    TaskType.MATH_ADDITION: 2,
    TaskType.MATH_SUBTRACTION: 2,
    TaskType.MATH_MULTIPLICATION: 2,
    TaskType.MATH_SEQUENCE: 1,
    TaskType.MATH_SUDOKU: 1,
    TaskType.REACTION_COLOR: 1,
    TaskType.REACTION_SHAPE: 1,
    TaskType.REACTION_STREAM: 1,
    TaskType.REACTION_COLOR_SWITCH: 1,
    TaskType.MUSIC_RHYTHM: 1,
    TaskType.MUSIC_MEMORY: 1,
    TaskType.LANG_ODD_ONE_OUT: 1,
    TaskType.LANG_CONNECT: 1,
    TaskType.LANG_FLAG: 1,
    TaskType.LANG_MAP: 1,
    TaskType.LANG_SYNONYM: 1,
    TaskType.LANG_RHYME: 1,
    TaskType.LANG_SENTENCE: 1,
}

# Types no longer in rotation; hidden from the skill profile.
LEGACY_TYPES: frozenset[TaskType] = frozenset({
    TaskType.LANG_SENTENCE,
    TaskType.LANG_RHYME,
    TaskType.LANG_SYNONYM,
    TaskType.MUSIC_RHYTHM,
})


def new_user_stats(user_id: str | None = None) -> UserStats:
    return UserStats(
        user_id=user_id or generate_uuid(),
        levels={t.value: level for t, level in INITIAL_LEVELS.items()},
    )


def _pick(raw: Mapping[str, Any], *keys: str) -> Any:
    for key in keys:
        if key in raw:
            return raw[key]
    return None


def _migrate_levels(raw_levels: Any) -> dict[str, int | float]:
    if not isinstance(raw_levels, Mapping):
        return {t.value: level for t, level in INITIAL_LEVELS.items()}

    levels: dict[str, int | float] = {}
    for key, value in raw_levels.items():
        levels[str(key)] = level_for(str(key), value).value
    for task_type in INITIAL_LEVELS:
        levels.setdefault(task_type.value, 1)
    return levels


def _migrate_confidence(raw_confidence: Any) -> dict[str, float]:
    if not isinstance(raw_confidence, Mapping):
        return {}
    confidence: dict[str, float] = {}
    for key, value in raw_confidence.items():
        if isinstance(value, (int, float)) and not isinstance(value, bool) and math.isfinite(value):
            confidence[str(key)] = min(1.0, max(0.0, float(value)))
    return confidence


def _migrate_streaks(raw_streaks: Any) -> dict[str, StreakData]:
    if not isinstance(raw_streaks, Mapping):
        return {}
    streaks: dict[str, StreakData] = {}
    for key, value in raw_streaks.items():
        try:
            streaks[str(key)] = StreakData.model_validate(value)
        except ValidationError:
            logger.warning(f"Dropping malformed streak entry for {key}")
    return streaks


def _migrate_history(raw_history: Any) -> list[TaskResult]:
    if not isinstance(raw_history, list):
        return []
    history: list[TaskResult] = []
    for entry in raw_history:
        if isinstance(entry, TaskResult):
            history.append(entry)
            continue
        try:
            history.append(TaskResult.model_validate(entry))
        except ValidationError as e:
            logger.warning(f"Dropping unreadable history entry: {e.error_count()} errors")
    return history


def migrate_user_stats(raw: UserStats | Mapping[str, Any] | None) -> UserStats:
    """
    Bring a stored profile up to the current shape.

    Missing levels become 1 (or the initial table when no levels were stored
    at all), missing confidence/streaks become empty, a missing user id is
    generated. Levels are normalized to their regime. Idempotent.
    """
    if isinstance(raw, UserStats):
        raw = raw.model_dump(by_alias=True)
    if not isinstance(raw, Mapping):
        logger.warning("Stored profile is not a mapping, starting fresh")
        return new_user_stats()

    user_id = _pick(raw, "userId", "user_id")
    total_time = _pick(raw, "totalTimeMs", "total_time_ms")
    if isinstance(total_time, bool) or not isinstance(total_time, (int, float)) or not math.isfinite(total_time):
        total_time = 0

    return UserStats(
        user_id=str(user_id) if user_id else generate_uuid(),
        levels=_migrate_levels(raw.get("levels")),
        confidence=_migrate_confidence(raw.get("confidence")),
        streaks=_migrate_streaks(raw.get("streaks")),
        history=_migrate_history(raw.get("history")),
        total_time_ms=max(0, total_time),
    )


# =============================================================================
# Summary
# =============================================================================


class HistoryPoint(BaseModel):
    index: int
    type: str
    difficulty: float
    seconds: float
    success: bool


class ProfileSummary(BaseModel):
    """Numbers behind the stats screen."""

    user_id: str
    brain_level: float
    tasks_solved: int
    flow_minutes: int
    skill_profile: dict[str, float] = Field(default_factory=dict)
    recent: list[HistoryPoint] = Field(default_factory=list)


def summarize(profile: UserStats, history_limit: int = 20) -> ProfileSummary:
    """
    Aggregate a profile for display.

    Brain level is the sum of all levels, floored to one decimal.
    """
    total_level = sum(profile.levels.values())
    legacy = {t.value for t in LEGACY_TYPES}
    recent = profile.history[-history_limit:] if history_limit > 0 else []

    return ProfileSummary(
        user_id=profile.user_id,
        brain_level=math.floor(total_level * 10) / 10,
        tasks_solved=len(profile.history),
        flow_minutes=int(profile.total_time_ms // 60000),
        skill_profile={k: v for k, v in profile.levels.items() if k not in legacy},
        recent=[
            HistoryPoint(
                index=i + 1,
                type=str(getattr(h.type, "value", h.type)),
                difficulty=h.difficulty_level,
                seconds=h.time_spent_ms / 1000,
                success=h.success,
            )
            for i, h in enumerate(recent)
        ],
    )
