"""
Difficulty regulation.

Two regimes, chosen by task type:

Windowed (addition, subtraction, multiplication, sudoku)
    Looks at the last 8 results of the type (15 once 30 have been played),
    computes accuracy and mean time, and moves the integer level by at most
    one step to keep the player inside the flow band:

    - accuracy < 0.6 or mean time > 1.2 * FLOW_MAX  -> decrease
    - accuracy >= 0.9 and mean time < FLOW_MIN      -> increase
      (every time during calibration, afterwards only when the result count
      is a multiple of 15)
    - otherwise                                     -> maintain

Confidence-weighted (everything else)
    An Elo-like step sized by outcome and speed, scaled by a volatility
    factor of 1 + 2 * (1 - confidence). Confidence grows with every result,
    so new types move fast and settled ones move gently.
"""

import logging
from dataclasses import dataclass

from flowscroll.tasks.models import (
    ContinuousLevel,
    DiscreteLevel,
    Regime,
    TaskResult,
    TaskType,
    UserStats,
    parse_task_type,
    regime_for,
    type_key,
)

logger = logging.getLogger(__name__)

# Windowed regime
EARLY_WINDOW = 8
STABLE_WINDOW = 15
CALIBRATION_RESULTS = 30
THROTTLE_EVERY = 15
DECREASE_BELOW_ACCURACY = 0.6
INCREASE_FROM_ACCURACY = 0.9
SLOW_FACTOR = 1.2
DEFAULT_FLOW_BAND_MS = (5000, 20000)
FLOW_BANDS_MS: dict[TaskType, tuple[int, int]] = {
    TaskType.MATH_SUDOKU: (10000, 40000),
}

# Confidence-weighted regime
DEFAULT_CONFIDENCE = 0.1
SUCCESS_STEPS: tuple[tuple[float, float], ...] = (
    (3000, 1.0),
    (5000, 0.6),
    (10000, 0.3),
)
SLOW_SUCCESS_STEP = 0.1
FAST_SKIP_MS = 1500
FAST_SKIP_STEP = -0.5
SLOW_SKIP_STEP = -0.2
FAILURE_STEP = -0.5
CONFIDENCE_GAIN = 0.05
SKIP_CONFIDENCE_GAIN = 0.01


@dataclass(frozen=True)
class LevelUpdate:
    """Outcome of one regulation step."""
    task_type: str
    previous_level: int | float
    level: int | float
    decision: str
    confidence: float | None = None


def flow_band(task_type: TaskType | str) -> tuple[int, int]:
    return FLOW_BANDS_MS.get(parse_task_type(task_type), DEFAULT_FLOW_BAND_MS)


def window_decision(
    task_type: TaskType | str,
    window: list[TaskResult],
    total_played: int,
) -> tuple[int, str]:
    """Level delta and decision label for the windowed regime."""
    if not window:
        return 0, "maintain"

    accuracy = sum(1 for h in window if h.success) / len(window)
    avg_time_ms = sum(h.time_spent_ms for h in window) / len(window)
    flow_min_ms, flow_max_ms = flow_band(task_type)

    if accuracy < DECREASE_BELOW_ACCURACY or avg_time_ms > flow_max_ms * SLOW_FACTOR:
        return -1, "decrease"
    if accuracy >= INCREASE_FROM_ACCURACY and avg_time_ms < flow_min_ms:
        if total_played < CALIBRATION_RESULTS:
            return 1, "increase_fast"
        if total_played % THROTTLE_EVERY == 0:
            return 1, "increase"
    return 0, "maintain"


def _regulate_windowed(profile: UserStats, result: TaskResult) -> LevelUpdate:
    key = type_key(result.type)
    current = DiscreteLevel.of(profile.levels.get(key, 1))

    type_history = profile.history_for(result.type)
    total_played = len(type_history)
    window_size = EARLY_WINDOW if total_played < CALIBRATION_RESULTS else STABLE_WINDOW
    window = type_history[-window_size:]

    delta, decision = window_decision(result.type, window, total_played)
    new_level = current.step(delta)
    profile.levels[key] = new_level.value

    return LevelUpdate(
        task_type=key,
        previous_level=current.value,
        level=new_level.value,
        decision=decision,
    )


def base_step(result: TaskResult) -> float:
    """Level change before volatility scaling."""
    if result.success:
        for limit_ms, step in SUCCESS_STEPS:
            if result.time_spent_ms < limit_ms:
                return step
        return SLOW_SUCCESS_STEP
    if result.was_skipped:
        return FAST_SKIP_STEP if result.time_spent_ms < FAST_SKIP_MS else SLOW_SKIP_STEP
    return FAILURE_STEP


def _regulate_confidence(profile: UserStats, result: TaskResult) -> LevelUpdate:
    key = type_key(result.type)
    current = ContinuousLevel.of(profile.levels.get(key, 1))
    confidence = profile.confidence_of(key, DEFAULT_CONFIDENCE)

    volatility = 1 + (1 - confidence) * 2
    change = base_step(result) * volatility
    new_level = current.shift(change)

    gain = SKIP_CONFIDENCE_GAIN if result.was_skipped else CONFIDENCE_GAIN
    new_confidence = round(min(1.0, confidence + gain), 4)

    profile.levels[key] = new_level.value
    profile.confidence[key] = new_confidence

    if change > 0:
        decision = "increase_elo"
    elif change < 0:
        decision = "decrease_elo"
    else:
        decision = "maintain"

    return LevelUpdate(
        task_type=key,
        previous_level=current.value,
        level=new_level.value,
        decision=decision,
        confidence=new_confidence,
    )


def regulate(profile: UserStats, result: TaskResult) -> LevelUpdate:
    """
    Recalibrate the level of `result.type` after it was recorded.

    Mutates `profile.levels` (and `profile.confidence` for the
    confidence-weighted regime). Never raises for any history shape.
    """
    if regime_for(result.type) is Regime.WINDOWED:
        update = _regulate_windowed(profile, result)
    else:
        update = _regulate_confidence(profile, result)

    if update.level != update.previous_level:
        logger.info(f"{update.task_type} level {update.previous_level} -> {update.level} ({update.decision})")
    else:
        logger.debug(f"{update.task_type} level held at {update.level} ({update.decision})")
    return update


def update_level(profile: UserStats, result: TaskResult) -> int | float:
    """Regulate and return only the new level."""
    return regulate(profile, result).level
