"""
Core data model for the FlowScroll task feed.

Task types are grouped into categories, and every type is regulated by
exactly one of two difficulty regimes:

- WINDOWED: integer levels 1-10 (arithmetic and grid logic)
- CONFIDENCE: real-valued levels >= 1 with two-decimal precision
"""

import math
import uuid
from collections.abc import Mapping
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, ClassVar, Union

from pydantic import BaseModel, ConfigDict, Field, model_validator
from pydantic.alias_generators import to_camel


class TaskCategory(str, Enum):
    """Top-level groups of mini-games."""
    MATH = "MATH"
    LANGUAGE = "LANGUAGE"
    REACTION = "REACTION"
    MUSIC = "MUSIC"
    FREE_MIND = "FREE_MIND"


class TaskType(str, Enum):
    """Concrete mini-game kinds."""
    MATH_ADDITION = "MATH_ADDITION"
    MATH_SUBTRACTION = "MATH_SUBTRACTION"
    MATH_MULTIPLICATION = "MATH_MULTIPLICATION"
    MATH_STREAM = "MATH_STREAM"
    MATH_SEQUENCE = "MATH_SEQUENCE"
    MATH_SUDOKU = "MATH_SUDOKU"
    LANG_SYNONYM = "LANG_SYNONYM"
    LANG_RHYME = "LANG_RHYME"
    LANG_SENTENCE = "LANG_SENTENCE"
    LANG_ODD_ONE_OUT = "LANG_ODD_ONE_OUT"
    LANG_CONNECT = "LANG_CONNECT"
    LANG_FLAG = "LANG_FLAG"
    LANG_MAP = "LANG_MAP"
    REACTION_COLOR = "REACTION_COLOR"
    REACTION_SHAPE = "REACTION_SHAPE"
    REACTION_STREAM = "REACTION_STREAM"
    REACTION_COLOR_SWITCH = "REACTION_COLOR_SWITCH"
    MUSIC_RHYTHM = "MUSIC_RHYTHM"
    MUSIC_MEMORY = "MUSIC_MEMORY"
    FREE_MIND_BREATHE = "FREE_MIND_BREATHE"


class Regime(str, Enum):
    """Difficulty regulation strategy."""
    WINDOWED = "windowed"
    CONFIDENCE = "confidence"


class Outcome(str, Enum):
    SUCCESS = "success"
    FAILED = "failed"
    SKIPPED = "skipped"


def derive_outcome(success: bool, was_skipped: bool) -> Outcome:
    if success:
        return Outcome.SUCCESS
    if was_skipped:
        return Outcome.SKIPPED
    return Outcome.FAILED


CATEGORY_BY_TYPE: dict[TaskType, TaskCategory] = {
    TaskType.MATH_ADDITION: TaskCategory.MATH,
    TaskType.MATH_SUBTRACTION: TaskCategory.MATH,
    TaskType.MATH_MULTIPLICATION: TaskCategory.MATH,
    TaskType.MATH_STREAM: TaskCategory.MATH,
    TaskType.MATH_SEQUENCE: TaskCategory.MATH,
    TaskType.MATH_SUDOKU: TaskCategory.MATH,
    TaskType.LANG_SYNONYM: TaskCategory.LANGUAGE,
    TaskType.LANG_RHYME: TaskCategory.LANGUAGE,
    TaskType.LANG_SENTENCE: TaskCategory.LANGUAGE,
    TaskType.LANG_ODD_ONE_OUT: TaskCategory.LANGUAGE,
    TaskType.LANG_CONNECT: TaskCategory.LANGUAGE,
    TaskType.LANG_FLAG: TaskCategory.LANGUAGE,
    TaskType.LANG_MAP: TaskCategory.LANGUAGE,
    TaskType.REACTION_COLOR: TaskCategory.REACTION,
    TaskType.REACTION_SHAPE: TaskCategory.REACTION,
    TaskType.REACTION_STREAM: TaskCategory.REACTION,
    TaskType.REACTION_COLOR_SWITCH: TaskCategory.REACTION,
    TaskType.MUSIC_RHYTHM: TaskCategory.MUSIC,
    TaskType.MUSIC_MEMORY: TaskCategory.MUSIC,
    TaskType.FREE_MIND_BREATHE: TaskCategory.FREE_MIND,
}

WINDOWED_TYPES: frozenset[TaskType] = frozenset({
    TaskType.MATH_ADDITION,
    TaskType.MATH_SUBTRACTION,
    TaskType.MATH_MULTIPLICATION,
    TaskType.MATH_SUDOKU,
})


def type_key(task_type: "TaskType | str") -> str:
    """Storage key for a task type (the enum value, or the raw string)."""
    if isinstance(task_type, TaskType):
        return task_type.value
    return str(task_type)


def parse_task_type(value: Any) -> TaskType | None:
    """Resolve a raw value to a TaskType, or None if it is not recognized."""
    if isinstance(value, TaskType):
        return value
    try:
        return TaskType(value)
    except ValueError:
        return None


def category_for(task_type: "TaskType | str") -> TaskCategory | None:
    resolved = parse_task_type(task_type)
    if resolved is None:
        return None
    return CATEGORY_BY_TYPE[resolved]


def regime_for(task_type: "TaskType | str") -> Regime:
    if parse_task_type(task_type) in WINDOWED_TYPES:
        return Regime.WINDOWED
    return Regime.CONFIDENCE


# =============================================================================
# Levels
# =============================================================================


@dataclass(frozen=True)
class DiscreteLevel:
    """Integer level of the windowed regime, always within 1-10."""

    value: int
    MIN: ClassVar[int] = 1
    MAX: ClassVar[int] = 10

    @classmethod
    def of(cls, raw: Any) -> "DiscreteLevel":
        number = _as_number(raw)
        return cls(max(cls.MIN, min(cls.MAX, int(math.floor(number)))))

    def step(self, delta: int) -> "DiscreteLevel":
        return DiscreteLevel(max(self.MIN, min(self.MAX, self.value + delta)))


@dataclass(frozen=True)
class ContinuousLevel:
    """Real-valued level of the confidence regime, >= 1 with two decimals."""

    value: float
    MIN: ClassVar[float] = 1.0

    @classmethod
    def of(cls, raw: Any) -> "ContinuousLevel":
        number = _as_number(raw)
        return cls(round(max(cls.MIN, number), 2))

    def shift(self, change: float) -> "ContinuousLevel":
        return ContinuousLevel.of(self.value + change)


def _as_number(raw: Any) -> float:
    if isinstance(raw, bool) or not isinstance(raw, (int, float)):
        return 1.0
    if math.isnan(raw) or math.isinf(raw):
        return 1.0
    return float(raw)


def level_for(task_type: "TaskType | str", raw: Any) -> DiscreteLevel | ContinuousLevel:
    """Interpret a stored level according to the type's regime."""
    if regime_for(task_type) is Regime.WINDOWED:
        return DiscreteLevel.of(raw)
    return ContinuousLevel.of(raw)


def read_level(levels: Mapping[str, Any], task_type: "TaskType | str") -> int | float:
    """Current level for a type, defaulting to 1 when missing."""
    raw = levels.get(type_key(task_type))
    if raw is None:
        raw = 1
    return level_for(task_type, raw).value


# =============================================================================
# Tasks
# =============================================================================


@dataclass
class GeneratedContent:
    """Output of a generator: prompt, renderer payload and canonical answer."""
    question: str
    content: dict = field(default_factory=dict)
    solution: Any = None


@dataclass(frozen=True)
class Task:
    """A generated mini-game. The difficulty level is frozen at creation."""
    id: str
    category: TaskCategory
    type: TaskType
    difficulty_level: int | float
    question: str
    content: dict = field(default_factory=dict)
    solution: Any = None
    generated_at: int = 0  # epoch ms

    def to_dict(self) -> dict[str, Any]:
        """Serialize with camelCase keys for the rendering client."""
        return {
            "id": self.id,
            "category": self.category.value,
            "type": self.type.value,
            "difficultyLevel": self.difficulty_level,
            "question": self.question,
            "content": self.content,
            "solution": self.solution,
            "generatedAt": self.generated_at,
        }


class TaskResult(BaseModel):
    """Immutable record of one completed, failed or skipped task."""

    model_config = ConfigDict(
        frozen=True,
        alias_generator=to_camel,
        populate_by_name=True,
        extra="allow",
    )

    task_id: str = ""
    type: Union[TaskType, str] = Field(union_mode="left_to_right")
    success: bool = False
    outcome: Outcome = Outcome.FAILED
    time_spent_ms: float = 0
    timestamp: int = 0
    start_time: int = 0
    difficulty_level: float = 1
    was_skipped: bool = False
    session_id: str = ""
    session_duration_ms: int = 0

    @model_validator(mode="before")
    @classmethod
    def fill_outcome(cls, data: Any) -> Any:
        """Entries stored before `outcome` existed get it from success/skip flags."""
        if not isinstance(data, Mapping) or "outcome" in data:
            return data
        success = data.get("success", False)
        was_skipped = data.get("wasSkipped", data.get("was_skipped", False))
        if isinstance(success, bool) and isinstance(was_skipped, bool):
            return {**data, "outcome": derive_outcome(success, was_skipped)}
        return data


class StreakData(BaseModel):
    correct: int = 0
    wrong: int = 0


def generate_uuid() -> str:
    return str(uuid.uuid4())


class UserStats(BaseModel):
    """
    Per-user aggregate state.

    Owned by the application shell; the result recorder and the difficulty
    regulator mutate it in place.
    """

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    user_id: str = Field(default_factory=generate_uuid)
    levels: dict[str, Union[int, float]] = Field(default_factory=dict)
    confidence: dict[str, float] = Field(default_factory=dict)
    streaks: dict[str, StreakData] = Field(default_factory=dict)
    history: list[TaskResult] = Field(default_factory=list)
    total_time_ms: float = 0

    def level_of(self, task_type: "TaskType | str") -> int | float:
        return read_level(self.levels, task_type)

    def confidence_of(self, task_type: "TaskType | str", default: float = 0.1) -> float:
        return self.confidence.get(type_key(task_type), default)

    def history_for(self, task_type: "TaskType | str") -> list[TaskResult]:
        """This type's results in play order."""
        key = type_key(task_type)
        return [h for h in self.history if type_key(h.type) == key]
