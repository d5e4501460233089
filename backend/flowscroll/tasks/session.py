"""
Feed session: the rolling buffer of pre-generated tasks a player swipes
through, and the glue that turns renderer events into recorded results,
level updates and persisted profiles.
"""

import logging
import random
from collections.abc import Callable, Sequence
from typing import Protocol

from flowscroll.tasks.factory import create_task, now_ms
from flowscroll.tasks.models import Task, TaskResult, TaskType, UserStats
from flowscroll.tasks.recorder import ResultSink, record_result
from flowscroll.tasks.regulator import LevelUpdate, regulate

logger = logging.getLogger(__name__)

BUFFER_SIZE = 3
FREE_MIND_AFTER_MS = 20 * 60 * 1000
FREE_MIND_COOLDOWN_MS = 10 * 60 * 1000

_BASE36 = "0123456789abcdefghijklmnopqrstuvwxyz"


class ProfileSaver(Protocol):
    def save(self, profile: UserStats) -> object: ...


def to_base36(value: int) -> str:
    if value <= 0:
        return "0"
    digits = []
    while value:
        value, rem = divmod(value, 36)
        digits.append(_BASE36[rem])
    return "".join(reversed(digits))


def generate_session_id(rng: random.Random | None = None, clock: Callable[[], int] = now_ms) -> str:
    """`sess_<8 hex chars>_<base36 epoch ms>`."""
    rng = rng or random
    return f"sess_{rng.getrandbits(32):08x}_{to_base36(clock())}"


class FeedSession:
    """
    One visit to the feed.

    In normal mode the session keeps `buffer_size` tasks queued ahead of the
    active one and applies every result to the profile (record, regulate,
    save). In duel mode the task list is fixed and results only reach the
    analytics sink; the profile is never touched.
    """

    def __init__(
        self,
        profile: UserStats,
        *,
        store: ProfileSaver | None = None,
        sink: ResultSink | None = None,
        buffer_size: int = BUFFER_SIZE,
        duel_tasks: Sequence[Task] | None = None,
        rng: random.Random | None = None,
        free_mind_after_ms: int = FREE_MIND_AFTER_MS,
        free_mind_cooldown_ms: int = FREE_MIND_COOLDOWN_MS,
        clock: Callable[[], int] = now_ms,
    ) -> None:
        self.profile = profile
        self.store = store
        self.sink = sink
        self.buffer_size = max(1, buffer_size)
        self.rng = rng
        self.free_mind_after_ms = free_mind_after_ms
        self.free_mind_cooldown_ms = free_mind_cooldown_ms
        self.clock = clock

        self.session_id = generate_session_id(rng, clock)
        self.started_at = clock()
        self.is_duel = duel_tasks is not None
        self.tasks: list[Task] = list(duel_tasks or [])
        self.index = 0
        self.completed: set[str] = set()
        self.task_started_at = self.started_at
        self.last_free_mind_at: int | None = None
        self._paused_at: int | None = None

        if not self.is_duel:
            self.fill_buffer()
        logger.info(
            f"Session {self.session_id} started for {profile.user_id} "
            f"({'duel, ' + str(len(self.tasks)) + ' tasks' if self.is_duel else 'feed'})"
        )

    # -------------------------------------------------------------------------
    # Buffer
    # -------------------------------------------------------------------------

    @property
    def remaining(self) -> int:
        """Tasks queued after the active one."""
        return max(0, len(self.tasks) - (self.index + 1))

    @property
    def current_task(self) -> Task | None:
        if 0 <= self.index < len(self.tasks):
            return self.tasks[self.index]
        return None

    @property
    def finished(self) -> bool:
        return self.is_duel and self.index >= len(self.tasks)

    def _free_mind_due(self, now: int) -> bool:
        if now - self.started_at < self.free_mind_after_ms:
            return False
        if self.last_free_mind_at is None:
            return True
        return now - self.last_free_mind_at >= self.free_mind_cooldown_ms

    def fill_buffer(self) -> list[Task]:
        """Top the queue up to `buffer_size` upcoming tasks; returns the new ones."""
        if self.is_duel:
            return []

        needed = self.buffer_size - self.remaining
        new_tasks: list[Task] = []

        now = self.clock()
        if needed > 0 and self._free_mind_due(now):
            new_tasks.append(create_task(self.profile, self.rng, task_type=TaskType.FREE_MIND_BREATHE))
            self.last_free_mind_at = now
            logger.info(f"Session {self.session_id}: inserting a breathing break")

        while len(new_tasks) < needed:
            new_tasks.append(create_task(self.profile, self.rng))

        self.tasks.extend(new_tasks)
        return new_tasks

    # -------------------------------------------------------------------------
    # Results
    # -------------------------------------------------------------------------

    def _find(self, task_id: str) -> Task | None:
        for task in self.tasks:
            if task.id == task_id:
                return task
        return None

    def _record(self, task: Task, success: bool, time_spent_ms: float, was_skipped: bool) -> tuple[TaskResult, LevelUpdate | None]:
        self.completed.add(task.id)
        common = dict(
            session_id=self.session_id,
            session_started_at=self.started_at,
            started_at=self.task_started_at,
            sink=self.sink,
            now=self.clock(),
        )

        if self.is_duel:
            scratch = self.profile.model_copy(deep=True)
            result = record_result(scratch, task, success, time_spent_ms, was_skipped, **common)
            return result, None

        result = record_result(self.profile, task, success, time_spent_ms, was_skipped, **common)
        update = regulate(self.profile, result)
        if self.store is not None:
            self.store.save(self.profile)
        return result, update

    def complete(self, task_id: str, success: bool, time_spent_ms: float) -> tuple[TaskResult, LevelUpdate | None] | None:
        """
        Report the renderer's completion callback for a task.

        Only the active task can be reported; its start time is the moment it
        became active. Returns None for an unknown, queued or already
        reported task.
        """
        task = self._find(task_id)
        if task is None:
            logger.warning(f"Session {self.session_id}: result for unknown task {task_id}")
            return None
        if task is not self.current_task:
            logger.warning(f"Session {self.session_id}: task {task_id} is not the active task")
            return None
        if task.id in self.completed:
            logger.warning(f"Session {self.session_id}: task {task_id} already reported")
            return None
        return self._record(task, success, time_spent_ms, was_skipped=False)

    def engaged_ms(self) -> int:
        """Time on the active task, excluding a pause in progress."""
        now = self._paused_at if self._paused_at is not None else self.clock()
        return max(0, now - self.task_started_at)

    def advance(self) -> tuple[TaskResult, LevelUpdate | None] | None:
        """
        Swipe to the next task.

        An active task without a reported result is recorded as skipped
        with the engaged time. Returns that skip result, if any.
        """
        if self.finished:
            return None
        if self._paused_at is not None:
            self.resume()

        skipped = None
        task = self.current_task
        if task is not None and task.id not in self.completed:
            skipped = self._record(task, False, self.engaged_ms(), was_skipped=True)

        self.index += 1
        self.task_started_at = self.clock()
        if self.finished:
            logger.info(f"Session {self.session_id}: duel finished at {self.index}/{len(self.tasks)}")
        else:
            self.fill_buffer()
        return skipped

    def pause(self) -> None:
        if self._paused_at is None:
            self._paused_at = self.clock()

    def resume(self) -> None:
        if self._paused_at is not None:
            self.task_started_at += self.clock() - self._paused_at
            self._paused_at = None

    def end(self) -> None:
        if not self.is_duel and self.store is not None:
            self.store.save(self.profile)
        logger.info(
            f"Session {self.session_id} ended after {self.clock() - self.started_at}ms, "
            f"{len(self.completed)} results"
        )
