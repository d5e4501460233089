"""Turn a finished interaction into a TaskResult and append it to history."""

import logging
from typing import Protocol

from flowscroll.tasks.factory import now_ms
from flowscroll.tasks.models import Outcome, Task, TaskResult, UserStats, derive_outcome

logger = logging.getLogger(__name__)


class ResultSink(Protocol):
    """Anything that accepts finished results, e.g. the analytics client."""

    def record_task_result(self, user_id: str, result: TaskResult) -> object: ...


def record_result(
    profile: UserStats,
    task: Task,
    success: bool,
    time_spent_ms: float,
    was_skipped: bool = False,
    *,
    session_id: str = "",
    session_started_at: int | None = None,
    started_at: int | None = None,
    sink: ResultSink | None = None,
    now: int | None = None,
) -> TaskResult:
    """
    Record one result. Must run before the difficulty regulator.

    Args:
        profile: User stats; history and total time are updated in place
        task: The task that was played
        success: Whether the completion condition was met
        time_spent_ms: Engaged time reported by the renderer
        was_skipped: User moved on without attempting
        session_id: Current feed session
        session_started_at: Session start (epoch ms)
        started_at: When the task became active (epoch ms)
        sink: Analytics receiver, called fire-and-forget
        now: Recording time (epoch ms), defaults to the wall clock

    Returns:
        The appended TaskResult
    """
    if now is None:
        now = now_ms()
    time_spent_ms = max(0.0, float(time_spent_ms))
    outcome = derive_outcome(success, was_skipped)

    result = TaskResult(
        task_id=task.id,
        type=task.type,
        success=success,
        outcome=outcome,
        time_spent_ms=time_spent_ms,
        timestamp=now,
        start_time=started_at if started_at is not None else int(now - time_spent_ms),
        difficulty_level=task.difficulty_level,
        was_skipped=outcome is Outcome.SKIPPED,
        session_id=session_id,
        session_duration_ms=now - session_started_at if session_started_at is not None else 0,
    )

    profile.history.append(result)
    profile.total_time_ms += time_spent_ms

    if sink is not None:
        try:
            sink.record_task_result(profile.user_id, result)
        except Exception as e:
            logger.warning(f"Analytics hand-off failed: {e}")

    return result
