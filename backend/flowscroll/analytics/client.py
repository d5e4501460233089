"""Fire-and-forget delivery of task results to the analytics endpoint."""

import logging
import threading
from concurrent.futures import Future, ThreadPoolExecutor
from datetime import datetime, timezone
from functools import lru_cache
from typing import Any

import requests

from flowscroll.config import get_settings
from flowscroll.tasks.models import TaskResult, type_key

logger = logging.getLogger(__name__)


def iso_timestamp(epoch_ms: float) -> str:
    """Epoch milliseconds as an ISO-8601 UTC string with millisecond precision."""
    moment = datetime.fromtimestamp(epoch_ms / 1000, tz=timezone.utc)
    return moment.isoformat(timespec="milliseconds").replace("+00:00", "Z")


def build_payload(user_id: str, result: TaskResult) -> dict[str, Any]:
    return {
        "userId": user_id,
        "taskId": result.task_id,
        "type": type_key(result.type),
        "success": result.success,
        "outcome": result.outcome.value,
        "timeSpentMs": result.time_spent_ms,
        "difficultyLevel": result.difficulty_level,
        "timestamp": iso_timestamp(result.timestamp),
        "startTime": iso_timestamp(result.start_time),
        "wasSkipped": result.was_skipped,
        "sessionId": result.session_id,
        "sessionDurationMs": result.session_duration_ms,
    }


class AnalyticsClient:
    """
    Posts one JSON document per result from a small worker pool.

    Delivery failures are logged and dropped; callers are never blocked
    and never see an exception. At most `max_pending` results wait or run
    at once; further results are dropped until the backlog drains. An
    empty endpoint disables delivery.
    """

    def __init__(
        self,
        endpoint_url: str,
        timeout_sec: float = 2.5,
        max_workers: int = 2,
        max_pending: int = 256,
    ) -> None:
        self.endpoint_url = endpoint_url
        self.timeout_sec = timeout_sec
        self._pending = threading.BoundedSemaphore(max(1, max_pending))
        self._executor = ThreadPoolExecutor(max_workers=max(1, max_workers), thread_name_prefix="analytics")

    @property
    def enabled(self) -> bool:
        return bool(self.endpoint_url)

    def record_task_result(self, user_id: str, result: TaskResult) -> Future | None:
        if not self.enabled:
            return None
        if not self._pending.acquire(blocking=False):
            logger.warning(f"Analytics backlog full, dropping task {result.task_id}")
            return None

        payload = build_payload(user_id, result)
        try:
            future = self._executor.submit(self._post, payload)
        except RuntimeError as e:
            # Executor already shut down
            self._pending.release()
            logger.warning(f"Analytics submit rejected: {e}")
            return None
        future.add_done_callback(lambda _: self._pending.release())
        return future

    def _post(self, payload: dict[str, Any]) -> bool:
        try:
            r = requests.post(self.endpoint_url, json=payload, timeout=self.timeout_sec)
            r.raise_for_status()
            return True
        except requests.RequestException as e:
            logger.warning(f"Analytics sync failed for task {payload.get('taskId')}: {e}")
            return False

    def close(self, wait: bool = True) -> None:
        self._executor.shutdown(wait=wait)


@lru_cache
def get_analytics_client() -> AnalyticsClient:
    settings = get_settings()
    return AnalyticsClient(
        endpoint_url=settings.analytics_endpoint,
        timeout_sec=settings.analytics_timeout_sec,
        max_workers=settings.analytics_workers,
        max_pending=settings.analytics_max_pending,
    )
