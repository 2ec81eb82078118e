"""In-memory telemetry for model API calls.

One ``APIMonitor`` is created per process and handed to the LLM client and
the HTTP app. Metrics are never persisted; ``clear_old_metrics`` has to be
called periodically to bound memory.
"""

from __future__ import annotations

import logging
import threading
import time
from dataclasses import asdict, dataclass
from typing import Callable

logger = logging.getLogger(__name__)

BACKUP_WINDOW_MINUTES = 5
BACKUP_THRESHOLD = 0.5


@dataclass
class CallMetric:
    model: str
    start_time: float  # epoch seconds
    success: bool = False
    end_time: float | None = None
    duration_ms: float | None = None
    error: str | None = None
    tokens: int | None = None


class APIMonitor:
    """Thread-safe list of call metrics with rolling success-rate queries."""

    def __init__(
        self,
        clock: Callable[[], float] = time.time,
        *,
        backup_window_minutes: int = BACKUP_WINDOW_MINUTES,
        backup_threshold: float = BACKUP_THRESHOLD,
    ):
        self._clock = clock
        self._lock = threading.Lock()
        self._metrics: list[CallMetric] = []
        self.backup_window_minutes = backup_window_minutes
        self.backup_threshold = backup_threshold

    def start_call(self, model: str) -> CallMetric:
        metric = CallMetric(model=model, start_time=self._clock())
        with self._lock:
            self._metrics.append(metric)
        return metric

    def end_call(
        self,
        metric: CallMetric,
        success: bool,
        error: str | None = None,
        tokens: int | None = None,
    ) -> None:
        end = self._clock()
        with self._lock:
            metric.end_time = end
            metric.duration_ms = (end - metric.start_time) * 1000
            metric.success = success
            metric.error = error
            metric.tokens = tokens

        if success:
            logger.info("Model call succeeded: %s (%.0fms)", metric.model, metric.duration_ms)
        else:
            logger.warning(
                "Model call failed: %s (%.0fms) - %s", metric.model, metric.duration_ms, error
            )

    def get_metrics(self) -> list[CallMetric]:
        with self._lock:
            return list(self._metrics)

    def get_recent_metrics(self, window_minutes: float = 5) -> list[CallMetric]:
        cutoff = self._clock() - window_minutes * 60
        with self._lock:
            return [m for m in self._metrics if m.start_time > cutoff]

    def get_success_rate(self, window_minutes: float = 60) -> float:
        """Fraction of finished calls in the window that succeeded.

        Calls still in flight are not counted. Returns 1.0 when nothing has
        finished yet.
        """
        finished = [m for m in self.get_recent_metrics(window_minutes) if m.end_time is not None]
        if not finished:
            return 1.0
        return sum(1 for m in finished if m.success) / len(finished)

    def should_use_backup(self) -> bool:
        return self.get_success_rate(self.backup_window_minutes) < self.backup_threshold

    def clear_old_metrics(self, hours: float = 24) -> int:
        """Drop metrics older than ``hours``; returns how many were removed."""
        cutoff = self._clock() - hours * 3600
        with self._lock:
            before = len(self._metrics)
            self._metrics = [m for m in self._metrics if m.start_time > cutoff]
            removed = before - len(self._metrics)
        if removed:
            logger.debug("Pruned %d old call metrics", removed)
        return removed

    def snapshot(self, window_minutes: float = 60) -> dict:
        recent = self.get_recent_metrics(window_minutes)
        return {
            "window_minutes": window_minutes,
            "calls": len(recent),
            "success_rate": self.get_success_rate(window_minutes),
            "use_backup": self.should_use_backup(),
            "recent": [asdict(m) for m in recent[-20:]],
        }
