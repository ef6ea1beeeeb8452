"""
Program Context

Read-only view of program-wide figures the status preamble needs: when the
program started and how many check tasks finished recently.
"""

import threading
import time
from abc import ABC, abstractmethod
from collections import deque

# Windows reported in programstatus, in seconds.
STATISTICS_WINDOWS = (60, 5 * 60, 15 * 60)


class ProgramContext(ABC):
    """Collaborator interface consumed by the exporter."""

    @abstractmethod
    def start_time(self) -> float:
        """Program start time, seconds since the epoch."""

    @abstractmethod
    def task_statistics(self, window: int) -> int:
        """Number of tasks completed during the last ``window`` seconds."""


class RollingTaskStatistics:
    """
    Counts completed tasks over a sliding time window.

    The check engine calls ``record()`` once per finished check; readers ask
    for the count over any window up to ``max_window`` seconds.
    """

    def __init__(self, max_window: int = max(STATISTICS_WINDOWS), clock=time.time):
        self._max_window = max_window
        self._clock = clock
        self._events: deque[tuple[float, int]] = deque()
        self._lock = threading.Lock()

    def record(self, count: int = 1, now: float | None = None) -> None:
        if now is None:
            now = self._clock()
        with self._lock:
            self._events.append((now, count))
            self._prune(now)

    def get(self, window: int, now: float | None = None) -> int:
        if now is None:
            now = self._clock()
        cutoff = now - window
        with self._lock:
            self._prune(now)
            return sum(count for ts, count in self._events if ts > cutoff)

    def _prune(self, now: float) -> None:
        cutoff = now - self._max_window
        while self._events and self._events[0][0] <= cutoff:
            self._events.popleft()


class ApplicationContext(ProgramContext):
    """
    Default context: process start time plus a rolling task counter.

    The counter is fed from outside. The check engine calls
    ``statistics.record()`` once per completed check; without such a
    collaborator every window reports 0.
    """

    def __init__(
        self,
        start_time: float | None = None,
        statistics: RollingTaskStatistics | None = None,
    ):
        self._start_time = time.time() if start_time is None else start_time
        self.statistics = statistics or RollingTaskStatistics()

    def start_time(self) -> float:
        return self._start_time

    def task_statistics(self, window: int) -> int:
        return self.statistics.get(window)
