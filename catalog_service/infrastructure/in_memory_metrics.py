"""In-memory metrics collector."""

from __future__ import annotations

import time
from collections import defaultdict
from collections.abc import Iterator
from contextlib import contextmanager
from typing import Any

from ..ports.metrics import MetricsPort


class TimingSummary:
    """Running count/total/min/max for one timer."""

    def __init__(self) -> None:
        self.count = 0
        self.total = 0.0
        self.min = float("inf")
        self.max = 0.0

    def add(self, value: float) -> None:
        self.count += 1
        self.total += value
        self.min = min(self.min, value)
        self.max = max(self.max, value)

    def to_dict(self) -> dict[str, float]:
        return {
            "count": self.count,
            "average_ms": round(self.total / self.count, 3) if self.count else 0.0,
            "min_ms": round(self.min, 3) if self.count else 0.0,
            "max_ms": round(self.max, 3),
        }


class InMemoryMetrics(MetricsPort):
    """Process-local metrics. One instance is created per application."""

    def __init__(self) -> None:
        self._counters: dict[str, int] = defaultdict(int)
        self._timings: dict[str, TimingSummary] = defaultdict(TimingSummary)

    def increment(self, name: str, value: int = 1) -> None:
        self._counters[name] += value

    def counter(self, name: str) -> int:
        return self._counters.get(name, 0)

    @contextmanager
    def timer(self, name: str) -> Iterator[None]:
        start = time.perf_counter()
        try:
            yield
        finally:
            self._timings[name].add((time.perf_counter() - start) * 1000)

    def get_all(self) -> dict[str, Any]:
        return {
            "counters": dict(self._counters),
            "timings": {name: summary.to_dict() for name, summary in self._timings.items()},
        }
