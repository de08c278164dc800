"""Metrics port - counters and timings for diagnostics."""

from abc import ABC, abstractmethod
from contextlib import AbstractContextManager
from typing import Any


class MetricsPort(ABC):
    """Abstract interface for metrics collection."""

    @abstractmethod
    def increment(self, name: str, value: int = 1) -> None:
        """Increment a counter (e.g. ``cache.hits.Brand``)."""
        ...

    @abstractmethod
    def timer(self, name: str) -> AbstractContextManager[Any]:
        """Context manager recording the duration of the enclosed block in ms."""
        ...

    @abstractmethod
    def get_all(self) -> dict[str, Any]:
        """Snapshot of every collected metric."""
        ...
