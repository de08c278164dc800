"""Event publisher port for catalog domain events."""

from __future__ import annotations

from typing import Protocol

from ..domain.events import DomainEvent


class EventPublisherPort(Protocol):
    """Protocol interface for publishing domain events to the platform."""

    async def publish(self, event: DomainEvent) -> None:
        """Publish an event. Raises on delivery failure."""
        ...
