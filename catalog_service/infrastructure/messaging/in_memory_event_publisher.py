"""In-memory event publisher for development and tests."""

from __future__ import annotations

from ...domain.events import DomainEvent


class InMemoryEventPublisher:
    """Records published events in order."""

    def __init__(self) -> None:
        self.events: list[DomainEvent] = []

    async def publish(self, event: DomainEvent) -> None:
        self.events.append(event)

    def clear(self) -> None:
        self.events.clear()
