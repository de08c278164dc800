"""NATS event publisher."""

from __future__ import annotations

from nats.aio.client import Client as NATSClient

from ...domain.events import DomainEvent
from ...domain.exceptions import EventPublishException
from ...ports.logger import LoggerPort
from ..simple_logger import SimpleLogger


class NATSEventPublisher:
    """Publishes domain events as JSON on a fixed subject.

    The event class name travels in the ``Event-Type`` header so consumers
    can dispatch without parsing the payload.
    """

    def __init__(self, nc: NATSClient, subject: str, logger: LoggerPort | None = None):
        self._nc = nc
        self._subject = subject
        self._logger = logger or SimpleLogger("catalog_service.messaging.nats")

    async def publish(self, event: DomainEvent) -> None:
        payload = event.model_dump_json().encode()
        try:
            await self._nc.publish(
                self._subject, payload, headers={"Event-Type": event.event_type}
            )
        except Exception as e:
            raise EventPublishException(
                f"Failed to publish {event.event_type}: {e}", subject=self._subject
            ) from e
        self._logger.info(
            "Event published",
            subject=self._subject,
            event_type=event.event_type,
            event_id=event.event_id,
        )
