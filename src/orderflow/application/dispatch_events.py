"""Application service: Dispatch Events use case.

Drains the outbox towards the real-time fan-out.  Delivery is
at-least-once: an event is marked dispatched only after the publisher
accepted it, and a failed publish leaves it pending for the next run.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any

from orderflow.domain.repository.unit_of_work import UnitOfWork
from orderflow.logging_config import get_logger

logger = get_logger("application.dispatch_events")


class EventPublisher(ABC):

    @abstractmethod
    def publish(self, event_type: str, payload: dict[str, Any]) -> None:
        """Deliver one event; raise on failure."""


@dataclass(frozen=True)
class DispatchResult:
    dispatched: int
    failed: int


class DispatchEventsHandler:

    def __init__(self, uow: UnitOfWork, publisher: EventPublisher) -> None:
        self._uow = uow
        self._publisher = publisher

    def handle(self, limit: int = 100) -> DispatchResult:
        dispatched = failed = 0
        with self._uow as uow:
            for event in uow.outbox.list_pending(limit):
                try:
                    self._publisher.publish(event.event_type, event.payload)
                except Exception:
                    failed += 1
                    uow.outbox.record_failure(event.id)  # type: ignore[arg-type]
                    logger.warning(
                        "event_dispatch_failed",
                        extra={"event_id": event.id, "event_type": event.event_type},
                        exc_info=True,
                    )
                    continue
                uow.outbox.mark_dispatched(event.id, datetime.now(timezone.utc))  # type: ignore[arg-type]
                dispatched += 1
            uow.commit()

        if dispatched or failed:
            logger.info(
                "events_dispatched",
                extra={"dispatched": dispatched, "failed": failed},
            )
        return DispatchResult(dispatched=dispatched, failed=failed)
