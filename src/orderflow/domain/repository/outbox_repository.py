"""Abstract repository for outbound event records."""

from __future__ import annotations

from abc import ABC, abstractmethod
from datetime import datetime

from orderflow.domain.model.outbox import OutboxEvent


class OutboxRepository(ABC):

    @abstractmethod
    def append(self, event: OutboxEvent) -> None:
        """Record an event in the current transaction."""

    @abstractmethod
    def list_pending(self, limit: int) -> list[OutboxEvent]:
        """Return undelivered events, oldest first."""

    @abstractmethod
    def mark_dispatched(self, event_id: int, at: datetime) -> None:
        """Flag an event as delivered."""

    @abstractmethod
    def record_failure(self, event_id: int) -> None:
        """Count a failed delivery attempt; the event stays pending."""
