"""EventPublisher that writes each event to the structured log.

Stands in for the real-time fan-out when none is configured.
"""

from __future__ import annotations

from typing import Any

from orderflow.application.dispatch_events import EventPublisher
from orderflow.logging_config import get_logger

logger = get_logger("notifications")


class LoggingEventPublisher(EventPublisher):

    def publish(self, event_type: str, payload: dict[str, Any]) -> None:
        logger.info("event_published", extra={"event_type": event_type, "payload": payload})
