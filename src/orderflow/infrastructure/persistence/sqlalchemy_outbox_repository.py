"""SQLAlchemy implementation of OutboxRepository."""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import select
from sqlalchemy.orm import Session

from orderflow.domain.model.outbox import OutboxEvent
from orderflow.domain.repository.outbox_repository import OutboxRepository
from orderflow.infrastructure.persistence.models import OutboxEventModel


class SqlAlchemyOutboxRepository(OutboxRepository):

    def __init__(self, session: Session) -> None:
        self._session = session

    def append(self, event: OutboxEvent) -> None:
        row = OutboxEventModel(
            event_type=event.event_type,
            payload=event.payload,
            created_at=event.created_at,
        )
        self._session.add(row)
        self._session.flush()
        event.id = row.id

    def list_pending(self, limit: int) -> list[OutboxEvent]:
        rows = self._session.execute(
            select(OutboxEventModel)
            .where(OutboxEventModel.dispatched_at.is_(None))
            .order_by(OutboxEventModel.id)
            .limit(limit)
            .with_for_update(skip_locked=True)
        ).scalars().all()
        return [
            OutboxEvent(
                id=row.id,
                event_type=row.event_type,
                payload=dict(row.payload),
                created_at=row.created_at,
                dispatched_at=row.dispatched_at,
                attempts=row.attempts,
            )
            for row in rows
        ]

    def mark_dispatched(self, event_id: int, at: datetime) -> None:
        row = self._session.get(OutboxEventModel, event_id)
        if row is not None:
            row.dispatched_at = at
            self._session.flush()

    def record_failure(self, event_id: int) -> None:
        row = self._session.get(OutboxEventModel, event_id)
        if row is not None:
            row.attempts += 1
            self._session.flush()
