"""SQLAlchemy Unit of Work — one session, one transaction.

Entering opens a session and binds every repository to it.  Leaving
always rolls back whatever was not committed and closes the session, on
every exit path.  Connection-level failures surface as the retryable
StorageUnavailableError; everything else propagates unchanged.
"""

from __future__ import annotations

from sqlalchemy import exc as sa_exc
from sqlalchemy.orm import Session, sessionmaker

from orderflow.domain.exceptions import StorageUnavailableError
from orderflow.domain.repository.unit_of_work import UnitOfWork
from orderflow.infrastructure.persistence.sqlalchemy_hold_repository import (
    SqlAlchemyHoldRepository,
)
from orderflow.infrastructure.persistence.sqlalchemy_inventory_repository import (
    SqlAlchemyInventoryRepository,
)
from orderflow.infrastructure.persistence.sqlalchemy_invoice_lookup import (
    SqlAlchemyInvoiceLookup,
)
from orderflow.infrastructure.persistence.sqlalchemy_order_repository import (
    SqlAlchemyOrderRepository,
)
from orderflow.infrastructure.persistence.sqlalchemy_outbox_repository import (
    SqlAlchemyOutboxRepository,
)
from orderflow.logging_config import get_logger

logger = get_logger("db.unit_of_work")


def is_transient(error: BaseException) -> bool:
    if isinstance(error, (sa_exc.OperationalError, sa_exc.TimeoutError)):
        return True
    return isinstance(error, sa_exc.DBAPIError) and error.connection_invalidated


class SqlAlchemyUnitOfWork(UnitOfWork):

    def __init__(self, session_factory: sessionmaker[Session]) -> None:
        self._session_factory = session_factory
        self._session: Session | None = None

    def __enter__(self) -> SqlAlchemyUnitOfWork:
        self._session = self._session_factory()
        self.orders = SqlAlchemyOrderRepository(self._session)
        self.inventory = SqlAlchemyInventoryRepository(self._session)
        self.holds = SqlAlchemyHoldRepository(self._session)
        self.outbox = SqlAlchemyOutboxRepository(self._session)
        self.invoices = SqlAlchemyInvoiceLookup(self._session)
        logger.debug("transaction_started")
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        try:
            self.rollback()
        finally:
            self._session.close()  # type: ignore[union-attr]
            self._session = None

        if exc is None:
            return
        if is_transient(exc):
            logger.warning("transaction_rolled_back", extra={"retryable": True}, exc_info=exc)
            raise StorageUnavailableError(
                "Storage temporarily unavailable; the operation was rolled back"
            ) from exc
        logger.debug("transaction_rolled_back", extra={"error": type(exc).__name__})

    def commit(self) -> None:
        try:
            self._session.commit()  # type: ignore[union-attr]
        except sa_exc.SQLAlchemyError as error:
            if is_transient(error):
                raise StorageUnavailableError(
                    "Storage temporarily unavailable; the operation was rolled back"
                ) from error
            raise
        logger.debug("transaction_committed")

    def rollback(self) -> None:
        if self._session is not None:
            self._session.rollback()
