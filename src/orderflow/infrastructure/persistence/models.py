"""SQLAlchemy ORM models — the persisted layout of the engine.

Kept separate from the domain dataclasses; repositories map between them.
"""

from __future__ import annotations

from datetime import date, datetime, timezone
from decimal import Decimal
from typing import Any, ClassVar

from sqlalchemy import JSON, Date, DateTime, ForeignKey, Index, Integer, Numeric, String
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Base(DeclarativeBase):

    type_annotation_map: ClassVar[dict] = {
        Decimal: Numeric(12, 2),
        datetime: DateTime(timezone=True),
        date: Date,
        dict[str, Any]: JSON,
    }


class OrderModel(Base):
    __tablename__ = "orders"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    user_id: Mapped[int] = mapped_column(Integer, index=True)
    status: Mapped[str] = mapped_column(String(20))
    payment_status: Mapped[str] = mapped_column(String(20))
    target_delivery_date: Mapped[date | None]
    created_at: Mapped[datetime] = mapped_column(default=_utcnow)


class OrderItemModel(Base):
    __tablename__ = "order_items"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    order_id: Mapped[int] = mapped_column(ForeignKey("orders.id"), index=True)
    product_id: Mapped[int] = mapped_column(ForeignKey("inventory.product_id"))
    quantity: Mapped[int] = mapped_column(Integer)
    price: Mapped[Decimal]


class InventoryModel(Base):
    __tablename__ = "inventory"

    product_id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    product_name: Mapped[str] = mapped_column(String(200))
    # Signed: negative stock is a valid backlog state.
    stock_quantity: Mapped[int] = mapped_column(Integer, default=0)


class InventoryHoldModel(Base):
    __tablename__ = "inventory_holds"
    __table_args__ = (
        Index("ix_holds_reference", "reference_type", "reference_value", "status"),
        Index("ix_holds_product_status", "product_id", "status"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    product_id: Mapped[int] = mapped_column(ForeignKey("inventory.product_id"))
    quantity: Mapped[int] = mapped_column(Integer)
    reason: Mapped[str] = mapped_column(String(200))
    reference_type: Mapped[str | None] = mapped_column(String(50))
    reference_value: Mapped[str | None] = mapped_column(String(100))
    status: Mapped[str] = mapped_column(String(20), default="ACTIVE")
    created_at: Mapped[datetime] = mapped_column(default=_utcnow)
    released_at: Mapped[datetime | None]


class OutboxEventModel(Base):
    __tablename__ = "outbox_events"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    event_type: Mapped[str] = mapped_column(String(50))
    payload: Mapped[dict[str, Any]]
    created_at: Mapped[datetime] = mapped_column(default=_utcnow)
    dispatched_at: Mapped[datetime | None] = mapped_column(index=True)
    attempts: Mapped[int] = mapped_column(Integer, default=0)


class CustomerInvoiceModel(Base):
    """Read-only here; invoices are written by the invoicing subsystem."""

    __tablename__ = "customer_invoices"

    invoice_id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    order_id: Mapped[int] = mapped_column(Integer, index=True)
    invoice_number: Mapped[str] = mapped_column(String(50))
    total_value: Mapped[Decimal]
    issue_date: Mapped[date | None]
