"""Abstract repository for Order aggregate."""

from __future__ import annotations

from abc import ABC, abstractmethod

from orderflow.domain.model.order import Order, OrderLineItem


class OrderRepository(ABC):

    @abstractmethod
    def add(self, order: Order) -> Order:
        """Persist a new order with its items and assign its ID."""

    @abstractmethod
    def get_by_id(self, order_id: int) -> Order | None:
        """Return an order by its ID, or None if not found."""

    @abstractmethod
    def get_for_update(self, order_id: int) -> Order | None:
        """Like ``get_by_id`` but locks the order row until the transaction ends."""

    @abstractmethod
    def save(self, order: Order) -> None:
        """Persist order-level fields (status, payment, target date)."""

    @abstractmethod
    def replace_items(self, order_id: int, items: list[OrderLineItem]) -> None:
        """Delete the stored line items and insert *items* as the new set."""

    @abstractmethod
    def list_page(
        self, user_id: int | None, before_id: int | None, limit: int
    ) -> list[Order]:
        """Return up to *limit* orders newest first, with id < *before_id*."""

    @abstractmethod
    def count(self, user_id: int | None) -> int:
        """Return how many orders exist, optionally for one user."""
