"""SQLAlchemy implementation of OrderRepository."""

from __future__ import annotations

from datetime import timezone

from sqlalchemy import delete, func, select
from sqlalchemy.orm import Session

from orderflow.domain.model.order import Order, OrderLineItem, OrderStatus, PaymentStatus
from orderflow.domain.model.value_objects import Money, Quantity
from orderflow.domain.repository.order_repository import OrderRepository
from orderflow.infrastructure.persistence.models import OrderItemModel, OrderModel


class SqlAlchemyOrderRepository(OrderRepository):

    def __init__(self, session: Session) -> None:
        self._session = session

    # --- OrderRepository interface --------------------------------------------

    def add(self, order: Order) -> Order:
        row = OrderModel(
            user_id=order.user_id,
            status=order.status.value,
            payment_status=order.payment_status.value,
            target_delivery_date=order.target_delivery_date,
            created_at=order.created_at,
        )
        self._session.add(row)
        self._session.flush()
        order.id = row.id
        self._insert_items(row.id, order.items)
        return order

    def get_by_id(self, order_id: int) -> Order | None:
        row = self._session.get(OrderModel, order_id)
        if row is None:
            return None
        return self._to_domain(row, self._load_items([order_id]).get(order_id, []))

    def get_for_update(self, order_id: int) -> Order | None:
        row = self._session.execute(
            select(OrderModel)
            .where(OrderModel.id == order_id)
            .with_for_update()
            .execution_options(populate_existing=True)
        ).scalar_one_or_none()
        if row is None:
            return None
        return self._to_domain(row, self._load_items([order_id]).get(order_id, []))

    def save(self, order: Order) -> None:
        row = self._session.get(OrderModel, order.id)
        if row is None:
            raise LookupError(f"Order #{order.id} is not persisted")
        row.status = order.status.value
        row.payment_status = order.payment_status.value
        row.target_delivery_date = order.target_delivery_date
        self._session.flush()

    def replace_items(self, order_id: int, items: list[OrderLineItem]) -> None:
        self._session.execute(
            delete(OrderItemModel).where(OrderItemModel.order_id == order_id)
        )
        self._insert_items(order_id, items)

    def list_page(
        self, user_id: int | None, before_id: int | None, limit: int
    ) -> list[Order]:
        stmt = select(OrderModel)
        if user_id is not None:
            stmt = stmt.where(OrderModel.user_id == user_id)
        if before_id is not None:
            stmt = stmt.where(OrderModel.id < before_id)
        rows = self._session.execute(
            stmt.order_by(OrderModel.id.desc()).limit(limit)
        ).scalars().all()

        items_by_order = self._load_items([r.id for r in rows])
        return [self._to_domain(r, items_by_order.get(r.id, [])) for r in rows]

    def count(self, user_id: int | None) -> int:
        stmt = select(func.count()).select_from(OrderModel)
        if user_id is not None:
            stmt = stmt.where(OrderModel.user_id == user_id)
        return self._session.execute(stmt).scalar_one()

    # --- Helpers --------------------------------------------------------------

    def _insert_items(self, order_id: int, items: list[OrderLineItem]) -> None:
        self._session.add_all(
            OrderItemModel(
                order_id=order_id,
                product_id=item.product_id,
                quantity=item.quantity.value,
                price=item.unit_price.amount,
            )
            for item in items
        )
        self._session.flush()

    def _load_items(self, order_ids: list[int]) -> dict[int, list[OrderItemModel]]:
        if not order_ids:
            return {}
        rows = self._session.execute(
            select(OrderItemModel)
            .where(OrderItemModel.order_id.in_(order_ids))
            .order_by(OrderItemModel.id)
        ).scalars().all()
        by_order: dict[int, list[OrderItemModel]] = {}
        for row in rows:
            by_order.setdefault(row.order_id, []).append(row)
        return by_order

    # --- Serialization --------------------------------------------------------

    @staticmethod
    def _to_domain(row: OrderModel, item_rows: list[OrderItemModel]) -> Order:
        created_at = row.created_at
        if created_at.tzinfo is None:
            created_at = created_at.replace(tzinfo=timezone.utc)
        return Order(
            id=row.id,
            user_id=row.user_id,
            items=[
                OrderLineItem(
                    product_id=i.product_id,
                    quantity=Quantity(i.quantity),
                    unit_price=Money(i.price),
                )
                for i in item_rows
            ],
            status=OrderStatus(row.status),
            payment_status=PaymentStatus(row.payment_status),
            target_delivery_date=row.target_delivery_date,
            created_at=created_at,
        )
