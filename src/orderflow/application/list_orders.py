"""Application service: List Orders use case (query).

Newest first, paged by order id.  Non-admin callers only ever see their own
orders; admins may list everything or filter by owner.
"""

from __future__ import annotations

from orderflow.application.common import ADMIN_ROLE_ID
from orderflow.application.dto import OrderPage, to_order_dto
from orderflow.domain.repository.unit_of_work import UnitOfWork

DEFAULT_PAGE_SIZE = 10
MAX_PAGE_SIZE = 100


class ListOrdersHandler:

    def __init__(self, uow: UnitOfWork, admin_role_id: int = ADMIN_ROLE_ID) -> None:
        self._uow = uow
        self._admin_role_id = admin_role_id

    def handle(
        self,
        user_id: int,
        role_id: int | None,
        cursor: int | None = None,
        limit: int = DEFAULT_PAGE_SIZE,
        owner_id: int | None = None,
    ) -> OrderPage:
        if role_id != self._admin_role_id:
            owner_id = user_id
        limit = max(1, min(limit, MAX_PAGE_SIZE))

        with self._uow as uow:
            orders = uow.orders.list_page(owner_id, cursor, limit)
            total = uow.orders.count(owner_id)

        next_cursor = orders[-1].id if len(orders) == limit else None
        return OrderPage(
            orders=[to_order_dto(o) for o in orders],
            total=total,
            next_cursor=next_cursor,
        )
