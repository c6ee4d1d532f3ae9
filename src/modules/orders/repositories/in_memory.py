"""In-memory Order repository.

Development and test implementation of ``IOrderRepository``.  Each
instance owns its own store; a per-instance lock makes every method,
including the guarded status write, atomic.  Item writes are accepted
only while the order is a DRAFT.
"""

from __future__ import annotations

import threading
from dataclasses import replace
from datetime import datetime, timedelta, timezone
from typing import Dict, List, Optional

from modules.core.models import new_identity
from modules.core.pagination import (
    PaginatedResult,
    PaginationParams,
    create_paginated_result,
)
from modules.orders.constants import OrderStatus
from modules.orders.domain import Order, OrderItem
from modules.orders.exceptions import (
    ConcurrentOrderModification,
    OrderItemNotFound,
    OrderNotDraft,
    OrderNotFound,
)
from modules.orders.repositories.interfaces import IOrderRepository


class InMemoryOrderRepository(IOrderRepository):
    def __init__(self) -> None:
        self._orders: Dict[str, Order] = {}
        self._lock = threading.RLock()
        self._last_timestamp: Optional[datetime] = None

    # ------------------------------------------------------------------
    # Standard order operations
    # ------------------------------------------------------------------

    def create_order(self, user_id: str, status: OrderStatus = OrderStatus.DRAFT) -> Order:
        with self._lock:
            now = self._now()
            order = Order(
                id=new_identity(),
                user_id=user_id,
                status=OrderStatus(status),
                items=[],
                created_at=now,
                updated_at=now,
            )
            self._orders[order.id] = order
            return self._copy(order)

    def get_by_id(self, id: str) -> Optional[Order]:
        with self._lock:
            order = self._orders.get(id)
            return self._copy(order) if order else None

    def find_by_user_id(
        self, user_id: str, status: Optional[OrderStatus] = None
    ) -> List[Order]:
        with self._lock:
            orders = [
                o
                for o in self._orders.values()
                if o.user_id == user_id and (status is None or o.status == status)
            ]
            return [self._copy(o) for o in self._most_recent_first(orders)]

    def find_by_user_id_paginated(
        self, user_id: str, pagination: PaginationParams
    ) -> PaginatedResult[Order]:
        with self._lock:
            orders = self._most_recent_first(
                o
                for o in self._orders.values()
                if o.user_id == user_id and o.status != OrderStatus.DRAFT
            )
            page = orders[pagination.offset : pagination.offset + pagination.limit]
            return create_paginated_result(
                [self._copy(o) for o in page], len(orders), pagination
            )

    def update_status(
        self,
        order_id: str,
        status: OrderStatus,
        expected_status: Optional[OrderStatus] = None,
    ) -> Order:
        with self._lock:
            order = self._get_or_raise(order_id)
            if expected_status is not None and order.status != expected_status:
                raise ConcurrentOrderModification(order_id, expected_status)
            order.status = OrderStatus(status)
            order.updated_at = self._now()
            return self._copy(order)

    def delete(self, id: str) -> bool:
        with self._lock:
            return self._orders.pop(id, None) is not None

    # ------------------------------------------------------------------
    # Draft order / cart operations
    # ------------------------------------------------------------------

    def find_draft_by_user_id(self, user_id: str) -> Optional[Order]:
        with self._lock:
            for order in self._orders.values():
                if order.user_id == user_id and order.status == OrderStatus.DRAFT:
                    return self._copy(order)
            return None

    def add_item(self, order_id: str, item: OrderItem) -> Order:
        with self._lock:
            order = self._get_draft_or_raise(order_id)
            existing = order.get_item(item.product_id)
            if existing:
                merged = existing.with_quantity(existing.quantity + item.quantity)
                order.items = [merged if i is existing else i for i in order.items]
            else:
                order.items = [*order.items, item]
            order.updated_at = self._now()
            return self._copy(order)

    def update_item_quantity(self, order_id: str, product_id: str, quantity: int) -> Order:
        with self._lock:
            order = self._get_draft_or_raise(order_id)
            existing = order.get_item(product_id)
            if existing is None:
                raise OrderItemNotFound(order_id, product_id)
            updated = existing.with_quantity(quantity)
            order.items = [updated if i is existing else i for i in order.items]
            order.updated_at = self._now()
            return self._copy(order)

    def remove_item(self, order_id: str, product_id: str) -> Order:
        with self._lock:
            order = self._get_draft_or_raise(order_id)
            remaining = [i for i in order.items if i.product_id != product_id]
            if len(remaining) != len(order.items):
                order.items = remaining
                order.updated_at = self._now()
            return self._copy(order)

    def clear_items(self, order_id: str) -> Order:
        with self._lock:
            order = self._get_draft_or_raise(order_id)
            order.items = []
            order.updated_at = self._now()
            return self._copy(order)

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _get_or_raise(self, order_id: str) -> Order:
        order = self._orders.get(order_id)
        if order is None:
            raise OrderNotFound(order_id)
        return order

    def _get_draft_or_raise(self, order_id: str) -> Order:
        order = self._get_or_raise(order_id)
        if order.status != OrderStatus.DRAFT:
            raise OrderNotDraft(order_id, order.status)
        return order

    def _now(self) -> datetime:
        # Strictly increasing so "most recent first" is deterministic.
        now = datetime.now(timezone.utc)
        if self._last_timestamp is not None and now <= self._last_timestamp:
            now = self._last_timestamp + timedelta(microseconds=1)
        self._last_timestamp = now
        return now

    @staticmethod
    def _most_recent_first(orders) -> List[Order]:
        return sorted(orders, key=lambda o: o.created_at, reverse=True)

    @staticmethod
    def _copy(order: Order) -> Order:
        """Callers get a detached snapshot; mutating it never touches the store."""
        return replace(order, items=list(order.items))
