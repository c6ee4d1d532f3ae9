"""Django ORM implementation of the Order repository.

Satisfies ``IOrderRepository`` using Django's QuerySet API.
All write operations are wrapped in ``transaction.atomic()`` so the
Order aggregate (Order + OrderItems) is persisted atomically.  Item
writes lock the order row and refuse anything but a DRAFT.

Status writes use a conditional ``UPDATE ... WHERE status = expected``
instead of a version column: the row count tells whether another request
changed the order first.
"""

from __future__ import annotations

from typing import List, Optional

import structlog
from django.core.exceptions import ValidationError
from django.db import transaction
from django.db.models import F
from django.utils import timezone

from modules.core.pagination import (
    PaginatedResult,
    PaginationParams,
    create_paginated_result,
)
from modules.orders import domain
from modules.orders.constants import OrderStatus
from modules.orders.exceptions import (
    ConcurrentOrderModification,
    OrderItemNotFound,
    OrderNotDraft,
    OrderNotFound,
)
from modules.orders.models import Order, OrderItem
from modules.orders.repositories.interfaces import IOrderRepository

logger = structlog.get_logger(__name__)


class OrderDjangoRepository(IOrderRepository):
    """Concrete Order repository backed by Django ORM."""

    # ------------------------------------------------------------------
    # Create
    # ------------------------------------------------------------------

    @transaction.atomic
    def create_order(
        self, user_id: str, status: OrderStatus = OrderStatus.DRAFT
    ) -> domain.Order:
        order = Order.objects.create(user_id=user_id, status=status)
        logger.info("order.created", order_id=str(order.id), status=status)
        return self._load(order.id)

    # ------------------------------------------------------------------
    # Read
    # ------------------------------------------------------------------

    def get_by_id(self, id: str) -> Optional[domain.Order]:
        """Retrieve an order with prefetched items.

        Returns ``None`` for non-existent or invalid IDs.
        """
        try:
            order = Order.objects.prefetch_related("items").filter(id=id).first()
        except (ValueError, ValidationError):
            return None
        return order.to_entity() if order else None

    def find_by_user_id(
        self, user_id: str, status: Optional[OrderStatus] = None
    ) -> List[domain.Order]:
        queryset = Order.objects.prefetch_related("items").filter(user_id=user_id)
        if status is not None:
            queryset = queryset.filter(status=status)
        return [order.to_entity() for order in queryset.order_by("-created_at", "-id")]

    def find_by_user_id_paginated(
        self, user_id: str, pagination: PaginationParams
    ) -> PaginatedResult[domain.Order]:
        queryset = (
            Order.objects.prefetch_related("items")
            .filter(user_id=user_id)
            .exclude(status=OrderStatus.DRAFT)
            .order_by("-created_at", "-id")
        )
        total = queryset.count()
        page = queryset[pagination.offset : pagination.offset + pagination.limit]
        return create_paginated_result(
            [order.to_entity() for order in page], total, pagination
        )

    def find_draft_by_user_id(self, user_id: str) -> Optional[domain.Order]:
        order = (
            Order.objects.prefetch_related("items")
            .filter(user_id=user_id, status=OrderStatus.DRAFT)
            .order_by("created_at")
            .first()
        )
        return order.to_entity() if order else None

    # ------------------------------------------------------------------
    # Status
    # ------------------------------------------------------------------

    @transaction.atomic
    def update_status(
        self,
        order_id: str,
        status: OrderStatus,
        expected_status: Optional[OrderStatus] = None,
    ) -> domain.Order:
        queryset = self._orders(order_id)
        if expected_status is not None:
            queryset = queryset.filter(status=expected_status)

        updated = queryset.update(status=status, updated_at=timezone.now())
        if not updated:
            if not self._orders(order_id).exists():
                raise OrderNotFound(order_id)
            logger.warning(
                "order.status_write_conflict",
                order_id=str(order_id),
                expected_status=expected_status,
                new_status=status,
            )
            raise ConcurrentOrderModification(order_id, expected_status)

        logger.info("order.status_updated", order_id=str(order_id), new_status=status)
        return self._load(order_id)

    @transaction.atomic
    def delete(self, id: str) -> bool:
        deleted, _ = self._orders(id).delete()
        if deleted:
            logger.info("order.deleted", order_id=str(id))
        return bool(deleted)

    # ------------------------------------------------------------------
    # Items
    # ------------------------------------------------------------------

    @transaction.atomic
    def add_item(self, order_id: str, item: domain.OrderItem) -> domain.Order:
        order = self._lock(order_id)
        existing = OrderItem.objects.filter(order=order, product_id=item.product_id)
        if existing.exists():
            existing.update(
                quantity=F("quantity") + item.quantity, updated_at=timezone.now()
            )
        else:
            OrderItem.objects.create(
                order=order,
                product_id=item.product_id,
                product_name=item.product_name,
                unit_price=item.unit_price.amount,
                currency=item.unit_price.currency,
                quantity=item.quantity,
            )
        self._touch(order)
        return self._load(order_id)

    @transaction.atomic
    def update_item_quantity(
        self, order_id: str, product_id: str, quantity: int
    ) -> domain.Order:
        order = self._lock(order_id)
        updated = OrderItem.objects.filter(order=order, product_id=product_id).update(
            quantity=quantity, updated_at=timezone.now()
        )
        if not updated:
            raise OrderItemNotFound(order_id, product_id)
        self._touch(order)
        return self._load(order_id)

    @transaction.atomic
    def remove_item(self, order_id: str, product_id: str) -> domain.Order:
        order = self._lock(order_id)
        deleted, _ = OrderItem.objects.filter(order=order, product_id=product_id).delete()
        if deleted:
            self._touch(order)
        return self._load(order_id)

    @transaction.atomic
    def clear_items(self, order_id: str) -> domain.Order:
        order = self._lock(order_id)
        OrderItem.objects.filter(order=order).delete()
        self._touch(order)
        return self._load(order_id)

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    @staticmethod
    def _orders(order_id: str):
        try:
            return Order.objects.filter(id=order_id)
        except (ValueError, ValidationError):
            return Order.objects.none()

    def _lock(self, order_id: str) -> Order:
        """Row-level lock on a DRAFT order (``SELECT FOR UPDATE``).

        The status is read under the lock, so a checkout that committed
        first makes every later item write fail.
        """
        order = self._orders(order_id).select_for_update().first()
        if order is None:
            raise OrderNotFound(order_id)
        if order.status != OrderStatus.DRAFT:
            logger.warning(
                "order.item_write_rejected",
                order_id=str(order_id),
                current_status=order.status,
            )
            raise OrderNotDraft(str(order_id), order.status)
        return order

    @staticmethod
    def _touch(order: Order) -> None:
        order.save(update_fields=["updated_at"])

    def _load(self, order_id) -> domain.Order:
        order = self.get_by_id(str(order_id))
        if order is None:
            raise OrderNotFound(str(order_id))
        return order
