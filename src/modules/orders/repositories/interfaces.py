"""Order repository interface.

Extends ``IRepository[Order]`` with the methods required by the Order
aggregate: draft (cart) look-up, item mutations, guarded status writes
and paginated history.

The repository does NOT enforce business rules: state transitions and
invariants are validated in the service layer.  The rules it guarantees
are the ones a stale read cannot: the optimistic-concurrency guard of
``update_status`` and the DRAFT check of the item writes, which raise
``OrderNotDraft`` once the order left DRAFT.
"""

from __future__ import annotations

from abc import abstractmethod
from typing import TYPE_CHECKING, List, Optional

from modules.core.repositories.interfaces import IRepository
from modules.orders.constants import OrderStatus

if TYPE_CHECKING:
    from modules.core.pagination import PaginatedResult, PaginationParams
    from modules.orders.domain import Order, OrderItem


class IOrderRepository(IRepository["Order"]):
    """Repository contract for the Order aggregate root."""

    # ------------------------------------------------------------------
    # Standard order operations
    # ------------------------------------------------------------------

    @abstractmethod
    def create_order(self, user_id: str, status: OrderStatus = OrderStatus.DRAFT) -> Order:
        """Create an empty order with a generated identity."""

    @abstractmethod
    def get_by_id(self, id: str) -> Optional[Order]:
        """Retrieve an order with its items; ``None`` for unknown ids."""

    @abstractmethod
    def find_by_user_id(
        self, user_id: str, status: Optional[OrderStatus] = None
    ) -> List[Order]:
        """All orders of a user, most recent first, optionally by status."""

    @abstractmethod
    def find_by_user_id_paginated(
        self, user_id: str, pagination: PaginationParams
    ) -> PaginatedResult[Order]:
        """One page of a user's order history.

        Sorted by ``created_at`` descending; DRAFT orders (carts) excluded.
        """

    @abstractmethod
    def update_status(
        self,
        order_id: str,
        status: OrderStatus,
        expected_status: Optional[OrderStatus] = None,
    ) -> Order:
        """Persist a new status.

        When ``expected_status`` is given the write only happens if the
        stored status still equals it; otherwise
        ``ConcurrentOrderModification`` is raised and nothing changes.

        Raises:
            OrderNotFound: unknown order.
            ConcurrentOrderModification: expected status no longer holds.
        """

    @abstractmethod
    def delete(self, id: str) -> bool:
        """Delete an order together with its items."""

    # ------------------------------------------------------------------
    # Draft order / cart operations
    # ------------------------------------------------------------------

    @abstractmethod
    def find_draft_by_user_id(self, user_id: str) -> Optional[Order]:
        """The user's active DRAFT order, ``None`` if there is none."""

    @abstractmethod
    def add_item(self, order_id: str, item: OrderItem) -> Order:
        """Append *item*; if the product already has a line, add to its quantity."""

    @abstractmethod
    def update_item_quantity(self, order_id: str, product_id: str, quantity: int) -> Order:
        """Set the quantity of an existing line."""

    @abstractmethod
    def remove_item(self, order_id: str, product_id: str) -> Order:
        """Remove a line; removing an absent line leaves the order unchanged."""

    @abstractmethod
    def clear_items(self, order_id: str) -> Order:
        """Remove every line of the order."""

    def get_item(self, order_id: str, product_id: str) -> Optional[OrderItem]:
        order = self.get_by_id(order_id)
        return order.get_item(product_id) if order else None
