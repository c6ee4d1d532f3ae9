"""Order aggregate (pure domain, no persistence).

Repositories load and return these dataclasses; services never touch
storage models directly.

- ``OrderItem`` snapshots product name and unit price at add-time; its
  subtotal is always derived, never stored as a source of truth.
- ``Order`` owns its items; they are persisted and deleted together.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from datetime import datetime, timezone
from typing import List, Optional

from modules.orders.constants import DEFAULT_CURRENCY, OrderStatus
from modules.orders.exceptions import InvalidQuantity
from modules.orders.state_machine import is_draft_order, is_terminal_status
from shared.domain.money import Money


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def validate_quantity(quantity: object) -> int:
    """Quantities are strictly positive integers (``bool`` is rejected)."""
    if isinstance(quantity, bool) or not isinstance(quantity, int) or quantity <= 0:
        raise InvalidQuantity(quantity)
    return quantity


@dataclass(frozen=True)
class OrderItem:
    product_id: str
    product_name: str
    unit_price: Money
    quantity: int
    added_at: datetime = field(default_factory=_utcnow)

    @property
    def subtotal(self) -> Money:
        return self.unit_price.multiply(self.quantity)

    def with_quantity(self, quantity: int) -> OrderItem:
        return replace(self, quantity=validate_quantity(quantity))


def create_order_item(
    product_id: str,
    product_name: str,
    unit_price: Money,
    quantity: int,
    now: Optional[datetime] = None,
) -> OrderItem:
    """Build an ``OrderItem`` after checking its invariants."""
    if not product_id or not product_id.strip():
        raise ValueError("Product ID cannot be empty.")
    if not product_name or not product_name.strip():
        raise ValueError("Product name cannot be empty.")
    return OrderItem(
        product_id=product_id,
        product_name=product_name.strip(),
        unit_price=unit_price,
        quantity=validate_quantity(quantity),
        added_at=now or _utcnow(),
    )


@dataclass
class Order:
    """Order aggregate root."""

    id: str
    user_id: str
    status: OrderStatus
    items: List[OrderItem] = field(default_factory=list)
    created_at: datetime = field(default_factory=_utcnow)
    updated_at: datetime = field(default_factory=_utcnow)

    @property
    def item_count(self) -> int:
        return sum(item.quantity for item in self.items)

    @property
    def currency(self) -> str:
        return self.items[0].unit_price.currency if self.items else DEFAULT_CURRENCY

    @property
    def total(self) -> Money:
        total = Money.zero(self.currency)
        for item in self.items:
            total = total.add(item.subtotal)
        return total

    @property
    def is_draft(self) -> bool:
        return is_draft_order(self.status)

    @property
    def is_terminal(self) -> bool:
        return is_terminal_status(self.status)

    @property
    def product_ids(self) -> List[str]:
        """Distinct product ids, in item order."""
        return list(dict.fromkeys(item.product_id for item in self.items))

    def get_item(self, product_id: str) -> Optional[OrderItem]:
        for item in self.items:
            if item.product_id == product_id:
                return item
        return None

    def is_owned_by(self, user_id: str) -> bool:
        return self.user_id == user_id
