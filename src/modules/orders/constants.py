"""Order domain constants.

Defines status choices, per-status metadata and valid status transitions
for the order state machine.  Every predicate in ``state_machine`` is
derived from these tables.
"""

from __future__ import annotations

from typing import NamedTuple

from django.db import models


class OrderStatus(models.TextChoices):
    DRAFT = "DRAFT", "Draft"
    CONFIRMED = "CONFIRMED", "Confirmed"
    PAID = "PAID", "Paid"
    SHIPPED = "SHIPPED", "Shipped"
    DELIVERED = "DELIVERED", "Delivered"
    CANCELLED = "CANCELLED", "Cancelled"


class StatusMetadata(NamedTuple):
    label: str
    description: str
    terminal: bool
    mutable: bool


ORDER_STATUS_METADATA: dict[str, StatusMetadata] = {
    OrderStatus.DRAFT: StatusMetadata(
        "Draft", "Cart/draft order, can be modified", terminal=False, mutable=True
    ),
    OrderStatus.CONFIRMED: StatusMetadata(
        "Confirmed", "Order confirmed, awaiting payment", terminal=False, mutable=False
    ),
    OrderStatus.PAID: StatusMetadata(
        "Paid", "Payment received, awaiting fulfilment", terminal=False, mutable=False
    ),
    OrderStatus.SHIPPED: StatusMetadata(
        "Shipped", "Order shipped, in transit", terminal=False, mutable=False
    ),
    OrderStatus.DELIVERED: StatusMetadata(
        "Delivered", "Order delivered successfully", terminal=True, mutable=False
    ),
    OrderStatus.CANCELLED: StatusMetadata(
        "Cancelled", "Order has been cancelled", terminal=True, mutable=False
    ),
}

# Ordered tuples: error messages list allowed targets in a stable order.
VALID_TRANSITIONS: dict[str, tuple[OrderStatus, ...]] = {
    OrderStatus.DRAFT: (OrderStatus.CONFIRMED, OrderStatus.CANCELLED),
    OrderStatus.CONFIRMED: (OrderStatus.PAID, OrderStatus.CANCELLED),
    OrderStatus.PAID: (OrderStatus.SHIPPED, OrderStatus.CANCELLED),
    OrderStatus.SHIPPED: (OrderStatus.DELIVERED, OrderStatus.CANCELLED),
    OrderStatus.DELIVERED: (),
    OrderStatus.CANCELLED: (),
}

TERMINAL_STATES: frozenset[str] = frozenset(
    status for status, meta in ORDER_STATUS_METADATA.items() if meta.terminal
)

PAID_STATES: frozenset[str] = frozenset(
    {OrderStatus.PAID, OrderStatus.SHIPPED, OrderStatus.DELIVERED}
)

DEFAULT_CURRENCY = "INR"
