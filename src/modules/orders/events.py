"""Domain events for the Orders bounded context.

Events are named in past tense and carry the data relevant at the time
they occurred.  They are published in-process after the status write
succeeded.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Tuple

from shared.domain.events import DomainEvent


@dataclass(frozen=True)
class ItemSummary:
    product_id: str
    product_name: str
    quantity: int
    subtotal: str


@dataclass(frozen=True, kw_only=True)
class OrderStatusChanged(DomainEvent):
    """Raised on every successful status transition."""

    user_id: str
    old_status: str
    new_status: str


@dataclass(frozen=True, kw_only=True)
class OrderConfirmed(OrderStatusChanged):
    """Checkout completed: an irreversible business commitment."""

    total: str
    currency: str
    item_count: int
    items: Tuple[ItemSummary, ...] = field(default_factory=tuple)


@dataclass(frozen=True, kw_only=True)
class OrderPaid(OrderStatusChanged):
    """Raised when payment was recorded for a confirmed order."""


@dataclass(frozen=True, kw_only=True)
class OrderShipped(OrderStatusChanged):
    """Raised when a paid, compliance-approved order left the pharmacy."""


@dataclass(frozen=True, kw_only=True)
class OrderDelivered(OrderStatusChanged):
    """Raised when delivery was confirmed."""


@dataclass(frozen=True, kw_only=True)
class OrderCancelled(OrderStatusChanged):
    """Raised when an order is cancelled."""
