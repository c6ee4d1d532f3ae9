"""Event handlers for Orders domain events."""

from __future__ import annotations

import structlog

from modules.orders.events import (
    OrderCancelled,
    OrderConfirmed,
    OrderStatusChanged,
)
from shared.domain.bus import IEventBus, IEventHandler

logger = structlog.get_logger(__name__)


class OrderConfirmedHandler(IEventHandler[OrderConfirmed]):
    def handle(self, event: OrderConfirmed) -> None:
        logger.info(
            "order.event.confirmed",
            order_id=event.aggregate_id,
            user_id=event.user_id,
            total=event.total,
            currency=event.currency,
            item_count=event.item_count,
            correlation_id=event.correlation_id,
        )


class OrderCancelledHandler(IEventHandler[OrderCancelled]):
    def handle(self, event: OrderCancelled) -> None:
        logger.info(
            "order.event.cancelled",
            order_id=event.aggregate_id,
            user_id=event.user_id,
            previous_status=event.old_status,
            correlation_id=event.correlation_id,
        )


class OrderStatusChangedHandler(IEventHandler[OrderStatusChanged]):
    def handle(self, event: OrderStatusChanged) -> None:
        logger.info(
            "order.event.status_changed",
            event_name=event.event_name,
            order_id=event.aggregate_id,
            old_status=event.old_status,
            new_status=event.new_status,
            correlation_id=event.correlation_id,
        )


def register_order_handlers(bus: IEventBus) -> IEventBus:
    """Subscribe the logging handlers of this module to *bus*."""
    bus.subscribe(OrderConfirmed, OrderConfirmedHandler())
    bus.subscribe(OrderCancelled, OrderCancelledHandler())
    bus.subscribe(OrderStatusChanged, OrderStatusChangedHandler())
    return bus
