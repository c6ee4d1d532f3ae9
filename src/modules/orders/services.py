"""Order command service (Use Cases).

Every command follows the same steps:

1. Load the order.
2. Verify the requesting user owns it.
3. Validate the transition against the state machine.
4. Apply the command-specific rule (non-empty cart on confirm,
   compliance approval on ship).
5. Persist the new status, guarded by the status that was validated.
6. Log ``{action, order_id, user_id, previous_state, next_state}`` and
   publish a domain event.

A failure in steps 1-4 aborts before anything is written.  If another
request changed the status between steps 1 and 5 the guarded write
raises ``ConcurrentOrderModification`` and nothing is written either.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Optional

from modules.compliance.constants import ComplianceStatus
from modules.core.logging import log_with_correlation
from modules.orders.constants import OrderStatus
from modules.orders.events import (
    ItemSummary,
    OrderCancelled,
    OrderConfirmed,
    OrderDelivered,
    OrderPaid,
    OrderShipped,
    OrderStatusChanged,
)
from modules.orders.exceptions import (
    ComplianceNotApproved,
    DraftOrderAlreadyExists,
    EmptyCart,
    InvalidOrderStateTransition,
    OrderCannotBeCancelled,
    OrderNotFound,
    OrderTerminalState,
    UnauthorizedOrderAccess,
)
from modules.orders.state_machine import (
    can_cancel,
    get_allowed_transitions,
    is_terminal_status,
    validate_transition,
)

if TYPE_CHECKING:
    from typing import Type

    from modules.compliance.services import OrderComplianceService
    from modules.orders.domain import Order
    from modules.orders.repositories.interfaces import IOrderRepository
    from shared.domain.bus import IEventBus

CONTEXT = "OrderCommandService"


class OrderCommandService:
    """Application service for order lifecycle commands.

    Receives its collaborators via constructor injection.  ``event_bus``
    is optional; without one, no events are published.
    """

    def __init__(
        self,
        order_repository: IOrderRepository,
        compliance_service: OrderComplianceService,
        event_bus: Optional[IEventBus] = None,
    ) -> None:
        self._order_repo = order_repository
        self._compliance = compliance_service
        self._event_bus = event_bus

    # ------------------------------------------------------------------
    # Commands
    # ------------------------------------------------------------------

    def create_order(self, user_id: str, correlation_id: Optional[str] = None) -> Order:
        """Open a new DRAFT order for *user_id*.

        Raises:
            DraftOrderAlreadyExists: the user already has a draft (cart).
        """
        existing = self._order_repo.find_draft_by_user_id(user_id)
        if existing is not None:
            log_with_correlation(
                "WARN",
                correlation_id,
                "order.create_rejected",
                CONTEXT,
                action="create",
                user_id=user_id,
                existing_order_id=existing.id,
            )
            raise DraftOrderAlreadyExists(existing.id)

        order = self._order_repo.create_order(user_id, OrderStatus.DRAFT)
        log_with_correlation(
            "INFO",
            correlation_id,
            "order.created",
            CONTEXT,
            action="create",
            order_id=order.id,
            user_id=user_id,
            previous_state=None,
            next_state=str(order.status),
        )
        return order

    def confirm_order(
        self, order_id: str, user_id: str, correlation_id: Optional[str] = None
    ) -> Order:
        """DRAFT -> CONFIRMED (checkout).

        Raises:
            OrderNotFound, UnauthorizedOrderAccess,
            InvalidOrderStateTransition: order is not a DRAFT.
            EmptyCart: the draft has no items.
        """
        order = self._load_owned_order(order_id, user_id, "confirm", correlation_id)
        self._ensure_transition(order, OrderStatus.CONFIRMED, "confirm", correlation_id)

        if not order.items:
            self._log_rejection(order, user_id, "confirm", correlation_id, reason="empty_cart")
            raise EmptyCart()

        updated = self._persist(order, user_id, OrderStatus.CONFIRMED, "confirm", correlation_id)
        self._publish(
            OrderConfirmed(
                aggregate_id=updated.id,
                correlation_id=correlation_id,
                user_id=user_id,
                old_status=str(order.status),
                new_status=str(updated.status),
                total=str(updated.total.amount),
                currency=updated.currency,
                item_count=updated.item_count,
                items=tuple(
                    ItemSummary(
                        product_id=item.product_id,
                        product_name=item.product_name,
                        quantity=item.quantity,
                        subtotal=str(item.subtotal.amount),
                    )
                    for item in updated.items
                ),
            )
        )
        return updated

    checkout = confirm_order

    def pay_order(
        self, order_id: str, user_id: str, correlation_id: Optional[str] = None
    ) -> Order:
        """CONFIRMED -> PAID.  Compliance is never consulted here."""
        order = self._load_owned_order(order_id, user_id, "pay", correlation_id)
        self._ensure_transition(order, OrderStatus.PAID, "pay", correlation_id)
        updated = self._persist(order, user_id, OrderStatus.PAID, "pay", correlation_id)
        self._publish_status_change(OrderPaid, order, updated, correlation_id)
        return updated

    def ship_order(
        self, order_id: str, user_id: str, correlation_id: Optional[str] = None
    ) -> Order:
        """PAID -> SHIPPED, only once the compliance gate approves.

        Raises:
            ComplianceNotApproved: the order holds a prescription-only item
                and no linked prescription or consultation is approved.
        """
        order = self._load_owned_order(order_id, user_id, "ship", correlation_id)
        self._ensure_transition(order, OrderStatus.SHIPPED, "ship", correlation_id)

        compliance_status = self._compliance.get_compliance_status(order.id)
        if compliance_status != ComplianceStatus.APPROVED:
            self._log_rejection(
                order,
                user_id,
                "ship",
                correlation_id,
                reason="compliance_not_approved",
                compliance_status=str(compliance_status),
            )
            raise ComplianceNotApproved(order.id, compliance_status)

        updated = self._persist(order, user_id, OrderStatus.SHIPPED, "ship", correlation_id)
        self._publish_status_change(OrderShipped, order, updated, correlation_id)
        return updated

    def deliver_order(
        self, order_id: str, user_id: str, correlation_id: Optional[str] = None
    ) -> Order:
        """SHIPPED -> DELIVERED."""
        order = self._load_owned_order(order_id, user_id, "deliver", correlation_id)
        self._ensure_transition(order, OrderStatus.DELIVERED, "deliver", correlation_id)
        updated = self._persist(order, user_id, OrderStatus.DELIVERED, "deliver", correlation_id)
        self._publish_status_change(OrderDelivered, order, updated, correlation_id)
        return updated

    def cancel_order(
        self, order_id: str, user_id: str, correlation_id: Optional[str] = None
    ) -> Order:
        """Any non-terminal status -> CANCELLED.

        Raises:
            OrderTerminalState: the order is DELIVERED or CANCELLED.
            OrderCannotBeCancelled: cancellation is not allowed from the
                current status.
        """
        order = self._load_owned_order(order_id, user_id, "cancel", correlation_id)

        if is_terminal_status(order.status):
            self._log_rejection(order, user_id, "cancel", correlation_id, reason="terminal_state")
            raise OrderTerminalState(order.id, order.status, OrderStatus.CANCELLED)
        if not can_cancel(order.status):
            self._log_rejection(order, user_id, "cancel", correlation_id, reason="not_cancellable")
            raise OrderCannotBeCancelled(
                order.id, order.status, get_allowed_transitions(order.status)
            )

        updated = self._persist(order, user_id, OrderStatus.CANCELLED, "cancel", correlation_id)
        self._publish_status_change(OrderCancelled, order, updated, correlation_id)
        return updated

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _load_owned_order(
        self, order_id: str, user_id: str, action: str, correlation_id: Optional[str]
    ) -> Order:
        order = self._order_repo.get_by_id(order_id)
        if order is None:
            log_with_correlation(
                "WARN",
                correlation_id,
                "order.not_found",
                CONTEXT,
                action=action,
                order_id=order_id,
                user_id=user_id,
            )
            raise OrderNotFound(order_id)
        if not order.is_owned_by(user_id):
            log_with_correlation(
                "WARN",
                correlation_id,
                "order.access_denied",
                CONTEXT,
                action=action,
                order_id=order_id,
                user_id=user_id,
            )
            raise UnauthorizedOrderAccess()
        return order

    def _ensure_transition(
        self, order: Order, target: OrderStatus, action: str, correlation_id: Optional[str]
    ) -> None:
        validation = validate_transition(order.status, target)
        if validation.valid:
            return
        self._log_rejection(
            order,
            order.user_id,
            action,
            correlation_id,
            reason="invalid_transition",
            target_state=str(target),
        )
        raise InvalidOrderStateTransition(
            order.status,
            target,
            validation.allowed_transitions,
            message=validation.reason,
        )

    def _persist(
        self,
        order: Order,
        user_id: str,
        target: OrderStatus,
        action: str,
        correlation_id: Optional[str],
    ) -> Order:
        updated = self._order_repo.update_status(order.id, target, expected_status=order.status)
        log_with_correlation(
            "INFO",
            correlation_id,
            f"order.{action}",
            CONTEXT,
            action=action,
            order_id=order.id,
            user_id=user_id,
            previous_state=str(order.status),
            next_state=str(updated.status),
        )
        return updated

    def _log_rejection(
        self,
        order: Order,
        user_id: str,
        action: str,
        correlation_id: Optional[str],
        **fields,
    ) -> None:
        log_with_correlation(
            "WARN",
            correlation_id,
            f"order.{action}_rejected",
            CONTEXT,
            action=action,
            order_id=order.id,
            user_id=user_id,
            current_state=str(order.status),
            **fields,
        )

    def _publish_status_change(
        self,
        event_class: Type[OrderStatusChanged],
        previous: Order,
        updated: Order,
        correlation_id: Optional[str],
    ) -> None:
        self._publish(
            event_class(
                aggregate_id=updated.id,
                correlation_id=correlation_id,
                user_id=updated.user_id,
                old_status=str(previous.status),
                new_status=str(updated.status),
            )
        )

    def _publish(self, event: OrderStatusChanged) -> None:
        if self._event_bus is not None:
            self._event_bus.publish(event)
