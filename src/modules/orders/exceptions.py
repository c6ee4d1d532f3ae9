"""Order domain exceptions.

Raised by the Service Layer when business rules are violated.
The API layer maps each ``code`` / ``http_status`` into a response; the
classes carry the data needed for precise client messages.
"""

from __future__ import annotations

from typing import Iterable, Optional

from modules.core.exceptions import (
    ConflictError,
    ForbiddenError,
    InvalidInputError,
    NotFoundError,
)


class OrderNotFound(NotFoundError):
    """The requested order does not exist."""

    code = "ORDER_NOT_FOUND"

    def __init__(self, order_id: str) -> None:
        super().__init__(f"Order with id '{order_id}' not found.", order_id=order_id)
        self.order_id = order_id


class UnauthorizedOrderAccess(ForbiddenError):
    """The caller does not own the order.

    The message is deliberately generic: it never reveals the real owner.
    """

    code = "UNAUTHORIZED_ORDER_ACCESS"

    def __init__(self) -> None:
        super().__init__("You do not have permission to access this order.")


class InvalidOrderStateTransition(ConflictError):
    """A transition that violates the order lifecycle was attempted."""

    code = "INVALID_ORDER_STATE_TRANSITION"

    def __init__(
        self,
        current_status: str,
        target_status: str,
        allowed_transitions: Iterable[str] = (),
        message: Optional[str] = None,
    ) -> None:
        allowed = [str(s) for s in allowed_transitions]
        super().__init__(
            message
            or f"Cannot transition order from '{current_status}' to '{target_status}'.",
            current_status=str(current_status),
            target_status=str(target_status),
            allowed_transitions=allowed,
        )
        self.current_status = current_status
        self.target_status = target_status
        self.allowed_transitions = allowed


class OrderTerminalState(InvalidOrderStateTransition):
    """The order reached a final state (DELIVERED / CANCELLED)."""

    code = "ORDER_TERMINAL_STATE"

    def __init__(self, order_id: str, current_status: str, target_status: str) -> None:
        super().__init__(
            current_status,
            target_status,
            (),
            message=(
                f"Order '{order_id}' is in terminal state '{current_status}' "
                "and cannot be modified."
            ),
        )
        self.order_id = order_id


class OrderCannotBeCancelled(InvalidOrderStateTransition):
    """Cancellation is not possible from the current status."""

    code = "ORDER_CANNOT_BE_CANCELLED"

    def __init__(
        self, order_id: str, current_status: str, allowed_transitions: Iterable[str] = ()
    ) -> None:
        super().__init__(
            current_status,
            "CANCELLED",
            allowed_transitions,
            message=f"Order '{order_id}' cannot be cancelled from status '{current_status}'.",
        )
        self.order_id = order_id


class ComplianceNotApproved(ConflictError):
    """Shipping is blocked until a linked prescription or consultation is approved."""

    code = "COMPLIANCE_NOT_APPROVED"

    def __init__(self, order_id: str, compliance_status: str) -> None:
        super().__init__(
            f"Order '{order_id}' cannot be shipped: compliance status is "
            f"'{compliance_status}'. An approved prescription or consultation is required.",
            order_id=order_id,
            compliance_status=str(compliance_status),
        )
        self.order_id = order_id
        self.compliance_status = compliance_status


class ConcurrentOrderModification(ConflictError):
    """The order status changed between read and write; nothing was persisted."""

    code = "CONCURRENT_ORDER_MODIFICATION"

    def __init__(self, order_id: str, expected_status: str) -> None:
        super().__init__(
            f"Order '{order_id}' is no longer in status '{expected_status}'.",
            order_id=order_id,
            expected_status=str(expected_status),
        )
        self.order_id = order_id
        self.expected_status = expected_status


# ---------------------------------------------------------------------------
# Cart / draft order
# ---------------------------------------------------------------------------


class EmptyCart(ConflictError):
    """Checkout attempted with no items in the cart."""

    code = "EMPTY_CART"

    def __init__(self) -> None:
        super().__init__(
            "Cannot place order: cart is empty. Please add items before checkout."
        )


class NoDraftOrder(NotFoundError):
    code = "NO_DRAFT_ORDER"

    def __init__(self) -> None:
        super().__init__("No active cart found. Please add items to start a new cart.")


class DraftOrderAlreadyExists(ConflictError):
    """One active draft per user."""

    code = "DRAFT_ORDER_ALREADY_EXISTS"

    def __init__(self, existing_order_id: str) -> None:
        super().__init__(
            "You already have an active cart.", existing_order_id=existing_order_id
        )
        self.existing_order_id = existing_order_id


class OrderNotDraft(ConflictError):
    code = "ORDER_NOT_DRAFT"

    def __init__(self, order_id: str, current_status: str) -> None:
        super().__init__(
            f"Order '{order_id}' is not a draft (current status: '{current_status}'). "
            "Only draft orders can be modified.",
            order_id=order_id,
            current_status=str(current_status),
        )
        self.current_status = current_status


class OrderItemNotFound(NotFoundError):
    code = "ORDER_ITEM_NOT_FOUND"

    def __init__(self, order_id: str, product_id: str) -> None:
        super().__init__(
            f"Product '{product_id}' not found in order '{order_id}'.",
            order_id=order_id,
            product_id=product_id,
        )
        self.product_id = product_id


class InvalidQuantity(InvalidInputError):
    code = "INVALID_QUANTITY"

    def __init__(self, quantity: object) -> None:
        super().__init__(
            f"Quantity must be a positive integer. Received: {quantity}",
            quantity=quantity,
        )
        self.quantity = quantity
