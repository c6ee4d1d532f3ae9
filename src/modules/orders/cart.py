"""Cart service (draft order management).

A user has at most one DRAFT order, the cart.  Items can only change
while the order is a draft; checkout hands the draft to the command
service, which performs the irreversible DRAFT -> CONFIRMED transition.

Business rules enforced:
- Products must exist and be active when added; name and price are
  snapshotted at add-time.
- Adding a product already in the cart increments its quantity.
- Quantities are positive integers.
- Removing a product that is not in the cart is a no-op.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Optional

from modules.core.logging import log_with_correlation
from modules.orders.constants import OrderStatus
from modules.orders.domain import create_order_item
from modules.orders.dtos import AddItemToCartDTO, UpdateCartItemDTO
from modules.orders.exceptions import (
    NoDraftOrder,
    OrderItemNotFound,
    OrderNotDraft,
    UnauthorizedOrderAccess,
)

if TYPE_CHECKING:
    from modules.orders.domain import Order
    from modules.orders.repositories.interfaces import IOrderRepository
    from modules.orders.services import OrderCommandService
    from modules.products.services import ProductQueryService

CONTEXT = "CartService"


class CartService:
    def __init__(
        self,
        order_repository: IOrderRepository,
        product_service: ProductQueryService,
        command_service: OrderCommandService,
    ) -> None:
        self._order_repo = order_repository
        self._products = product_service
        self._commands = command_service

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def get_cart(self, user_id: str, correlation_id: Optional[str] = None) -> Optional[Order]:
        """The user's DRAFT order, or ``None``.  No side effects."""
        draft = self._order_repo.find_draft_by_user_id(user_id)
        if draft is None:
            log_with_correlation(
                "DEBUG", correlation_id, "cart.not_found", CONTEXT, user_id=user_id
            )
        return draft

    def get_cart_or_fail(self, user_id: str, correlation_id: Optional[str] = None) -> Order:
        draft = self.get_cart(user_id, correlation_id)
        if draft is None:
            raise NoDraftOrder()
        return draft

    # ------------------------------------------------------------------
    # Commands
    # ------------------------------------------------------------------

    def create_or_get_cart(self, user_id: str, correlation_id: Optional[str] = None) -> Order:
        """Idempotent: return the existing draft or open a new one."""
        draft = self._order_repo.find_draft_by_user_id(user_id)
        if draft is not None:
            log_with_correlation(
                "DEBUG",
                correlation_id,
                "cart.reused",
                CONTEXT,
                order_id=draft.id,
                user_id=user_id,
            )
            return draft

        draft = self._order_repo.create_order(user_id, OrderStatus.DRAFT)
        log_with_correlation(
            "INFO", correlation_id, "cart.created", CONTEXT, order_id=draft.id, user_id=user_id
        )
        return draft

    def add_item_to_cart(
        self,
        user_id: str,
        product_id: str,
        quantity: int,
        correlation_id: Optional[str] = None,
    ) -> Order:
        """Add *quantity* of *product_id*, creating the cart if needed.

        Raises:
            InvalidQuantity: quantity is not a positive integer.
            ProductNotFound / InactiveProduct: the product cannot be sold.
        """
        dto = AddItemToCartDTO(product_id=product_id, quantity=quantity)
        product = self._products.get_available_product(dto.product_id)
        draft = self.create_or_get_cart(user_id, correlation_id)

        item = create_order_item(
            product_id=product.id,
            product_name=product.name,
            unit_price=product.price,
            quantity=dto.quantity,
        )
        cart = self._order_repo.add_item(draft.id, item)
        log_with_correlation(
            "INFO",
            correlation_id,
            "cart.item_added",
            CONTEXT,
            order_id=draft.id,
            user_id=user_id,
            product_id=product.id,
            product_name=product.name,
            quantity=dto.quantity,
            unit_price=str(product.price.amount),
        )
        return cart

    def update_cart_item(
        self,
        user_id: str,
        product_id: str,
        quantity: int,
        correlation_id: Optional[str] = None,
    ) -> Order:
        """Set the quantity of an existing line.

        Raises:
            InvalidQuantity: quantity is not a positive integer; use
                ``remove_cart_item`` to drop a line.
            NoDraftOrder: the user has no cart.
            OrderItemNotFound: the product is not in the cart.
        """
        dto = UpdateCartItemDTO(quantity=quantity)
        draft = self._get_modifiable_draft(user_id, correlation_id)

        item = draft.get_item(product_id)
        if item is None:
            raise OrderItemNotFound(draft.id, product_id)

        cart = self._order_repo.update_item_quantity(draft.id, product_id, dto.quantity)
        log_with_correlation(
            "INFO",
            correlation_id,
            "cart.item_updated",
            CONTEXT,
            order_id=draft.id,
            user_id=user_id,
            product_id=product_id,
            previous_quantity=item.quantity,
            new_quantity=dto.quantity,
        )
        return cart

    def remove_cart_item(
        self, user_id: str, product_id: str, correlation_id: Optional[str] = None
    ) -> Order:
        draft = self._get_modifiable_draft(user_id, correlation_id)
        if draft.get_item(product_id) is None:
            log_with_correlation(
                "DEBUG",
                correlation_id,
                "cart.item_absent",
                CONTEXT,
                order_id=draft.id,
                user_id=user_id,
                product_id=product_id,
            )
            return draft

        cart = self._order_repo.remove_item(draft.id, product_id)
        log_with_correlation(
            "INFO",
            correlation_id,
            "cart.item_removed",
            CONTEXT,
            order_id=draft.id,
            user_id=user_id,
            product_id=product_id,
        )
        return cart

    def clear_cart(self, user_id: str, correlation_id: Optional[str] = None) -> Order:
        draft = self._get_modifiable_draft(user_id, correlation_id)
        cart = self._order_repo.clear_items(draft.id)
        log_with_correlation(
            "INFO",
            correlation_id,
            "cart.cleared",
            CONTEXT,
            order_id=draft.id,
            user_id=user_id,
            removed_item_count=draft.item_count,
        )
        return cart

    def abandon_cart(self, user_id: str, correlation_id: Optional[str] = None) -> Order:
        """Cancel the draft through the regular cancel command."""
        draft = self._get_modifiable_draft(user_id, correlation_id)
        return self._commands.cancel_order(draft.id, user_id, correlation_id)

    def confirm_draft_order(self, user_id: str, correlation_id: Optional[str] = None) -> Order:
        """Checkout.

        Raises:
            NoDraftOrder: the user has no cart.
            EmptyCart: the cart has no items.
        """
        draft = self.get_cart_or_fail(user_id, correlation_id)
        return self._commands.confirm_order(draft.id, user_id, correlation_id)

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _get_modifiable_draft(self, user_id: str, correlation_id: Optional[str]) -> Order:
        draft = self.get_cart_or_fail(user_id, correlation_id)
        if not draft.is_owned_by(user_id):
            log_with_correlation(
                "WARN",
                correlation_id,
                "cart.access_denied",
                CONTEXT,
                order_id=draft.id,
                user_id=user_id,
            )
            raise UnauthorizedOrderAccess()
        if not draft.is_draft:
            raise OrderNotDraft(draft.id, draft.status)
        return draft
