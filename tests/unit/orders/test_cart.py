"""Unit tests for CartService (draft order management).

Covers:
- One draft per user; create_or_get_cart is idempotent.
- Adding items: product must exist and be active, quantities merge,
  price snapshot taken at add-time.
- Updating, removing and clearing lines.
- Items can no longer change once the draft is confirmed.
- Abandon and checkout go through the order command service.
"""

from __future__ import annotations

from decimal import Decimal

import pytest
from pydantic import ValidationError
from structlog.testing import capture_logs

from modules.orders.constants import OrderStatus
from modules.orders.events import OrderCancelled, OrderConfirmed
from modules.orders.exceptions import (
    EmptyCart,
    InvalidQuantity,
    NoDraftOrder,
    OrderItemNotFound,
    OrderNotDraft,
)
from modules.products.exceptions import InactiveProduct, ProductNotFound
from shared.domain.money import Money

pytestmark = pytest.mark.unit


@pytest.fixture()
def cart(container):
    return container.cart


# ---------------------------------------------------------------------------
# Cart lookup / creation
# ---------------------------------------------------------------------------


class TestGetCart:
    def test_no_cart_returns_none(self, cart):
        assert cart.get_cart("user-1") is None

    def test_get_cart_or_fail_without_cart(self, cart):
        with pytest.raises(NoDraftOrder):
            cart.get_cart_or_fail("user-1")

    def test_get_cart_has_no_side_effects(self, cart, container):
        cart.get_cart("user-1")

        assert container.order_repository.find_draft_by_user_id("user-1") is None

    def test_create_or_get_cart_is_idempotent(self, cart):
        first = cart.create_or_get_cart("user-1")
        second = cart.create_or_get_cart("user-1")

        assert first.id == second.id
        assert first.status == OrderStatus.DRAFT

    def test_carts_are_per_user(self, cart):
        mine = cart.create_or_get_cart("user-1")
        theirs = cart.create_or_get_cart("user-2")

        assert mine.id != theirs.id
        assert cart.get_cart("user-2").id == theirs.id


# ---------------------------------------------------------------------------
# Add item
# ---------------------------------------------------------------------------


class TestAddItem:
    def test_add_creates_cart_and_snapshots_product(self, cart):
        order = cart.add_item_to_cart("user-1", "prod-001", 2)

        assert order.status == OrderStatus.DRAFT
        assert order.user_id == "user-1"
        item = order.get_item("prod-001")
        assert item.product_name == "Paracetamol 500mg"
        assert item.unit_price == Money.of(Decimal("35.00"), "INR")
        assert item.quantity == 2
        assert order.total == Money.of(Decimal("70.00"), "INR")

    def test_adding_same_product_increments_quantity(self, cart):
        cart.add_item_to_cart("user-1", "prod-001", 2)
        order = cart.add_item_to_cart("user-1", "prod-001", 3)

        assert len(order.items) == 1
        assert order.get_item("prod-001").quantity == 5

    def test_different_products_are_separate_lines(self, cart):
        cart.add_item_to_cart("user-1", "prod-001", 1)
        order = cart.add_item_to_cart("user-1", "prod-002", 1)

        assert order.product_ids == ["prod-001", "prod-002"]
        assert order.total == Money.of(Decimal("155.00"), "INR")

    def test_prescription_product_can_be_added(self, cart):
        order = cart.add_item_to_cart("user-1", "prod-003", 1)

        assert order.get_item("prod-003") is not None

    def test_unknown_product(self, cart):
        with pytest.raises(ProductNotFound):
            cart.add_item_to_cart("user-1", "prod-404", 1)

        assert cart.get_cart("user-1") is None

    def test_inactive_product(self, cart):
        with pytest.raises(InactiveProduct):
            cart.add_item_to_cart("user-1", "prod-009", 1)

    @pytest.mark.parametrize("quantity", [0, -1, 1.5, "2", True])
    def test_invalid_quantity(self, cart, quantity):
        with pytest.raises(InvalidQuantity):
            cart.add_item_to_cart("user-1", "prod-001", quantity)

        assert cart.get_cart("user-1") is None

    def test_blank_product_id(self, cart):
        with pytest.raises(ValidationError):
            cart.add_item_to_cart("user-1", "   ", 1)

        assert cart.get_cart("user-1") is None

    def test_add_logs_item_added(self, cart):
        with capture_logs() as logs:
            order = cart.add_item_to_cart("user-1", "prod-001", 2, correlation_id="cid-1")

        added = [entry for entry in logs if entry["event"] == "cart.item_added"]
        assert len(added) == 1
        assert added[0]["order_id"] == order.id
        assert added[0]["quantity"] == 2
        assert added[0]["unit_price"] == "35.00"
        assert added[0]["correlation_id"] == "cid-1"


# ---------------------------------------------------------------------------
# Update / remove / clear
# ---------------------------------------------------------------------------


class TestModifyItems:
    def test_update_sets_quantity(self, cart):
        cart.add_item_to_cart("user-1", "prod-001", 2)

        order = cart.update_cart_item("user-1", "prod-001", 7)

        assert order.get_item("prod-001").quantity == 7

    def test_update_absent_line(self, cart):
        cart.add_item_to_cart("user-1", "prod-001", 2)

        with pytest.raises(OrderItemNotFound):
            cart.update_cart_item("user-1", "prod-002", 1)

    def test_update_without_cart(self, cart):
        with pytest.raises(NoDraftOrder):
            cart.update_cart_item("user-1", "prod-001", 1)

    def test_update_to_zero_is_rejected(self, cart):
        cart.add_item_to_cart("user-1", "prod-001", 2)

        with pytest.raises(InvalidQuantity):
            cart.update_cart_item("user-1", "prod-001", 0)

    def test_remove_line(self, cart):
        cart.add_item_to_cart("user-1", "prod-001", 1)
        cart.add_item_to_cart("user-1", "prod-002", 1)

        order = cart.remove_cart_item("user-1", "prod-001")

        assert order.product_ids == ["prod-002"]

    def test_remove_absent_line_is_noop(self, cart):
        before = cart.add_item_to_cart("user-1", "prod-001", 1)

        after = cart.remove_cart_item("user-1", "prod-002")

        assert after.items == before.items

    def test_remove_without_cart(self, cart):
        with pytest.raises(NoDraftOrder):
            cart.remove_cart_item("user-1", "prod-001")

    def test_clear_cart_keeps_the_draft(self, cart):
        draft = cart.add_item_to_cart("user-1", "prod-001", 1)

        order = cart.clear_cart("user-1")

        assert order.id == draft.id
        assert order.items == []
        assert order.status == OrderStatus.DRAFT


# ---------------------------------------------------------------------------
# Checkout / abandon
# ---------------------------------------------------------------------------


class TestCheckout:
    def test_confirm_draft_order(self, cart, event_bus):
        cart.add_item_to_cart("user-1", "prod-001", 2)

        order = cart.confirm_draft_order("user-1")

        assert order.status == OrderStatus.CONFIRMED
        assert cart.get_cart("user-1") is None
        assert isinstance(event_bus.published[-1], OrderConfirmed)

    def test_confirm_without_cart(self, cart):
        with pytest.raises(NoDraftOrder):
            cart.confirm_draft_order("user-1")

    def test_confirm_empty_cart(self, cart):
        cart.create_or_get_cart("user-1")

        with pytest.raises(EmptyCart):
            cart.confirm_draft_order("user-1")

        assert cart.get_cart("user-1").status == OrderStatus.DRAFT

    def test_confirmed_order_is_no_longer_modifiable(self, cart, container):
        cart.add_item_to_cart("user-1", "prod-001", 2)
        confirmed = cart.confirm_draft_order("user-1")

        # A new add opens a fresh cart instead of touching the confirmed order.
        new_cart = cart.add_item_to_cart("user-1", "prod-002", 1)

        assert new_cart.id != confirmed.id
        stored = container.order_repository.get_by_id(confirmed.id)
        assert stored.product_ids == ["prod-001"]
        assert stored.get_item("prod-001").quantity == 2

    def test_add_after_concurrent_checkout_is_refused(self, cart, container, monkeypatch):
        draft = cart.add_item_to_cart("user-1", "prod-001", 1)
        repo = container.order_repository
        stale_draft = repo.find_draft_by_user_id("user-1")
        cart.confirm_draft_order("user-1")
        # The add request read the cart before checkout committed.
        monkeypatch.setattr(repo, "find_draft_by_user_id", lambda user_id: stale_draft)

        with pytest.raises(OrderNotDraft):
            cart.add_item_to_cart("user-1", "prod-003", 5)

        stored = repo.get_by_id(draft.id)
        assert stored.status == OrderStatus.CONFIRMED
        assert stored.product_ids == ["prod-001"]

    def test_abandon_cart_cancels_the_draft(self, cart, event_bus):
        draft = cart.add_item_to_cart("user-1", "prod-001", 1)

        order = cart.abandon_cart("user-1")

        assert order.id == draft.id
        assert order.status == OrderStatus.CANCELLED
        assert cart.get_cart("user-1") is None
        assert isinstance(event_bus.published[-1], OrderCancelled)

    def test_abandon_without_cart(self, cart):
        with pytest.raises(NoDraftOrder):
            cart.abandon_cart("user-1")
