"""Unit tests for the in-memory Order repository."""

from __future__ import annotations

import threading

import pytest

from modules.core.pagination import normalize_pagination
from modules.orders.constants import OrderStatus
from modules.orders.domain import create_order_item
from modules.orders.exceptions import (
    ConcurrentOrderModification,
    OrderItemNotFound,
    OrderNotDraft,
    OrderNotFound,
)
from modules.orders.repositories import InMemoryOrderRepository
from shared.domain.money import Money

pytestmark = pytest.mark.unit


@pytest.fixture()
def repo():
    return InMemoryOrderRepository()


def _item(product_id="prod-001", quantity=1, price="35.00"):
    return create_order_item(product_id, f"Product {product_id}", Money.of(price, "INR"), quantity)


# ---------------------------------------------------------------------------
# Create / read
# ---------------------------------------------------------------------------


class TestCreateAndRead:
    def test_create_order_defaults_to_draft(self, repo):
        order = repo.create_order("user-1")

        assert order.status == OrderStatus.DRAFT
        assert order.items == []
        assert repo.get_by_id(order.id) == order

    def test_get_unknown_returns_none(self, repo):
        assert repo.get_by_id("missing") is None
        assert not repo.exists("missing")

    def test_returned_orders_are_detached(self, repo):
        order = repo.create_order("user-1")
        order.items.append(_item())
        order.status = OrderStatus.PAID

        stored = repo.get_by_id(order.id)
        assert stored.items == []
        assert stored.status == OrderStatus.DRAFT

    def test_find_by_user_id_most_recent_first(self, repo):
        first = repo.create_order("user-1", OrderStatus.CONFIRMED)
        second = repo.create_order("user-1", OrderStatus.PAID)
        repo.create_order("user-2", OrderStatus.PAID)

        assert [o.id for o in repo.find_by_user_id("user-1")] == [second.id, first.id]
        assert [o.id for o in repo.find_by_user_id("user-1", OrderStatus.PAID)] == [second.id]

    def test_find_draft_by_user_id(self, repo):
        repo.create_order("user-1", OrderStatus.CONFIRMED)
        draft = repo.create_order("user-1")

        assert repo.find_draft_by_user_id("user-1").id == draft.id
        assert repo.find_draft_by_user_id("user-2") is None

    def test_delete(self, repo):
        order = repo.create_order("user-1")

        assert repo.delete(order.id) is True
        assert repo.delete(order.id) is False
        assert repo.get_by_id(order.id) is None


class TestPagination:
    def test_excludes_drafts_and_paginates(self, repo):
        repo.create_order("user-1")  # draft, never listed
        created = [repo.create_order("user-1", OrderStatus.CONFIRMED) for _ in range(5)]

        page = repo.find_by_user_id_paginated("user-1", normalize_pagination(2, 2))

        assert [o.id for o in page.items] == [created[2].id, created[1].id]
        assert page.pagination.total == 5
        assert page.pagination.total_pages == 3
        assert page.pagination.has_next
        assert page.pagination.has_previous

    def test_page_beyond_the_end_is_empty(self, repo):
        repo.create_order("user-1", OrderStatus.PAID)

        page = repo.find_by_user_id_paginated("user-1", normalize_pagination(5, 10))

        assert page.items == []
        assert page.pagination.total == 1
        assert not page.pagination.has_next


# ---------------------------------------------------------------------------
# Status
# ---------------------------------------------------------------------------


class TestUpdateStatus:
    def test_unconditional_update(self, repo):
        order = repo.create_order("user-1")

        updated = repo.update_status(order.id, OrderStatus.CONFIRMED)

        assert updated.status == OrderStatus.CONFIRMED
        assert updated.updated_at > order.updated_at

    def test_guarded_update_succeeds_when_status_matches(self, repo):
        order = repo.create_order("user-1")

        updated = repo.update_status(
            order.id, OrderStatus.CONFIRMED, expected_status=OrderStatus.DRAFT
        )

        assert updated.status == OrderStatus.CONFIRMED

    def test_guarded_update_fails_when_status_moved(self, repo):
        order = repo.create_order("user-1")
        repo.update_status(order.id, OrderStatus.CANCELLED)

        with pytest.raises(ConcurrentOrderModification):
            repo.update_status(order.id, OrderStatus.CONFIRMED, expected_status=OrderStatus.DRAFT)

        assert repo.get_by_id(order.id).status == OrderStatus.CANCELLED

    def test_update_unknown_order(self, repo):
        with pytest.raises(OrderNotFound):
            repo.update_status("missing", OrderStatus.PAID)

    def test_only_one_of_many_racing_writers_wins(self, repo):
        order = repo.create_order("user-1", OrderStatus.PAID)
        results = []
        barrier = threading.Barrier(8)

        def attempt(target):
            barrier.wait()
            try:
                repo.update_status(order.id, target, expected_status=OrderStatus.PAID)
                results.append("ok")
            except ConcurrentOrderModification:
                results.append("conflict")

        targets = [OrderStatus.SHIPPED, OrderStatus.CANCELLED] * 4
        threads = [threading.Thread(target=attempt, args=(t,)) for t in targets]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        assert results.count("ok") == 1
        assert results.count("conflict") == 7


# ---------------------------------------------------------------------------
# Items
# ---------------------------------------------------------------------------


class TestItems:
    def test_add_item_merges_quantities(self, repo):
        order = repo.create_order("user-1")
        repo.add_item(order.id, _item("prod-001", 2))

        updated = repo.add_item(order.id, _item("prod-001", 3))

        assert len(updated.items) == 1
        assert updated.items[0].quantity == 5

    def test_add_item_keeps_original_price_snapshot(self, repo):
        order = repo.create_order("user-1")
        repo.add_item(order.id, _item("prod-001", 1, price="35.00"))

        updated = repo.add_item(order.id, _item("prod-001", 1, price="40.00"))

        assert updated.items[0].unit_price == Money.of("35.00", "INR")

    def test_update_item_quantity(self, repo):
        order = repo.create_order("user-1")
        repo.add_item(order.id, _item("prod-001", 2))

        updated = repo.update_item_quantity(order.id, "prod-001", 7)

        assert updated.get_item("prod-001").quantity == 7

    def test_update_missing_item(self, repo):
        order = repo.create_order("user-1")

        with pytest.raises(OrderItemNotFound):
            repo.update_item_quantity(order.id, "prod-404", 1)

    def test_remove_item_and_missing_item_is_noop(self, repo):
        order = repo.create_order("user-1")
        repo.add_item(order.id, _item("prod-001"))
        repo.add_item(order.id, _item("prod-002"))

        after_remove = repo.remove_item(order.id, "prod-001")
        after_noop = repo.remove_item(order.id, "prod-404")

        assert [i.product_id for i in after_remove.items] == ["prod-002"]
        assert after_noop.items == after_remove.items

    def test_clear_items(self, repo):
        order = repo.create_order("user-1")
        repo.add_item(order.id, _item("prod-001"))

        assert repo.clear_items(order.id).items == []

    def test_get_item(self, repo):
        order = repo.create_order("user-1")
        repo.add_item(order.id, _item("prod-001", 2))

        assert repo.get_item(order.id, "prod-001").quantity == 2
        assert repo.get_item(order.id, "prod-404") is None

    def test_item_operations_on_unknown_order(self, repo):
        with pytest.raises(OrderNotFound):
            repo.add_item("missing", _item())

    @pytest.mark.parametrize(
        "write",
        [
            lambda repo, order_id: repo.add_item(order_id, _item("prod-003")),
            lambda repo, order_id: repo.update_item_quantity(order_id, "prod-001", 5),
            lambda repo, order_id: repo.remove_item(order_id, "prod-001"),
            lambda repo, order_id: repo.clear_items(order_id),
        ],
        ids=["add", "update", "remove", "clear"],
    )
    def test_item_writes_refused_after_checkout(self, repo, write):
        order = repo.create_order("user-1")
        repo.add_item(order.id, _item("prod-001", 2))
        repo.update_status(order.id, OrderStatus.CONFIRMED, expected_status=OrderStatus.DRAFT)

        with pytest.raises(OrderNotDraft) as exc_info:
            write(repo, order.id)

        assert exc_info.value.current_status == OrderStatus.CONFIRMED
        items = repo.get_by_id(order.id).items
        assert [(i.product_id, i.quantity) for i in items] == [("prod-001", 2)]
