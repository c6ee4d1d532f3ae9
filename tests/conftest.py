from decimal import Decimal

import pytest

from config.container import build_in_memory_container
from modules.products.domain import CatalogProduct
from shared.domain.money import Money
from shared.infrastructure.bus import RecordingEventBus

USER_ID = "user-1"
OTHER_USER_ID = "user-2"

GENERAL_PRODUCT = CatalogProduct(
    id="prod-001",
    name="Paracetamol 500mg",
    price=Money.of(Decimal("35.00"), "INR"),
)
SECOND_GENERAL_PRODUCT = CatalogProduct(
    id="prod-002",
    name="Vitamin C 1000mg",
    price=Money.of(Decimal("120.00"), "INR"),
)
PRESCRIPTION_PRODUCT = CatalogProduct(
    id="prod-003",
    name="Amoxicillin 500mg",
    price=Money.of(Decimal("95.50"), "INR"),
    requires_prescription=True,
)
INACTIVE_PRODUCT = CatalogProduct(
    id="prod-009",
    name="Discontinued Syrup",
    price=Money.of(Decimal("10.00"), "INR"),
    is_active=False,
)

CATALOG = (GENERAL_PRODUCT, SECOND_GENERAL_PRODUCT, PRESCRIPTION_PRODUCT, INACTIVE_PRODUCT)


@pytest.fixture(autouse=True)
def _use_db(db):
    """Automatically use the test database for all tests."""


@pytest.fixture()
def event_bus():
    return RecordingEventBus()


@pytest.fixture()
def container(event_bus):
    """Fully wired services over fresh in-memory repositories."""
    return build_in_memory_container(CATALOG, event_bus=event_bus)


@pytest.fixture()
def confirmed_general_order(container):
    container.cart.add_item_to_cart(USER_ID, GENERAL_PRODUCT.id, 2)
    return container.cart.confirm_draft_order(USER_ID)


@pytest.fixture()
def paid_prescription_order(container):
    container.cart.add_item_to_cart(USER_ID, PRESCRIPTION_PRODUCT.id, 1)
    order = container.cart.confirm_draft_order(USER_ID)
    return container.orders.pay_order(order.id, USER_ID)
