"""Order DTOs for the Service Layer.

Framework-agnostic data transfer objects using Pydantic v2.
These are the contracts between the (external) API layer and the
services.  DTOs are immutable (``frozen=True``).

- ``AddItemToCartDTO`` / ``UpdateCartItemDTO``: cart input.
- ``OrderHistoryQueryDTO``: raw paging input, normalised by the query service.
- ``OrderOutputDTO``: order with items and totals (cart and command responses).
- ``OrderSummaryDTO`` / ``OrderHistoryDTO``: paginated history.
- ``OrderDetailDTO``: order plus compliance info for prescription orders.
"""

from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from typing import TYPE_CHECKING, List, Optional

from pydantic import BaseModel, ConfigDict, field_validator

from modules.compliance.dtos import ComplianceInfoDTO
from modules.core.pagination import PaginationMeta, PaginationParams, normalize_pagination
from modules.orders.domain import validate_quantity

if TYPE_CHECKING:
    from modules.compliance.domain import ComplianceInfo
    from modules.orders.domain import Order, OrderItem
    from shared.domain.money import Money


# ---------------------------------------------------------------------------
# Input DTOs
# ---------------------------------------------------------------------------


class AddItemToCartDTO(BaseModel):
    """Immutable DTO for adding a product to the cart.

    ``unit_price`` is resolved by the Service Layer from the catalog.
    Quantities are checked before coercion, so ``"2"``, ``1.5`` and
    ``True`` raise ``InvalidQuantity`` instead of being converted.
    """

    model_config = ConfigDict(frozen=True, str_strip_whitespace=True)

    product_id: str
    quantity: int = 1

    @field_validator("product_id")
    @classmethod
    def product_id_must_not_be_blank(cls, v: str) -> str:
        if not v:
            raise ValueError("Product ID is required.")
        return v

    @field_validator("quantity", mode="before")
    @classmethod
    def quantity_must_be_positive(cls, v: object) -> int:
        return validate_quantity(v)


class UpdateCartItemDTO(BaseModel):
    """Quantity must stay positive; dropping a line is ``remove_cart_item``."""

    model_config = ConfigDict(frozen=True)

    quantity: int

    @field_validator("quantity", mode="before")
    @classmethod
    def quantity_must_be_positive(cls, v: object) -> int:
        return validate_quantity(v)


class OrderHistoryQueryDTO(BaseModel):
    """Paging input as received; out-of-range values are clamped, not rejected."""

    model_config = ConfigDict(frozen=True)

    page: Optional[int] = None
    limit: Optional[int] = None

    def to_params(self, default_limit: int, max_limit: int) -> PaginationParams:
        return normalize_pagination(
            self.page, self.limit, default_limit=default_limit, max_limit=max_limit
        )


# ---------------------------------------------------------------------------
# Output DTOs
# ---------------------------------------------------------------------------


class MoneyDTO(BaseModel):
    model_config = ConfigDict(frozen=True)

    amount: Decimal
    currency: str

    @classmethod
    def from_money(cls, money: Money) -> MoneyDTO:
        return cls(amount=money.amount, currency=money.currency)


class OrderItemOutputDTO(BaseModel):
    """Immutable DTO for order item responses."""

    model_config = ConfigDict(frozen=True)

    product_id: str
    product_name: str
    unit_price: MoneyDTO
    quantity: int
    subtotal: MoneyDTO
    added_at: datetime

    @classmethod
    def from_entity(cls, item: OrderItem) -> OrderItemOutputDTO:
        return cls(
            product_id=item.product_id,
            product_name=item.product_name,
            unit_price=MoneyDTO.from_money(item.unit_price),
            quantity=item.quantity,
            subtotal=MoneyDTO.from_money(item.subtotal),
            added_at=item.added_at,
        )


class OrderOutputDTO(BaseModel):
    """Immutable DTO for order responses."""

    model_config = ConfigDict(frozen=True)

    id: str
    user_id: str
    status: str
    items: List[OrderItemOutputDTO]
    item_count: int
    total: MoneyDTO
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_entity(cls, order: Order) -> OrderOutputDTO:
        return cls(**_order_fields(order))


class OrderSummaryDTO(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str
    status: str
    item_count: int
    total: MoneyDTO
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_entity(cls, order: Order) -> OrderSummaryDTO:
        return cls(
            id=order.id,
            status=str(order.status),
            item_count=order.item_count,
            total=MoneyDTO.from_money(order.total),
            created_at=order.created_at,
            updated_at=order.updated_at,
        )


class OrderHistoryDTO(BaseModel):
    model_config = ConfigDict(frozen=True)

    orders: List[OrderSummaryDTO]
    pagination: PaginationMeta


class OrderDetailDTO(OrderOutputDTO):
    """Order detail; ``compliance`` is only present for prescription orders."""

    compliance: Optional[ComplianceInfoDTO] = None

    @classmethod
    def from_entity(
        cls, order: Order, compliance: Optional[ComplianceInfo] = None
    ) -> OrderDetailDTO:
        return cls(
            **_order_fields(order),
            compliance=ComplianceInfoDTO.from_domain(compliance) if compliance else None,
        )


def _order_fields(order: Order) -> dict:
    return {
        "id": order.id,
        "user_id": order.user_id,
        "status": str(order.status),
        "items": [OrderItemOutputDTO.from_entity(item) for item in order.items],
        "item_count": order.item_count,
        "total": MoneyDTO.from_money(order.total),
        "created_at": order.created_at,
        "updated_at": order.updated_at,
    }
