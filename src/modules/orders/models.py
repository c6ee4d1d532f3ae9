"""Order and OrderItem models (relational storage of the Order aggregate).

Business rules implemented:
- Status is always one of ``OrderStatus`` (transitions validated at service layer).
- One line per product per order (quantities are merged, never duplicated).
- OrderItem snapshots product name and price at add-time (``unit_price``).
- OrderItem subtotal is derived (``quantity * unit_price``), never stored.
- Items are deleted together with their order (CASCADE).
"""

from __future__ import annotations

from django.core.exceptions import ValidationError
from django.core.validators import MinValueValidator
from django.db import models

from modules.core.models import BaseModel
from modules.orders import domain
from modules.orders.constants import DEFAULT_CURRENCY, OrderStatus
from shared.domain.money import Money


class Order(BaseModel):
    """Order aggregate root.

    ``user_id`` is an opaque reference to the identity provider; there is
    no user table in this system.
    """

    user_id = models.CharField(max_length=64, db_index=True)
    status = models.CharField(
        max_length=20,
        choices=OrderStatus.choices,
        default=OrderStatus.DRAFT,
    )

    class Meta:
        db_table = "orders"
        ordering = ["-created_at"]
        indexes = [
            models.Index(fields=["user_id", "status"], name="orders_user_status_idx"),
            models.Index(fields=["-created_at"], name="orders_created_idx"),
        ]

    def to_entity(self) -> domain.Order:
        """Build the domain aggregate; expects ``items`` to be prefetched."""
        return domain.Order(
            id=str(self.id),
            user_id=self.user_id,
            status=OrderStatus(self.status),
            items=[item.to_entity() for item in self.items.all()],
            created_at=self.created_at,
            updated_at=self.updated_at,
        )

    def __str__(self) -> str:
        return f"{self.id} ({self.status})"


class OrderItem(BaseModel):
    """Line item of an order.

    ``unit_price`` is a **snapshot** of the product price at the time it was
    added; it never changes even if the catalog price is updated later.
    ``created_at`` doubles as the add-time of the line.
    """

    order = models.ForeignKey(
        "orders.Order",
        on_delete=models.CASCADE,
        related_name="items",
    )
    product_id = models.CharField(max_length=64)
    product_name = models.CharField(max_length=255)
    unit_price = models.DecimalField(max_digits=10, decimal_places=2)
    currency = models.CharField(max_length=3, default=DEFAULT_CURRENCY)
    quantity = models.PositiveIntegerField(
        default=1,
        validators=[MinValueValidator(1)],
    )

    class Meta:
        db_table = "order_items"
        ordering = ["created_at"]
        constraints = [
            models.CheckConstraint(
                condition=models.Q(quantity__gte=1),
                name="order_items_quantity_positive",
            ),
            models.UniqueConstraint(
                fields=["order", "product_id"],
                name="order_items_unique_product",
            ),
        ]

    def clean(self) -> None:
        super().clean()
        if self.quantity is not None and self.quantity < 1:
            raise ValidationError({"quantity": "Quantity must be at least 1."})

    def to_entity(self) -> domain.OrderItem:
        return domain.OrderItem(
            product_id=self.product_id,
            product_name=self.product_name,
            unit_price=Money.of(self.unit_price, self.currency),
            quantity=self.quantity,
            added_at=self.created_at,
        )

    def __str__(self) -> str:
        return f"{self.product_name} x{self.quantity}"
