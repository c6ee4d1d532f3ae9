"""Product domain exceptions.

Raised by the Service Layer when a product referenced by a cart
operation cannot be sold.
"""

from __future__ import annotations

from modules.core.exceptions import ConflictError, NotFoundError


class ProductNotFound(NotFoundError):
    """The requested product does not exist."""

    code = "PRODUCT_NOT_FOUND"

    def __init__(self, product_id: str) -> None:
        super().__init__(f"Product '{product_id}' not found.", product_id=product_id)
        self.product_id = product_id


class InactiveProduct(ConflictError):
    """The product exists but is inactive and cannot be sold."""

    code = "PRODUCT_INACTIVE"

    def __init__(self, product_id: str) -> None:
        super().__init__(f"Product '{product_id}' is inactive.", product_id=product_id)
        self.product_id = product_id
