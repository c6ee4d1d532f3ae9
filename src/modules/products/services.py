"""Product query service (read-only use cases for other modules).

The cart needs "does this product exist and may it be sold?" and the
compliance gate needs "does this product require a prescription?".
Both questions go through this service, which depends only on the
injected ``IProductRepository``.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Iterable

import structlog

from modules.products.exceptions import InactiveProduct, ProductNotFound

if TYPE_CHECKING:
    from modules.products.domain import CatalogProduct
    from modules.products.repositories.interfaces import IProductRepository

logger = structlog.get_logger(__name__)


class ProductQueryService:
    def __init__(self, repository: IProductRepository) -> None:
        self._repo = repository

    def get_available_product(self, product_id: str) -> CatalogProduct:
        """Return the product snapshot if it exists and is active.

        Raises:
            ProductNotFound: unknown product id.
            InactiveProduct: product exists but cannot be sold.
        """
        product = self._repo.get_by_id(product_id)
        if product is None:
            logger.warning("product.not_found", product_id=product_id)
            raise ProductNotFound(product_id)
        if not product.is_active:
            logger.warning("product.inactive", product_id=product_id)
            raise InactiveProduct(product_id)
        return product

    def requires_prescription(self, product_id: str) -> bool:
        """Unknown products never require a prescription."""
        product = self._repo.get_by_id(product_id)
        return bool(product and product.requires_prescription)

    def any_requires_prescription(self, product_ids: Iterable[str]) -> bool:
        return any(self.requires_prescription(pid) for pid in dict.fromkeys(product_ids))
