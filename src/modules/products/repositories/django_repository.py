"""Django ORM implementation of the Product repository.

Error handling follows the Null Object pattern: methods return ``None``
instead of raising, the Service Layer decides how to translate a missing
entity.
"""

from __future__ import annotations

from typing import Optional

from django.core.exceptions import ValidationError

from modules.products.domain import CatalogProduct
from modules.products.models import Product
from modules.products.repositories.interfaces import IProductRepository


class ProductDjangoRepository(IProductRepository):
    """Concrete Product repository backed by Django ORM."""

    def get_by_id(self, id: str) -> Optional[CatalogProduct]:
        """Retrieve a product by primary key.

        Returns ``None`` for non-existent or invalid IDs.
        """
        try:
            product = Product.objects.filter(id=id).first()
        except (ValueError, ValidationError):
            return None
        return product.to_entity() if product else None

    def get_by_sku(self, sku: str) -> Optional[CatalogProduct]:
        """Retrieve a product by SKU (case-insensitive via upper normalisation)."""
        product = Product.objects.filter(sku=sku.strip().upper()).first()
        return product.to_entity() if product else None
