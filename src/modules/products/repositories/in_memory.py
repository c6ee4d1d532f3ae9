"""In-memory Product repository (development and tests)."""

from __future__ import annotations

from typing import Dict, Iterable, Optional

from modules.products.domain import CatalogProduct
from modules.products.repositories.interfaces import IProductRepository


class InMemoryProductRepository(IProductRepository):
    def __init__(self, products: Iterable[CatalogProduct] = ()) -> None:
        self._products: Dict[str, CatalogProduct] = {}
        for product in products:
            self.add(product)

    def add(self, product: CatalogProduct) -> CatalogProduct:
        self._products[product.id] = product
        return product

    def get_by_id(self, id: str) -> Optional[CatalogProduct]:
        return self._products.get(id)
