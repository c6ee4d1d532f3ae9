"""Product repository interface.

The ordering core only reads the catalog: it needs a product snapshot by
id (name, price, active flag, prescription flag).  Catalog CRUD lives
outside this system.
"""

from __future__ import annotations

from abc import abstractmethod
from typing import Iterable, List, Optional

from modules.core.repositories.interfaces import IRepository
from modules.products.domain import CatalogProduct


class IProductRepository(IRepository[CatalogProduct]):
    """Read contract for the Product catalog."""

    @abstractmethod
    def get_by_id(self, id: str) -> Optional[CatalogProduct]:
        """Retrieve a product snapshot; ``None`` for unknown or malformed ids."""

    def get_many(self, ids: Iterable[str]) -> List[CatalogProduct]:
        """Snapshots for every known id in *ids* (unknown ids are skipped)."""
        products = []
        for product_id in dict.fromkeys(ids):
            product = self.get_by_id(product_id)
            if product is not None:
                products.append(product)
        return products
