"""Read-only catalog snapshot handed to the ordering and compliance modules."""

from __future__ import annotations

from dataclasses import dataclass

from shared.domain.money import Money


@dataclass(frozen=True)
class CatalogProduct:
    id: str
    name: str
    price: Money
    requires_prescription: bool = False
    is_active: bool = True
