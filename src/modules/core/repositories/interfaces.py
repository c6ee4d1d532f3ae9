"""Generic repository interface (Dependency Inversion Principle).

Provides ``IRepository[T]``, the base abstract class that all
domain-specific repository interfaces extend.  Service-layer code
depends on this abstraction, never on Django ORM directly, so every
repository can be swapped between the relational and the in-memory
implementation.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Generic, Optional, TypeVar

T = TypeVar("T")


class IRepository(ABC, Generic[T]):
    """Base generic repository contract.

    Type parameter ``T`` represents the domain entity managed by the
    repository (e.g. ``Order``, ``Prescription``).  Entities are plain
    dataclasses; implementations translate to and from their storage.
    """

    @abstractmethod
    def get_by_id(self, id: str) -> Optional[T]:
        """Retrieve an entity by its identity key, ``None`` if absent."""

    def exists(self, id: str) -> bool:
        """Return ``True`` when an entity with *id* is stored."""
        return self.get_by_id(id) is not None
