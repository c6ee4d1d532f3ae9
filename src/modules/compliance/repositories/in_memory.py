"""In-memory link repositories (development and tests)."""

from __future__ import annotations

import threading
from typing import Dict, List

from modules.compliance.repositories.interfaces import (
    IOrderConsultationLinkRepository,
    IOrderPrescriptionLinkRepository,
)


class _LinkStore:
    """order id -> artifact ids, insertion ordered, no duplicates."""

    def __init__(self) -> None:
        self._links: Dict[str, Dict[str, None]] = {}
        self._lock = threading.Lock()

    def ids_for(self, order_id: str) -> List[str]:
        with self._lock:
            return list(self._links.get(order_id, ()))

    def add(self, order_id: str, artifact_id: str) -> None:
        with self._lock:
            self._links.setdefault(order_id, {})[artifact_id] = None


class InMemoryOrderPrescriptionLinkRepository(IOrderPrescriptionLinkRepository):
    def __init__(self) -> None:
        self._store = _LinkStore()

    def find_prescription_ids_by_order_id(self, order_id: str) -> List[str]:
        return self._store.ids_for(order_id)

    def add_link(self, order_id: str, prescription_id: str) -> None:
        self._store.add(order_id, prescription_id)


class InMemoryOrderConsultationLinkRepository(IOrderConsultationLinkRepository):
    def __init__(self) -> None:
        self._store = _LinkStore()

    def find_consultation_ids_by_order_id(self, order_id: str) -> List[str]:
        return self._store.ids_for(order_id)

    def add_link(self, order_id: str, consultation_id: str) -> None:
        self._store.add(order_id, consultation_id)
