"""Link repository interfaces.

Only the compliance gate reads links; prescription and consultation
services write them.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import List


class IOrderPrescriptionLinkRepository(ABC):
    @abstractmethod
    def find_prescription_ids_by_order_id(self, order_id: str) -> List[str]:
        """Linked prescription ids, in link order; empty when none."""

    @abstractmethod
    def add_link(self, order_id: str, prescription_id: str) -> None:
        """Record a link; an existing pair is left untouched."""


class IOrderConsultationLinkRepository(ABC):
    @abstractmethod
    def find_consultation_ids_by_order_id(self, order_id: str) -> List[str]:
        """Linked consultation request ids, in link order; empty when none."""

    @abstractmethod
    def add_link(self, order_id: str, consultation_id: str) -> None:
        """Record a link; an existing pair is left untouched."""
