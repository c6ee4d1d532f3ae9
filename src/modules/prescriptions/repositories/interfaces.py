"""Prescription repository interface."""

from __future__ import annotations

from abc import abstractmethod
from datetime import datetime
from typing import List, Optional

from modules.core.repositories.interfaces import IRepository
from modules.prescriptions.domain import Prescription
from shared.domain.review import ReviewStatus


class IPrescriptionRepository(IRepository[Prescription]):
    @abstractmethod
    def create(self, user_id: str, file_reference: str) -> Prescription:
        """Persist a new PENDING prescription."""

    @abstractmethod
    def get_by_id(self, id: str) -> Optional[Prescription]:
        """``None`` for unknown or malformed ids."""

    @abstractmethod
    def find_by_user_id(self, user_id: str) -> List[Prescription]:
        """Prescriptions of a user, most recent first."""

    @abstractmethod
    def find_by_status(self, status: ReviewStatus) -> List[Prescription]:
        """Prescriptions in *status*, oldest first (review queue order)."""

    @abstractmethod
    def update_status(
        self,
        id: str,
        status: ReviewStatus,
        reviewed_at: datetime,
        rejection_reason: Optional[str] = None,
        expected_status: Optional[ReviewStatus] = None,
    ) -> Optional[Prescription]:
        """Record a review outcome; ``None`` when the prescription is gone.

        With *expected_status* the write is conditional: a prescription in
        any other status is left untouched and ``InvalidPrescriptionStatus``
        is raised.
        """
