"""Consultation request repository interface."""

from __future__ import annotations

from abc import abstractmethod
from datetime import datetime
from typing import List, Optional

from modules.consultations.domain import ConsultationRequest
from modules.core.repositories.interfaces import IRepository
from shared.domain.review import ReviewStatus


class IConsultationRequestRepository(IRepository[ConsultationRequest]):
    @abstractmethod
    def create(self, user_id: str) -> ConsultationRequest: ...

    @abstractmethod
    def get_by_id(self, id: str) -> Optional[ConsultationRequest]: ...

    @abstractmethod
    def find_by_user_id(self, user_id: str) -> List[ConsultationRequest]:
        """Most recent first."""

    @abstractmethod
    def find_by_status(self, status: ReviewStatus) -> List[ConsultationRequest]:
        """Oldest first."""

    @abstractmethod
    def update_status(
        self,
        id: str,
        status: ReviewStatus,
        reviewed_at: datetime,
        rejection_reason: Optional[str] = None,
        expected_status: Optional[ReviewStatus] = None,
    ) -> Optional[ConsultationRequest]:
        """``None`` when the request is gone.

        With *expected_status*, a request in any other status is left
        untouched and ``InvalidConsultationStatus`` is raised.
        """
