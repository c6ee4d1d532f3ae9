"""Django ORM implementation of the ConsultationRequest repository."""

from __future__ import annotations

from datetime import datetime
from typing import List, Optional

import structlog
from django.core.exceptions import ValidationError

from modules.consultations.domain import ConsultationRequest as ConsultationEntity
from modules.consultations.exceptions import InvalidConsultationStatus
from modules.consultations.models import ConsultationRequest
from modules.consultations.repositories.interfaces import IConsultationRequestRepository
from shared.domain.review import ReviewStatus

logger = structlog.get_logger(__name__)


class ConsultationRequestDjangoRepository(IConsultationRequestRepository):
    def create(self, user_id: str) -> ConsultationEntity:
        return ConsultationRequest.objects.create(
            user_id=user_id, status=ReviewStatus.PENDING.value
        ).to_entity()

    def get_by_id(self, id: str) -> Optional[ConsultationEntity]:
        try:
            consultation = ConsultationRequest.objects.filter(id=id).first()
        except (ValueError, ValidationError):
            return None
        return consultation.to_entity() if consultation else None

    def find_by_user_id(self, user_id: str) -> List[ConsultationEntity]:
        queryset = ConsultationRequest.objects.filter(user_id=user_id).order_by(
            "-created_at", "-id"
        )
        return [c.to_entity() for c in queryset]

    def find_by_status(self, status: ReviewStatus) -> List[ConsultationEntity]:
        queryset = ConsultationRequest.objects.filter(
            status=ReviewStatus(status).value
        ).order_by("created_at", "id")
        return [c.to_entity() for c in queryset]

    def update_status(
        self,
        id: str,
        status: ReviewStatus,
        reviewed_at: datetime,
        rejection_reason: Optional[str] = None,
        expected_status: Optional[ReviewStatus] = None,
    ) -> Optional[ConsultationEntity]:
        try:
            queryset = ConsultationRequest.objects.filter(id=id)
            if expected_status is not None:
                queryset = queryset.filter(status=ReviewStatus(expected_status).value)
            updated = queryset.update(
                status=ReviewStatus(status).value,
                reviewed_at=reviewed_at,
                rejection_reason=rejection_reason,
                updated_at=reviewed_at,
            )
        except (ValueError, ValidationError):
            return None
        if updated:
            return self.get_by_id(id)

        current = self.get_by_id(id)
        if current is None:
            return None
        logger.warning(
            "consultation.review_write_conflict",
            consultation_id=str(id),
            current_status=str(current.status),
            expected_status=str(expected_status),
        )
        raise InvalidConsultationStatus(current.status, ReviewStatus(status))
