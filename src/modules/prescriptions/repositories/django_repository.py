"""Django ORM implementation of the Prescription repository."""

from __future__ import annotations

from datetime import datetime
from typing import List, Optional

import structlog
from django.core.exceptions import ValidationError

from modules.prescriptions.domain import Prescription as PrescriptionEntity
from modules.prescriptions.exceptions import InvalidPrescriptionStatus
from modules.prescriptions.models import Prescription
from modules.prescriptions.repositories.interfaces import IPrescriptionRepository
from shared.domain.review import ReviewStatus

logger = structlog.get_logger(__name__)


class PrescriptionDjangoRepository(IPrescriptionRepository):
    def create(self, user_id: str, file_reference: str) -> PrescriptionEntity:
        return Prescription.objects.create(
            user_id=user_id,
            file_reference=file_reference,
            status=ReviewStatus.PENDING.value,
        ).to_entity()

    def get_by_id(self, id: str) -> Optional[PrescriptionEntity]:
        try:
            prescription = Prescription.objects.filter(id=id).first()
        except (ValueError, ValidationError):
            return None
        return prescription.to_entity() if prescription else None

    def find_by_user_id(self, user_id: str) -> List[PrescriptionEntity]:
        queryset = Prescription.objects.filter(user_id=user_id).order_by("-created_at", "-id")
        return [p.to_entity() for p in queryset]

    def find_by_status(self, status: ReviewStatus) -> List[PrescriptionEntity]:
        queryset = Prescription.objects.filter(status=ReviewStatus(status).value).order_by(
            "created_at", "id"
        )
        return [p.to_entity() for p in queryset]

    def update_status(
        self,
        id: str,
        status: ReviewStatus,
        reviewed_at: datetime,
        rejection_reason: Optional[str] = None,
        expected_status: Optional[ReviewStatus] = None,
    ) -> Optional[PrescriptionEntity]:
        try:
            queryset = Prescription.objects.filter(id=id)
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
            "prescription.review_write_conflict",
            prescription_id=str(id),
            current_status=str(current.status),
            expected_status=str(expected_status),
        )
        raise InvalidPrescriptionStatus(current.status, ReviewStatus(status))
