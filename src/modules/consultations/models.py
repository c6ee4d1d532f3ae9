from __future__ import annotations

from django.db import models

from modules.consultations.domain import ConsultationRequest as ConsultationEntity
from modules.core.models import BaseModel
from shared.domain.review import ReviewStatus

REVIEW_STATUS_CHOICES = [(status.value, status.value.title()) for status in ReviewStatus]


class ConsultationRequest(BaseModel):
    user_id = models.CharField(max_length=64, db_index=True)
    status = models.CharField(
        max_length=20,
        choices=REVIEW_STATUS_CHOICES,
        default=ReviewStatus.PENDING.value,
    )
    reviewed_at = models.DateTimeField(null=True, blank=True, default=None)
    rejection_reason = models.TextField(null=True, blank=True, default=None)  # noqa: DJ01

    class Meta:
        db_table = "consultation_requests"
        ordering = ["-created_at"]
        indexes = [
            models.Index(fields=["status", "created_at"], name="consultations_status_idx"),
        ]

    def to_entity(self) -> ConsultationEntity:
        return ConsultationEntity(
            id=str(self.id),
            user_id=self.user_id,
            status=ReviewStatus(self.status),
            created_at=self.created_at,
            reviewed_at=self.reviewed_at,
            rejection_reason=self.rejection_reason,
        )

    def __str__(self) -> str:
        return f"ConsultationRequest {self.id} ({self.status})"
