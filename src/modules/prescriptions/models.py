"""Prescription model.

Business rules implemented:
- Status is PENDING on creation and changes exactly once (service layer).
- ``rejection_reason`` is only set for REJECTED prescriptions.
- ``reviewed_at`` is set by the review.
"""

from __future__ import annotations

from django.db import models

from modules.core.models import BaseModel
from modules.prescriptions.domain import Prescription as PrescriptionEntity
from shared.domain.review import ReviewStatus

REVIEW_STATUS_CHOICES = [(status.value, status.value.title()) for status in ReviewStatus]


class Prescription(BaseModel):
    user_id = models.CharField(max_length=64, db_index=True)
    file_reference = models.CharField(max_length=512)
    status = models.CharField(
        max_length=20,
        choices=REVIEW_STATUS_CHOICES,
        default=ReviewStatus.PENDING.value,
    )
    reviewed_at = models.DateTimeField(null=True, blank=True, default=None)
    rejection_reason = models.TextField(null=True, blank=True, default=None)  # noqa: DJ01

    class Meta:
        db_table = "prescriptions"
        ordering = ["-created_at"]
        indexes = [
            models.Index(fields=["status", "created_at"], name="prescriptions_status_idx"),
        ]

    def to_entity(self) -> PrescriptionEntity:
        return PrescriptionEntity(
            id=str(self.id),
            user_id=self.user_id,
            file_reference=self.file_reference,
            status=ReviewStatus(self.status),
            created_at=self.created_at,
            reviewed_at=self.reviewed_at,
            rejection_reason=self.rejection_reason,
        )

    def __str__(self) -> str:
        return f"Prescription {self.id} ({self.status})"
