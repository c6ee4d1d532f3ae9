"""Prescription DTOs (Pydantic v2, immutable)."""

from __future__ import annotations

from datetime import datetime
from typing import TYPE_CHECKING, Optional

from pydantic import BaseModel, ConfigDict, field_validator, model_validator

from modules.prescriptions.exceptions import InvalidFileReference
from shared.domain.review import ReviewDecision

if TYPE_CHECKING:
    from modules.prescriptions.domain import Prescription


class SubmitPrescriptionDTO(BaseModel):
    model_config = ConfigDict(frozen=True, str_strip_whitespace=True)

    file_reference: str
    order_id: Optional[str] = None

    @field_validator("file_reference", mode="before")
    @classmethod
    def file_reference_must_not_be_blank(cls, v: object) -> object:
        if not isinstance(v, str) or not v.strip():
            raise InvalidFileReference()
        return v


class ReviewDTO(BaseModel):
    """Review input shared by prescriptions and consultation requests."""

    model_config = ConfigDict(frozen=True, str_strip_whitespace=True)

    decision: ReviewDecision
    rejection_reason: Optional[str] = None

    @model_validator(mode="after")
    def reason_only_for_rejections(self):
        if self.decision is ReviewDecision.APPROVE and self.rejection_reason:
            raise ValueError("A rejection reason is only accepted with REJECT.")
        return self


class PrescriptionOutputDTO(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str
    user_id: str
    file_reference: str
    status: str
    created_at: datetime
    reviewed_at: Optional[datetime] = None
    rejection_reason: Optional[str] = None

    @classmethod
    def from_entity(cls, prescription: Prescription) -> PrescriptionOutputDTO:
        return cls(
            id=prescription.id,
            user_id=prescription.user_id,
            file_reference=prescription.file_reference,
            status=str(prescription.status),
            created_at=prescription.created_at,
            reviewed_at=prescription.reviewed_at,
            rejection_reason=prescription.rejection_reason,
        )
