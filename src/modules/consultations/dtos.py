"""Consultation request DTOs."""

from __future__ import annotations

from datetime import datetime
from typing import TYPE_CHECKING, Optional

from pydantic import BaseModel, ConfigDict

if TYPE_CHECKING:
    from modules.consultations.domain import ConsultationRequest


class RequestConsultationDTO(BaseModel):
    model_config = ConfigDict(frozen=True, str_strip_whitespace=True)

    order_id: Optional[str] = None


class ConsultationOutputDTO(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str
    user_id: str
    status: str
    created_at: datetime
    reviewed_at: Optional[datetime] = None
    rejection_reason: Optional[str] = None

    @classmethod
    def from_entity(cls, consultation: ConsultationRequest) -> ConsultationOutputDTO:
        return cls(
            id=consultation.id,
            user_id=consultation.user_id,
            status=str(consultation.status),
            created_at=consultation.created_at,
            reviewed_at=consultation.reviewed_at,
            rejection_reason=consultation.rejection_reason,
        )
