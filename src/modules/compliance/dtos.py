"""Compliance output DTOs."""

from __future__ import annotations

from typing import TYPE_CHECKING, List, Literal, Optional

from pydantic import BaseModel, ConfigDict

if TYPE_CHECKING:
    from modules.compliance.domain import ComplianceInfo


class PrescriptionComplianceDTO(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str
    status: str
    rejection_reason: Optional[str] = None


class ConsultationComplianceDTO(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str
    status: str


class ComplianceInfoDTO(BaseModel):
    """Read-only compliance block of the order detail view.

    Empty artifact lists are stored as ``None`` and left out of
    ``to_response()``.
    """

    model_config = ConfigDict(frozen=True)

    requires_prescription: Literal[True] = True
    status: str
    prescriptions: Optional[List[PrescriptionComplianceDTO]] = None
    consultations: Optional[List[ConsultationComplianceDTO]] = None

    @classmethod
    def from_domain(cls, info: ComplianceInfo) -> ComplianceInfoDTO:
        prescriptions = [
            PrescriptionComplianceDTO(
                id=p.id, status=str(p.status), rejection_reason=p.rejection_reason
            )
            for p in info.prescriptions
        ]
        consultations = [
            ConsultationComplianceDTO(id=c.id, status=str(c.status))
            for c in info.consultations
        ]
        return cls(
            status=str(info.status),
            prescriptions=prescriptions or None,
            consultations=consultations or None,
        )

    def to_response(self) -> dict:
        empty = {name for name in ("prescriptions", "consultations") if getattr(self, name) is None}
        return self.model_dump(mode="json", exclude=empty)
