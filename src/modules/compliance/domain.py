"""Compliance evaluation over loaded snapshots.

``resolve_compliance_status`` is the whole decision: it sees only the
statuses of the artifacts that still exist and the number of links the
order has, and is recomputed on every read.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, Optional, Tuple

from modules.compliance.constants import ComplianceStatus
from shared.domain.review import ReviewStatus


@dataclass(frozen=True)
class PrescriptionEvidence:
    id: str
    status: ReviewStatus
    rejection_reason: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "status": str(self.status),
            "rejection_reason": self.rejection_reason,
        }


@dataclass(frozen=True)
class ConsultationEvidence:
    id: str
    status: ReviewStatus

    def to_dict(self) -> Dict[str, Any]:
        return {"id": self.id, "status": str(self.status)}


@dataclass(frozen=True)
class ComplianceInfo:
    """Compliance view of an order that contains prescription-only items."""

    status: ComplianceStatus
    prescriptions: Tuple[PrescriptionEvidence, ...] = field(default_factory=tuple)
    consultations: Tuple[ConsultationEvidence, ...] = field(default_factory=tuple)
    requires_prescription: bool = True

    def to_dict(self) -> Dict[str, Any]:
        """Plain dict; empty artifact lists are omitted."""
        payload: Dict[str, Any] = {
            "requires_prescription": self.requires_prescription,
            "status": str(self.status),
        }
        if self.prescriptions:
            payload["prescriptions"] = [p.to_dict() for p in self.prescriptions]
        if self.consultations:
            payload["consultations"] = [c.to_dict() for c in self.consultations]
        return payload


def resolve_compliance_status(
    prescription_statuses: Iterable[ReviewStatus],
    consultation_statuses: Iterable[ReviewStatus],
    link_count: int,
) -> ComplianceStatus:
    """Approval on either channel wins over any rejection.

    REJECTED needs at least one link; everything else is PENDING.
    """
    prescription_statuses = list(prescription_statuses)
    consultation_statuses = list(consultation_statuses)

    has_approved = (
        ReviewStatus.APPROVED in prescription_statuses
        or ReviewStatus.APPROVED in consultation_statuses
    )
    if has_approved:
        return ComplianceStatus.APPROVED

    has_rejected = (
        ReviewStatus.REJECTED in prescription_statuses
        or ReviewStatus.REJECTED in consultation_statuses
    )
    if has_rejected and link_count > 0:
        return ComplianceStatus.REJECTED
    return ComplianceStatus.PENDING
