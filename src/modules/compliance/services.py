"""Order compliance service (the fulfilment gate).

Decides whether an order may proceed to shipping:

- Absent order or an order without items: PENDING.
- No prescription-only product in the order: APPROVED, links are not read.
- Otherwise: APPROVED when any linked prescription or consultation is
  approved, REJECTED when something linked was rejected and nothing was
  approved, PENDING in every other case.

Links pointing at artifacts that no longer exist are skipped.  Payment
never consults this service; only the PAID -> SHIPPED transition does.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, List, Optional

import structlog

from modules.compliance.constants import ComplianceStatus
from modules.compliance.domain import (
    ComplianceInfo,
    ConsultationEvidence,
    PrescriptionEvidence,
    resolve_compliance_status,
)

if TYPE_CHECKING:
    from modules.compliance.repositories.interfaces import (
        IOrderConsultationLinkRepository,
        IOrderPrescriptionLinkRepository,
    )
    from modules.consultations.repositories.interfaces import IConsultationRequestRepository
    from modules.orders.domain import Order
    from modules.orders.repositories.interfaces import IOrderRepository
    from modules.prescriptions.repositories.interfaces import IPrescriptionRepository
    from modules.products.services import ProductQueryService

logger = structlog.get_logger(__name__)


class OrderComplianceService:
    def __init__(
        self,
        order_repository: IOrderRepository,
        product_service: ProductQueryService,
        prescription_repository: IPrescriptionRepository,
        consultation_repository: IConsultationRequestRepository,
        prescription_link_repository: IOrderPrescriptionLinkRepository,
        consultation_link_repository: IOrderConsultationLinkRepository,
    ) -> None:
        self._order_repo = order_repository
        self._products = product_service
        self._prescription_repo = prescription_repository
        self._consultation_repo = consultation_repository
        self._prescription_links = prescription_link_repository
        self._consultation_links = consultation_link_repository

    def can_fulfil(self, order_id: str) -> bool:
        return self.get_compliance_status(order_id) == ComplianceStatus.APPROVED

    def get_compliance_status(self, order_id: str) -> ComplianceStatus:
        order = self._order_repo.get_by_id(order_id)
        if order is None or not order.items:
            return ComplianceStatus.PENDING
        if not self.requires_prescription(order):
            return ComplianceStatus.APPROVED
        return self._evaluate(order_id).status

    def get_compliance_info(self, order_id: str) -> Optional[ComplianceInfo]:
        """``None`` unless the order holds a prescription-only item."""
        order = self._order_repo.get_by_id(order_id)
        if order is None or not order.items:
            return None
        if not self.requires_prescription(order):
            return None
        return self._evaluate(order_id)

    def requires_prescription(self, order: Order) -> bool:
        return self._products.any_requires_prescription(order.product_ids)

    def _evaluate(self, order_id: str) -> ComplianceInfo:
        prescription_ids = self._prescription_links.find_prescription_ids_by_order_id(order_id)
        consultation_ids = self._consultation_links.find_consultation_ids_by_order_id(order_id)

        prescriptions: List[PrescriptionEvidence] = []
        for prescription_id in prescription_ids:
            prescription = self._prescription_repo.get_by_id(prescription_id)
            if prescription is None:
                logger.debug(
                    "compliance.dangling_link",
                    order_id=order_id,
                    prescription_id=prescription_id,
                )
                continue
            prescriptions.append(
                PrescriptionEvidence(
                    id=prescription.id,
                    status=prescription.status,
                    rejection_reason=prescription.rejection_reason,
                )
            )

        consultations: List[ConsultationEvidence] = []
        for consultation_id in consultation_ids:
            consultation = self._consultation_repo.get_by_id(consultation_id)
            if consultation is None:
                logger.debug(
                    "compliance.dangling_link",
                    order_id=order_id,
                    consultation_id=consultation_id,
                )
                continue
            consultations.append(
                ConsultationEvidence(id=consultation.id, status=consultation.status)
            )

        status = resolve_compliance_status(
            [p.status for p in prescriptions],
            [c.status for c in consultations],
            link_count=len(prescription_ids) + len(consultation_ids),
        )
        return ComplianceInfo(
            status=status,
            prescriptions=tuple(prescriptions),
            consultations=tuple(consultations),
        )
