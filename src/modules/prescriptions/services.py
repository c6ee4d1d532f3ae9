"""Prescription service layer (Use Cases).

Business rules enforced:
- A prescription is submitted PENDING by its owner.
- Submitting against an order requires the order to exist and belong to
  the submitter; the link is recorded for the compliance gate.
- A review happens exactly once: only PENDING prescriptions can be
  approved or rejected, and the status write itself is conditional on
  PENDING.  A rejection reason is accepted only with REJECT.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, List, Optional, Union

import structlog
from django.utils import timezone

from modules.orders.exceptions import OrderNotFound, UnauthorizedOrderAccess
from modules.prescriptions.dtos import ReviewDTO, SubmitPrescriptionDTO
from modules.prescriptions.exceptions import (
    InvalidPrescriptionStatus,
    PrescriptionAccessDenied,
    PrescriptionNotFound,
)
from shared.domain.review import ReviewDecision, ReviewStatus

if TYPE_CHECKING:
    from modules.compliance.repositories.interfaces import IOrderPrescriptionLinkRepository
    from modules.orders.repositories.interfaces import IOrderRepository
    from modules.prescriptions.domain import Prescription
    from modules.prescriptions.repositories.interfaces import IPrescriptionRepository

logger = structlog.get_logger(__name__)


class PrescriptionService:
    def __init__(
        self,
        prescription_repository: IPrescriptionRepository,
        order_repository: IOrderRepository,
        link_repository: IOrderPrescriptionLinkRepository,
    ) -> None:
        self._prescription_repo = prescription_repository
        self._order_repo = order_repository
        self._link_repo = link_repository

    # ------------------------------------------------------------------
    # Commands
    # ------------------------------------------------------------------

    def submit_prescription(
        self,
        user_id: str,
        file_reference: str,
        order_id: Optional[str] = None,
        correlation_id: Optional[str] = None,
    ) -> Prescription:
        """Create a PENDING prescription, optionally linked to *order_id*.

        Raises:
            InvalidFileReference: blank file reference.
            OrderNotFound: *order_id* does not exist.
            UnauthorizedOrderAccess: the order belongs to someone else.
        """
        dto = SubmitPrescriptionDTO(file_reference=file_reference, order_id=order_id)
        if dto.order_id is not None:
            self._ensure_order_owned(dto.order_id, user_id)

        prescription = self._prescription_repo.create(user_id, dto.file_reference)
        if dto.order_id is not None:
            self._link_repo.add_link(dto.order_id, prescription.id)

        logger.info(
            "prescription.submitted",
            prescription_id=prescription.id,
            user_id=user_id,
            order_id=dto.order_id,
            correlation_id=correlation_id,
        )
        return prescription

    def review_prescription(
        self,
        prescription_id: str,
        decision: Union[ReviewDecision, str],
        rejection_reason: Optional[str] = None,
        correlation_id: Optional[str] = None,
    ) -> Prescription:
        """Approve or reject a PENDING prescription.

        The write only lands while the prescription is still PENDING, so
        of two concurrent reviews exactly one succeeds.

        Raises:
            PrescriptionNotFound: unknown prescription.
            InvalidPrescriptionStatus: the prescription was already reviewed.
            pydantic.ValidationError: unknown decision, or a rejection
                reason given with APPROVE.
        """
        dto = ReviewDTO(decision=decision, rejection_reason=rejection_reason)
        target = dto.decision.resulting_status

        prescription = self._prescription_repo.get_by_id(prescription_id)
        if prescription is None:
            raise PrescriptionNotFound(prescription_id)
        if not prescription.is_pending:
            logger.warning(
                "prescription.review_rejected",
                prescription_id=prescription_id,
                current_status=str(prescription.status),
                target_status=str(target),
                correlation_id=correlation_id,
            )
            raise InvalidPrescriptionStatus(prescription.status, target)

        updated = self._prescription_repo.update_status(
            prescription_id,
            target,
            reviewed_at=timezone.now(),
            rejection_reason=dto.rejection_reason,
            expected_status=ReviewStatus.PENDING,
        )
        if updated is None:
            raise PrescriptionNotFound(prescription_id)

        logger.info(
            "prescription.reviewed",
            prescription_id=prescription_id,
            status=str(updated.status),
            correlation_id=correlation_id,
        )
        return updated

    def link_prescription_to_order(
        self, prescription_id: str, order_id: str, user_id: str
    ) -> None:
        """Attach an earlier submission to one of the user's orders.

        Raises:
            PrescriptionNotFound, PrescriptionAccessDenied,
            OrderNotFound, UnauthorizedOrderAccess.
        """
        prescription = self._prescription_repo.get_by_id(prescription_id)
        if prescription is None:
            raise PrescriptionNotFound(prescription_id)
        if prescription.user_id != user_id:
            raise PrescriptionAccessDenied()
        self._ensure_order_owned(order_id, user_id)

        self._link_repo.add_link(order_id, prescription_id)
        logger.info(
            "prescription.linked",
            prescription_id=prescription_id,
            order_id=order_id,
            user_id=user_id,
        )

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def get_my_prescriptions(self, user_id: str) -> List[Prescription]:
        return self._prescription_repo.find_by_user_id(user_id)

    def get_pending_prescriptions(self) -> List[Prescription]:
        """Review queue, oldest submission first."""
        return self._prescription_repo.find_by_status(ReviewStatus.PENDING)

    def _ensure_order_owned(self, order_id: str, user_id: str) -> None:
        order = self._order_repo.get_by_id(order_id)
        if order is None:
            raise OrderNotFound(order_id)
        if not order.is_owned_by(user_id):
            raise UnauthorizedOrderAccess()
