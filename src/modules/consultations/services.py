"""Consultation request service layer.

Mirrors the prescription flow without a file: request, review exactly
once (the status write is conditional on PENDING), list, and link to
orders for the compliance gate.  Reviews share ``ReviewDTO`` with
prescriptions.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, List, Optional, Union

import structlog
from django.utils import timezone

from modules.consultations.dtos import RequestConsultationDTO
from modules.consultations.exceptions import (
    ConsultationAccessDenied,
    ConsultationNotFound,
    InvalidConsultationStatus,
)
from modules.orders.exceptions import OrderNotFound, UnauthorizedOrderAccess
from modules.prescriptions.dtos import ReviewDTO
from shared.domain.review import ReviewDecision, ReviewStatus

if TYPE_CHECKING:
    from modules.compliance.repositories.interfaces import IOrderConsultationLinkRepository
    from modules.consultations.domain import ConsultationRequest
    from modules.consultations.repositories.interfaces import IConsultationRequestRepository
    from modules.orders.repositories.interfaces import IOrderRepository

logger = structlog.get_logger(__name__)


class ConsultationService:
    def __init__(
        self,
        consultation_repository: IConsultationRequestRepository,
        order_repository: IOrderRepository,
        link_repository: IOrderConsultationLinkRepository,
    ) -> None:
        self._consultation_repo = consultation_repository
        self._order_repo = order_repository
        self._link_repo = link_repository

    def request_consultation(
        self,
        user_id: str,
        order_id: Optional[str] = None,
        correlation_id: Optional[str] = None,
    ) -> ConsultationRequest:
        dto = RequestConsultationDTO(order_id=order_id)
        if dto.order_id is not None:
            self._ensure_order_owned(dto.order_id, user_id)

        consultation = self._consultation_repo.create(user_id)
        if dto.order_id is not None:
            self._link_repo.add_link(dto.order_id, consultation.id)

        logger.info(
            "consultation.requested",
            consultation_id=consultation.id,
            user_id=user_id,
            order_id=dto.order_id,
            correlation_id=correlation_id,
        )
        return consultation

    def review_consultation(
        self,
        consultation_id: str,
        decision: Union[ReviewDecision, str],
        rejection_reason: Optional[str] = None,
        correlation_id: Optional[str] = None,
    ) -> ConsultationRequest:
        dto = ReviewDTO(decision=decision, rejection_reason=rejection_reason)
        target = dto.decision.resulting_status

        consultation = self._consultation_repo.get_by_id(consultation_id)
        if consultation is None:
            raise ConsultationNotFound(consultation_id)
        if not consultation.is_pending:
            logger.warning(
                "consultation.review_rejected",
                consultation_id=consultation_id,
                current_status=str(consultation.status),
                target_status=str(target),
                correlation_id=correlation_id,
            )
            raise InvalidConsultationStatus(consultation.status, target)

        updated = self._consultation_repo.update_status(
            consultation_id,
            target,
            reviewed_at=timezone.now(),
            rejection_reason=dto.rejection_reason,
            expected_status=ReviewStatus.PENDING,
        )
        if updated is None:
            raise ConsultationNotFound(consultation_id)

        logger.info(
            "consultation.reviewed",
            consultation_id=consultation_id,
            status=str(updated.status),
            correlation_id=correlation_id,
        )
        return updated

    def link_consultation_to_order(
        self, consultation_id: str, order_id: str, user_id: str
    ) -> None:
        consultation = self._consultation_repo.get_by_id(consultation_id)
        if consultation is None:
            raise ConsultationNotFound(consultation_id)
        if consultation.user_id != user_id:
            raise ConsultationAccessDenied()
        self._ensure_order_owned(order_id, user_id)

        self._link_repo.add_link(order_id, consultation_id)
        logger.info(
            "consultation.linked",
            consultation_id=consultation_id,
            order_id=order_id,
            user_id=user_id,
        )

    def get_my_consultations(self, user_id: str) -> List[ConsultationRequest]:
        return self._consultation_repo.find_by_user_id(user_id)

    def get_pending_consultations(self) -> List[ConsultationRequest]:
        return self._consultation_repo.find_by_status(ReviewStatus.PENDING)

    def _ensure_order_owned(self, order_id: str, user_id: str) -> None:
        order = self._order_repo.get_by_id(order_id)
        if order is None:
            raise OrderNotFound(order_id)
        if not order.is_owned_by(user_id):
            raise UnauthorizedOrderAccess()
