"""Consultation domain exceptions."""

from __future__ import annotations

from modules.core.exceptions import ConflictError, ForbiddenError, NotFoundError


class ConsultationNotFound(NotFoundError):
    code = "CONSULTATION_NOT_FOUND"

    def __init__(self, consultation_id: str) -> None:
        super().__init__(
            f"Consultation request '{consultation_id}' not found.",
            consultation_id=consultation_id,
        )
        self.consultation_id = consultation_id


class InvalidConsultationStatus(ConflictError):
    code = "INVALID_CONSULTATION_STATUS"

    def __init__(self, current_status: str, target_status: str) -> None:
        super().__init__(
            f"Cannot transition consultation request from '{current_status}' to '{target_status}'.",
            current_status=str(current_status),
            target_status=str(target_status),
        )
        self.current_status = current_status
        self.target_status = target_status


class ConsultationAccessDenied(ForbiddenError):
    code = "CONSULTATION_ACCESS_DENIED"

    def __init__(self) -> None:
        super().__init__("You do not have access to this consultation request.")
