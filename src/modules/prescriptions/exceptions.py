"""Prescription domain exceptions."""

from __future__ import annotations

from modules.core.exceptions import (
    ConflictError,
    ForbiddenError,
    InvalidInputError,
    NotFoundError,
)


class PrescriptionNotFound(NotFoundError):
    code = "PRESCRIPTION_NOT_FOUND"

    def __init__(self, prescription_id: str) -> None:
        super().__init__(
            f"Prescription '{prescription_id}' not found.",
            prescription_id=prescription_id,
        )
        self.prescription_id = prescription_id


class InvalidPrescriptionStatus(ConflictError):
    """The prescription was already reviewed; a review happens exactly once."""

    code = "INVALID_PRESCRIPTION_STATUS"

    def __init__(self, current_status: str, target_status: str) -> None:
        super().__init__(
            f"Cannot transition prescription from '{current_status}' to '{target_status}'.",
            current_status=str(current_status),
            target_status=str(target_status),
        )
        self.current_status = current_status
        self.target_status = target_status


class InvalidFileReference(InvalidInputError):
    code = "INVALID_FILE_REFERENCE"

    def __init__(self) -> None:
        super().__init__("A prescription file reference is required.")


class PrescriptionAccessDenied(ForbiddenError):
    code = "PRESCRIPTION_ACCESS_DENIED"

    def __init__(self) -> None:
        super().__init__("You do not have access to this prescription.")
