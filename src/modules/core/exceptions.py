"""Base domain exceptions.

Every business-rule violation raised by the Service Layer derives from
``DomainError``.  Each class carries a stable machine ``code`` and an
``http_status`` hint; the (external) API layer translates them into
responses without inspecting messages.
"""

from __future__ import annotations

from typing import Any, Dict


class DomainError(Exception):
    """Root of all domain errors."""

    code = "DOMAIN_ERROR"
    http_status = 400

    def __init__(self, message: str, **details: Any) -> None:
        super().__init__(message)
        self.message = message
        self.details: Dict[str, Any] = details

    def to_dict(self) -> Dict[str, Any]:
        payload: Dict[str, Any] = {"code": self.code, "message": self.message}
        if self.details:
            payload["details"] = self.details
        return payload


class NotFoundError(DomainError):
    """A requested aggregate does not exist."""

    code = "NOT_FOUND"
    http_status = 404


class ForbiddenError(DomainError):
    """The caller may not access the requested aggregate."""

    code = "FORBIDDEN"
    http_status = 403


class ConflictError(DomainError):
    """The request conflicts with the current state of the aggregate."""

    code = "CONFLICT"
    http_status = 409


class InvalidInputError(DomainError):
    """The request carries values the domain does not accept."""

    code = "INVALID_INPUT"
    http_status = 400
