"""Consultation request repositories package."""

from modules.consultations.repositories.django_repository import (
    ConsultationRequestDjangoRepository,
)
from modules.consultations.repositories.in_memory import InMemoryConsultationRequestRepository
from modules.consultations.repositories.interfaces import IConsultationRequestRepository

__all__ = [
    "ConsultationRequestDjangoRepository",
    "IConsultationRequestRepository",
    "InMemoryConsultationRequestRepository",
]
