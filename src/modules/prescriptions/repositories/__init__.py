"""Prescription repositories package."""

from modules.prescriptions.repositories.django_repository import PrescriptionDjangoRepository
from modules.prescriptions.repositories.in_memory import InMemoryPrescriptionRepository
from modules.prescriptions.repositories.interfaces import IPrescriptionRepository

__all__ = [
    "IPrescriptionRepository",
    "InMemoryPrescriptionRepository",
    "PrescriptionDjangoRepository",
]
