"""Order/compliance link repositories package."""

from modules.compliance.repositories.django_repository import (
    OrderConsultationLinkDjangoRepository,
    OrderPrescriptionLinkDjangoRepository,
)
from modules.compliance.repositories.in_memory import (
    InMemoryOrderConsultationLinkRepository,
    InMemoryOrderPrescriptionLinkRepository,
)
from modules.compliance.repositories.interfaces import (
    IOrderConsultationLinkRepository,
    IOrderPrescriptionLinkRepository,
)

__all__ = [
    "IOrderConsultationLinkRepository",
    "IOrderPrescriptionLinkRepository",
    "InMemoryOrderConsultationLinkRepository",
    "InMemoryOrderPrescriptionLinkRepository",
    "OrderConsultationLinkDjangoRepository",
    "OrderPrescriptionLinkDjangoRepository",
]
