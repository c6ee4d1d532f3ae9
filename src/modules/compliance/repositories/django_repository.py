"""Django ORM implementations of the link repositories."""

from __future__ import annotations

from typing import List

from modules.compliance.models import OrderConsultationLink, OrderPrescriptionLink
from modules.compliance.repositories.interfaces import (
    IOrderConsultationLinkRepository,
    IOrderPrescriptionLinkRepository,
)


class OrderPrescriptionLinkDjangoRepository(IOrderPrescriptionLinkRepository):
    def find_prescription_ids_by_order_id(self, order_id: str) -> List[str]:
        return list(
            OrderPrescriptionLink.objects.filter(order_id=str(order_id))
            .order_by("created_at", "id")
            .values_list("prescription_id", flat=True)
        )

    def add_link(self, order_id: str, prescription_id: str) -> None:
        OrderPrescriptionLink.objects.get_or_create(
            order_id=str(order_id), prescription_id=str(prescription_id)
        )


class OrderConsultationLinkDjangoRepository(IOrderConsultationLinkRepository):
    def find_consultation_ids_by_order_id(self, order_id: str) -> List[str]:
        return list(
            OrderConsultationLink.objects.filter(order_id=str(order_id))
            .order_by("created_at", "id")
            .values_list("consultation_id", flat=True)
        )

    def add_link(self, order_id: str, consultation_id: str) -> None:
        OrderConsultationLink.objects.get_or_create(
            order_id=str(order_id), consultation_id=str(consultation_id)
        )
