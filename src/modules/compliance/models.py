"""Order to compliance artifact links.

Links reference orders, prescriptions and consultation requests by plain
id: deleting an artifact never cascades here and the gate skips links
that point nowhere.  A pair is stored at most once; the same artifact
may back any number of orders.
"""

from __future__ import annotations

from django.db import models

from modules.core.models import BaseModel


class OrderPrescriptionLink(BaseModel):
    order_id = models.CharField(max_length=64, db_index=True)
    prescription_id = models.CharField(max_length=64)

    class Meta:
        db_table = "order_prescription_links"
        ordering = ["created_at"]
        constraints = [
            models.UniqueConstraint(
                fields=["order_id", "prescription_id"],
                name="unique_order_prescription_link",
            ),
        ]

    def __str__(self) -> str:
        return f"{self.order_id} -> prescription {self.prescription_id}"


class OrderConsultationLink(BaseModel):
    order_id = models.CharField(max_length=64, db_index=True)
    consultation_id = models.CharField(max_length=64)

    class Meta:
        db_table = "order_consultation_links"
        ordering = ["created_at"]
        constraints = [
            models.UniqueConstraint(
                fields=["order_id", "consultation_id"],
                name="unique_order_consultation_link",
            ),
        ]

    def __str__(self) -> str:
        return f"{self.order_id} -> consultation {self.consultation_id}"
