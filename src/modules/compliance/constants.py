"""Compliance status values.

Derived from linked prescriptions and consultations on every read and
never persisted.
"""

from __future__ import annotations

from django.db import models


class ComplianceStatus(models.TextChoices):
    APPROVED = "APPROVED", "Approved"
    PENDING = "PENDING", "Pending"
    REJECTED = "REJECTED", "Rejected"
