"""In-memory Prescription repository (development and tests)."""

from __future__ import annotations

import threading
from dataclasses import replace
from datetime import datetime, timedelta, timezone
from typing import Dict, List, Optional

from modules.core.models import new_identity
from modules.prescriptions.domain import Prescription
from modules.prescriptions.exceptions import InvalidPrescriptionStatus
from modules.prescriptions.repositories.interfaces import IPrescriptionRepository
from shared.domain.review import ReviewStatus


class InMemoryPrescriptionRepository(IPrescriptionRepository):
    def __init__(self) -> None:
        self._prescriptions: Dict[str, Prescription] = {}
        self._lock = threading.RLock()
        self._last_timestamp: Optional[datetime] = None

    def create(self, user_id: str, file_reference: str) -> Prescription:
        with self._lock:
            prescription = Prescription(
                id=new_identity(),
                user_id=user_id,
                file_reference=file_reference,
                created_at=self._now(),
            )
            self._prescriptions[prescription.id] = prescription
            return prescription

    def add(self, prescription: Prescription) -> Prescription:
        """Store a prebuilt prescription as-is (test fixtures)."""
        with self._lock:
            self._prescriptions[prescription.id] = prescription
            return prescription

    def get_by_id(self, id: str) -> Optional[Prescription]:
        with self._lock:
            return self._prescriptions.get(id)

    def find_by_user_id(self, user_id: str) -> List[Prescription]:
        with self._lock:
            found = [p for p in self._prescriptions.values() if p.user_id == user_id]
        return sorted(found, key=lambda p: p.created_at, reverse=True)

    def find_by_status(self, status: ReviewStatus) -> List[Prescription]:
        with self._lock:
            found = [p for p in self._prescriptions.values() if p.status == status]
        return sorted(found, key=lambda p: p.created_at)

    def update_status(
        self,
        id: str,
        status: ReviewStatus,
        reviewed_at: datetime,
        rejection_reason: Optional[str] = None,
        expected_status: Optional[ReviewStatus] = None,
    ) -> Optional[Prescription]:
        with self._lock:
            current = self._prescriptions.get(id)
            if current is None:
                return None
            if expected_status is not None and current.status != expected_status:
                raise InvalidPrescriptionStatus(current.status, ReviewStatus(status))
            updated = replace(
                current,
                status=ReviewStatus(status),
                reviewed_at=reviewed_at,
                rejection_reason=rejection_reason,
            )
            self._prescriptions[id] = updated
            return updated

    def _now(self) -> datetime:
        now = datetime.now(timezone.utc)
        if self._last_timestamp is not None and now <= self._last_timestamp:
            now = self._last_timestamp + timedelta(microseconds=1)
        self._last_timestamp = now
        return now
