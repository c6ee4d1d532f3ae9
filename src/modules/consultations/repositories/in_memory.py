"""In-memory ConsultationRequest repository (development and tests)."""

from __future__ import annotations

import threading
from dataclasses import replace
from datetime import datetime, timedelta, timezone
from typing import Dict, List, Optional

from modules.consultations.domain import ConsultationRequest
from modules.consultations.exceptions import InvalidConsultationStatus
from modules.consultations.repositories.interfaces import IConsultationRequestRepository
from modules.core.models import new_identity
from shared.domain.review import ReviewStatus


class InMemoryConsultationRequestRepository(IConsultationRequestRepository):
    def __init__(self) -> None:
        self._requests: Dict[str, ConsultationRequest] = {}
        self._lock = threading.RLock()
        self._last_timestamp: Optional[datetime] = None

    def create(self, user_id: str) -> ConsultationRequest:
        with self._lock:
            request = ConsultationRequest(
                id=new_identity(), user_id=user_id, created_at=self._now()
            )
            self._requests[request.id] = request
            return request

    def add(self, request: ConsultationRequest) -> ConsultationRequest:
        with self._lock:
            self._requests[request.id] = request
            return request

    def get_by_id(self, id: str) -> Optional[ConsultationRequest]:
        with self._lock:
            return self._requests.get(id)

    def find_by_user_id(self, user_id: str) -> List[ConsultationRequest]:
        with self._lock:
            found = [r for r in self._requests.values() if r.user_id == user_id]
        return sorted(found, key=lambda r: r.created_at, reverse=True)

    def find_by_status(self, status: ReviewStatus) -> List[ConsultationRequest]:
        with self._lock:
            found = [r for r in self._requests.values() if r.status == status]
        return sorted(found, key=lambda r: r.created_at)

    def update_status(
        self,
        id: str,
        status: ReviewStatus,
        reviewed_at: datetime,
        rejection_reason: Optional[str] = None,
        expected_status: Optional[ReviewStatus] = None,
    ) -> Optional[ConsultationRequest]:
        with self._lock:
            current = self._requests.get(id)
            if current is None:
                return None
            if expected_status is not None and current.status != expected_status:
                raise InvalidConsultationStatus(current.status, ReviewStatus(status))
            updated = replace(
                current,
                status=ReviewStatus(status),
                reviewed_at=reviewed_at,
                rejection_reason=rejection_reason,
            )
            self._requests[id] = updated
            return updated

    def _now(self) -> datetime:
        now = datetime.now(timezone.utc)
        if self._last_timestamp is not None and now <= self._last_timestamp:
            now = self._last_timestamp + timedelta(microseconds=1)
        self._last_timestamp = now
        return now
