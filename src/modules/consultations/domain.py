"""Consultation request aggregate.

The second compliance path: a doctor consultation that, once approved,
clears prescription-only items for the orders it is linked to.  It does
not reference an order itself.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Optional

from shared.domain.review import ReviewStatus


@dataclass(frozen=True)
class ConsultationRequest:
    id: str
    user_id: str
    status: ReviewStatus = ReviewStatus.PENDING
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    reviewed_at: Optional[datetime] = None
    rejection_reason: Optional[str] = None

    @property
    def is_pending(self) -> bool:
        return self.status == ReviewStatus.PENDING
