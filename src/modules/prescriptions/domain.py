"""Prescription aggregate.

A user-owned prescription with an explicit review lifecycle:
created PENDING on submission, reviewed exactly once to APPROVED or
REJECTED.  ``file_reference`` is an opaque pointer into file storage and
is never interpreted here.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Optional

from shared.domain.review import ReviewStatus


@dataclass(frozen=True)
class Prescription:
    id: str
    user_id: str
    file_reference: str
    status: ReviewStatus = ReviewStatus.PENDING
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    reviewed_at: Optional[datetime] = None
    rejection_reason: Optional[str] = None

    @property
    def is_pending(self) -> bool:
        return self.status == ReviewStatus.PENDING
