"""Review lifecycle shared by prescriptions and consultation requests.

Both artifacts start PENDING and are reviewed exactly once, ending
APPROVED or REJECTED.
"""

from __future__ import annotations

from enum import Enum


class ReviewStatus(str, Enum):
    PENDING = "PENDING"
    APPROVED = "APPROVED"
    REJECTED = "REJECTED"

    def __str__(self) -> str:
        return self.value


class ReviewDecision(str, Enum):
    APPROVE = "APPROVE"
    REJECT = "REJECT"

    def __str__(self) -> str:
        return self.value

    @property
    def resulting_status(self) -> ReviewStatus:
        if self is ReviewDecision.APPROVE:
            return ReviewStatus.APPROVED
        return ReviewStatus.REJECTED
