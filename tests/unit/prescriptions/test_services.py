"""Unit tests for PrescriptionService and its DTOs.

Covers:
- Submission (with and without an order) and the order link it records.
- Review happens exactly once, even for reviewers working from a stale
  read; a rejection reason is accepted only with REJECT.
- Linking checks ownership of both the prescription and the order.
- Owner listing and the oldest-first review queue.
"""

from __future__ import annotations

import pytest
from pydantic import ValidationError
from structlog.testing import capture_logs

from modules.orders.exceptions import OrderNotFound, UnauthorizedOrderAccess
from modules.prescriptions.dtos import (
    PrescriptionOutputDTO,
    ReviewDTO,
    SubmitPrescriptionDTO,
)
from modules.prescriptions.exceptions import (
    InvalidFileReference,
    InvalidPrescriptionStatus,
    PrescriptionAccessDenied,
    PrescriptionNotFound,
)
from shared.domain.review import ReviewDecision, ReviewStatus

pytestmark = pytest.mark.unit


@pytest.fixture()
def service(container):
    return container.prescriptions


def _links(container, order_id):
    return container.prescription_link_repository.find_prescription_ids_by_order_id(order_id)


# ---------------------------------------------------------------------------
# Submit
# ---------------------------------------------------------------------------


class TestSubmitPrescription:
    def test_submit_without_order(self, service):
        prescription = service.submit_prescription("user-1", "uploads/rx-1.pdf")

        assert prescription.status == ReviewStatus.PENDING
        assert prescription.user_id == "user-1"
        assert prescription.file_reference == "uploads/rx-1.pdf"
        assert prescription.reviewed_at is None

    def test_submit_with_order_records_link(self, container, service, paid_prescription_order):
        prescription = service.submit_prescription(
            "user-1", "uploads/rx-1.pdf", order_id=paid_prescription_order.id
        )

        assert _links(container, paid_prescription_order.id) == [prescription.id]

    @pytest.mark.parametrize("file_reference", ["", "   "])
    def test_blank_file_reference(self, service, file_reference):
        with pytest.raises(InvalidFileReference):
            service.submit_prescription("user-1", file_reference)

    def test_unknown_order(self, container, service):
        with pytest.raises(OrderNotFound):
            service.submit_prescription("user-1", "uploads/rx.pdf", order_id="missing")

        assert service.get_my_prescriptions("user-1") == []

    def test_order_of_another_user(self, service, paid_prescription_order):
        with pytest.raises(UnauthorizedOrderAccess):
            service.submit_prescription(
                "user-2", "uploads/rx.pdf", order_id=paid_prescription_order.id
            )

        assert service.get_my_prescriptions("user-2") == []

    def test_submit_logs_without_file_reference(self, service):
        with capture_logs() as logs:
            prescription = service.submit_prescription("user-1", "uploads/rx-1.pdf")

        assert logs == [
            {
                "event": "prescription.submitted",
                "log_level": "info",
                "prescription_id": prescription.id,
                "user_id": "user-1",
                "order_id": None,
                "correlation_id": None,
            }
        ]


# ---------------------------------------------------------------------------
# Review
# ---------------------------------------------------------------------------


class TestReviewPrescription:
    def test_approve(self, service):
        prescription = service.submit_prescription("user-1", "uploads/rx.pdf")

        reviewed = service.review_prescription(prescription.id, ReviewDecision.APPROVE)

        assert reviewed.status == ReviewStatus.APPROVED
        assert reviewed.reviewed_at is not None
        assert reviewed.rejection_reason is None

    def test_reject_keeps_reason(self, service):
        prescription = service.submit_prescription("user-1", "uploads/rx.pdf")

        reviewed = service.review_prescription(
            prescription.id, "REJECT", rejection_reason="Expired"
        )

        assert reviewed.status == ReviewStatus.REJECTED
        assert reviewed.rejection_reason == "Expired"

    def test_approval_with_reason_is_refused(self, service):
        prescription = service.submit_prescription("user-1", "uploads/rx.pdf")

        with pytest.raises(ValidationError):
            service.review_prescription(
                prescription.id, ReviewDecision.APPROVE, rejection_reason="Looks fine"
            )

        assert service.get_my_prescriptions("user-1")[0].status == ReviewStatus.PENDING

    @pytest.mark.parametrize("first", [ReviewDecision.APPROVE, ReviewDecision.REJECT])
    @pytest.mark.parametrize("second", [ReviewDecision.APPROVE, ReviewDecision.REJECT])
    def test_review_happens_once(self, service, first, second):
        prescription = service.submit_prescription("user-1", "uploads/rx.pdf")
        service.review_prescription(prescription.id, first)

        with pytest.raises(InvalidPrescriptionStatus):
            service.review_prescription(prescription.id, second)

        assert service.get_my_prescriptions("user-1")[0].status == first.resulting_status

    def test_unknown_prescription(self, service):
        with pytest.raises(PrescriptionNotFound):
            service.review_prescription("missing", ReviewDecision.APPROVE)

    def test_review_on_stale_read_does_not_overwrite(self, container, service, monkeypatch):
        prescription = service.submit_prescription("user-1", "uploads/rx.pdf")
        repo = container.prescription_repository
        # Both reviewers loaded the prescription while it was still PENDING.
        monkeypatch.setattr(repo, "get_by_id", lambda id: prescription)
        service.review_prescription(prescription.id, ReviewDecision.APPROVE)

        with pytest.raises(InvalidPrescriptionStatus) as exc_info:
            service.review_prescription(
                prescription.id, ReviewDecision.REJECT, rejection_reason="Expired"
            )

        assert exc_info.value.current_status == ReviewStatus.APPROVED
        stored = service.get_my_prescriptions("user-1")[0]
        assert stored.status == ReviewStatus.APPROVED
        assert stored.rejection_reason is None

    def test_unknown_decision(self, service):
        prescription = service.submit_prescription("user-1", "uploads/rx.pdf")

        with pytest.raises(ValueError):
            service.review_prescription(prescription.id, "MAYBE")


# ---------------------------------------------------------------------------
# Link
# ---------------------------------------------------------------------------


class TestLinkPrescription:
    def test_link_existing_prescription(self, container, service, paid_prescription_order):
        prescription = service.submit_prescription("user-1", "uploads/rx.pdf")

        service.link_prescription_to_order(prescription.id, paid_prescription_order.id, "user-1")

        assert _links(container, paid_prescription_order.id) == [prescription.id]

    def test_linking_twice_is_idempotent(self, container, service, paid_prescription_order):
        prescription = service.submit_prescription(
            "user-1", "uploads/rx.pdf", order_id=paid_prescription_order.id
        )

        service.link_prescription_to_order(prescription.id, paid_prescription_order.id, "user-1")

        assert _links(container, paid_prescription_order.id) == [prescription.id]

    def test_someone_elses_prescription(self, service, paid_prescription_order):
        prescription = service.submit_prescription("user-2", "uploads/rx.pdf")

        with pytest.raises(PrescriptionAccessDenied):
            service.link_prescription_to_order(
                prescription.id, paid_prescription_order.id, "user-1"
            )

    def test_someone_elses_order(self, service, paid_prescription_order):
        prescription = service.submit_prescription("user-2", "uploads/rx.pdf")

        with pytest.raises(UnauthorizedOrderAccess):
            service.link_prescription_to_order(
                prescription.id, paid_prescription_order.id, "user-2"
            )

    def test_unknown_prescription(self, service, paid_prescription_order):
        with pytest.raises(PrescriptionNotFound):
            service.link_prescription_to_order("missing", paid_prescription_order.id, "user-1")


# ---------------------------------------------------------------------------
# Queries
# ---------------------------------------------------------------------------


class TestQueries:
    def test_my_prescriptions_newest_first(self, service):
        first = service.submit_prescription("user-1", "uploads/a.pdf")
        second = service.submit_prescription("user-1", "uploads/b.pdf")
        service.submit_prescription("user-2", "uploads/c.pdf")

        assert [p.id for p in service.get_my_prescriptions("user-1")] == [second.id, first.id]

    def test_pending_queue_oldest_first(self, service):
        first = service.submit_prescription("user-1", "uploads/a.pdf")
        reviewed = service.submit_prescription("user-2", "uploads/b.pdf")
        third = service.submit_prescription("user-2", "uploads/c.pdf")
        service.review_prescription(reviewed.id, ReviewDecision.APPROVE)

        assert [p.id for p in service.get_pending_prescriptions()] == [first.id, third.id]


# ---------------------------------------------------------------------------
# DTOs
# ---------------------------------------------------------------------------


class TestDTOs:
    def test_submit_dto_requires_file_reference(self):
        with pytest.raises(InvalidFileReference):
            SubmitPrescriptionDTO(file_reference="  ")

    def test_submit_dto_strips_file_reference(self):
        dto = SubmitPrescriptionDTO(file_reference=" uploads/rx.pdf ", order_id=" order-1 ")

        assert dto.file_reference == "uploads/rx.pdf"
        assert dto.order_id == "order-1"

    def test_review_dto_parses_decision(self):
        dto = ReviewDTO(decision="REJECT", rejection_reason=" Expired ")

        assert dto.decision is ReviewDecision.REJECT
        assert dto.rejection_reason == "Expired"

    def test_review_dto_refuses_reason_on_approval(self):
        with pytest.raises(ValidationError):
            ReviewDTO(decision="APPROVE", rejection_reason="Looks fine")

    def test_output_dto(self, service):
        prescription = service.submit_prescription("user-1", "uploads/rx.pdf")

        dto = PrescriptionOutputDTO.from_entity(prescription)

        assert dto.status == "PENDING"
        assert dto.file_reference == "uploads/rx.pdf"
        assert dto.reviewed_at is None
