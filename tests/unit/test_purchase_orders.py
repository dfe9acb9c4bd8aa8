"""Unit tests for the purchase order financing ledger"""

from datetime import date
from decimal import Decimal

import pytest

from scf_gateway.domain.exceptions import (
    FinancingExceedsOrderValue,
    InvalidRequest,
    InvalidState,
    UnknownParticipant,
)
from scf_gateway.domain.models import LineItem, PurchaseOrderStatus


@pytest.fixture
def po_id(service, supplier_id, buyer_id) -> str:
    """35,000 order placed by the rating-9 manufacturer"""
    return service.purchase_orders.create_po(
        buyer_id=buyer_id,
        supplier_id=supplier_id,
        amount=Decimal("35000"),
        issue_date=date(2024, 7, 15),
        expected_delivery_date=date(2024, 8, 15),
        items=[
            LineItem("Maize Seeds - Hybrid Variety", 500, Decimal("25"), "Seeds", date(2024, 8, 1)),
            LineItem("Irrigation Equipment", 50, Decimal("450"), "Equipment"),
        ],
    )


def test_create_po_starts_as_draft(service, po_id):
    po = service.purchase_orders.get_po(po_id)

    assert po.status == PurchaseOrderStatus.DRAFT
    assert po.number == "PO-2024-001"
    assert po.financing.requested is False
    assert po.financing.approved is False


def test_create_po_unknown_participant(service, buyer_id):
    with pytest.raises(UnknownParticipant):
        service.purchase_orders.create_po(
            buyer_id, "participant_missing", Decimal("100"), date(2024, 7, 1), date(2024, 8, 1)
        )


def test_full_financing_rate_from_buyer_rating(service, po_id):
    """Buyer rated 9 financing the full 35,000 pays 5.5%"""
    service.purchase_orders.send_po(po_id)
    service.purchase_orders.confirm_po(po_id)

    po = service.purchase_orders.request_financing(po_id, Decimal("35000"))

    assert po.status == PurchaseOrderStatus.FINANCED
    assert po.financing.requested is True
    assert po.financing.approved is True
    assert po.financing.amount == Decimal("35000")
    assert po.financing.rate == Decimal("5.5")


def test_financing_exceeding_order_value(service, po_id):
    before = service.purchase_orders.get_po(po_id)

    with pytest.raises(FinancingExceedsOrderValue):
        service.purchase_orders.request_financing(po_id, Decimal("35000.01"))

    assert service.purchase_orders.get_po(po_id) == before


def test_financing_exceeding_order_value_after_financed(service, po_id):
    """Over-limit requests fail the same way regardless of status"""
    service.purchase_orders.request_financing(po_id, Decimal("1000"))

    with pytest.raises(FinancingExceedsOrderValue):
        service.purchase_orders.request_financing(po_id, Decimal("50000"))


def test_financing_directly_from_draft(service, po_id):
    po = service.purchase_orders.request_financing(po_id, Decimal("28000"))
    assert po.status == PurchaseOrderStatus.FINANCED


def test_financing_twice_fails(service, po_id):
    service.purchase_orders.request_financing(po_id, Decimal("28000"))

    with pytest.raises(InvalidState):
        service.purchase_orders.request_financing(po_id, Decimal("1000"))
    assert service.purchase_orders.get_po(po_id).financing.amount == Decimal("28000")


def test_financing_amount_must_be_positive(service, po_id):
    with pytest.raises(InvalidRequest):
        service.purchase_orders.request_financing(po_id, Decimal("0"))


def test_lifecycle_to_completed(service, po_id):
    service.purchase_orders.send_po(po_id)
    service.purchase_orders.confirm_po(po_id)
    service.purchase_orders.request_financing(po_id, Decimal("20000"))
    service.purchase_orders.mark_delivered(po_id)
    po = service.purchase_orders.complete_po(po_id)

    assert po.status == PurchaseOrderStatus.COMPLETED


def test_no_backward_transitions(service, po_id):
    service.purchase_orders.confirm_po(po_id)

    with pytest.raises(InvalidState):
        service.purchase_orders.send_po(po_id)
    with pytest.raises(InvalidState):
        service.purchase_orders.confirm_po(po_id)


def test_financing_after_delivery_fails(service, po_id):
    service.purchase_orders.mark_delivered(po_id)

    with pytest.raises(InvalidState):
        service.purchase_orders.request_financing(po_id, Decimal("1000"))


def test_po_numbers_restart_each_year(service, po_id, supplier_id, buyer_id):
    def create(issue_date):
        new_id = service.purchase_orders.create_po(
            buyer_id, supplier_id, Decimal("1000"), issue_date, issue_date
        )
        return service.purchase_orders.get_po(new_id).number

    assert create(date(2025, 1, 3)) == "PO-2025-001"
    assert create(date(2024, 12, 30)) == "PO-2024-002"
    assert create(date(2025, 2, 1)) == "PO-2025-002"
