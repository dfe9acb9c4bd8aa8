"""Unit tests for the inventory-backed financing ledger"""

from datetime import date
from decimal import Decimal

import pytest

from scf_gateway.domain.exceptions import (
    AlreadyPaid,
    CollateralInsufficient,
    IndexOutOfRange,
    InvalidState,
    UnknownParticipant,
)
from scf_gateway.domain.models import (
    CollateralCondition,
    CollateralItem,
    FinancingStatus,
    InstallmentStatus,
)


@pytest.fixture
def financing_id(service, supplier_id) -> str:
    """Rating-8 supplier borrowing 120,000 against 150,000 of stock"""
    return service.inventory.apply(
        participant_id=supplier_id,
        inventory_value=Decimal("150000"),
        requested_amount=Decimal("120000"),
        collateral_items=[
            CollateralItem("Coffee Processing Equipment", "Machinery", 5, Decimal("15000"), CollateralCondition.GOOD),
            CollateralItem("Raw Coffee Beans Stock", "Raw Materials", 2500, Decimal("30"), CollateralCondition.NEW),
        ],
    )


def test_apply_creates_application(service, financing_id):
    financing = service.inventory.get_financing(financing_id)

    assert financing.status == FinancingStatus.APPLIED
    assert financing.application_date == date(2025, 1, 15)
    assert financing.interest_rate is None
    assert financing.repayment_schedule == []
    assert sum(item.total_value for item in financing.collateral_items) == Decimal("150000")


def test_apply_unknown_participant(service):
    with pytest.raises(UnknownParticipant):
        service.inventory.apply("participant_missing", Decimal("1000"), Decimal("500"))


def test_apply_more_than_inventory_value(service, supplier_id):
    with pytest.raises(CollateralInsufficient):
        service.inventory.apply(supplier_id, Decimal("150000"), Decimal("150000.01"))
    assert service.inventory.list_financings() == []


def test_approve_prices_and_schedules(service, financing_id):
    """Rating 8: 8.6%, 6 months, 20,000 + 860 per installment"""
    financing = service.inventory.approve(financing_id)

    assert financing.status == FinancingStatus.APPROVED
    assert financing.interest_rate == Decimal("8.6")
    assert financing.term_months == 6
    assert financing.approval_date == date(2025, 1, 15)
    assert len(financing.repayment_schedule) == financing.term_months
    assert sum(i.principal for i in financing.repayment_schedule) == financing.financing_amount
    for installment in financing.repayment_schedule:
        assert installment.principal == Decimal("20000")
        assert installment.interest == Decimal("860")
        assert installment.amount == Decimal("20860")
        assert installment.status == InstallmentStatus.PENDING
    assert financing.repayment_schedule[0].due_date == date(2025, 2, 15)


def test_approve_only_from_applied(service, financing_id):
    service.inventory.approve(financing_id)

    with pytest.raises(InvalidState):
        service.inventory.approve(financing_id)


def test_schedule_not_regenerated_by_later_operations(service, financing_id):
    schedule = service.inventory.approve(financing_id).repayment_schedule
    service.inventory.activate(financing_id)
    service.inventory.record_payment(financing_id, 0)

    later = service.inventory.get_financing(financing_id).repayment_schedule
    assert [(i.due_date, i.amount) for i in later] == [(i.due_date, i.amount) for i in schedule]


def test_pay_every_installment_repays_agreement(service, financing_id):
    service.inventory.approve(financing_id)
    service.inventory.activate(financing_id)

    for index in range(5):
        financing = service.inventory.record_payment(financing_id, index)
        assert financing.status == FinancingStatus.ACTIVE

    financing = service.inventory.record_payment(financing_id, 5)
    assert financing.status == FinancingStatus.REPAID
    assert all(i.status == InstallmentStatus.PAID for i in financing.repayment_schedule)


def test_record_payment_twice(service, financing_id):
    service.inventory.approve(financing_id)
    service.inventory.record_payment(financing_id, 2)

    with pytest.raises(AlreadyPaid):
        service.inventory.record_payment(financing_id, 2)


@pytest.mark.parametrize("index", [-1, 6, 100])
def test_record_payment_index_out_of_range(service, financing_id, index):
    service.inventory.approve(financing_id)

    with pytest.raises(IndexOutOfRange):
        service.inventory.record_payment(financing_id, index)


def test_record_payment_before_approval(service, financing_id):
    with pytest.raises(InvalidState):
        service.inventory.record_payment(financing_id, 0)


def test_overdue_installment_can_be_paid_late(service, financing_id):
    service.inventory.approve(financing_id)
    service.inventory.activate(financing_id)

    financing = service.inventory.mark_installment_overdue(financing_id, 0)
    assert financing.repayment_schedule[0].status == InstallmentStatus.OVERDUE

    financing = service.inventory.record_payment(financing_id, 0)
    assert financing.repayment_schedule[0].status == InstallmentStatus.PAID


def test_activate_only_from_approved(service, financing_id):
    with pytest.raises(InvalidState):
        service.inventory.activate(financing_id)

    service.inventory.approve(financing_id)
    assert service.inventory.activate(financing_id).status == FinancingStatus.ACTIVE


def test_default_only_from_active(service, financing_id):
    service.inventory.approve(financing_id)
    with pytest.raises(InvalidState):
        service.inventory.mark_defaulted(financing_id)

    service.inventory.activate(financing_id)
    assert service.inventory.mark_defaulted(financing_id).status == FinancingStatus.DEFAULTED

    with pytest.raises(InvalidState):
        service.inventory.record_payment(financing_id, 0)
