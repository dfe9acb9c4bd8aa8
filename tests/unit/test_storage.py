"""Unit tests for the storage abstraction and the database-backed repositories"""

import threading
import time
from datetime import date
from decimal import Decimal

import pytest

from scf_gateway.domain.exceptions import NotFound
from scf_gateway.domain.models import (
    CollateralItem,
    FinancingStatus,
    InstallmentStatus,
    InvoiceStatus,
    LineItem,
    ParticipantCategory,
)
from scf_gateway.domain.service import SupplyChainFinancingService
from scf_gateway.domain.storage import EntityLocks, InMemoryRepository
from scf_gateway.infrastructure.database.repositories import build_repositories
from scf_gateway.infrastructure.database.session import build_session_factory


@pytest.fixture
def db_service() -> SupplyChainFinancingService:
    """Service backed by an in-memory SQLite database"""
    repositories = build_repositories(build_session_factory("sqlite://"))
    return SupplyChainFinancingService(clock=lambda: date(2025, 1, 15), **repositories)


def test_in_memory_repository_isolates_copies(service, supplier_id):
    repository = InMemoryRepository()
    participant = service.registry.get(supplier_id)
    repository.put(participant)

    participant.credit_rating = 1
    assert repository.get(supplier_id).credit_rating == 8

    listed = repository.list()
    listed[0].credit_rating = 2
    assert repository.get(supplier_id).credit_rating == 8


def test_in_memory_repository_missing_id():
    assert InMemoryRepository().get("nothing") is None


def test_database_round_trip_participant(db_service, participant_factory):
    participant_id = db_service.registry.register(
        participant_factory("Green Valley Farm Supplies", ParticipantCategory.SUPPLIER, 8, "95.5")
    )

    participant = db_service.registry.get(participant_id)
    assert participant.category == ParticipantCategory.SUPPLIER
    assert participant.on_time_payment_rate == Decimal("95.5")
    assert participant.monthly_volume == Decimal("100000")


def test_database_invoice_lifecycle(db_service, participant_factory):
    supplier = db_service.registry.register(participant_factory("Supplier A", ParticipantCategory.SUPPLIER, 8))
    buyer = db_service.registry.register(participant_factory("Buyer B", ParticipantCategory.RETAILER, 6))
    invoice_id = db_service.invoices.create_invoice(
        supplier,
        buyer,
        Decimal("25000"),
        date(2024, 7, 1),
        date(2024, 7, 31),
        items=[LineItem("Premium Coffee Beans", 1000, Decimal("25"), "Agricultural Products")],
    )
    db_service.invoices.offer_factoring(invoice_id, Decimal("3.5"))
    db_service.invoices.factor_invoice(invoice_id)

    invoice = db_service.invoices.get_invoice(invoice_id)
    assert invoice.status == InvoiceStatus.FACTORED
    assert invoice.issue_date == date(2024, 7, 1)
    assert invoice.factoring_offer.net_amount == Decimal("24125.00")
    assert invoice.factoring_offer.accepted is True
    assert invoice.items[0].total_price == Decimal("25000")


def test_database_schedule_survives_round_trip(db_service, participant_factory):
    supplier = db_service.registry.register(participant_factory("Supplier A", ParticipantCategory.SUPPLIER, 8))
    financing_id = db_service.inventory.apply(
        supplier,
        Decimal("150000"),
        Decimal("120000"),
        [CollateralItem("Raw Coffee Beans Stock", "Raw Materials", 2500, Decimal("60"))],
    )
    db_service.inventory.approve(financing_id)
    db_service.inventory.record_payment(financing_id, 0)

    financing = db_service.inventory.get_financing(financing_id)
    assert financing.status == FinancingStatus.APPROVED
    assert len(financing.repayment_schedule) == 6
    assert financing.repayment_schedule[0].status == InstallmentStatus.PAID
    assert financing.repayment_schedule[1].status == InstallmentStatus.PENDING
    assert financing.repayment_schedule[1].due_date == date(2025, 3, 15)
    assert financing.repayment_schedule[1].amount == Decimal("20860.00")


def test_database_list_keeps_insertion_order(db_service, participant_factory):
    ids = [
        db_service.registry.register(participant_factory(name, ParticipantCategory.SUPPLIER, 5))
        for name in ("Zeta Farms", "Alpha Farms", "Mid Farms")
    ]

    assert [p.id for p in db_service.registry.list()] == ids


def test_entity_locks_dropped_after_release():
    locks = EntityLocks()

    with locks.hold("inv_1"):
        assert len(locks) == 1
        with locks.hold("inv_2"):
            assert len(locks) == 2

    assert len(locks) == 0


def test_entity_lock_kept_while_another_thread_waits():
    locks = EntityLocks()
    acquired = []

    def waiter():
        with locks.hold("inv_1"):
            acquired.append(len(locks))

    with locks.hold("inv_1"):
        thread = threading.Thread(target=waiter)
        thread.start()
        while locks._users.get("inv_1") != 2:
            time.sleep(0.001)
        assert len(locks) == 1
    thread.join()

    assert acquired == [1]
    assert len(locks) == 0


def test_unknown_ids_leave_no_locks_behind(service, supplier_id):
    for i in range(1000):
        with pytest.raises(NotFound):
            service.invoices.factor_invoice(f"inv_missing_{i}")
        with pytest.raises(NotFound):
            service.purchase_orders.request_financing(f"po_missing_{i}", Decimal("100"))
        with pytest.raises(NotFound):
            service.inventory.record_payment(f"inv_fin_missing_{i}", 0)

    assert len(service.invoices._locks) == 0
    assert len(service.purchase_orders._locks) == 0
    assert len(service.inventory._locks) == 0


def test_database_numbering_continues_after_restart(participant_factory):
    """A fresh service over the same database picks up the year's count"""
    session_factory = build_session_factory("sqlite://")
    first = SupplyChainFinancingService(**build_repositories(session_factory))
    supplier = first.registry.register(participant_factory("Supplier A", ParticipantCategory.SUPPLIER, 8))
    buyer = first.registry.register(participant_factory("Buyer B", ParticipantCategory.RETAILER, 6))
    first.invoices.create_invoice(supplier, buyer, Decimal("100"), date(2024, 7, 1), date(2024, 7, 31))

    restarted = SupplyChainFinancingService(**build_repositories(session_factory))
    invoice_id = restarted.invoices.create_invoice(
        supplier, buyer, Decimal("200"), date(2024, 8, 1), date(2024, 8, 31)
    )

    assert restarted.invoices.get_invoice(invoice_id).number == "INV-2024-002"
