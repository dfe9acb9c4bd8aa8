"""Concurrent transitions on one entity must serialize"""

import threading
from datetime import date
from decimal import Decimal

from scf_gateway.domain.exceptions import AlreadyPaid, DuplicateParticipant, InvalidState
from scf_gateway.domain.models import InvoiceStatus, ParticipantCategory

WORKERS = 16


def _race(target):
    """Run target from WORKERS threads released together; return (successes, errors)"""
    barrier = threading.Barrier(WORKERS)
    successes, errors = [], []
    lock = threading.Lock()

    def worker():
        barrier.wait()
        try:
            result = target()
        except Exception as e:  # collected and asserted on by the caller
            with lock:
                errors.append(e)
        else:
            with lock:
                successes.append(result)

    threads = [threading.Thread(target=worker) for _ in range(WORKERS)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()
    return successes, errors


def test_factor_invoice_race(service, supplier_id, buyer_id):
    invoice_id = service.invoices.create_invoice(
        supplier_id, buyer_id, Decimal("25000"), date(2024, 7, 1), date(2024, 7, 31)
    )
    service.invoices.offer_factoring(invoice_id, Decimal("3.5"))

    successes, errors = _race(lambda: service.invoices.factor_invoice(invoice_id))

    assert len(successes) == 1
    assert len(errors) == WORKERS - 1
    assert all(isinstance(e, InvalidState) for e in errors)
    assert service.invoices.get_invoice(invoice_id).status == InvoiceStatus.FACTORED
    assert service.compute_metrics().invoices_factored == 1
    assert len(service.invoices._locks) == 0


def test_record_payment_race(service, supplier_id):
    financing_id = service.inventory.apply(supplier_id, Decimal("150000"), Decimal("120000"))
    service.inventory.approve(financing_id)

    successes, errors = _race(lambda: service.inventory.record_payment(financing_id, 0))

    assert len(successes) == 1
    assert all(isinstance(e, AlreadyPaid) for e in errors)


def test_duplicate_registration_race(service, participant_factory):
    successes, errors = _race(
        lambda: service.registry.register(
            participant_factory("Lake Traders", ParticipantCategory.RETAILER, 5, business_license="BL-RACE")
        )
    )

    assert len(successes) == 1
    assert all(isinstance(e, DuplicateParticipant) for e in errors)
    assert len(service.registry.list()) == 1


def test_different_invoices_proceed_independently(service, supplier_id, buyer_id):
    invoice_ids = []
    for _ in range(WORKERS):
        invoice_id = service.invoices.create_invoice(
            supplier_id, buyer_id, Decimal("1000"), date(2024, 7, 1), date(2024, 7, 31)
        )
        service.invoices.offer_factoring(invoice_id, Decimal("2.0"))
        invoice_ids.append(invoice_id)
    pending = iter(invoice_ids)
    take = threading.Lock()

    def factor_next():
        with take:
            invoice_id = next(pending)
        return service.invoices.factor_invoice(invoice_id)

    successes, errors = _race(factor_next)

    assert errors == []
    assert len(successes) == WORKERS
    assert service.compute_metrics().invoices_factored == WORKERS
