"""Invoice factoring ledger"""

import logging
import threading
import uuid
from datetime import date
from typing import Callable, List, Optional, Sequence

from scf_gateway.domain.exceptions import InvalidRequest, InvalidState, NoFactoringOffer, NotFound
from scf_gateway.domain.models import FactoringOffer, Invoice, InvoiceStatus, LineItem
from scf_gateway.domain.rates import factoring_net_payout
from scf_gateway.domain.registry import ParticipantRegistry
from scf_gateway.domain.storage import EntityLocks, Repository, YearlySequence
from scf_gateway.utils.money import Number, as_decimal

logger = logging.getLogger(__name__)

# pending -> approved | overdue | factored
# approved -> paid | overdue
# factored -> paid
OVERDUE_NOOP = {InvoiceStatus.OVERDUE, InvoiceStatus.PAID, InvoiceStatus.FACTORED}
PAYABLE = {InvoiceStatus.APPROVED, InvoiceStatus.FACTORED}


def _log_transition(invoice: Invoice, from_status: InvoiceStatus) -> None:
    logger.info(
        "Invoice status changed",
        extra={
            "entity": "invoice",
            "entity_id": invoice.id,
            "from_status": from_status.value,
            "to_status": invoice.status.value,
        },
    )


class InvoiceLedger:
    """Tracks supplier invoices and their factoring offers"""

    def __init__(
        self,
        repository: Repository[Invoice],
        registry: ParticipantRegistry,
        clock: Callable[[], date] = date.today,
        default_currency: str = "USD",
    ):
        self.repository = repository
        self.registry = registry
        self.clock = clock
        self.default_currency = default_currency
        self._locks = EntityLocks()
        self._create_lock = threading.Lock()
        self._numbers = YearlySequence(self._count_issued_in)

    def create_invoice(
        self,
        supplier_id: str,
        buyer_id: str,
        amount: Number,
        issue_date: date,
        due_date: date,
        items: Sequence[LineItem] = (),
        currency: Optional[str] = None,
        terms_and_conditions: str = "",
    ) -> str:
        self.registry.require(supplier_id)
        self.registry.require(buyer_id)
        amount = as_decimal(amount)
        if supplier_id == buyer_id:
            raise InvalidRequest("Supplier and buyer must be different participants")
        if amount <= 0:
            raise InvalidRequest(f"Invoice amount must be positive, got {amount}")
        if due_date < issue_date:
            raise InvalidRequest("Due date is before issue date")

        with self._create_lock:
            sequence = self._numbers.next(issue_date.year)
            invoice = Invoice(
                id=f"inv_{uuid.uuid4().hex}",
                number=f"INV-{issue_date.year}-{sequence:03d}",
                supplier_id=supplier_id,
                buyer_id=buyer_id,
                amount=amount,
                currency=currency or self.default_currency,
                issue_date=issue_date,
                due_date=due_date,
                items=list(items),
                terms_and_conditions=terms_and_conditions,
            )
            self.repository.put(invoice)

        logger.info(
            "Invoice created",
            extra={"entity": "invoice", "entity_id": invoice.id, "to_status": invoice.status.value},
        )
        return invoice.id

    def get_invoice(self, invoice_id: str) -> Invoice:
        invoice = self.repository.get(invoice_id)
        if invoice is None:
            raise NotFound(f"Invoice {invoice_id} not found")
        return invoice

    def list_invoices(self) -> List[Invoice]:
        return self.repository.list()

    def _count_issued_in(self, year: int) -> int:
        return sum(1 for i in self.repository.list() if i.issue_date.year == year)

    def approve_invoice(self, invoice_id: str) -> Invoice:
        """Buyer acknowledges the invoice: pending -> approved"""
        with self._locks.hold(invoice_id):
            invoice = self.get_invoice(invoice_id)
            if invoice.status != InvoiceStatus.PENDING:
                raise InvalidState(f"Cannot approve invoice in status '{invoice.status.value}'")
            invoice.status = InvoiceStatus.APPROVED
            self.repository.put(invoice)
        _log_transition(invoice, InvoiceStatus.PENDING)
        return invoice

    def offer_factoring(self, invoice_id: str, fee_rate_percent: Number) -> Invoice:
        """Attach (or replace) a factoring offer on a pending invoice"""
        with self._locks.hold(invoice_id):
            invoice = self.get_invoice(invoice_id)
            if invoice.status != InvoiceStatus.PENDING:
                raise InvalidState(f"Cannot offer factoring on invoice in status '{invoice.status.value}'")
            fee_rate = as_decimal(fee_rate_percent)
            invoice.factoring_offer = FactoringOffer(
                fee_rate=fee_rate,
                net_amount=factoring_net_payout(invoice.amount, fee_rate),
            )
            self.repository.put(invoice)

        logger.info(
            "Factoring offered",
            extra={
                "entity": "invoice",
                "entity_id": invoice.id,
                "fee_rate": str(invoice.factoring_offer.fee_rate),
                "net_amount": str(invoice.factoring_offer.net_amount),
            },
        )
        return invoice

    def factor_invoice(self, invoice_id: str) -> Invoice:
        """Accept the factoring offer: pending -> factored"""
        with self._locks.hold(invoice_id):
            invoice = self.get_invoice(invoice_id)
            if invoice.status != InvoiceStatus.PENDING:
                raise InvalidState(f"Cannot factor invoice in status '{invoice.status.value}'")
            if invoice.factoring_offer is None:
                raise NoFactoringOffer(f"Invoice {invoice_id} has no factoring offer")
            invoice.factoring_offer.accepted = True
            invoice.status = InvoiceStatus.FACTORED
            self.repository.put(invoice)
        _log_transition(invoice, InvoiceStatus.PENDING)
        return invoice

    def mark_overdue(self, invoice_id: str, as_of: Optional[date] = None) -> Invoice:
        """
        Flag an unpaid invoice whose due date has passed.

        Repeat calls, and calls on paid or factored invoices, leave the
        invoice unchanged.

        Raises:
            InvalidState: invoice is not yet due
        """
        as_of = as_of or self.clock()
        with self._locks.hold(invoice_id):
            invoice = self.get_invoice(invoice_id)
            if invoice.status in OVERDUE_NOOP:
                return invoice
            if invoice.due_date >= as_of:
                raise InvalidState(f"Invoice {invoice_id} is not due until {invoice.due_date.isoformat()}")
            previous = invoice.status
            invoice.status = InvoiceStatus.OVERDUE
            self.repository.put(invoice)
        _log_transition(invoice, previous)
        return invoice

    def mark_paid(self, invoice_id: str) -> Invoice:
        """Record settlement reported by the payment collaborator"""
        with self._locks.hold(invoice_id):
            invoice = self.get_invoice(invoice_id)
            if invoice.status not in PAYABLE:
                raise InvalidState(f"Cannot mark invoice paid in status '{invoice.status.value}'")
            previous = invoice.status
            invoice.status = InvoiceStatus.PAID
            self.repository.put(invoice)
        _log_transition(invoice, previous)
        return invoice
