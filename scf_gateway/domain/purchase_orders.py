"""Purchase order financing ledger"""

import logging
import threading
import uuid
from datetime import date
from typing import List, Optional, Sequence

from scf_gateway.domain.exceptions import FinancingExceedsOrderValue, InvalidRequest, InvalidState, NotFound
from scf_gateway.domain.models import FinancingTerms, LineItem, PurchaseOrder, PurchaseOrderStatus
from scf_gateway.domain.rates import financing_rate
from scf_gateway.domain.registry import ParticipantRegistry
from scf_gateway.domain.storage import EntityLocks, Repository, YearlySequence
from scf_gateway.utils.money import Number, as_decimal

logger = logging.getLogger(__name__)

# Lifecycle is linear; moves may skip ahead but never go back
STATUS_ORDER = [
    PurchaseOrderStatus.DRAFT,
    PurchaseOrderStatus.SENT,
    PurchaseOrderStatus.CONFIRMED,
    PurchaseOrderStatus.FINANCED,
    PurchaseOrderStatus.DELIVERED,
    PurchaseOrderStatus.COMPLETED,
]
FINANCEABLE = {PurchaseOrderStatus.DRAFT, PurchaseOrderStatus.SENT, PurchaseOrderStatus.CONFIRMED}


class PurchaseOrderLedger:
    """Tracks purchase orders and the financing advanced against them"""

    def __init__(
        self,
        repository: Repository[PurchaseOrder],
        registry: ParticipantRegistry,
        default_currency: str = "USD",
    ):
        self.repository = repository
        self.registry = registry
        self.default_currency = default_currency
        self._locks = EntityLocks()
        self._create_lock = threading.Lock()
        self._numbers = YearlySequence(self._count_issued_in)

    def create_po(
        self,
        buyer_id: str,
        supplier_id: str,
        amount: Number,
        issue_date: date,
        expected_delivery_date: date,
        items: Sequence[LineItem] = (),
        currency: Optional[str] = None,
    ) -> str:
        self.registry.require(buyer_id)
        self.registry.require(supplier_id)
        amount = as_decimal(amount)
        if buyer_id == supplier_id:
            raise InvalidRequest("Buyer and supplier must be different participants")
        if amount <= 0:
            raise InvalidRequest(f"Order amount must be positive, got {amount}")
        if expected_delivery_date < issue_date:
            raise InvalidRequest("Expected delivery date is before issue date")

        with self._create_lock:
            sequence = self._numbers.next(issue_date.year)
            po = PurchaseOrder(
                id=f"po_{uuid.uuid4().hex}",
                number=f"PO-{issue_date.year}-{sequence:03d}",
                buyer_id=buyer_id,
                supplier_id=supplier_id,
                amount=amount,
                currency=currency or self.default_currency,
                issue_date=issue_date,
                expected_delivery_date=expected_delivery_date,
                items=list(items),
            )
            self.repository.put(po)

        logger.info("Purchase order created", extra={"entity": "purchase_order", "entity_id": po.id})
        return po.id

    def get_po(self, po_id: str) -> PurchaseOrder:
        po = self.repository.get(po_id)
        if po is None:
            raise NotFound(f"Purchase order {po_id} not found")
        return po

    def list_pos(self) -> List[PurchaseOrder]:
        return self.repository.list()

    def _count_issued_in(self, year: int) -> int:
        return sum(1 for po in self.repository.list() if po.issue_date.year == year)

    def send_po(self, po_id: str) -> PurchaseOrder:
        return self._advance(po_id, PurchaseOrderStatus.SENT)

    def confirm_po(self, po_id: str) -> PurchaseOrder:
        return self._advance(po_id, PurchaseOrderStatus.CONFIRMED)

    def mark_delivered(self, po_id: str) -> PurchaseOrder:
        return self._advance(po_id, PurchaseOrderStatus.DELIVERED)

    def complete_po(self, po_id: str) -> PurchaseOrder:
        return self._advance(po_id, PurchaseOrderStatus.COMPLETED)

    def request_financing(self, po_id: str, requested_amount: Number) -> PurchaseOrder:
        """
        Finance a purchase order before delivery.

        Approval is automatic: the rate comes from the buyer's credit
        rating and the order moves straight to 'financed'.

        Raises:
            InvalidState: order is already financed or further along
            FinancingExceedsOrderValue: requested amount > order amount
        """
        requested_amount = as_decimal(requested_amount)
        if requested_amount <= 0:
            raise InvalidRequest(f"Financing amount must be positive, got {requested_amount}")

        with self._locks.hold(po_id):
            po = self.get_po(po_id)
            if requested_amount > po.amount:
                raise FinancingExceedsOrderValue(
                    f"Requested {requested_amount} exceeds order value {po.amount}"
                )
            if po.status not in FINANCEABLE:
                raise InvalidState(f"Cannot finance purchase order in status '{po.status.value}'")
            buyer = self.registry.require(po.buyer_id)
            rate = financing_rate(buyer.credit_rating)

            previous = po.status
            po.financing = FinancingTerms(requested=True, approved=True, amount=requested_amount, rate=rate)
            po.status = PurchaseOrderStatus.FINANCED
            self.repository.put(po)

        logger.info(
            "Purchase order financed",
            extra={
                "entity": "purchase_order",
                "entity_id": po.id,
                "from_status": previous.value,
                "to_status": po.status.value,
                "financing_amount": str(requested_amount),
                "financing_rate": str(rate),
            },
        )
        return po

    def _advance(self, po_id: str, target: PurchaseOrderStatus) -> PurchaseOrder:
        with self._locks.hold(po_id):
            po = self.get_po(po_id)
            if STATUS_ORDER.index(target) <= STATUS_ORDER.index(po.status):
                raise InvalidState(
                    f"Cannot move purchase order from '{po.status.value}' to '{target.value}'"
                )
            previous = po.status
            po.status = target
            self.repository.put(po)

        logger.info(
            "Purchase order status changed",
            extra={
                "entity": "purchase_order",
                "entity_id": po.id,
                "from_status": previous.value,
                "to_status": target.value,
            },
        )
        return po
